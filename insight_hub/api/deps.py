from __future__ import annotations

from fastapi import Request

from insight_hub.agents.orchestrator import ResearchOrchestrator
from insight_hub.services.pdf_exporter import PdfExporter
from insight_hub.services.record_store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_orchestrator(request: Request) -> ResearchOrchestrator:
    return request.app.state.orchestrator


def get_pdf_exporter(request: Request) -> PdfExporter | None:
    return getattr(request.app.state, "pdf_exporter", None)
