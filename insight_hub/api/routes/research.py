from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from insight_hub.agents.orchestrator import InvalidResearchRequestError, ResearchOrchestrator
from insight_hub.api.deps import get_orchestrator, get_pdf_exporter, get_record_store
from insight_hub.models.schemas import (
    ErrorResponse,
    ResearchRecord,
    ResearchRequest,
    ResearchStartResponse,
)
from insight_hub.services import logger as log_service
from insight_hub.services.pdf_exporter import PdfExporter
from insight_hub.services.record_store import RecordStore

router = APIRouter(prefix="/research", tags=["research"])

MISSING_FIELDS_ERROR = "Company name and project domain are required"
PROCESS_ERROR = "Failed to process research request"
NOT_FOUND_ERROR = "Research data not found"
FETCH_ERROR = "Failed to fetch research data"
PDF_UNAVAILABLE_ERROR = "PDF export is not available"
PDF_ERROR = "Failed to generate PDF"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _parse_request(body: Any) -> ResearchRequest | None:
    if not isinstance(body, dict):
        return None
    try:
        payload = ResearchRequest.model_validate(body)
    except ValidationError:
        return None
    if not (payload.company_name or "").strip() or not (payload.project_domain or "").strip():
        return None
    return payload


@router.post(
    "",
    response_model=ResearchStartResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def start_research(
    request: Request,
    orchestrator: ResearchOrchestrator = Depends(get_orchestrator),
):
    """Run the research pipeline to completion and return the new record id."""
    try:
        body = await request.json()
    except Exception as e:
        logger.error(f"Research error: unreadable request body: {e!r}")
        return _error(500, PROCESS_ERROR)

    payload = _parse_request(body)
    if payload is None:
        return _error(400, MISSING_FIELDS_ERROR)

    log_service.log_event(
        event_type="research_started",
        message="Research started",
        company_name=payload.company_name,
        project_domain=payload.project_domain,
    )
    try:
        research_id = await orchestrator.run(payload.company_name, payload.project_domain)
    except InvalidResearchRequestError:
        return _error(400, MISSING_FIELDS_ERROR)
    except Exception as e:
        logger.exception(f"Research error: {e}")
        return _error(500, PROCESS_ERROR)

    return ResearchStartResponse(research_id=research_id)


@router.get(
    "/{research_id}",
    response_model=ResearchRecord,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_research(research_id: str, store: RecordStore = Depends(get_record_store)):
    try:
        record = await store.get(research_id)
    except Exception as e:
        logger.exception(f"Error fetching research data: {e}")
        return _error(500, FETCH_ERROR)

    if record is None:
        return _error(404, NOT_FOUND_ERROR)
    return record


@router.post(
    "/{research_id}/pdf",
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        501: {"model": ErrorResponse},
    },
)
async def export_research_pdf(
    research_id: str,
    store: RecordStore = Depends(get_record_store),
    exporter: PdfExporter | None = Depends(get_pdf_exporter),
):
    """Hand a stored record to the configured PDF exporter."""
    try:
        record = await store.get(research_id)
    except Exception as e:
        logger.exception(f"Error fetching research data: {e}")
        return _error(500, FETCH_ERROR)
    if record is None:
        return _error(404, NOT_FOUND_ERROR)
    if exporter is None:
        return _error(501, PDF_UNAVAILABLE_ERROR)

    try:
        document = await exporter.export(record)
    except Exception as e:
        logger.exception(f"PDF export failed for {research_id}: {e}")
        return _error(500, PDF_ERROR)
    return Response(content=document, media_type=exporter.media_type)
