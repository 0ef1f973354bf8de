from __future__ import annotations

from typing import Protocol

from insight_hub.models.schemas import ResearchRecord


class PdfExporter(Protocol):
    """Renders a stored record to a binary document.

    No implementation ships with the service; deployments attach one to
    ``app.state.pdf_exporter``.
    """

    media_type: str

    async def export(self, record: ResearchRecord) -> bytes: ...
