from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path
from typing import Protocol

from insight_hub.config import Settings, settings
from insight_hub.models.schemas import ResearchRecord
from insight_hub.services import logger as log_service


class RecordStore(Protocol):
    async def put(self, research_id: str, record: ResearchRecord) -> None: ...
    async def get(self, research_id: str) -> ResearchRecord | None: ...


class InMemoryRecordStore:
    """Process-scoped store; overwrites on repeated ids."""

    def __init__(self) -> None:
        self._records: dict[str, ResearchRecord] = {}

    async def put(self, research_id: str, record: ResearchRecord) -> None:
        self._records[research_id] = record

    async def get(self, research_id: str) -> ResearchRecord | None:
        return self._records.get(research_id)

    def __len__(self) -> int:
        return len(self._records)


class JsonFileRecordStore:
    """One JSON document per record under ``base_dir``."""

    def __init__(self, *, base_dir: str = ".cache/research/records"):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, research_id: str) -> Path:
        key = hashlib.sha1(research_id.encode("utf-8")).hexdigest()
        return self.base_dir / f"{key}.json"

    def _write(self, research_id: str, record: ResearchRecord) -> None:
        path = self._path(research_id)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(record.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        tmp.replace(path)

    def _read(self, research_id: str) -> ResearchRecord | None:
        path = self._path(research_id)
        if not path.exists():
            return None
        return ResearchRecord.model_validate_json(path.read_text(encoding="utf-8"))

    async def put(self, research_id: str, record: ResearchRecord) -> None:
        await asyncio.to_thread(self._write, research_id, record)
        log_service.log_event(
            event_type="record_stored",
            message="Research record written to disk",
            research_id=research_id,
        )

    async def get(self, research_id: str) -> ResearchRecord | None:
        return await asyncio.to_thread(self._read, research_id)


def build_record_store(cfg: Settings = settings) -> RecordStore:
    backend = cfg.record_store_backend.lower().strip()
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "file":
        return JsonFileRecordStore(base_dir=cfg.record_store_dir)
    raise ValueError(f"Unsupported RECORD_STORE_BACKEND: {cfg.record_store_backend}")
