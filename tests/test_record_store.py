from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from insight_hub.config import Settings
from insight_hub.models.schemas import ContentBlock, ResearchRecord
from insight_hub.services.record_store import (
    InMemoryRecordStore,
    JsonFileRecordStore,
    build_record_store,
)
from insight_hub.services.structurer import fallback_sections


def _record(research_id: str = "research_1_abcdefghi", company: str = "Acme") -> ResearchRecord:
    return ResearchRecord(
        id=research_id,
        company_name=company,
        project_domain="Cloud",
        generated_at=datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        sections=fallback_sections(company, "Cloud"),
    )


@pytest.mark.asyncio
async def test_memory_store_put_get_and_overwrite():
    store = InMemoryRecordStore()
    assert await store.get("research_1_abcdefghi") is None

    await store.put("research_1_abcdefghi", _record())
    await store.put("research_1_abcdefghi", _record(company="Globex"))

    stored = await store.get("research_1_abcdefghi")
    assert stored.company_name == "Globex"
    assert len(store) == 1


@pytest.mark.asyncio
async def test_file_store_persists_across_instances(tmp_path):
    record = _record()
    await JsonFileRecordStore(base_dir=str(tmp_path)).put(record.id, record)

    reopened = JsonFileRecordStore(base_dir=str(tmp_path))
    loaded = await reopened.get(record.id)

    assert loaded == record
    assert await reopened.get("research_2_zzzzzzzzz") is None
    files = list(tmp_path.glob("*.json"))
    assert len(files) == 1
    assert '"companyName": "Acme"' in files[0].read_text(encoding="utf-8")
    assert not list(tmp_path.glob("*.tmp"))


def test_build_record_store_backends(tmp_path):
    memory = build_record_store(Settings(_env_file=None, record_store_backend="memory"))
    on_disk = build_record_store(
        Settings(_env_file=None, record_store_backend="file", record_store_dir=str(tmp_path))
    )

    assert isinstance(memory, InMemoryRecordStore)
    assert isinstance(on_disk, JsonFileRecordStore)
    with pytest.raises(ValueError):
        build_record_store(Settings(_env_file=None, record_store_backend="redis"))


@pytest.mark.asyncio
async def test_stored_record_cannot_be_altered_through_a_reference():
    store = InMemoryRecordStore()
    await store.put("research_1_abcdefghi", _record())
    record = await store.get("research_1_abcdefghi")

    with pytest.raises(AttributeError):
        record.sections.overview.content.append(ContentBlock(text="tampered"))
    with pytest.raises(ValidationError):
        record.sections.news = record.sections.products
    with pytest.raises(ValidationError):
        record.sections.overview.content[0].text = "tampered"
    with pytest.raises(ValidationError):
        record.sections.overview.content[0].sources[0].url = "https://evil.test"

    again = await store.get("research_1_abcdefghi")
    assert len(again.sections.overview.content) == 2
    assert again.sections.news == fallback_sections("Acme", "Cloud").news
