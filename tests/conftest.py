from __future__ import annotations

import pytest

from insight_hub.agents.orchestrator import ResearchOrchestrator
from insight_hub.services.content_fetcher import ContentFetcher
from insight_hub.services.query_planner import TemplateQueryPlanner
from insight_hub.services.record_store import InMemoryRecordStore
from insight_hub.services.search_executor import SearchExecutor
from insight_hub.services.structurer import TemplateInformationStructurer
from insight_hub.tools.content_retriever import SimulatedContentRetriever
from insight_hub.tools.search_provider import SearchProvider


class FakeCompletion:
    """Stands in for the OpenRouter completion capability."""

    model = "fake/model"

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict[str, str]] = []

    async def complete(self, *, system: str, prompt: str, caller: str) -> str:
        self.calls.append({"system": system, "prompt": prompt, "caller": caller})
        if self.error is not None:
            raise self.error
        return self.text


def build_offline_orchestrator(store: InMemoryRecordStore) -> ResearchOrchestrator:
    return ResearchOrchestrator(
        planner=TemplateQueryPlanner(),
        search_executor=SearchExecutor(SearchProvider([]), request_delay=0),
        fetcher=ContentFetcher(SimulatedContentRetriever(min_delay=0, max_delay=0)),
        structurer=TemplateInformationStructurer(),
        store=store,
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def offline_orchestrator(store: InMemoryRecordStore) -> ResearchOrchestrator:
    return build_offline_orchestrator(store)
