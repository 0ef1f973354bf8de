from __future__ import annotations

import time
from datetime import datetime, timezone
from enum import Enum

from loguru import logger

from insight_hub.config import Settings, settings
from insight_hub.llm_client import build_completion
from insight_hub.models.documents import SearchBundle
from insight_hub.models.schemas import ResearchRecord
from insight_hub.services import logger as log_service
from insight_hub.services.content_fetcher import ContentFetcher
from insight_hub.services.query_planner import QueryPlanner, build_query_planner
from insight_hub.services.record_store import RecordStore
from insight_hub.services.search_executor import SearchExecutor
from insight_hub.services.structurer import InformationStructurer, build_structurer
from insight_hub.tools import web_utils
from insight_hub.tools.content_retriever import build_content_retriever
from insight_hub.tools.search_provider import build_search_provider

MAX_ID_ATTEMPTS = 5


class InvalidResearchRequestError(ValueError):
    """Raised when company name or project domain is missing or blank."""


class PipelineStage(str, Enum):
    IDLE = "idle"
    PLANNING_QUERIES = "planning_queries"
    SEARCHING = "searching"
    FETCHING = "fetching"
    STRUCTURING = "structuring"
    STORED = "stored"
    DONE = "done"


def new_research_id(now_ms: int | None = None) -> str:
    """``research_<epoch-millis>_<9 base36 chars>``."""
    millis = int(time.time() * 1000) if now_ms is None else now_ms
    return f"research_{millis}_{web_utils.random_base36(9)}"


def select_fetch_urls(bundles: list[SearchBundle], links_per_query: int) -> list[str]:
    """Top links of each query's results, in query order."""
    return [
        result.link
        for bundle in bundles
        for result in bundle.results[: max(links_per_query, 0)]
        if result.link
    ]


class ResearchOrchestrator:
    """Runs one research request through the four stages.

    Flow:
      1. Plan search queries (model or template)
      2. Search the query budget
      3. Fetch the top links of each result set
      4. Structure the documents into ten sections
      5. Store the finished record and return its id

    Every stage degrades internally, so an exception reaching ``run`` is fatal
    for that run and nothing is stored.
    """

    def __init__(
        self,
        *,
        planner: QueryPlanner,
        search_executor: SearchExecutor,
        fetcher: ContentFetcher,
        structurer: InformationStructurer,
        store: RecordStore,
        links_per_query: int = 3,
    ):
        self.planner = planner
        self.search_executor = search_executor
        self.fetcher = fetcher
        self.structurer = structurer
        self.store = store
        self.links_per_query = links_per_query

    @classmethod
    def from_settings(cls, store: RecordStore, cfg: Settings = settings) -> "ResearchOrchestrator":
        completion = build_completion(cfg)
        if completion is None:
            logger.info("OpenRouter not configured, using template planner and structurer")
        return cls(
            planner=build_query_planner(completion),
            search_executor=SearchExecutor(
                build_search_provider(cfg),
                query_budget=cfg.search_query_budget,
                max_results=cfg.search_results_per_query,
                max_parallel=cfg.search_max_parallel_requests,
                request_delay=cfg.search_request_delay_seconds,
            ),
            fetcher=ContentFetcher(
                build_content_retriever(cfg),
                max_parallel=cfg.fetch_max_parallel_requests,
                timeout=cfg.fetch_timeout_seconds,
            ),
            structurer=build_structurer(
                completion,
                context_char_budget=cfg.structurer_context_char_budget,
            ),
            store=store,
            links_per_query=cfg.fetch_links_per_query,
        )

    @staticmethod
    def _enter(research_id: str, stage: PipelineStage, **data) -> None:
        log_service.log_pipeline_stage(research_id, stage.value, "started", data or None)

    async def _allocate_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            research_id = new_research_id()
            if await self.store.get(research_id) is None:
                return research_id
            logger.warning(f"Research id collision on {research_id}, regenerating")
        raise RuntimeError("Could not allocate a unique research id")

    @staticmethod
    def _validate(company_name: object, project_domain: object) -> tuple[str, str]:
        if not isinstance(company_name, str) or not isinstance(project_domain, str):
            raise InvalidResearchRequestError("Company name and project domain are required")
        company, domain = company_name.strip(), project_domain.strip()
        if not company or not domain:
            raise InvalidResearchRequestError("Company name and project domain are required")
        return company, domain

    async def run(self, company_name: str, project_domain: str) -> str:
        company, domain = self._validate(company_name, project_domain)
        research_id = await self._allocate_id()
        started = time.monotonic()
        logger.info(f"Starting research {research_id} for {company!r} ({domain})")

        self._enter(research_id, PipelineStage.PLANNING_QUERIES)
        queries = await self.planner.generate_queries(company, domain)

        self._enter(research_id, PipelineStage.SEARCHING, queries=len(queries))
        bundles = await self.search_executor.run(queries)

        urls = select_fetch_urls(bundles, self.links_per_query)
        self._enter(research_id, PipelineStage.FETCHING, urls=len(urls))
        documents = await self.fetcher.fetch(urls)

        self._enter(research_id, PipelineStage.STRUCTURING, documents=len(documents))
        sections = await self.structurer.structure(company, domain, documents)

        record = ResearchRecord(
            id=research_id,
            company_name=company,
            project_domain=domain,
            generated_at=datetime.now(timezone.utc),
            sections=sections,
        )
        await self.store.put(research_id, record)
        log_service.log_pipeline_stage(research_id, PipelineStage.STORED.value, "completed")

        runtime_ms = int((time.monotonic() - started) * 1000)
        log_service.log_pipeline_stage(
            research_id, PipelineStage.DONE.value, "completed", {"runtime_ms": runtime_ms}
        )
        logger.info(f"Research {research_id} complete in {runtime_ms}ms")
        return research_id
