from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from insight_hub.config import Settings, settings
from insight_hub.models.documents import SearchResult
from insight_hub.tools import web_utils
from insight_hub.tools.google_search import GoogleCustomSearch
from insight_hub.tools.serpapi_search import SerpApiSearch

SYNTHETIC_PROVIDER = "synthetic"


class SearchBackend(Protocol):
    name: str

    async def search(self, query: str, *, max_results: int = 5) -> list[SearchResult]: ...


@dataclass
class SearchResponse:
    results: list[SearchResult]
    provider: str
    fallback_from: str | None = None
    fallback_reason: str | None = None


def generate_synthetic_results(query: str) -> list[SearchResult]:
    """Fabricate three plausible results for a query when no backend can answer."""
    return [
        SearchResult(
            title=f'Search result for "{query}" - Company Information',
            link=f"https://example.com/search-result-1-{web_utils.random_base36()}",
            snippet=(
                f"Comprehensive information about {query} including company overview, "
                "products, and market position."
            ),
            display_link="example.com",
        ),
        SearchResult(
            title=f"{query} - Financial and Market Analysis",
            link=f"https://example.com/search-result-2-{web_utils.random_base36()}",
            snippet=f"Financial performance, market analysis, and competitive landscape for {query}.",
            display_link="example.com",
        ),
        SearchResult(
            title=f"Recent News and Developments - {query}",
            link=f"https://example.com/search-result-3-{web_utils.random_base36()}",
            snippet=f"Latest news, partnerships, and strategic developments related to {query}.",
            display_link="example.com",
        ),
    ]


class SearchProvider:
    """Tiered search: configured backends in order, then synthetic results.

    A backend that raises, times out after ``backend_timeout`` seconds, or
    returns nothing hands over to the next tier.
    ``search`` never raises and never returns more than ``max_results`` items.
    """

    def __init__(
        self,
        backends: list[SearchBackend] | None = None,
        *,
        backend_timeout: float | None = 30.0,
    ):
        self.backends = list(backends or [])
        self.backend_timeout = backend_timeout

    async def lookup(self, query: str, *, max_results: int = 5) -> SearchResponse:
        limit = max(int(max_results), 0)
        fallback_from: str | None = None
        fallback_reason: str | None = None

        for backend in self.backends:
            try:
                results = await asyncio.wait_for(
                    backend.search(query, max_results=limit),
                    timeout=self.backend_timeout,
                )
            except Exception as e:
                reason = str(e) or type(e).__name__
                logger.warning(f"{backend.name} search failed for '{query}': {reason}")
                fallback_from, fallback_reason = backend.name, reason
                continue
            if results:
                return SearchResponse(
                    results=results[:limit],
                    provider=backend.name,
                    fallback_from=fallback_from,
                    fallback_reason=fallback_reason,
                )
            fallback_from = backend.name
            fallback_reason = f"{backend.name} returned zero results"

        if not self.backends:
            fallback_reason = "no search backend configured"
        return SearchResponse(
            results=generate_synthetic_results(query)[:limit],
            provider=SYNTHETIC_PROVIDER,
            fallback_from=fallback_from,
            fallback_reason=fallback_reason,
        )

    async def search(self, query: str, max_results: int = 5) -> list[SearchResult]:
        response = await self.lookup(query, max_results=max_results)
        return response.results


def build_search_provider(cfg: Settings = settings) -> SearchProvider:
    backends: list[SearchBackend] = []
    if cfg.google_search_configured:
        backends.append(
            GoogleCustomSearch(
                cfg.google_search_api_key,
                cfg.google_search_engine_id,
                timeout=cfg.search_timeout_seconds,
            )
        )
    if cfg.serpapi_configured:
        backends.append(SerpApiSearch(cfg.serpapi_key, timeout=cfg.search_timeout_seconds))
    if not backends:
        logger.info("No search API configured, using synthetic search results")
    return SearchProvider(backends, backend_timeout=cfg.search_timeout_seconds)
