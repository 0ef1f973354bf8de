from __future__ import annotations

import asyncio

from loguru import logger

from insight_hub.models.documents import SearchBundle
from insight_hub.tools.search_provider import SearchProvider


class SearchExecutor:
    """Run a bounded batch of queries through the search provider.

    Only the first ``query_budget`` queries run; the rest are dropped. Each
    query holds a worker slot for its search plus ``request_delay`` seconds so
    backends see a steady request rate. Bundles come back in query order.
    Each backend tier is timed out inside the provider; ``timeout`` is an
    optional cap on a whole lookup and is off by default.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        query_budget: int = 15,
        max_results: int = 5,
        max_parallel: int = 1,
        request_delay: float = 0.1,
        timeout: float | None = None,
    ):
        self.provider = provider
        self.query_budget = max(int(query_budget), 0)
        self.max_results = max(int(max_results), 1)
        self.max_parallel = max(int(max_parallel), 1)
        self.request_delay = max(float(request_delay), 0.0)
        self.timeout = timeout

    async def run(self, queries: list[str]) -> list[SearchBundle]:
        selected = list(queries[: self.query_budget])
        if len(queries) > len(selected):
            logger.info(
                f"Query budget reached: running {len(selected)} of {len(queries)} queries"
            )
        semaphore = asyncio.Semaphore(self.max_parallel)

        async def run_query(query: str) -> SearchBundle:
            async with semaphore:
                try:
                    response = await asyncio.wait_for(
                        self.provider.lookup(query, max_results=self.max_results),
                        timeout=self.timeout,
                    )
                except Exception as e:
                    logger.error(f'Error searching for "{query}": {e!r}')
                    return SearchBundle(query=query, error=str(e) or type(e).__name__)
                finally:
                    if self.request_delay:
                        await asyncio.sleep(self.request_delay)

            if response.fallback_from:
                logger.debug(
                    f'Search for "{query}" served by {response.provider} '
                    f"({response.fallback_reason})"
                )
            return SearchBundle(query=query, results=response.results)

        return list(await asyncio.gather(*(run_query(q) for q in selected)))
