from __future__ import annotations

import asyncio

from loguru import logger

from insight_hub.models.documents import FetchedDocument
from insight_hub.tools.content_retriever import ContentRetriever

ERROR_TITLE = "Error"
ERROR_CONTENT = "Failed to scrape content"


class ContentFetcher:
    """Retrieve every URL independently; one document per URL, input order kept."""

    def __init__(
        self,
        retriever: ContentRetriever,
        *,
        max_parallel: int = 4,
        timeout: float | None = 20.0,
    ):
        self.retriever = retriever
        self.max_parallel = max(int(max_parallel), 1)
        self.timeout = timeout

    async def _fetch_one(self, url: str, semaphore: asyncio.Semaphore) -> FetchedDocument:
        async with semaphore:
            try:
                return await asyncio.wait_for(self.retriever.retrieve(url), timeout=self.timeout)
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.error(f"Error scraping {url}: {message}")
                return FetchedDocument(
                    url=url,
                    title=ERROR_TITLE,
                    content=ERROR_CONTENT,
                    error=message,
                )

    async def fetch(self, urls: list[str]) -> list[FetchedDocument]:
        semaphore = asyncio.Semaphore(self.max_parallel)
        documents = await asyncio.gather(*(self._fetch_one(url, semaphore) for url in urls))
        failed = sum(1 for doc in documents if doc.error is not None)
        logger.info(
            f"Fetched {len(documents) - failed}/{len(documents)} documents via {self.retriever.name}"
        )
        return list(documents)
