from __future__ import annotations

import asyncio
import random
from typing import Protocol

import httpx

from insight_hub.config import Settings, settings
from insight_hub.models.documents import FetchedDocument
from insight_hub.tools import content_extractor, web_utils

USER_AGENT = "Mozilla/5.0 (compatible; InsightHubBot/1.0)"

SIMULATED_TRAILER = (
    " Additional context and detailed information would be extracted from the actual "
    "webpage content, including specific data points, quotes, and factual information "
    "relevant to the research objectives."
)


class ContentRetriever(Protocol):
    name: str

    async def retrieve(self, url: str) -> FetchedDocument: ...


class HttpContentRetriever:
    """Fetch a page over HTTP and extract its main text."""

    name = "http"

    def __init__(
        self,
        *,
        timeout: float = 20.0,
        max_chars: int = 20000,
        max_bytes: int = 2_000_000,
    ):
        self.timeout = timeout
        self.max_chars = max_chars
        self.max_bytes = max_bytes

    async def retrieve(self, url: str) -> FetchedDocument:
        if not web_utils.is_valid_url(url):
            raise ValueError(f"Invalid URL: {url}")

        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            async with client.stream("GET", url, headers={"User-Agent": USER_AGENT}) as response:
                response.raise_for_status()
                chunks: list[bytes] = []
                bytes_read = 0
                async for chunk in response.aiter_bytes():
                    chunks.append(chunk)
                    bytes_read += len(chunk)
                    # Bytes past max_bytes are dropped.
                    if bytes_read >= self.max_bytes:
                        break
                encoding = response.encoding or "utf-8"
        raw = b"".join(chunks)[: self.max_bytes].decode(encoding, errors="replace")

        extracted = content_extractor.extract_main_content(url, raw, max_chars=self.max_chars)
        if not extracted.text:
            raise RuntimeError(f"No readable content at {url}")
        return FetchedDocument(
            url=url,
            title=extracted.title or web_utils.extract_domain(url),
            content=extracted.text,
        )


def simulated_content(host: str, rng: random.Random | None = None) -> str:
    """Templated page text for a host, drawn from one of six content categories."""
    content_types = [
        f"Company overview and mission statement from {host}. This organization focuses on innovation and customer satisfaction, with a strong market presence and commitment to excellence.",
        f"Product and service information from {host}. Detailed descriptions of core offerings, target markets, and competitive advantages in the industry.",
        f"Financial performance data from {host}. Revenue growth, profitability metrics, and investment information demonstrating strong business fundamentals.",
        f"Market analysis and competitive positioning from {host}. Industry trends, market share data, and strategic positioning relative to competitors.",
        f"Customer testimonials and case studies from {host}. Success stories, client feedback, and evidence of customer satisfaction and loyalty.",
        f"Recent news and press releases from {host}. Latest developments, partnerships, acquisitions, and strategic initiatives.",
    ]
    return (rng or random).choice(content_types) + SIMULATED_TRAILER


class SimulatedContentRetriever:
    """Stand-in retriever used when no real extractor is wired in."""

    name = "simulated"

    def __init__(
        self,
        *,
        min_delay: float = 0.1,
        max_delay: float = 0.6,
        rng: random.Random | None = None,
    ):
        self.min_delay = min_delay
        self.max_delay = max(max_delay, min_delay)
        self._rng = rng or random.Random()

    async def retrieve(self, url: str) -> FetchedDocument:
        await asyncio.sleep(self._rng.uniform(self.min_delay, self.max_delay))
        if not web_utils.is_valid_url(url):
            raise ValueError(f"Invalid URL: {url}")
        host = web_utils.extract_domain(url)
        return FetchedDocument(
            url=url,
            title=f"Content from {host}",
            content=simulated_content(host, self._rng),
        )


def build_content_retriever(cfg: Settings = settings) -> ContentRetriever:
    mode = cfg.content_retriever.lower().strip()
    if mode == "http":
        return HttpContentRetriever(
            timeout=cfg.fetch_timeout_seconds,
            max_chars=cfg.extractor_max_page_chars,
            max_bytes=cfg.fetch_max_page_bytes,
        )
    if mode == "simulated":
        return SimulatedContentRetriever()
    raise ValueError(f"Unsupported CONTENT_RETRIEVER: {cfg.content_retriever}")
