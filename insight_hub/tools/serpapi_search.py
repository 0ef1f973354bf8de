from __future__ import annotations

from typing import Any

import httpx

from insight_hub.models.documents import SearchResult

SERPAPI_SEARCH_URL = "https://serpapi.com/search"


class SerpApiSearch:
    """SerpApi Google engine backend."""

    name = "serpapi"

    def __init__(self, api_key: str, *, timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout

    async def search(self, query: str, *, max_results: int = 5) -> list[SearchResult]:
        params: dict[str, Any] = {
            "api_key": self.api_key,
            "engine": "google",
            "q": query,
            "num": max_results,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(SERPAPI_SEARCH_URL, params=params)
            response.raise_for_status()
            payload = response.json()

        mapped: list[SearchResult] = []
        for item in payload.get("organic_results", []) or []:
            link = item.get("link", "")
            if not link:
                continue
            mapped.append(
                SearchResult(
                    title=item.get("title", ""),
                    link=link,
                    snippet=item.get("snippet", ""),
                    display_link=item.get("displayed_link") or link,
                )
            )
        return mapped
