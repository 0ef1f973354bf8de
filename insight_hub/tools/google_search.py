from __future__ import annotations

from typing import Any

import httpx

from insight_hub.models.documents import SearchResult

GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


class GoogleCustomSearch:
    """Google Custom Search JSON API backend."""

    name = "google"

    def __init__(self, api_key: str, search_engine_id: str, *, timeout: float = 30.0):
        self.api_key = api_key
        self.search_engine_id = search_engine_id
        self.timeout = timeout

    async def search(self, query: str, *, max_results: int = 5) -> list[SearchResult]:
        params: dict[str, Any] = {
            "key": self.api_key,
            "cx": self.search_engine_id,
            "q": query,
            "num": max_results,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(GOOGLE_SEARCH_URL, params=params)
            response.raise_for_status()
            payload = response.json()

        return [
            SearchResult(
                title=item.get("title", ""),
                link=item.get("link", ""),
                snippet=item.get("snippet", ""),
                display_link=item.get("displayLink", ""),
            )
            for item in payload.get("items", []) or []
            if item.get("link")
        ]
