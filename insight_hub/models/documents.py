from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class SearchResult:
    title: str
    link: str
    snippet: str
    display_link: str = ""


@dataclass(slots=True)
class SearchBundle:
    """Results of one executed query, in backend order."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    error: str | None = None


@dataclass(slots=True)
class FetchedDocument:
    url: str
    title: str
    content: str
    error: str | None = None
