from __future__ import annotations

import re
from dataclasses import dataclass

import trafilatura
from bs4 import BeautifulSoup

# Page chrome that trafilatura occasionally keeps on thin pages.
BOILERPLATE_MARKERS = (
    "main menu",
    "navigation",
    "cookie",
    "subscribe",
    "jump to content",
    "sign in",
)
MIN_USEFUL_CHARS = 200
STRIPPED_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "form", "aside")

_INLINE_SPACE = re.compile(r"[ \t\xa0]+")
_BLANK_RUN = re.compile(r"\n\s*\n(\s*\n)+")


@dataclass
class ExtractedContent:
    url: str
    title: str
    text: str
    method: str


def _tidy(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INLINE_SPACE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return _BLANK_RUN.sub("\n\n", text).strip()


def _looks_low_quality(text: str) -> bool:
    if len(text) < MIN_USEFUL_CHARS:
        return True
    lowered = text.lower()
    boilerplate = sum(lowered.count(marker) for marker in BOILERPLATE_MARKERS)
    return boilerplate >= 4 and len(text) < 2500


def _extract_with_trafilatura(html: str) -> str:
    extracted = trafilatura.extract(html, output_format="txt")
    return _tidy(extracted) if isinstance(extracted, str) else ""


def _extract_with_soup(soup: BeautifulSoup) -> str:
    for tag in soup(list(STRIPPED_TAGS)):
        tag.decompose()
    paragraphs = [p.get_text(" ", strip=True) for p in soup.find_all("p")]
    body = "\n\n".join(p for p in paragraphs if p) or soup.get_text("\n")
    return _tidy(body)


def extract_main_content(url: str, raw_content: str, *, max_chars: int = 20000) -> ExtractedContent:
    """Pull the readable body out of a fetched page.

    trafilatura runs first; when its output is missing or looks like page
    chrome, paragraph text collected with BeautifulSoup is used if it is at
    least as long. Plain-text responses are wrapped in a minimal document.
    Text longer than ``max_chars`` is cut and marked with ``...``.
    """
    lowered = raw_content.lower()
    if "<html" in lowered or "<body" in lowered:
        html = raw_content
    else:
        html = f"<html><body>{raw_content}</body></html>"

    soup = BeautifulSoup(html, "html.parser")
    title = _tidy(soup.title.string) if soup.title and soup.title.string else ""

    text, method = _extract_with_trafilatura(html), "trafilatura"
    if not text or _looks_low_quality(text):
        fallback = _extract_with_soup(soup)
        if len(fallback) >= len(text):
            text, method = fallback, "beautifulsoup"

    if 0 < max_chars < len(text):
        text = text[:max_chars] + "..."
    return ExtractedContent(url=url, title=title, text=text, method=method)
