from __future__ import annotations

from insight_hub.tools import content_extractor
from insight_hub.tools.content_extractor import extract_main_content


def test_short_navigation_text_is_low_quality():
    assert content_extractor._looks_low_quality("Main menu\nNavigation\nSign in")
    assert not content_extractor._looks_low_quality("Acme quarterly results. " * 20)


def test_uses_trafilatura_when_output_is_good(monkeypatch):
    body = "Acme expands its logistics network across three continents. " * 10
    monkeypatch.setattr(content_extractor, "_extract_with_trafilatura", lambda *_: body.strip())

    result = extract_main_content(
        "https://acme.test/news",
        "<html><head><title>Acme News</title></head><body>ignored</body></html>",
    )

    assert result.method == "trafilatura"
    assert result.title == "Acme News"
    assert result.text.startswith("Acme expands")


def test_falls_back_to_paragraphs_when_primary_is_empty(monkeypatch):
    monkeypatch.setattr(content_extractor, "_extract_with_trafilatura", lambda *_: "")
    html = (
        "<html><body><nav>Main menu</nav>"
        "<p>Acme was founded in 1990.</p><script>var x = 1;</script>"
        "<p>It employs 4,000 people.</p></body></html>"
    )

    result = extract_main_content("https://acme.test/about", html)

    assert result.method == "beautifulsoup"
    assert result.text == "Acme was founded in 1990.\n\nIt employs 4,000 people."
    assert "var x" not in result.text


def test_plain_text_input_is_wrapped_and_truncated(monkeypatch):
    monkeypatch.setattr(content_extractor, "_extract_with_trafilatura", lambda *_: "")

    result = extract_main_content("https://acme.test", "word " * 100, max_chars=50)

    assert result.title == ""
    assert len(result.text) == 53
    assert result.text.endswith("...")
