"""Helpers for pulling JSON payloads out of free-form model text.

The whole (fence-stripped) text is parsed first; only when that fails is the
outermost bracketed span tried, for answers wrapped in prose.
"""
from __future__ import annotations

import json
from typing import Any


def _strip_fences(raw_text: str) -> str:
    text = raw_text.strip()
    if text.startswith("```"):
        parts = text.split("```")
        if len(parts) < 2:
            raise json.JSONDecodeError("invalid fenced block", text, 0)
        text = parts[1]
        if text.startswith("json"):
            text = text[4:]
        text = text.strip()
    return text


def _loads_span(text: str, open_char: str, close_char: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    start = text.find(open_char)
    end = text.rfind(close_char)
    if start < 0 or end <= start:
        raise json.JSONDecodeError("no JSON payload found", text, 0)
    return json.loads(text[start : end + 1])


def extract_json_array(raw_text: str) -> list[Any]:
    text = _strip_fences(raw_text)
    parsed = _loads_span(text, "[", "]")
    if not isinstance(parsed, list):
        raise json.JSONDecodeError("not an array", text, 0)
    return parsed


def extract_json_object(raw_text: str) -> dict[str, Any]:
    text = _strip_fences(raw_text)
    parsed = _loads_span(text, "{", "}")
    if not isinstance(parsed, dict):
        raise json.JSONDecodeError("not an object", text, 0)
    return parsed
