"""Prompt catalog for the query planner and structurer.

Entries are ``string.Template`` text addressed by dotted keys such as
``structurer.user_prompt``. A list of strings is joined with newlines so
long prompts stay readable in the JSON file.
"""
from __future__ import annotations

import json
from pathlib import Path
from string import Template
from typing import Any

PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"


class PromptCatalog:
    """JSON prompt file, re-read whenever its mtime changes."""

    def __init__(self, path: Path = PROMPTS_PATH):
        self.path = path
        self._entries: dict[str, Any] = {}
        self._loaded_mtime_ns: int | None = None

    def _entries_now(self) -> dict[str, Any]:
        mtime_ns = self.path.stat().st_mtime_ns
        if self._loaded_mtime_ns != mtime_ns:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError(f"Prompt catalog {self.path} must be a JSON object")
            self._entries, self._loaded_mtime_ns = payload, mtime_ns
        return self._entries

    def text(self, key: str) -> str:
        node: Any = self._entries_now()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(f"Prompt key not found: {key}")
            node = node[part]
        if isinstance(node, str):
            return node
        if isinstance(node, list) and all(isinstance(line, str) for line in node):
            return "\n".join(node)
        raise TypeError(f"Prompt {key} must be a string or a list of lines")

    def render(self, key: str, **values: Any) -> str:
        template = Template(self.text(key))
        try:
            return template.substitute(values)
        except KeyError as exc:
            raise KeyError(f"Prompt {key} needs a value for '{exc.args[0]}'") from exc


_catalog = PromptCatalog()


def render_prompt(key: str, **values: Any) -> str:
    return _catalog.render(key, **values)
