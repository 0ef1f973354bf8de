"""OpenRouter text-completion client built on the OpenAI-compatible SDK."""
from __future__ import annotations

import re
import time
from typing import Any, Protocol

from insight_hub.config import Settings, settings
from insight_hub.services import logger as log_service

_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)


class TextCompletion(Protocol):
    model: str

    async def complete(self, *, system: str, prompt: str, caller: str) -> str: ...


class OpenRouterCompletion:
    """Single-shot completion: one system instruction, one user prompt, raw text back.

    The caller owns parsing and fallback; errors from the SDK propagate.
    """

    def __init__(self, openai_client: Any, *, model: str, max_tokens: int = 8192):
        self._client = openai_client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, *, system: str, prompt: str, caller: str) -> str:
        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=0,
            )
        except Exception as e:
            log_service.log_llm_call(
                model=self.model,
                caller=caller,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(e),
            )
            raise

        usage = getattr(response, "usage", None)
        log_service.log_llm_call(
            model=self.model,
            caller=caller,
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )

        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        text = getattr(choices[0].message, "content", None) or ""
        # Reasoning models may prepend their chain of thought.
        return _THINK_BLOCK.sub("", text).strip()


def get_client(cfg: Settings = settings):
    """Get an OpenRouter client via the OpenAI-compatible SDK."""
    from openai import AsyncOpenAI

    base_url = cfg.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    return AsyncOpenAI(
        api_key=cfg.openrouter_api_key,
        base_url=base_url,
        timeout=cfg.llm_timeout_seconds,
        default_headers={
            "HTTP-Referer": cfg.site_url,
            "X-Title": cfg.site_name,
        },
    )


def build_completion(cfg: Settings = settings) -> OpenRouterCompletion | None:
    """Return the live completion capability, or None when no API key is configured."""
    if not cfg.openrouter_api_key.strip():
        return None
    return OpenRouterCompletion(
        get_client(cfg),
        model=cfg.openrouter_model,
        max_tokens=cfg.llm_max_tokens,
    )
