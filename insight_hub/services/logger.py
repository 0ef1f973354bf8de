"""Loguru setup and structured log helpers for Insight Hub."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from insight_hub.config import Settings, settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "fastapi",
    "httpx",
    "httpcore",
    "openai._base_client",
    "trafilatura",
    "asyncio",
)


def configure_logging(cfg: Settings = settings) -> None:
    """Replace loguru's default sink with ours; safe to call more than once."""
    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=cfg.app_log_level.upper(),
        colorize=True,
    )
    if cfg.log_to_file:
        log_dir = Path(cfg.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "insight_hub_{time:YYYY-MM-DD}.log",
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="00:00",
            retention="7 days",
            compression="zip",
        )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(cfg.noisy_log_level.upper())


def _emit(label: str, payload: dict[str, Any], level: str = "INFO") -> None:
    payload = {"timestamp": datetime.now(timezone.utc).isoformat(), **payload}
    logger.opt(depth=2).log(level, f"{label}: {payload}")


def log_llm_call(
    model: str,
    caller: str,
    input_tokens: int = 0,
    output_tokens: int = 0,
    duration_ms: int = 0,
    status: str = "success",
    error: Optional[str] = None,
) -> None:
    """Log one completion request, failed or not."""
    payload = {
        "model": model,
        "caller": caller,
        "tokens": {"in": input_tokens, "out": output_tokens},
        "duration_ms": duration_ms,
        "status": status,
    }
    if error:
        _emit("LLM_CALL_FAILED", {**payload, "error": error}, level="ERROR")
    else:
        _emit("LLM_CALL", payload)


def log_pipeline_stage(
    research_id: str,
    stage: str,
    status: str,
    data: Optional[dict] = None,
) -> None:
    payload: dict[str, Any] = {"research_id": research_id, "stage": stage, "status": status}
    if data:
        payload["data"] = data
    _emit("PIPELINE_STAGE", payload)


def log_event(event_type: str, message: str, **kwargs: Any) -> None:
    _emit("EVENT", {"event_type": event_type, "message": message, **kwargs})


configure_logging()
