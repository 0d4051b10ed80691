"""Structured logging setup and per-request log context."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

if TYPE_CHECKING:
    from job_match_core.config.settings import Settings

_NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "sqlalchemy.engine", "aiosqlite")


def configure_logging(settings: Settings) -> None:
    """Route stdlib and structlog output through one renderer.

    ``log_format`` picks JSON lines or the colored console renderer;
    ``log_level`` applies to the root logger.
    """
    shared_processors: list[structlog.types.Processor] = [
        merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        shared_processors.append(structlog.processors.format_exc_info)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    level = resolve_level(settings.log_level)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_request_context(request_id: str | None = None, **extra: Any) -> str:
    """Tag subsequent log entries in this context with a request id.

    Returns the bound id, generating one when none is given.
    """
    request_id = request_id or uuid.uuid4().hex[:12]
    bind_contextvars(request_id=request_id, **extra)
    return request_id


def clear_request_context() -> None:
    """Drop all context bound by ``bind_request_context``."""
    clear_contextvars()


def resolve_level(level_name: str) -> int:
    """Map a level name onto a logging level, defaulting to INFO."""
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else logging.INFO
