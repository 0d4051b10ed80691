"""Observability: structured logging and request context."""

from job_match_engine.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    resolve_level,
)

__all__ = [
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
    "resolve_level",
]
