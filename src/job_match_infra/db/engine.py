"""Async database engine factory."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from job_match_core.config.settings import Settings


def _engine_options(settings: Settings) -> dict[str, Any]:
    if settings.db_backend != "sqlite":
        return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in settings.database_url:
        # every session must see the same in-memory database
        options["poolclass"] = StaticPool
    return options


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine for ``settings.database_url``.

    SQLite runs without pooling limits; postgres gets a bounded pool that
    checks connections before use.
    """
    return create_async_engine(settings.database_url, echo=False, **_engine_options(settings))
