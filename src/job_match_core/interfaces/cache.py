"""Key-value cache protocol used for TTL memoization."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheClient(Protocol):
    """String key-value store with expiry.

    Entries are pure memoization: a miss or an evicted key must always be
    recomputable from the store.
    """

    async def get(self, key: str) -> str | None:
        """Cached value for ``key``, or None on a miss."""
        ...

    async def set(self, key: str, value: str, ttl_seconds: int = 300) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
        ...

    async def delete(self, key: str) -> None:
        """Evict ``key`` if present."""
        ...

    async def exists(self, key: str) -> bool:
        """Whether ``key`` currently holds a value."""
        ...
