"""diskcache-backed implementation of CacheClient."""

from __future__ import annotations

import asyncio
from pathlib import Path

import diskcache


class DiskCacheClient:
    """Persistent TTL cache backed by diskcache (SQLite under the hood).

    diskcache is synchronous, so every call runs in a worker thread.
    """

    def __init__(self, cache_dir: Path) -> None:
        """Open (or create) the cache under ``cache_dir``."""
        cache_dir.mkdir(parents=True, exist_ok=True)
        self._cache = diskcache.Cache(str(cache_dir))

    async def get(self, key: str) -> str | None:
        """Cached value for ``key``, or None on a miss or expiry."""
        result = await asyncio.to_thread(self._cache.get, key)
        return None if result is None else str(result)

    async def set(self, key: str, value: str, ttl_seconds: int = 300) -> None:
        """Store ``value`` until ``ttl_seconds`` have elapsed."""
        await asyncio.to_thread(self._cache.set, key, value, expire=ttl_seconds)

    async def delete(self, key: str) -> None:
        """Evict ``key`` if present."""
        await asyncio.to_thread(self._cache.delete, key)

    async def exists(self, key: str) -> bool:
        """Whether ``key`` currently holds an unexpired value."""
        return await asyncio.to_thread(self._cache.__contains__, key)

    def close(self) -> None:
        """Release the underlying SQLite handle."""
        self._cache.close()
