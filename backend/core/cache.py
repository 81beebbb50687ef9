"""Fast Key-Value Cache

Redis in deployment, a process-local dictionary when no Redis URL is
configured. Values are strings; TTLs are seconds.
"""
import time
from typing import Callable, Protocol

import redis.asyncio as aioredis

from core.logging import cache_logger

log = cache_logger()


class FastCache(Protocol):
    async def get(self, key: str, ttl: int = -1) -> str | None:
        """Return the value for `key`; a positive `ttl` also refreshes its expiry."""
        ...

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        ...

    async def aclose(self) -> None:
        ...


class RedisCache:
    """FastCache on redis.asyncio."""

    __slots__ = ("_client",)

    def __init__(self, client: aioredis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def get(self, key: str, ttl: int = -1) -> str | None:
        if ttl > 0:
            return await self._client.getex(key, ex=ttl)
        return await self._client.get(key)

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        await self._client.set(key, value, ex=ttl if ttl and ttl > 0 else None)

    async def aclose(self) -> None:
        await self._client.aclose()


class InMemoryCache:
    """Process-local FastCache used when Redis is not configured."""

    __slots__ = ("_entries", "_clock")

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[str, tuple[str, float | None]] = {}
        self._clock = clock

    async def get(self, key: str, ttl: int = -1) -> str | None:
        item = self._entries.get(key)
        if item is None:
            return None
        value, expires_at = item
        now = self._clock()
        if expires_at is not None and expires_at <= now:
            del self._entries[key]
            return None
        if ttl > 0:
            self._entries[key] = (value, now + ttl)
        return value

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl and ttl > 0 else None
        self._entries[key] = (value, expires_at)

    async def aclose(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


def build_cache(redis_url: str) -> FastCache:
    if redis_url:
        log.info("cache_backend", backend="redis")
        return RedisCache.from_url(redis_url)
    log.info("cache_backend", backend="memory")
    return InMemoryCache()
