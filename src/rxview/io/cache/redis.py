"""Redis cache backend.

Async adapter over redis.asyncio for deployments sharing one cache across
processes. TTL handled natively by SETEX.

Requires: pip install rxview[redis]
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class AsyncRedisClient(Protocol):
    """Protocol for async Redis client (duck typing)."""
    async def get(self, key: str) -> bytes | None: ...
    async def setex(self, name: str, time: int, value: str) -> bool: ...


class RedisCache:
    """Redis-backed content cache.

    Args:
        client: Existing async Redis client
        prefix: Key prefix for namespacing (default: "rxview:")

    Example:
        >>> cache = RedisCache.from_url("redis://localhost:6379/0")
        >>> content_cache = ContentCache(cache)
    """

    __slots__ = ("_client", "_prefix")

    def __init__(self, client: AsyncRedisClient, prefix: str = "rxview:") -> None:
        self._client = client
        self._prefix = prefix

    @classmethod
    def from_url(cls, url: str, prefix: str = "rxview:", **redis_kwargs: object) -> RedisCache:
        """Create cache from a Redis URL. The connection is opened lazily."""
        try:
            import redis.asyncio as aioredis
        except ImportError as e:
            raise ImportError(
                "Redis cache requires redis package. "
                "Install with: pip install rxview[redis]"
            ) from e
        return cls(aioredis.from_url(url, **redis_kwargs), prefix)  # type: ignore[arg-type]

    async def get(self, key: str) -> str | None:
        val = await self._client.get(f"{self._prefix}{key}")
        if val is None:
            return None
        return val.decode() if isinstance(val, bytes) else str(val)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self._client.setex(f"{self._prefix}{key}", int(ttl), value)
