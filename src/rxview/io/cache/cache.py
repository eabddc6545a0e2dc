"""Content cache with TTL support.

Backends store opaque strings under string keys. ContentCache wraps a backend
with the namespaced key scheme and treats every backend failure as a miss, so
an unavailable cache degrades to always-regenerate instead of failing the
request.

Key namespaces:
    enhanced_content:<set_id>   assembled EnhancedContent (1 hour)
    seo_metadata:<set_id>       generated title/description (24 hours)
    drug_summary:<set_id>       generated summary (24 hours)
    enhanced_sections:<set_id>  generated section batch (24 hours)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from rxview.runtime.observability import get_logger

if TYPE_CHECKING:
    from rxview.foundation.config import CacheSettings

DEFAULT_TTL: int = 3600
M = TypeVar("M", bound=BaseModel)

log = get_logger("rxview.cache")


class Namespace(StrEnum):
    """Cache key namespaces."""
    ENHANCED_CONTENT = "enhanced_content"
    SEO_METADATA = "seo_metadata"
    DRUG_SUMMARY = "drug_summary"
    ENHANCED_SECTIONS = "enhanced_sections"

    def key(self, set_id: str) -> str:
        return f"{self.value}:{set_id}"


@dataclass(slots=True)
class CacheEntry:
    """A cached value with expiration tracking."""
    value: str
    expires_at: float

    def expired(self, now: float) -> bool:
        return now >= self.expires_at


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol for async cache backends."""

    async def get(self, key: str) -> str | None: ...
    async def set(self, key: str, value: str, ttl: int) -> None: ...


class MemoryCache:
    """In-memory cache with TTL-based expiration.

    Single event loop, so an asyncio.Lock is not needed: get/set never suspend
    while touching the dict. Expired entries are dropped on read; when the
    capacity is reached the expired entries go first, then the oldest quarter.

    Args:
        max_entries: Maximum number of entries before eviction
        clock: Monotonic time source in seconds (injectable for tests)

    Example:
        >>> cache = MemoryCache()
        >>> await cache.set("drug_summary:abc", "text", 60)
        >>> await cache.get("drug_summary:abc")
        'text'
    """

    __slots__ = ("_entries", "_max_entries", "_clock")

    def __init__(self, max_entries: int = 5000, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._max_entries = max_entries
        self._clock = clock

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl: int) -> None:
        if key not in self._entries and len(self._entries) >= self._max_entries:
            self._evict()
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, v in self._entries.items() if v.expired(now)]:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            oldest = sorted(self._entries, key=lambda k: self._entries[k].expires_at)
            for key in oldest[: max(self._max_entries // 4, 1)]:
                del self._entries[key]

    @property
    def size(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class ContentCache:
    """Failure-tolerant cache-aside facade over a backend.

    get/set never raise: a backend error is logged and reported as a miss
    (get) or ignored (set).

    Args:
        backend: Storage backend
        content_ttl: TTL for assembled enhanced content
        generation_ttl: TTL for individual generations (SEO, summary, sections)
    """

    __slots__ = ("_backend", "content_ttl", "generation_ttl")

    def __init__(
        self,
        backend: CacheBackend | None = None,
        *,
        content_ttl: int = DEFAULT_TTL,
        generation_ttl: int = 86400,
    ) -> None:
        self._backend = backend if backend is not None else MemoryCache()
        self.content_ttl = content_ttl
        self.generation_ttl = generation_ttl

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> ContentCache:
        """Build a cache from RXVIEW_CACHE_* settings (Redis when a URL is set)."""
        backend: CacheBackend
        if settings.redis_url is not None:
            from .redis import RedisCache
            backend = RedisCache.from_url(settings.redis_url.get_secret_value(), prefix=settings.key_prefix)
        else:
            backend = MemoryCache(max_entries=settings.max_entries)
        return cls(backend, content_ttl=settings.content_ttl, generation_ttl=settings.generation_ttl)

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def ttl_for(self, namespace: Namespace) -> int:
        return self.content_ttl if namespace is Namespace.ENHANCED_CONTENT else self.generation_ttl

    async def get(self, key: str) -> str | None:
        try:
            return await self._backend.get(key)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.warning("cache get failed, treating as miss", key=key, error=str(e))
            return None

    async def set(self, key: str, value: str, ttl: int) -> None:
        try:
            await self._backend.set(key, value, ttl)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.warning("cache set failed, skipping", key=key, error=str(e))

    # ─── Typed helpers ────────────────────────────────────────────────

    async def get_model(self, namespace: Namespace, set_id: str, model: type[M]) -> M | None:
        """Read and validate a cached pydantic model. Undecodable entries are misses."""
        key = namespace.key(set_id)
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return model.model_validate_json(raw)
        except ValidationError as e:
            log.warning("discarding undecodable cache entry", key=key, error=str(e))
            return None

    async def set_model(self, namespace: Namespace, set_id: str, value: BaseModel) -> None:
        """Serialize a pydantic model into its namespace with the namespace TTL."""
        await self.set(namespace.key(set_id), value.model_dump_json(by_alias=True), self.ttl_for(namespace))
