"""Content caching with TTL support.

Backends:
    - MemoryCache: in-process dict (default)
    - RedisCache: async redis backend (requires rxview[redis])

ContentCache wraps either one and turns backend failures into misses.
"""

from .cache import DEFAULT_TTL, CacheBackend, CacheEntry, ContentCache, MemoryCache, Namespace

__all__ = [
    "CacheBackend",
    "CacheEntry",
    "ContentCache",
    "MemoryCache",
    "Namespace",
    "DEFAULT_TTL",
    # Redis (lazy import)
    "RedisCache",
]


def __getattr__(name: str) -> object:
    """Lazy import the Redis backend to avoid import-time dependency."""
    if name == "RedisCache":
        from .redis import RedisCache
        return RedisCache
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
