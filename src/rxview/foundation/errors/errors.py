"""Error codes and provider exceptions.

ErrorCode classifies failures for retry decisions. ProviderError and its
subclasses are what the model provider raises; the retry loop branches on
``code`` and the orchestrator turns an exhausted ProviderError into fallback
content.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from functools import lru_cache
from typing import Self


class ErrorCode(StrEnum):
    """Standard error codes for generation and lookup failures."""
    RATE_LIMITED = "RATE_LIMITED"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    NOT_FOUND = "NOT_FOUND"


class RpcErrorCode(IntEnum):
    """JSON-RPC envelope error codes."""
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


# Pattern -> code, checked in insertion order
_PATTERN_CODES: dict[str, ErrorCode] = {
    "ratelimit": ErrorCode.RATE_LIMITED,
    "rate limit": ErrorCode.RATE_LIMITED,
    "rate_limit": ErrorCode.RATE_LIMITED,
    "429": ErrorCode.RATE_LIMITED,
    "timeout": ErrorCode.TIMEOUT,
    "timed out": ErrorCode.TIMEOUT,
    "connection": ErrorCode.NETWORK_ERROR,
    "network": ErrorCode.NETWORK_ERROR,
    "json": ErrorCode.PARSE_ERROR,
    "decode": ErrorCode.PARSE_ERROR,
    "notfound": ErrorCode.NOT_FOUND,
}
_PATTERN_KEYS = tuple(_PATTERN_CODES)


@lru_cache(maxsize=256)
def _classify_cached(exc_key: str) -> ErrorCode:
    haystack = exc_key.lower()
    for pattern in _PATTERN_KEYS:
        if pattern in haystack:
            return _PATTERN_CODES[pattern]
    return ErrorCode.EXTERNAL_SERVICE_ERROR


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map exception to error code via its code attribute or name/message patterns."""
    if isinstance(exc, ProviderError):
        return exc.code
    return _classify_cached(f"{type(exc).__name__} {exc}")


class ProviderError(Exception):
    """Failure reported by the text-generation provider."""

    __slots__ = ("code",)

    def __init__(self, message: str, code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR) -> None:
        self.code = code
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: BaseException, context: str = "") -> Self:
        """Wrap an arbitrary exception, classifying it by name and message."""
        message = f"{context}: {exc}" if context else str(exc)
        return cls(message or type(exc).__name__, classify_exception(exc))


class RateLimitedError(ProviderError):
    """Provider signalled a rate limit (HTTP 429 or equivalent)."""

    def __init__(self, message: str = "Rate limit exceeded") -> None:
        super().__init__(message, ErrorCode.RATE_LIMITED)


class TransientProviderError(ProviderError):
    """Network failure, timeout or 5xx from the provider."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NETWORK_ERROR) -> None:
        super().__init__(message, code)
