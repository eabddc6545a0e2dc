"""Unified error handling for rxview.

- ErrorCode / RpcErrorCode: failure classification and JSON-RPC codes
- ProviderError: exceptions raised by the model provider
- Found / NotFound / TransientFailure: tagged lookup outcomes
"""

from .errors import (
    ErrorCode,
    ProviderError,
    RateLimitedError,
    RpcErrorCode,
    TransientProviderError,
    classify_exception,
)
from .outcome import Found, LookupOutcome, NotFound, TransientFailure, describe_query

__all__ = [
    # Codes
    "ErrorCode", "RpcErrorCode", "classify_exception",
    # Provider errors
    "ProviderError", "RateLimitedError", "TransientProviderError",
    # Outcomes
    "Found", "NotFound", "TransientFailure", "LookupOutcome", "describe_query",
]
