"""Retry policies for provider calls.

Example:
    >>> from rxview.runtime.retry import RetryPolicy, execute_with_retry
    >>> policy = RetryPolicy(max_attempts=3)
    >>> text = await execute_with_retry(lambda: provider.complete(prompt), policy, "summary")
"""

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .policy import NO_RETRY, RetryPolicy, Sleep, execute_with_retry

__all__ = [
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "ConstantBackoff",
    # Policy
    "RetryPolicy",
    "NO_RETRY",
    "Sleep",
    # Execution
    "execute_with_retry",
]
