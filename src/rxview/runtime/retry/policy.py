"""Retry policy for model provider calls.

A bounded loop: attempt, classify the failure, pick a delay, suspend, repeat.
Rate-limit failures back off exponentially; every other failure waits a short
fixed delay. The final failure is re-raised as a ProviderError.

The sleep function is injectable so tests can record delays instead of waiting.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Annotated, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from rxview.foundation.errors import ErrorCode, ProviderError, classify_exception
from rxview.runtime.observability import get_logger

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff

if TYPE_CHECKING:
    from rxview.foundation.config import RetrySettings

T = TypeVar("T")
Sleep = Callable[[float], Awaitable[None]]

log = get_logger("rxview.retry")


class RetryPolicy(BaseModel):
    """Retry configuration for a provider call.

    Attributes:
        max_attempts: Total attempts including the first
        rate_limit_backoff: Delay strategy after a rate-limit failure
        transient_backoff: Delay strategy after any other failure
        sleep: Coroutine used to wait between attempts

    Example:
        >>> policy = RetryPolicy(max_attempts=3)
        >>> await execute_with_retry(lambda: provider.complete(prompt), policy, "summary")
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    max_attempts: Annotated[int, Field(ge=1, le=10)] = 3
    rate_limit_backoff: Backoff = Field(default_factory=ExponentialBackoff, repr=False)
    transient_backoff: Backoff = Field(default_factory=ConstantBackoff, repr=False)
    sleep: Sleep = Field(default=asyncio.sleep, exclude=True, repr=False)

    @classmethod
    def from_settings(cls, settings: RetrySettings, *, sleep: Sleep | None = None) -> RetryPolicy:
        """Build a policy from RXVIEW_RETRY_* settings."""
        return cls(
            max_attempts=settings.max_attempts,
            rate_limit_backoff=ExponentialBackoff(base=settings.base_delay),
            transient_backoff=ConstantBackoff(settings.transient_delay),
            **({"sleep": sleep} if sleep is not None else {}),
        )

    def get_delay(self, code: ErrorCode, attempt: int) -> float:
        """Delay after a failed attempt with the given error code."""
        backoff = self.rate_limit_backoff if code is ErrorCode.RATE_LIMITED else self.transient_backoff
        return backoff.delay(attempt)


NO_RETRY = RetryPolicy(max_attempts=1)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    label: str,
) -> T:
    """Run an async operation under a retry policy.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        policy: Retry configuration
        label: Operation name for logging

    Returns:
        The first successful result

    Raises:
        ProviderError: When every attempt failed. Non-provider exceptions are
            wrapped so callers only need to handle one type.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            return await operation()
        except Exception as e:
            code = classify_exception(e)
            if attempt >= policy.max_attempts:
                log.error("retries exhausted", operation=label, attempts=attempt, code=code.value, error=str(e))
                if isinstance(e, ProviderError):
                    raise
                raise ProviderError.from_exception(e, label) from e

            delay = policy.get_delay(code, attempt)
            log.warning(
                "attempt failed, retrying",
                operation=label,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                code=code.value,
                delay_s=delay,
                error=str(e),
            )
            await policy.sleep(delay)
