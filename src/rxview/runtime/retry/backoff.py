"""Backoff strategies for retry policies.

Attempt numbers are 1-indexed: ``delay(1)`` is the wait after the first
failed attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation."""

    def delay(self, attempt: int) -> float:
        """Delay in seconds after the given failed attempt (1-indexed)."""
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff without jitter.

    Delay = min(base * multiplier ^ (attempt - 1), max_delay)

    With the defaults this yields 1s, 2s, 4s, ...
    """

    base: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0

    def delay(self, attempt: int) -> float:
        return min(self.base * (self.multiplier ** max(attempt - 1, 0)), self.max_delay)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between retries."""

    delay_seconds: float = 0.5

    def delay(self, attempt: int) -> float:
        return self.delay_seconds
