"""Tagged lookup outcomes.

The content service returns one of these instead of raising, so callers branch
on the variant with ``match``:

    >>> match await service.enhanced_by_names("Aspirin"):
    ...     case Found(content): ...
    ...     case NotFound(query): ...
    ...     case TransientFailure(message): ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    """The record resolved and content was produced."""
    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    """No record matches the query. Domain absence, not a failure."""
    query: str


@dataclass(frozen=True, slots=True)
class TransientFailure:
    """The record collaborator failed; the caller may retry later."""
    message: str


LookupOutcome: TypeAlias = "Found[T] | NotFound | TransientFailure"


def describe_query(drug_name: str, generic_name: str | None = None) -> str:
    """Human-readable search term, e.g. ``Tylenol (acetaminophen)``."""
    return f"{drug_name} ({generic_name})" if generic_name else drug_name
