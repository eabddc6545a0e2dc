"""URL slugs for drug page paths."""

from __future__ import annotations

import re

_SPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w\s-]")


def create_slug(text: str) -> str:
    """URL slug: lowercase, punctuation dropped, whitespace runs become hyphens."""
    return _SPACE_RE.sub("-", _NON_WORD_RE.sub("", text.lower())).strip("-")
