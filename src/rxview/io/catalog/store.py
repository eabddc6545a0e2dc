"""In-memory drug catalog loaded from a Labels.json dump.

The catalog is the record-lookup collaborator of the content service. Records
are loaded once at start and never mutated.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import orjson

from rxview.models import (
    DrugRecord,
    Pagination,
    SearchItem,
    SearchPage,
    SearchQuery,
    SectionKey,
    Sitemap,
    SitemapUrl,
    create_slug,
)
from rxview.runtime.observability import get_logger

log = get_logger("rxview.catalog")


@runtime_checkable
class DrugLookup(Protocol):
    """Record-lookup collaborator."""

    async def get_by_names(self, drug_name: str, generic_name: str | None = None) -> DrugRecord | None: ...
    async def search(self, query: SearchQuery) -> SearchPage: ...
    async def sitemap(self) -> Sitemap: ...


def _normalize(name: str) -> str:
    return name.lower().replace("-", " ")


def drug_path(record: DrugRecord) -> str:
    """Public page path, ``/drugs/<brand-slug>-<generic-slug>``."""
    return f"/drugs/{create_slug(record.drug_name)}-{create_slug(record.generic_name)}"


def format_effective_time(value: str | None) -> str:
    """``YYYYMMDD`` label dates as ``YYYY-MM-DD``; today when absent."""
    if value and len(value) >= 8 and value[:8].isdigit():
        return f"{value[:4]}-{value[4:6]}-{value[6:8]}"
    return datetime.now(UTC).date().isoformat()


class DrugCatalog:
    """Read-only record store with name lookup, search and sitemap.

    Example:
        >>> catalog = DrugCatalog.from_json(Path("admin/Labels.json"))
        >>> record = await catalog.get_by_names("Tylenol", "acetaminophen")
    """

    __slots__ = ("_records",)

    def __init__(self, records: Iterable[DrugRecord] = ()) -> None:
        self._records: tuple[DrugRecord, ...] = tuple(records)

    @classmethod
    def from_json(cls, path: Path) -> DrugCatalog:
        """Load a JSON array of label entries. Entries that fail validation are skipped."""
        entries = orjson.loads(path.read_bytes())
        records: list[DrugRecord] = []
        skipped = 0
        for entry in entries:
            try:
                records.append(DrugRecord.from_label(entry))
            except (KeyError, TypeError, ValueError) as e:
                skipped += 1
                log.debug("skipping malformed label entry", error=str(e))
        log.info("loaded drug catalog", path=str(path), records=len(records), skipped=skipped)
        return cls(records)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> tuple[DrugRecord, ...]:
        return self._records

    async def get_by_names(self, drug_name: str, generic_name: str | None = None) -> DrugRecord | None:
        """Case-insensitive lookup; hyphens in brand names match spaces.

        With a generic name both names must match. Without one, the name may
        match either the brand or the generic name.
        """
        wanted = _normalize(drug_name)
        if generic_name:
            generic = generic_name.lower()
            matches = (
                r for r in self._records
                if _normalize(r.drug_name) == wanted and r.generic_name.lower() == generic
            )
        else:
            matches = (
                r for r in self._records
                if _normalize(r.drug_name) == wanted or _normalize(r.generic_name) == wanted
            )
        return next(matches, None)

    async def search(self, query: SearchQuery) -> SearchPage:
        hits = list(self._records)
        if query.query:
            term = query.query.lower()
            hits = [r for r in hits if _matches(r, term)]
        if query.labeler:
            labeler = query.labeler.lower()
            hits = [r for r in hits if labeler in r.labeler.lower()]

        start = (query.page - 1) * query.limit
        end = start + query.limit
        return SearchPage(
            drugs=[
                SearchItem(drug_name=r.drug_name, generic_name=r.generic_name, labeler=r.labeler, url=drug_path(r))
                for r in hits[start:end]
            ],
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=len(hits),
                total_pages=math.ceil(len(hits) / query.limit),
                has_next=end < len(hits),
                has_prev=query.page > 1,
            ),
        )

    async def sitemap(self) -> Sitemap:
        urls = [
            SitemapUrl(url=drug_path(r), lastmod=format_effective_time(r.effective_time))
            for r in self._records
        ]
        return Sitemap(urls=urls, total_urls=len(urls))


def _matches(record: DrugRecord, term: str) -> bool:
    indications = record.prose(SectionKey.INDICATIONS_AND_USAGE) or ""
    return (
        term in record.drug_name.lower()
        or term in record.generic_name.lower()
        or term in record.labeler.lower()
        or term in indications.lower()
    )
