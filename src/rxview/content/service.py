"""Drug content service: record resolution plus content production.

The single seam between the outer surfaces (tool adapter, HTTP routes) and the
content pipeline. Lookups return tagged outcomes; collaborator failures become
TransientFailure rather than exceptions.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from rxview.foundation.errors import Found, LookupOutcome, NotFound, TransientFailure, describe_query
from rxview.models import BasicContent, DrugRecord, EnhancedContent, SearchPage, SearchQuery, Sitemap
from rxview.runtime.observability import get_logger

from .assembler import build_basic_content
from .orchestrator import EnhancementOrchestrator

if TYPE_CHECKING:
    from rxview.io.catalog import DrugLookup

log = get_logger("rxview.service")


class DrugContentService:
    """Resolves records by name and renders basic or enhanced content."""

    __slots__ = ("_lookup", "_orchestrator")

    def __init__(self, lookup: DrugLookup, orchestrator: EnhancementOrchestrator) -> None:
        self._lookup = lookup
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> EnhancementOrchestrator:
        return self._orchestrator

    async def resolve(self, drug_name: str, generic_name: str | None = None) -> LookupOutcome[DrugRecord]:
        query = describe_query(drug_name, generic_name)
        try:
            record = await self._lookup.get_by_names(drug_name, generic_name)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.exception("record lookup failed", query=query)
            return TransientFailure(str(e) or type(e).__name__)
        return Found(record) if record is not None else NotFound(query)

    async def basic_by_names(self, drug_name: str, generic_name: str | None = None) -> LookupOutcome[BasicContent]:
        match await self.resolve(drug_name, generic_name):
            case Found(record):
                return Found(build_basic_content(record))
            case other:
                return other

    async def enhanced_by_names(
        self, drug_name: str, generic_name: str | None = None
    ) -> LookupOutcome[EnhancedContent]:
        match await self.resolve(drug_name, generic_name):
            case Found(record):
                return Found(await self._orchestrator.get_enhanced_content(record))
            case other:
                return other

    async def search(self, query: SearchQuery) -> SearchPage:
        return await self._lookup.search(query)

    async def sitemap(self) -> Sitemap:
        return await self._lookup.sitemap()
