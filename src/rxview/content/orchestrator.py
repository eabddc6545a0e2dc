"""Enhancement orchestrator: cache-aside production of EnhancedContent.

Per record:
    CacheCheck -> Generate -> Assemble -> Persist -> Return
                     |
                     +-> Fallback (exhausted provider retries, never cached)

Concurrent misses for the same record may each generate and each write the
cache; the last write wins.
"""

from __future__ import annotations

import asyncio

from rxview.foundation.errors import ProviderError
from rxview.io.cache import ContentCache, Namespace
from rxview.models import (
    BasicContent,
    DrugRecord,
    DrugSummary,
    EnhancedContent,
    Section,
    SectionBatch,
    SectionKey,
    SeoMetadata,
)
from rxview.runtime.observability import get_logger

from .assembler import build_basic_content
from .gateway import ModelGateway
from .prompts import fallback_seo, fallback_summary, prepare_section_contents

log = get_logger("rxview.orchestrator")


class EnhancementOrchestrator:
    """Produces EnhancedContent for a record, reading and populating the cache.

    Each of the three generations is looked up in its own namespace first, so a
    partially warm cache only regenerates what is missing.
    """

    __slots__ = ("_gateway", "_cache")

    def __init__(self, gateway: ModelGateway, cache: ContentCache) -> None:
        self._gateway = gateway
        self._cache = cache

    async def get_enhanced_content(self, record: DrugRecord) -> EnhancedContent:
        cached = await self._cache.get_model(Namespace.ENHANCED_CONTENT, record.set_id, EnhancedContent)
        if cached is not None:
            log.debug("enhanced content cache hit", set_id=record.set_id)
            return cached

        basic = build_basic_content(record)
        results = await asyncio.gather(
            self._seo(record),
            self._summary(record),
            self._sections(record),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, ProviderError):
                raise result
        if failure := next((r for r in results if isinstance(r, ProviderError)), None):
            log.error("generation failed, serving fallback content",
                      set_id=record.set_id, drug=record.drug_name, code=failure.code.value, error=str(failure))
            return self.build_fallback(record, basic)

        meta, summary, enhanced = results
        content = EnhancedContent(
            **basic.model_dump(exclude={"sections"}),
            sections=_apply_enhancements(basic.sections, enhanced),
            seo_title=meta.title,
            meta_description=meta.description,
            enhanced_summary=summary,
        )
        await self._cache.set_model(Namespace.ENHANCED_CONTENT, record.set_id, content)
        return content

    def build_fallback(self, record: DrugRecord, basic: BasicContent | None = None) -> EnhancedContent:
        """Template metadata over unenhanced sections. Same shape as real content."""
        basic = basic or build_basic_content(record)
        meta = fallback_seo(record)
        return EnhancedContent(
            **basic.model_dump(),
            seo_title=meta.title,
            meta_description=meta.description,
            enhanced_summary=fallback_summary(record),
        )

    # ─── Cached-or-generate ──────────────────────────────────────────

    async def _seo(self, record: DrugRecord) -> SeoMetadata:
        cached = await self._cache.get_model(Namespace.SEO_METADATA, record.set_id, SeoMetadata)
        return cached or await self._gateway.generate_title_and_description(record)

    async def _summary(self, record: DrugRecord) -> str:
        cached = await self._cache.get_model(Namespace.DRUG_SUMMARY, record.set_id, DrugSummary)
        return cached.text if cached else await self._gateway.generate_summary(record)

    async def _sections(self, record: DrugRecord) -> dict[SectionKey, str]:
        cached = await self._cache.get_model(Namespace.ENHANCED_SECTIONS, record.set_id, SectionBatch)
        if cached is not None:
            return cached.sections
        return await self._gateway.generate_section_batch(record, prepare_section_contents(record))


def _apply_enhancements(sections: list[Section], enhanced: dict[SectionKey, str]) -> list[Section]:
    out: list[Section] = []
    for section in sections:
        key = SectionKey.from_title(section.title)
        text = enhanced.get(key) if key is not None else None
        out.append(section.model_copy(update={"enhanced_content": text}) if text else section)
    return out
