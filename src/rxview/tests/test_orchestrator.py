"""Tests for the enhancement orchestrator's cache-aside flow and fallback."""

from __future__ import annotations

import asyncio

import pytest
from conftest import BrokenBackend, FakeProvider, make_record

from rxview.content import EnhancementOrchestrator, ModelGateway, build_basic_content
from rxview.foundation.errors import RateLimitedError, TransientProviderError
from rxview.io.cache import ContentCache, MemoryCache, Namespace
from rxview.models import DrugRecord, DrugSummary, EnhancedContent, SeoMetadata
from rxview.runtime.retry import RetryPolicy


def _orchestrator(provider: FakeProvider | None, cache: ContentCache, policy: RetryPolicy) -> EnhancementOrchestrator:
    return EnhancementOrchestrator(ModelGateway(provider, cache, policy), cache)


# ═════════════════════════════════════════════════════════════════════════════
# Generate → Assemble → Persist
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_generates_and_assembles(orchestrator: EnhancementOrchestrator, record: DrugRecord) -> None:
    content = await orchestrator.get_enhanced_content(record)

    assert content.seo_title == "Aspirin: Uses & Safety"
    assert content.meta_description == "What aspirin treats and how to take it."
    assert content.enhanced_summary == "Aspirin is a pain reliever made by Test Pharma."
    assert [s.title for s in content.sections] == ["Indications and Usage", "Dosage and Administration"]
    assert [s.enhanced_content for s in content.sections] == [
        "In plain words: indicationsAndUsage",
        "In plain words: dosageAndAdministration",
    ]


@pytest.mark.asyncio
async def test_result_is_persisted(orchestrator: EnhancementOrchestrator, cache: ContentCache,
                                   record: DrugRecord) -> None:
    content = await orchestrator.get_enhanced_content(record)
    cached = await cache.get_model(Namespace.ENHANCED_CONTENT, "123", EnhancedContent)
    assert cached is not None
    assert cached.to_payload() == content.to_payload()


@pytest.mark.asyncio
async def test_cache_hit_is_idempotent(
    orchestrator: EnhancementOrchestrator, provider: FakeProvider, record: DrugRecord
) -> None:
    await orchestrator.get_enhanced_content(record)
    calls = len(provider.calls)

    second = await orchestrator.get_enhanced_content(record)
    third = await orchestrator.get_enhanced_content(record)

    assert len(provider.calls) == calls == 3
    assert second.model_dump_json(by_alias=True) == third.model_dump_json(by_alias=True)


@pytest.mark.asyncio
async def test_partial_cache_regenerates_only_missing(
    orchestrator: EnhancementOrchestrator, provider: FakeProvider, cache: ContentCache, record: DrugRecord
) -> None:
    await cache.set_model(Namespace.SEO_METADATA, "123", SeoMetadata(title="Cached title", description="Cached"))
    await cache.set_model(Namespace.DRUG_SUMMARY, "123", DrugSummary(text="Cached summary"))

    content = await orchestrator.get_enhanced_content(record)

    assert content.seo_title == "Cached title"
    assert content.enhanced_summary == "Cached summary"
    assert provider.count("seo") == provider.count("summary") == 0
    assert provider.count("sections") == 1


@pytest.mark.asyncio
async def test_uncovered_sections_stay_unenhanced(cache: ContentCache, policy: RetryPolicy,
                                                  record: DrugRecord) -> None:
    orchestrator = _orchestrator(FakeProvider(sections='{"indicationsAndUsage": "only one"}'), cache, policy)

    content = await orchestrator.get_enhanced_content(record)

    assert all(s.enhanced_content is None for s in content.sections)
    assert content.seo_title == "Aspirin: Uses & Safety"


# ═════════════════════════════════════════════════════════════════════════════
# Fallback
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_fallback_completeness(cache: ContentCache, policy: RetryPolicy, record: DrugRecord) -> None:
    orchestrator = _orchestrator(FakeProvider(error=TransientProviderError("upstream down")), cache, policy)

    content = await orchestrator.get_enhanced_content(record)

    assert content.seo_title and content.meta_description and content.enhanced_summary
    basic = build_basic_content(record)
    assert [s.model_dump() for s in content.sections] == [s.model_dump() for s in basic.sections]
    assert all(s.enhanced_content is None for s in content.sections)


@pytest.mark.asyncio
async def test_fallback_is_not_cached(cache: ContentCache, policy: RetryPolicy, record: DrugRecord) -> None:
    provider = FakeProvider(error=RateLimitedError())
    orchestrator = _orchestrator(provider, cache, policy)

    await orchestrator.get_enhanced_content(record)
    assert await cache.get_model(Namespace.ENHANCED_CONTENT, "123", EnhancedContent) is None

    provider.error = None
    content = await orchestrator.get_enhanced_content(record)
    assert content.seo_title == "Aspirin: Uses & Safety"


@pytest.mark.asyncio
async def test_fallback_has_same_shape_as_enhanced(orchestrator: EnhancementOrchestrator, record: DrugRecord) -> None:
    enhanced = (await orchestrator.get_enhanced_content(record)).to_payload()
    fallback = orchestrator.build_fallback(record).to_payload()

    assert set(fallback) == set(enhanced)


@pytest.mark.asyncio
async def test_unavailable_cache_always_regenerates(policy: RetryPolicy, record: DrugRecord) -> None:
    provider = FakeProvider()
    orchestrator = _orchestrator(provider, ContentCache(BrokenBackend()), policy)

    first = await orchestrator.get_enhanced_content(record)
    await orchestrator.get_enhanced_content(record)

    assert first.seo_title == "Aspirin: Uses & Safety"
    assert len(provider.calls) == 6


# ═════════════════════════════════════════════════════════════════════════════
# Concurrency & end-to-end
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_concurrent_misses_converge_on_one_key(policy: RetryPolicy, record: DrugRecord) -> None:
    backend = MemoryCache()
    orchestrator = _orchestrator(FakeProvider(), ContentCache(backend), policy)

    results = await asyncio.gather(*(orchestrator.get_enhanced_content(record) for _ in range(3)))

    assert {r.seo_title for r in results} == {"Aspirin: Uses & Safety"}
    assert await backend.get(Namespace.ENHANCED_CONTENT.key("123")) is not None


@pytest.mark.asyncio
async def test_aspirin_with_gateway_disabled(cache: ContentCache) -> None:
    record = make_record()
    orchestrator = EnhancementOrchestrator(ModelGateway(None, cache), cache)

    payload = (await orchestrator.get_enhanced_content(record)).to_payload()

    assert payload["seoTitle"] == "Aspirin (acetylsalicylic-acid) - Prescription Info"
    assert payload["enhancedSummary"].startswith(
        "Aspirin is a prescription medication containing acetylsalicylic-acid"
    )
    assert [(s["title"], s["order"]) for s in payload["sections"]] == [
        ("Indications and Usage", 1),
        ("Dosage and Administration", 2),
    ]
    assert all("enhancedContent" not in s for s in payload["sections"])
