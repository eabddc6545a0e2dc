"""Tests for the model gateway: parsing, fallbacks, retries and cache writes."""

from __future__ import annotations

import orjson
import pytest
from conftest import SUMMARY_TEXT, FakeProvider, SleepRecorder, make_record

from rxview.content import ModelGateway, prepare_section_contents
from rxview.content.prompts import SECTION_CHAR_LIMIT
from rxview.foundation.config import OpenAISettings, RxviewSettings
from rxview.foundation.errors import ProviderError, RateLimitedError, TransientProviderError
from rxview.io.cache import ContentCache, Namespace
from rxview.models import DrugRecord, DrugSummary, SectionBatch, SectionKey, SeoMetadata
from rxview.runtime.retry import RetryPolicy


# ═════════════════════════════════════════════════════════════════════════════
# Title & description
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_seo_success_is_cached(gateway: ModelGateway, cache: ContentCache, record: DrugRecord) -> None:
    meta = await gateway.generate_title_and_description(record)

    assert meta.title == "Aspirin: Uses & Safety"
    assert await cache.get_model(Namespace.SEO_METADATA, "123", SeoMetadata) == meta


@pytest.mark.asyncio
async def test_seo_parse_failure_falls_back_without_retry(
    cache: ContentCache, policy: RetryPolicy, sleeps: SleepRecorder, record: DrugRecord
) -> None:
    provider = FakeProvider(seo="Sure! Here is a title: Aspirin")
    gateway = ModelGateway(provider, cache, policy)

    meta = await gateway.generate_title_and_description(record)

    assert meta.title == "Aspirin (acetylsalicylic-acid) - Prescription Info"
    assert meta.description == (
        "Complete prescribing information for Aspirin (acetylsalicylic-acid) by Test Pharma. "
        "Dosage, side effects, warnings & more."
    )
    assert provider.count("seo") == 1
    assert sleeps.delays == []
    assert await cache.get_model(Namespace.SEO_METADATA, "123", SeoMetadata) is None


@pytest.mark.asyncio
async def test_seo_missing_keys_falls_back(cache: ContentCache, policy: RetryPolicy, record: DrugRecord) -> None:
    gateway = ModelGateway(FakeProvider(seo='{"title": "Only a title"}'), cache, policy)
    meta = await gateway.generate_title_and_description(record)
    assert meta.title.endswith("- Prescription Info")


@pytest.mark.asyncio
async def test_seo_retries_rate_limits(cache: ContentCache, policy: RetryPolicy, sleeps: SleepRecorder,
                                       record: DrugRecord) -> None:
    provider = FakeProvider(failures=[RateLimitedError(), RateLimitedError()])
    gateway = ModelGateway(provider, cache, policy)

    meta = await gateway.generate_title_and_description(record)

    assert meta.title == "Aspirin: Uses & Safety"
    assert provider.count("seo") == 3
    assert sleeps.delays == pytest.approx([1.0, 2.0])


@pytest.mark.asyncio
async def test_exhausted_retries_propagate(cache: ContentCache, policy: RetryPolicy, record: DrugRecord) -> None:
    gateway = ModelGateway(FakeProvider(error=TransientProviderError("upstream 503")), cache, policy)

    with pytest.raises(ProviderError, match="upstream 503"):
        await gateway.generate_title_and_description(record)
    with pytest.raises(ProviderError):
        await gateway.generate_summary(record)
    with pytest.raises(ProviderError):
        await gateway.generate_section_batch(record, prepare_section_contents(record))


# ═════════════════════════════════════════════════════════════════════════════
# Summary
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_summary_success_is_cached(gateway: ModelGateway, cache: ContentCache, record: DrugRecord) -> None:
    assert await gateway.generate_summary(record) == SUMMARY_TEXT
    cached = await cache.get_model(Namespace.DRUG_SUMMARY, "123", DrugSummary)
    assert cached is not None and cached.text == SUMMARY_TEXT


@pytest.mark.asyncio
async def test_empty_summary_falls_back_uncached(cache: ContentCache, policy: RetryPolicy, record: DrugRecord) -> None:
    gateway = ModelGateway(FakeProvider(summary="  "), cache, policy)

    text = await gateway.generate_summary(record)

    assert text == "Aspirin is a prescription medication containing acetylsalicylic-acid, manufactured by Test Pharma."
    assert await cache.get_model(Namespace.DRUG_SUMMARY, "123", DrugSummary) is None


# ═════════════════════════════════════════════════════════════════════════════
# Section batch
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_section_batch_requests_only_non_empty_sections(
    gateway: ModelGateway, provider: FakeProvider, cache: ContentCache, record: DrugRecord
) -> None:
    contents = {
        SectionKey.INDICATIONS_AND_USAGE: "Pain relief",
        SectionKey.DOSAGE_AND_ADMINISTRATION: "325mg daily",
        SectionKey.DESCRIPTION: "",
    }
    enhanced = await gateway.generate_section_batch(record, contents)

    assert set(enhanced) == {SectionKey.INDICATIONS_AND_USAGE, SectionKey.DOSAGE_AND_ADMINISTRATION}
    schema = provider.calls[0]["json_schema"]
    assert schema["required"] == ["indicationsAndUsage", "dosageAndAdministration"]
    assert schema["additionalProperties"] is False
    assert provider.calls[0]["system"] is not None

    cached = await cache.get_model(Namespace.ENHANCED_SECTIONS, "123", SectionBatch)
    assert cached is not None and cached.sections == enhanced


@pytest.mark.asyncio
async def test_section_batch_partial_response_is_total_failure(
    cache: ContentCache, policy: RetryPolicy, record: DrugRecord
) -> None:
    partial = orjson.dumps({"indicationsAndUsage": "Helps with pain"}).decode()
    gateway = ModelGateway(FakeProvider(sections=partial), cache, policy)

    assert await gateway.generate_section_batch(record, prepare_section_contents(record)) == {}
    assert await cache.get_model(Namespace.ENHANCED_SECTIONS, "123", SectionBatch) is None


@pytest.mark.asyncio
async def test_section_batch_extra_keys_or_bad_json_rejected(
    cache: ContentCache, policy: RetryPolicy, record: DrugRecord
) -> None:
    extra = orjson.dumps({
        "indicationsAndUsage": "a", "dosageAndAdministration": "b", "description": "c",
    }).decode()
    for raw in (extra, "not json", "[]"):
        gateway = ModelGateway(FakeProvider(sections=raw), cache, policy)
        assert await gateway.generate_section_batch(record, prepare_section_contents(record)) == {}


@pytest.mark.asyncio
async def test_section_batch_nothing_to_enhance(gateway: ModelGateway, provider: FakeProvider) -> None:
    record = make_record(fields={})
    assert await gateway.generate_section_batch(record, {}) == {}
    assert provider.calls == []


def test_prepare_section_contents_strips_and_truncates() -> None:
    record = make_record(fields={
        "indicationsAndUsage": "<p>Pain&nbsp;relief</p>",
        "warningsAndPrecautions": "x" * (SECTION_CHAR_LIMIT + 50),
        "description": "   ",
    })
    contents = prepare_section_contents(record)

    assert list(contents) == [SectionKey.INDICATIONS_AND_USAGE, SectionKey.WARNINGS_AND_PRECAUTIONS]
    assert contents[SectionKey.INDICATIONS_AND_USAGE] == "Pain relief"
    assert len(contents[SectionKey.WARNINGS_AND_PRECAUTIONS]) == SECTION_CHAR_LIMIT


# ═════════════════════════════════════════════════════════════════════════════
# Disabled gateway
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_disabled_gateway_short_circuits(cache: ContentCache, record: DrugRecord) -> None:
    gateway = ModelGateway(None, cache)

    assert not gateway.enabled
    meta = await gateway.generate_title_and_description(record)
    assert meta.title == "Aspirin (acetylsalicylic-acid) - Prescription Info"
    assert (await gateway.generate_summary(record)).startswith(
        "Aspirin is a prescription medication containing acetylsalicylic-acid"
    )
    assert await gateway.generate_section_batch(record, prepare_section_contents(record)) == {}


def test_from_settings_without_key_is_disabled(cache: ContentCache) -> None:
    settings = RxviewSettings(openai=OpenAISettings(api_key=None))
    assert not ModelGateway.from_settings(settings, cache).enabled


def test_from_settings_with_key_is_enabled(cache: ContentCache) -> None:
    settings = RxviewSettings(openai=OpenAISettings(api_key="sk-test"))
    assert ModelGateway.from_settings(settings, cache).enabled
