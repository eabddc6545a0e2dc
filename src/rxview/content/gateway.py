"""Model gateway: one logical generation per call, under retry.

Each operation:
    1. Short-circuits to its fallback when no provider is configured.
    2. Calls the provider through ``execute_with_retry``. Exhausted retries
       propagate as ProviderError; the gateway never swallows them.
    3. Parses the response. Unusable responses (bad JSON, empty text, a schema
       mismatch) fall back immediately without retrying.
    4. Writes a successful generation to its cache namespace before returning.

The gateway writes the cache but never reads it; cache-aside lookups belong to
the orchestrator.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from rxview.io.cache import ContentCache, Namespace
from rxview.models import DrugRecord, DrugSummary, SectionBatch, SectionKey, SeoMetadata
from rxview.runtime.observability import get_logger
from rxview.runtime.retry import RetryPolicy, Sleep, execute_with_retry

from .prompts import (
    SECTIONS_SYSTEM_PROMPT,
    fallback_seo,
    fallback_summary,
    section_schema,
    sections_prompt,
    seo_prompt,
    summary_prompt,
)
from .provider import ModelProvider, OpenAIProvider

if TYPE_CHECKING:
    from rxview.foundation.config import RxviewSettings

log = get_logger("rxview.gateway")


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Sampling parameters per operation."""
    seo_temperature: float = 0.7
    seo_max_tokens: int = 200
    summary_temperature: float = 0.6
    summary_max_tokens: int = 150
    sections_temperature: float = 0.4


class ModelGateway:
    """Generates SEO metadata, summaries and section rewrites for a record.

    Args:
        provider: Text-generation backend, or None to disable generation
        cache: Cache receiving successful generations
        policy: Retry policy applied to every provider call
        options: Sampling parameters

    Example:
        >>> gateway = ModelGateway(OpenAIProvider.from_settings(cfg), ContentCache())
        >>> meta = await gateway.generate_title_and_description(record)
        >>> meta.title
        'Aspirin: Uses, Dosage & Safety'
    """

    __slots__ = ("_provider", "_cache", "_policy", "_options")

    def __init__(
        self,
        provider: ModelProvider | None,
        cache: ContentCache,
        policy: RetryPolicy | None = None,
        options: GenerationOptions | None = None,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._policy = policy or RetryPolicy()
        self._options = options or GenerationOptions()

    @classmethod
    def from_settings(
        cls,
        settings: RxviewSettings,
        cache: ContentCache,
        *,
        sleep: Sleep | None = None,
    ) -> ModelGateway:
        """Build from settings; without an API key the gateway runs disabled."""
        cfg = settings.openai
        provider: ModelProvider | None = None
        if cfg.enabled:
            provider = OpenAIProvider.from_settings(cfg)
        else:
            log.warning("OpenAI API key not found, AI features will be disabled")
        options = GenerationOptions(
            seo_temperature=cfg.seo_temperature,
            seo_max_tokens=cfg.seo_max_tokens,
            summary_temperature=cfg.summary_temperature,
            summary_max_tokens=cfg.summary_max_tokens,
            sections_temperature=cfg.sections_temperature,
        )
        return cls(provider, cache, RetryPolicy.from_settings(settings.retry, sleep=sleep), options)

    @property
    def enabled(self) -> bool:
        return self._provider is not None

    # ─── Operations ──────────────────────────────────────────────────

    async def generate_title_and_description(self, record: DrugRecord) -> SeoMetadata:
        if self._provider is None:
            return fallback_seo(record)
        provider, prompt = self._provider, seo_prompt(record)

        raw = await execute_with_retry(
            lambda: provider.complete(
                prompt,
                temperature=self._options.seo_temperature,
                max_tokens=self._options.seo_max_tokens,
            ),
            self._policy,
            f"{Namespace.SEO_METADATA}:{record.drug_name}",
        )
        try:
            meta = SeoMetadata.model_validate(orjson.loads(raw))
        except (orjson.JSONDecodeError, ValidationError) as e:
            log.warning("unparseable SEO response, using fallback", drug=record.drug_name, error=str(e))
            return fallback_seo(record)

        await self._cache.set_model(Namespace.SEO_METADATA, record.set_id, meta)
        return meta

    async def generate_summary(self, record: DrugRecord) -> str:
        if self._provider is None:
            return fallback_summary(record)
        provider, prompt = self._provider, summary_prompt(record)

        text = await execute_with_retry(
            lambda: provider.complete(
                prompt,
                temperature=self._options.summary_temperature,
                max_tokens=self._options.summary_max_tokens,
            ),
            self._policy,
            f"{Namespace.DRUG_SUMMARY}:{record.drug_name}",
        )
        if not text.strip():
            log.warning("empty summary response, using fallback", drug=record.drug_name)
            return fallback_summary(record)

        await self._cache.set_model(Namespace.DRUG_SUMMARY, record.set_id, DrugSummary(text=text.strip()))
        return text.strip()

    async def generate_section_batch(
        self,
        record: DrugRecord,
        section_contents: Mapping[SectionKey, str],
    ) -> dict[SectionKey, str]:
        """Rewrite every non-empty section in one schema-constrained call.

        Returns exactly the requested keys, or an empty dict when the response
        does not conform. Never a partial mapping.
        """
        requested = {key: text for key, text in section_contents.items() if text and text.strip()}
        if self._provider is None or not requested:
            return {}
        provider = self._provider
        keys = list(requested)
        payload = orjson.dumps({key.value: text for key, text in requested.items()}).decode()
        prompt = sections_prompt(record, payload)
        schema = section_schema(keys)

        raw = await execute_with_retry(
            lambda: provider.complete(
                prompt,
                system=SECTIONS_SYSTEM_PROMPT,
                temperature=self._options.sections_temperature,
                json_schema=schema,
                schema_name="drug_sections",
            ),
            self._policy,
            f"{Namespace.ENHANCED_SECTIONS}:{record.drug_name}",
        )
        enhanced = _parse_section_batch(raw, keys)
        if enhanced is None:
            log.warning("section response does not match schema, skipping enhancement",
                        drug=record.drug_name, requested=len(keys))
            return {}

        await self._cache.set_model(Namespace.ENHANCED_SECTIONS, record.set_id, SectionBatch(sections=enhanced))
        return enhanced


def _parse_section_batch(raw: str, keys: list[SectionKey]) -> dict[SectionKey, str] | None:
    """Exactly the requested keys, each a non-empty string, or None."""
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None
    if not isinstance(data, dict) or set(data) != {key.value for key in keys}:
        return None
    if not all(isinstance(v, str) and v.strip() for v in data.values()):
        return None
    return {key: data[key.value].strip() for key in keys}
