"""Shared fixtures: a scripted model provider, recorded sleeps, sample records."""

from __future__ import annotations

from typing import Any

import orjson
import pytest

from rxview.content import DrugContentService, EnhancementOrchestrator, ModelGateway
from rxview.ext.mcp import ToolProtocolAdapter
from rxview.io.cache import ContentCache, MemoryCache
from rxview.io.catalog import DrugCatalog
from rxview.models import DrugRecord
from rxview.runtime.observability import configure_logging
from rxview.runtime.retry import RetryPolicy

SEO_JSON = '{"title": "Aspirin: Uses & Safety", "description": "What aspirin treats and how to take it."}'
SUMMARY_TEXT = "Aspirin is a pain reliever made by Test Pharma."


class FakeProvider:
    """Scripted provider.

    ``failures`` are raised one per call before normal responses resume;
    ``error`` is raised on every call. Section calls echo the requested keys
    unless ``sections`` overrides the raw response.
    """

    def __init__(
        self,
        *,
        seo: str = SEO_JSON,
        summary: str = SUMMARY_TEXT,
        sections: str | None = None,
        failures: list[BaseException] | None = None,
        error: BaseException | None = None,
    ) -> None:
        self.seo = seo
        self.summary = summary
        self.sections = sections
        self.failures = list(failures or [])
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        json_schema: dict[str, Any] | None = None,
        schema_name: str = "response",
    ) -> str:
        self.calls.append({"prompt": prompt, "system": system, "json_schema": json_schema})
        if self.failures:
            raise self.failures.pop(0)
        if self.error is not None:
            raise self.error
        if json_schema is not None:
            if self.sections is not None:
                return self.sections
            return orjson.dumps({key: f"In plain words: {key}" for key in json_schema["required"]}).decode()
        if prompt.startswith("Generate SEO"):
            return self.seo
        return self.summary

    def count(self, kind: str) -> int:
        """Calls of one kind: ``seo``, ``summary`` or ``sections``."""
        def kind_of(call: dict[str, Any]) -> str:
            if call["json_schema"] is not None:
                return "sections"
            return "seo" if call["prompt"].startswith("Generate SEO") else "summary"
        return sum(1 for c in self.calls if kind_of(c) == kind)


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class BrokenBackend:
    """Cache backend that fails every operation."""

    async def get(self, key: str) -> str | None:
        raise ConnectionError("cache down")

    async def set(self, key: str, value: str, ttl: int) -> None:
        raise ConnectionError("cache down")


def make_record(**overrides: Any) -> DrugRecord:
    data: dict[str, Any] = {
        "set_id": "123",
        "drug_name": "Aspirin",
        "generic_name": "acetylsalicylic-acid",
        "labeler": "Test Pharma",
        "fields": {"indicationsAndUsage": "Pain relief", "dosageAndAdministration": "325mg daily"},
    }
    data.update(overrides)
    return DrugRecord.model_validate(data)


@pytest.fixture(autouse=True)
def quiet_logs() -> None:
    configure_logging("none")


@pytest.fixture
def record() -> DrugRecord:
    return make_record()


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def policy(sleeps: SleepRecorder) -> RetryPolicy:
    return RetryPolicy(max_attempts=3, sleep=sleeps)


@pytest.fixture
def backend() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def cache(backend: MemoryCache) -> ContentCache:
    return ContentCache(backend)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def gateway(provider: FakeProvider, cache: ContentCache, policy: RetryPolicy) -> ModelGateway:
    return ModelGateway(provider, cache, policy)


@pytest.fixture
def orchestrator(gateway: ModelGateway, cache: ContentCache) -> EnhancementOrchestrator:
    return EnhancementOrchestrator(gateway, cache)


@pytest.fixture
def catalog(record: DrugRecord) -> DrugCatalog:
    return DrugCatalog([
        record,
        make_record(
            set_id="456",
            drug_name="Tylenol Extra-Strength",
            generic_name="acetaminophen",
            labeler="McNeil",
            fields={"indicationsAndUsage": "Temporary relief of minor aches and fever"},
            effective_time="20230415",
        ),
        make_record(
            set_id="789",
            drug_name="Advil",
            generic_name="ibuprofen",
            labeler="Pfizer Consumer",
            fields={"indicationsAndUsage": "Relief of headache and fever"},
        ),
    ])


@pytest.fixture
def service(catalog: DrugCatalog, orchestrator: EnhancementOrchestrator) -> DrugContentService:
    return DrugContentService(catalog, orchestrator)


@pytest.fixture
def adapter(service: DrugContentService) -> ToolProtocolAdapter:
    return ToolProtocolAdapter(service)
