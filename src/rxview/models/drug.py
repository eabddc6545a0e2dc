"""Drug records and the content shapes built from them.

Serialized field names are camelCase (``seoTitle``, ``enhancedContent``) to
match the JSON contract; Python attributes are snake_case. Always dump with
``by_alias=True`` when producing wire payloads.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .sections import SectionCategory, SectionKey

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _now() -> datetime:
    return datetime.now(UTC)


class DrugRecord(BaseModel):
    """Canonical drug label. Read-only input to the content pipeline."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    set_id: str = Field(min_length=1)
    drug_name: str
    generic_name: str
    labeler: str
    fields: dict[SectionKey, str] = Field(default_factory=dict)
    product_type: str | None = None
    effective_time: str | None = None

    @field_validator("fields", mode="before")
    @classmethod
    def _known_fields_only(cls, v: Any) -> Any:
        """Drop label keys outside the section table instead of failing."""
        if isinstance(v, dict):
            known = {k.value for k in SectionKey}
            return {k: val for k, val in v.items() if str(k) in known and isinstance(val, str)}
        return v

    def prose(self, key: SectionKey) -> str | None:
        return self.fields.get(key)

    @classmethod
    def from_label(cls, raw: dict[str, Any]) -> DrugRecord:
        """Build from a Labels.json entry (``drugName``, ``setId``, ``label{...}``)."""
        label = raw.get("label") or {}
        return cls(
            set_id=raw["setId"],
            drug_name=raw["drugName"],
            generic_name=label.get("genericName", ""),
            labeler=raw.get("labeler") or label.get("labelerName", ""),
            fields=label,
            product_type=label.get("productType"),
            effective_time=label.get("effectiveTime"),
        )


class Section(BaseModel):
    """One titled prose subdivision of a label."""

    model_config = _CAMEL

    id: str
    title: str
    content: str
    enhanced_content: str | None = None
    order: int = Field(ge=1)
    category: SectionCategory | None = None
    is_important: bool | None = None


class BasicContent(BaseModel):
    """Unenhanced view for the fast render path."""

    model_config = _CAMEL

    id: str
    drug_name: str
    generic_name: str
    slug: str
    sections: list[Section]
    last_updated: datetime = Field(default_factory=_now)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EnhancedContent(BasicContent):
    """Basic content plus SEO metadata and an AI summary.

    Fallback content has exactly this shape; consumers cannot tell the two apart
    except by the absence of ``enhancedContent`` on sections.
    """

    seo_title: str = Field(min_length=1)
    meta_description: str = Field(min_length=1)
    enhanced_summary: str = Field(min_length=1)

    @property
    def enhanced_sections(self) -> list[Section]:
        return [s for s in self.sections if s.enhanced_content]


# ─────────────────────────────────────────────────────────────────────────────
# Generation payloads (cached per namespace)
# ─────────────────────────────────────────────────────────────────────────────


class SeoMetadata(BaseModel):
    """Generated page title and meta description."""

    title: str = Field(min_length=1)
    description: str = Field(min_length=1)


class DrugSummary(BaseModel):
    text: str = Field(min_length=1)


class SectionBatch(BaseModel):
    """Enhanced prose keyed by section field."""

    sections: dict[SectionKey, str] = Field(default_factory=dict)
