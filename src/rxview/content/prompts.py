"""Prompt templates, response schema and deterministic fallbacks.

Fallback text is built here so the gateway (disabled or unparseable responses)
and the orchestrator (exhausted retries) produce identical wording.
"""

from __future__ import annotations

from typing import Any

from rxview.models import SECTION_TABLE, DrugRecord, SectionKey, SeoMetadata

from .assembler import strip_html

SECTION_CHAR_LIMIT = 1000
SEO_EXCERPT_CHARS = 200
SUMMARY_EXCERPT_CHARS = 300

SECTIONS_SYSTEM_PROMPT = (
    "You are a medical communication specialist. Your task is to enhance drug label sections to make "
    "them more accessible and patient-friendly while maintaining complete medical accuracy. For each "
    "provided section, rewrite the content to be clearer and more understandable to patients, but keep "
    "all essential medical information. Use simple language and explain medical terms when necessary."
)


def _excerpt(record: DrugRecord, limit: int) -> str:
    indications = record.prose(SectionKey.INDICATIONS_AND_USAGE)
    return f"- Primary Uses: {strip_html(indications)[:limit]}... " if indications else ""


def seo_prompt(record: DrugRecord) -> str:
    return (
        f"Generate SEO-optimized title and meta description for the prescription drug {record.drug_name} "
        f"(generic name: {record.generic_name}) manufactured by {record.labeler}. Key information: "
        f"- Drug Name: {record.drug_name} - Generic Name: {record.generic_name} - Labeler: {record.labeler} "
        f"- Product Type: {record.product_type or 'unknown'} {_excerpt(record, SEO_EXCERPT_CHARS)}"
        'Return JSON with "title" (max 60 chars) and "description" (max 160 chars). Make them engaging and '
        "informative for patients and healthcare providers searching for drug information."
    )


def summary_prompt(record: DrugRecord) -> str:
    return (
        f"Create a clear, informative summary for the prescription medication {record.drug_name} "
        f"({record.generic_name}). Key details: - Brand Name: {record.drug_name} - Generic Name: "
        f"{record.generic_name} - Manufacturer: {record.labeler} {_excerpt(record, SUMMARY_EXCERPT_CHARS)}"
        "Write 2-3 sentences that explain what this medication is, what it treats, and who makes it. "
        "Keep it professional but accessible to patients. Do not include dosage information or medical "
        "advice. List at least two related medications a healthcare provider may be interested in "
        "prescribing for what this medication treats."
    )


def sections_prompt(record: DrugRecord, payload_json: str) -> str:
    return (
        f"Please enhance the following sections for the prescription drug {record.drug_name} "
        f"({record.generic_name}) by {record.labeler}. Make each section more patient-friendly while "
        f"maintaining medical accuracy: {payload_json}"
    )


def section_schema(keys: list[SectionKey]) -> dict[str, Any]:
    """JSON schema requiring exactly the requested section keys."""
    return {
        "type": "object",
        "properties": {
            key.value: {"type": "string", "description": key.spec.guidance}
            for key in keys
        },
        "required": [key.value for key in keys],
        "additionalProperties": False,
    }


def prepare_section_contents(record: DrugRecord) -> dict[SectionKey, str]:
    """Plain-text, truncated contents of every non-empty section, in table order."""
    contents: dict[SectionKey, str] = {}
    for spec in SECTION_TABLE:
        raw = record.prose(spec.key)
        if raw and raw.strip():
            contents[spec.key] = strip_html(raw)[:SECTION_CHAR_LIMIT]
    return contents


# ─────────────────────────────────────────────────────────────────────────────
# Fallbacks
# ─────────────────────────────────────────────────────────────────────────────


def fallback_seo(record: DrugRecord) -> SeoMetadata:
    return SeoMetadata(
        title=f"{record.drug_name} ({record.generic_name}) - Prescription Info",
        description=(
            f"Complete prescribing information for {record.drug_name} ({record.generic_name}) by "
            f"{record.labeler}. Dosage, side effects, warnings & more."
        ),
    )


def fallback_summary(record: DrugRecord) -> str:
    return (
        f"{record.drug_name} is a prescription medication containing {record.generic_name}, "
        f"manufactured by {record.labeler}."
    )
