"""Basic content assembly.

Pure, synchronous construction of the unenhanced section view of a record.
Used on its own for the fast render path and as input to the orchestrator.
"""

from __future__ import annotations

import html
import re

from rxview.models import SECTION_TABLE, BasicContent, DrugRecord, Section, create_slug

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


def build_sections(record: DrugRecord) -> list[Section]:
    """Sections for every non-empty field, in table order, numbered from 1."""
    sections: list[Section] = []
    for spec in SECTION_TABLE:
        content = record.prose(spec.key)
        if not content or not content.strip():
            continue
        sections.append(Section(
            id=f"{record.set_id}-{spec.key.value}",
            title=spec.title,
            content=content,
            order=len(sections) + 1,
            category=spec.category,
            is_important=spec.important,
        ))
    return sections


def build_basic_content(record: DrugRecord) -> BasicContent:
    return BasicContent(
        id=record.set_id,
        drug_name=record.drug_name,
        generic_name=record.generic_name,
        slug=create_slug(record.drug_name),
        sections=build_sections(record),
    )


def strip_html(markup: str) -> str:
    """Plain text from label markup: tags removed, entities decoded, whitespace collapsed."""
    text = html.unescape(_TAG_RE.sub("", markup)).replace("\xa0", " ")
    return _SPACE_RE.sub(" ", text).strip()
