"""Domain models: drug records, sections, content and catalog payloads."""

from .catalog import Pagination, SearchItem, SearchPage, SearchQuery, Sitemap, SitemapUrl
from .drug import (
    BasicContent,
    DrugRecord,
    DrugSummary,
    EnhancedContent,
    Section,
    SectionBatch,
    SeoMetadata,
)
from .sections import SECTION_TABLE, SectionCategory, SectionKey, SectionSpec
from .slug import create_slug

__all__ = [
    # Records & content
    "DrugRecord", "Section", "BasicContent", "EnhancedContent",
    # Generation payloads
    "SeoMetadata", "DrugSummary", "SectionBatch",
    # Section table
    "SECTION_TABLE", "SectionKey", "SectionCategory", "SectionSpec",
    # Catalog
    "SearchQuery", "SearchItem", "Pagination", "SearchPage", "SitemapUrl", "Sitemap",
    # Paths
    "create_slug",
]
