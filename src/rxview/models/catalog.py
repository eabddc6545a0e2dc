"""Search and sitemap payloads returned by the catalog."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchQuery(BaseModel):
    """Search parameters. Page and limit are clamped the way the REST layer validates them."""

    model_config = _CAMEL

    query: str | None = None
    labeler: str | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class SearchItem(BaseModel):
    model_config = _CAMEL

    drug_name: str
    generic_name: str
    labeler: str
    url: str


class Pagination(BaseModel):
    model_config = _CAMEL

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class SearchPage(BaseModel):
    model_config = _CAMEL

    drugs: list[SearchItem]
    pagination: Pagination

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class SitemapUrl(BaseModel):
    url: str
    lastmod: str
    changefreq: str = "monthly"
    priority: str = "0.8"


class Sitemap(BaseModel):
    model_config = _CAMEL

    urls: list[SitemapUrl]
    total_urls: int

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
