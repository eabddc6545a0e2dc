"""Drug record catalog (record lookup, search, sitemap)."""

from .store import DrugCatalog, DrugLookup, drug_path, format_effective_time

__all__ = ["DrugLookup", "DrugCatalog", "drug_path", "format_effective_time"]
