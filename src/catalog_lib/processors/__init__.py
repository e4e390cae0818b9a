"""Entity-specific preparation steps run before or around the enrichment pipeline."""
from .companies import derive_companies, merge_companies
from .joins import ensure_child_per_parent, link_all_platform_licenses, link_pairs
from .platforms import match_platforms_to_companies, normalize_platform_urls
from .scaffold import scaffold_tables

__all__ = [
    "derive_companies",
    "merge_companies",
    "ensure_child_per_parent",
    "link_all_platform_licenses",
    "link_pairs",
    "match_platforms_to_companies",
    "normalize_platform_urls",
    "scaffold_tables",
]
