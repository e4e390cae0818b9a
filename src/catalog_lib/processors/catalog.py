"""
Catalog entities beyond the core platform tables.

``CATALOG_ORDER`` lists them parents first: platform-level tables, then the
model-level tables, then the join tables that need both sides processed.
Join tables are filled by pairing existing records rather than seeded, and
per-parent tables get one child for every parent still lacking one.
"""
from __future__ import annotations

from typing import Mapping, Optional

from ..models import EntitySchema
from ..pipeline import PrepareHook
from ..xref import Index
from .joins import child_seeder, pair_linker

CATALOG_ORDER = (
    "models",
    "api",
    "features",
    "community",
    "documentation",
    "market",
    "trials",
    "security_and_compliance",
    "versioning",
    "technical_specifications",
    "performance",
    "benchmarks",
    "training",
    "ethics",
    "use_cases",
    "api_integrations",
    "model_benchmarks",
    "model_use_cases",
    "platform_features",
    "platform_certifications",
)

PAIR_LINKED = frozenset({"model_benchmarks", "model_use_cases", "platform_features", "platform_certifications"})
CHILD_PER_PARENT = frozenset({"versioning", "use_cases", "api_integrations"})


def prepare_hook(
    schema: EntitySchema,
    references: Mapping[str, Index],
    now: Optional[str] = None,
) -> Optional[PrepareHook]:
    if schema.name in PAIR_LINKED:
        return pair_linker(schema, references, now=now)
    if schema.name in CHILD_PER_PARENT:
        return child_seeder(schema, references, now=now)
    return None


def creates_defaults(schema: EntitySchema) -> bool:
    # pairs come from the right-side records, never from a first-key default
    return schema.name not in PAIR_LINKED
