from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from ..entities import PLATFORM_LICENSES
from ..models import EntitySchema
from ..records import Record, generate_id, now_iso, stamp_new
from ..xref import Index

logger = logging.getLogger(__name__)


def link_all_platform_licenses(
    records: List[Record],
    platforms: Index,
    licenses: Index,
    now: Optional[str] = None,
) -> List[Record]:
    """Append a join row for every platform x license pair not yet present.

    Existing rows keep their position; new rows follow in platform order,
    then license order.
    """
    ts = now or now_iso()
    existing = {(r.get("platform_id"), r.get("license_id")) for r in records}
    out = list(records)
    added = 0
    for platform_id in platforms:
        for license_id in licenses:
            if (platform_id, license_id) in existing:
                continue
            row: Record = {
                PLATFORM_LICENSES.id_field: generate_id(PLATFORM_LICENSES.id_prefix),
                "platform_id": platform_id,
                "license_id": license_id,
            }
            out.append(stamp_new(row, ts))
            existing.add((platform_id, license_id))
            added += 1
    logger.info("Updated platform_licenses join table with %d new relationships", added)
    return out


def join_linker(references: Mapping[str, Index], now: Optional[str] = None):
    """Pipeline ``prepare`` hook wrapping :func:`link_all_platform_licenses`."""

    def prepare(records: List[Record]) -> List[Record]:
        return link_all_platform_licenses(
            records, references.get("platform_id") or {}, references.get("license_id") or {}, now=now
        )

    return prepare


def link_pairs(
    records: List[Record],
    schema: EntitySchema,
    references: Mapping[str, Index],
    now: Optional[str] = None,
) -> List[Record]:
    """Append a join row for each right-side record that names a known left-side key.

    ``schema`` has two direct references, left then right. A feature row
    carries its ``platform_id``, so it yields the (platform, feature) pair.
    Pairs already in ``records`` are not repeated; new rows follow in the
    order of the right-side index.
    """
    left, right = schema.direct_references[:2]
    left_index = references.get(left.field) or {}
    right_index = references.get(right.field) or {}
    ts = now or now_iso()

    existing = {(r.get(left.field), r.get(right.field)) for r in records}
    out = list(records)
    added = 0
    for right_key, target in right_index.items():
        left_key = target.get(left.field)
        if not left_key or left_key not in left_index:
            continue
        if (left_key, right_key) in existing:
            continue
        row: Record = {
            schema.id_field: generate_id(schema.id_prefix),
            left.field: left_key,
            right.field: right_key,
        }
        out.append(stamp_new(row, ts))
        existing.add((left_key, right_key))
        added += 1
    logger.info("Updated %s join table with %d new relationships", schema.name, added)
    return out


def ensure_child_per_parent(
    records: List[Record],
    schema: EntitySchema,
    parents: Index,
    now: Optional[str] = None,
) -> List[Record]:
    """Give every parent without a child record one fresh, empty child.

    The parent key is the schema's first direct reference (``platform_id``
    for versioning, ``model_id`` for use cases).
    """
    parent_field = schema.direct_references[0].field
    ts = now or now_iso()
    have = {r.get(parent_field) for r in records}
    out = list(records)
    added = 0
    for key in parents:
        if key in have:
            continue
        row: Record = {schema.id_field: generate_id(schema.id_prefix), parent_field: key}
        out.append(stamp_new(row, ts))
        added += 1
    if added:
        logger.info("Created %d %s records for parents without one", added, schema.name)
    return out


def pair_linker(schema: EntitySchema, references: Mapping[str, Index], now: Optional[str] = None):
    """Pipeline ``prepare`` hook wrapping :func:`link_pairs`."""

    def prepare(records: List[Record]) -> List[Record]:
        return link_pairs(records, schema, references, now=now)

    return prepare


def child_seeder(schema: EntitySchema, references: Mapping[str, Index], now: Optional[str] = None):
    """Pipeline ``prepare`` hook wrapping :func:`ensure_child_per_parent`."""
    parent_field = schema.direct_references[0].field

    def prepare(records: List[Record]) -> List[Record]:
        return ensure_child_per_parent(records, schema, references.get(parent_field) or {}, now=now)

    return prepare
