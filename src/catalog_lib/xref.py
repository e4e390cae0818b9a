"""Cross-reference lookups between entity collections."""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .models import EntitySchema
from .records import Record, generate_id, is_blank, now_iso, stamp_new

logger = logging.getLogger(__name__)

Index = Dict[str, Record]


def index_records(records: List[Record], key_field: str) -> Index:
    """Map ``record[key_field]`` to the record.

    Later records overwrite earlier ones on duplicate keys. Records with an
    empty key are left out.
    """
    index: Index = {}
    for r in records:
        key = r.get(key_field)
        if is_blank(key):
            continue
        index[str(key)] = r
    return index


def filter_orphans(
    records: List[Record],
    schema: EntitySchema,
    references: Mapping[str, Index],
) -> List[Record]:
    """Keep only records whose join keys resolve in ``references``.

    ``references`` maps a join field (``platform_id``) to the index of the
    referenced entity. Every dropped record is logged.
    """
    refs = schema.direct_references
    if not refs:
        return list(records)

    kept: List[Record] = []
    for r in records:
        ok = True
        for ref in refs:
            key = r.get(ref.field)
            if is_blank(key):
                logger.warning(
                    "%s record %s has no %s, skipping", schema.name, schema.label(r), ref.field
                )
                ok = False
                break
            if key not in references.get(ref.field, {}):
                logger.warning(
                    "%s record %s references non-existent %s %s, skipping",
                    schema.name,
                    schema.label(r),
                    ref.context_key,
                    key,
                )
                ok = False
                break
        if ok:
            kept.append(r)

    logger.info("Validated %d/%d %s records", len(kept), len(records), schema.name)
    return kept


def build_default_records(
    schema: EntitySchema,
    references: Mapping[str, Index],
    now: Optional[str] = None,
) -> List[Record]:
    """One fresh record per record of the first reference.

    Secondary references take the first key of their index. Returns an empty
    list if the schema has no references or any referenced index is empty.
    """
    refs = schema.direct_references
    if not refs or not schema.id_field:
        return []
    indexes = [references.get(ref.field) or {} for ref in refs]
    if any(not idx for idx in indexes):
        return []

    ts = now or now_iso()
    primary_ref, primary_index = refs[0], indexes[0]
    secondary = [(ref.field, next(iter(idx))) for ref, idx in zip(refs[1:], indexes[1:])]

    out: List[Record] = []
    for key, target in primary_index.items():
        rec: Record = {schema.id_field: generate_id(schema.id_prefix), primary_ref.field: key}
        for f, k in secondary:
            rec[f] = k
        stamp_new(rec, ts)
        out.append(rec)
        name = target.get(primary_ref.label_field or "") or key
        logger.info("Created default %s record for %s: %s", schema.name, primary_ref.context_key, name)
    return out


def resolve_context(
    record: Record,
    schema: EntitySchema,
    references: Mapping[str, Index],
) -> Dict[str, Record]:
    """Referenced records keyed by ``Reference.context_key`` for prompt rendering.

    ``via`` references are looked up from the record resolved before them.
    """
    ctx: Dict[str, Record] = {}
    for ref in schema.references:
        source = ctx.get(ref.via, {}) if ref.via else record
        target = references.get(ref.field, {}).get(source.get(ref.field) or "")
        if target is not None:
            ctx[ref.context_key] = target
    return ctx
