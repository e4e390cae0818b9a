"""Record helpers: blank checks, fill-only merge, identifiers and timestamps."""
from __future__ import annotations

import datetime as dt
import time
import uuid
from typing import Any, Dict, List, Optional

Record = Dict[str, Optional[str]]

CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"


def now_iso(now: Optional[dt.datetime] = None) -> str:
    """UTC timestamp in the ``2024-01-31T12:00:00.000Z`` form used in the data files."""
    now = now or dt.datetime.now(dt.timezone.utc)
    return now.astimezone(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def generate_id(prefix: str = "") -> str:
    """``<prefix>_<epoch millis>_<7 hex chars>``; unique within a run."""
    stamp = int(time.time() * 1000)
    suffix = uuid.uuid4().hex[:7]
    return f"{prefix}_{stamp}_{suffix}" if prefix else f"{stamp}_{suffix}"


def coerce_value(value: Any) -> Optional[str]:
    """Turn a JSON value from the model into a cell string (``None`` stays ``None``)."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        parts = [coerce_value(v) for v in value]
        return ", ".join(p for p in parts if p)
    if isinstance(value, dict):
        return "; ".join(f"{k}: {coerce_value(v)}" for k, v in value.items())
    return str(value).strip()


def merge_missing(
    record: Record,
    partial: Dict[str, Any],
    protected: tuple = (),
) -> List[str]:
    """Fill fields of ``record`` that are absent, ``None`` or empty.

    Existing non-empty values are never overwritten, and keys in
    ``protected`` (identifier, ``createdAt``) are never written. Blank values
    in ``partial`` are ignored. Mutates ``record`` in place and returns the
    names of the fields that were filled.
    """
    filled: List[str] = []
    for key, value in partial.items():
        if key in protected or key == CREATED_AT:
            continue
        if not is_blank(record.get(key)):
            continue
        new_value = coerce_value(value)
        if is_blank(new_value):
            continue
        record[key] = new_value
        filled.append(key)
    return filled


def stamp_new(record: Record, now: Optional[str] = None) -> Record:
    ts = now or now_iso()
    record[CREATED_AT] = ts
    record[UPDATED_AT] = ts
    return record


def touch(record: Record, now: Optional[str] = None) -> Record:
    record[UPDATED_AT] = now or now_iso()
    return record
