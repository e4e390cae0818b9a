# scripts/80_process_entity.py
# -*- coding: utf-8 -*-
"""
Enrich any CSV file described only by its id column and the fields to fill.

Usage:
  python -m scripts.80_process_entity --file Features.csv --id-field feature_id \
      --fields feature_name,feature_description [--complete-when a,b] [--name features] \
      [--ref platform_id:platforms] [--ref certification_id:security_and_compliance:security_id]

--ref links a column to another configured entity file: rows pointing at an
unknown key are dropped and the linked record is shown to the model.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from catalog_lib.entities import generic_schema
from catalog_lib.errors import MissingPreconditionError, run_script
from catalog_lib.pipeline import EnrichmentPipeline
from catalog_lib.runtime import (
    add_common_args,
    bootstrap,
    build_enricher,
    build_limiter,
    load_references,
    parse_reference,
)


def _split(value):
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def main() -> int:
    ap = add_common_args(argparse.ArgumentParser())
    ap.add_argument("--file", required=True, help="CSV under data/ (or an absolute path)")
    ap.add_argument("--id-field", required=True)
    ap.add_argument("--fields", required=True, help="Comma-separated fields to enrich")
    ap.add_argument("--complete-when", default=None, help="Fields that must be filled to skip a record")
    ap.add_argument("--name", default=None, help="Entity name for logs (default: file stem)")
    ap.add_argument("--ref", action="append", type=parse_reference, default=[],
                    metavar="FIELD:ENTITY[:KEY]", help="Reference to another entity file (repeatable)")
    args = ap.parse_args()
    settings = bootstrap("process_entity", args.config)

    path = Path(args.file)
    if not path.is_absolute():
        path = settings.data_dir / path
    if not path.exists():
        raise MissingPreconditionError(f"CSV file not found at: {path}")

    fields = _split(args.fields)
    if not fields:
        raise MissingPreconditionError("--fields must name at least one field")
    schema = generic_schema(
        args.name or path.stem.lower(),
        args.id_field,
        fields,
        completeness_fields=_split(args.complete_when) or None,
        references=args.ref,
    )
    delay = settings.delay_ms if args.delay_ms is None else args.delay_ms
    pipeline = EnrichmentPipeline(
        schema,
        path,
        build_enricher(schema, settings),
        build_limiter(delay),
        settings.backups_dir,
        references=load_references(schema, settings),
        checkpoint_every=settings.checkpoint_every,
    )
    report = pipeline.run()
    print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "process_entity"))
