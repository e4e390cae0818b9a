# scripts/75_process_catalog_entity.py
# -*- coding: utf-8 -*-
"""
Enrich one of the extended catalog tables (models, API, features, join
tables, ...). The tables it references must already exist.

Usage:
  python -m scripts.75_process_catalog_entity --entity models [--delay-ms N]
  python -m scripts.75_process_catalog_entity --all

Join tables gain a row for each related pair found in the referenced
records; versioning, use cases and API integrations get one record for
every parent without one.
"""
from __future__ import annotations

import argparse
import logging
import sys

from catalog_lib.entities import SCHEMAS
from catalog_lib.errors import run_script
from catalog_lib.processors.catalog import CATALOG_ORDER, creates_defaults, prepare_hook
from catalog_lib.runtime import add_common_args, bootstrap, load_references, run_entity

logger = logging.getLogger("process_catalog_entity")


def main() -> int:
    ap = add_common_args(argparse.ArgumentParser())
    group = ap.add_mutually_exclusive_group(required=True)
    group.add_argument("--entity", choices=CATALOG_ORDER)
    group.add_argument("--all", action="store_true", help="Process every table in dependency order")
    args = ap.parse_args()
    settings = bootstrap("process_catalog_entity", args.config)

    names = CATALOG_ORDER if args.all else (args.entity,)
    for i, name in enumerate(names, 1):
        logger.info("Processing %s (%d/%d)", name, i, len(names))
        schema = SCHEMAS[name]
        references = load_references(schema, settings)
        report = run_entity(
            schema,
            settings,
            delay_ms=args.delay_ms,
            references=references,
            prepare=prepare_hook(schema, references),
            create_defaults=creates_defaults(schema),
        )
        print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "process_catalog_entity"))
