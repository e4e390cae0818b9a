# scripts/05_scaffold_tables.py
# -*- coding: utf-8 -*-
"""
Create a header-only CSV for every catalog entity whose file is missing.

Usage:
  python -m scripts.05_scaffold_tables [--only models,api] [--force]

--force replaces existing files (after backing them up) with empty tables.
"""
from __future__ import annotations

import argparse
import sys

from catalog_lib.entities import SCHEMAS
from catalog_lib.errors import MissingPreconditionError, run_script
from catalog_lib.processors.scaffold import scaffold_tables
from catalog_lib.runtime import bootstrap


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None, help="Path to config.yaml (default: config/config.yaml)")
    ap.add_argument("--only", default=None, help="Comma-separated entity names (default: all)")
    ap.add_argument("--force", action="store_true", help="Back up and replace existing files")
    args = ap.parse_args()
    settings = bootstrap("scaffold_tables", args.config)

    names = [n.strip() for n in (args.only or "").split(",") if n.strip()]
    unknown = [n for n in names if n not in SCHEMAS]
    if unknown:
        raise MissingPreconditionError(f"Unknown entities: {', '.join(unknown)}")
    schemas = [SCHEMAS[n] for n in names] if names else list(SCHEMAS.values())

    written = scaffold_tables(
        settings.data_dir,
        settings.files,
        schemas,
        force=args.force,
        backup_dir=settings.backups_dir,
    )
    print(f"[OK] created {len(written)} table(s) under {settings.data_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "scaffold_tables"))
