# scripts/55_process_platform_licenses.py
# -*- coding: utf-8 -*-
"""
Enrich the platform x license join table.

Usage:
  python -m scripts.55_process_platform_licenses [--link-all] [--delay-ms N]

--link-all adds a row for every platform x license pair missing from the
table before enrichment. Without it an empty table is seeded with one row
per platform, linked to the first license.
"""
from __future__ import annotations

import argparse
import sys

from catalog_lib.entities import PLATFORM_LICENSES
from catalog_lib.errors import run_script
from catalog_lib.processors.joins import join_linker
from catalog_lib.runtime import add_common_args, bootstrap, load_references, run_entity


def main() -> int:
    ap = add_common_args(argparse.ArgumentParser())
    ap.add_argument("--link-all", action="store_true", help="Add every missing platform x license pair")
    args = ap.parse_args()
    settings = bootstrap("process_platform_licenses", args.config)

    references = load_references(PLATFORM_LICENSES, settings)
    report = run_entity(
        PLATFORM_LICENSES,
        settings,
        delay_ms=args.delay_ms,
        references=references,
        prepare=join_linker(references) if args.link_all else None,
    )
    print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "process_platform_licenses"))
