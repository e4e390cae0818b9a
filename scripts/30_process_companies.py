# scripts/30_process_companies.py
# -*- coding: utf-8 -*-
"""
Derive companies from platform URLs, merge them into Companies.csv and
enrich the incomplete ones.

Usage:
  python -m scripts.30_process_companies [--delay-ms N]
"""
from __future__ import annotations

import argparse
import sys

from catalog_lib.csv_utils import load_records
from catalog_lib.entities import COMPANIES
from catalog_lib.errors import MissingPreconditionError, run_script
from catalog_lib.processors.companies import company_preparer
from catalog_lib.runtime import add_common_args, bootstrap, run_entity


def main() -> int:
    args = add_common_args(argparse.ArgumentParser()).parse_args()
    settings = bootstrap("process_companies", args.config)

    platforms_path = settings.data_file("platforms")
    if not platforms_path.exists():
        raise MissingPreconditionError(f"Platforms file not found at: {platforms_path}")
    platforms = load_records(platforms_path)
    report = run_entity(
        COMPANIES,
        settings,
        delay_ms=args.delay_ms,
        prepare=company_preparer(platforms),
    )
    print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "process_companies"))
