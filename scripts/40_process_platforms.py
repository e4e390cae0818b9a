# scripts/40_process_platforms.py
# -*- coding: utf-8 -*-
"""
Match platforms to companies, normalise their URLs and enrich the
incomplete ones.

Usage:
  python -m scripts.40_process_platforms [--delay-ms N]
"""
from __future__ import annotations

import argparse
import sys

from catalog_lib.csv_utils import load_records
from catalog_lib.entities import PLATFORMS
from catalog_lib.errors import run_script
from catalog_lib.processors.platforms import platform_preparer
from catalog_lib.runtime import add_common_args, bootstrap, run_entity


def main() -> int:
    args = add_common_args(argparse.ArgumentParser()).parse_args()
    settings = bootstrap("process_platforms", args.config)

    companies = load_records(settings.data_file("companies"))
    report = run_entity(
        PLATFORMS,
        settings,
        delay_ms=args.delay_ms,
        prepare=platform_preparer(companies),
        must_exist=True,
    )
    print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "process_platforms"))
