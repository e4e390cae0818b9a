# scripts/20_import_validated_platforms.py
# -*- coding: utf-8 -*-
"""
Append the valid entries of a platform validation report to Platforms.csv,
creating companies in Companies.csv as needed.

Usage:
  python -m scripts.20_import_validated_platforms [report.json]

Without an argument the newest logs/platform_validation_*.json is used.
"""
from __future__ import annotations

import argparse
import logging
import sys

from catalog_lib.errors import MissingPreconditionError, run_script
from catalog_lib.platform_list import find_latest_report
from catalog_lib.processors.importer import import_validated_platforms
from catalog_lib.runtime import bootstrap

logger = logging.getLogger("import_validated_platforms")


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("report", nargs="?", default=None, help="Report file name under logs/")
    ap.add_argument("--config", default=None, help="Path to config.yaml")
    args = ap.parse_args()

    settings = bootstrap("import_validated_platforms", args.config)
    if args.report:
        report = settings.logs_dir / args.report
    else:
        report = find_latest_report(settings.logs_dir)
        if report is None:
            raise MissingPreconditionError(
                "No validation reports found. Run scripts.10_validate_platform_list first."
            )

    result = import_validated_platforms(
        report,
        settings.data_file("platforms"),
        settings.data_file("companies"),
        settings.backups_dir,
    )
    logger.info("Next steps: run scripts.30_process_companies, then scripts.40_process_platforms")
    print(
        f"[OK] imported {len(result.new_platforms)} platforms, "
        f"{len(result.new_companies)} new companies"
    )
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "import_validated_platforms"))
