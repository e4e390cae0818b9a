# scripts/10_validate_platform_list.py
# -*- coding: utf-8 -*-
"""
Validate the tab-separated list of candidate platforms.

Usage:
  python -m scripts.10_validate_platform_list [--file AI_Platform_List.csv]

Reads:
  - data/AI_Platform_List.csv  (name<TAB>url, header row first)
  - data/Platforms.csv         (duplicate detection)
Writes:
  - logs/platform_validation_<stamp>.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from functools import partial

from catalog_lib.csv_utils import load_records
from catalog_lib.errors import MissingPreconditionError, run_script
from catalog_lib.platform_list import (
    check_url,
    parse_new_platforms_file,
    report_path,
    save_validation_report,
    validate_platforms,
)
from catalog_lib.runtime import bootstrap

logger = logging.getLogger("validate_platform_list")


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None, help="Path to config.yaml")
    ap.add_argument("--file", default=None, help="Candidate list under data/ (default from config)")
    args = ap.parse_args()

    settings = bootstrap("validate_platform_list", args.config)
    src = settings.data_dir / args.file if args.file else settings.data_file("new_platforms")
    if not src.exists():
        raise MissingPreconditionError(f"New platforms file not found at: {src}")

    candidates = parse_new_platforms_file(src)
    logger.info("Found %d platforms in new file", len(candidates))
    if not candidates:
        logger.warning("No platforms found in the new file. Validation aborted.")
        return 0

    existing = load_records(settings.data_file("platforms"))
    report = validate_platforms(
        candidates, existing, url_checker=partial(check_url, timeout=settings.url_timeout_s)
    )
    out = save_validation_report(report, report_path(settings.logs_dir))

    logger.info("Validation complete:")
    logger.info("- Valid platforms: %d", len(report.valid))
    logger.info("- Invalid platforms: %d", len(report.invalid))
    logger.info("- Potential duplicates: %d", len(report.duplicates))
    for p, reason in report.invalid[:5]:
        logger.warning("  %s (%s): %s", p.name or "<no name>", p.url or "<no url>", reason)
    print(f"[OK] wrote validation report -> {out}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "validate_platform_list"))
