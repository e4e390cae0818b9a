# scripts/70_update_categories.py
# -*- coding: utf-8 -*-
"""
Fill Levels 3-10 of the hierarchical categorisation sheet from Level 1 and
Level 2. Progress is saved every ``pipeline.categories_checkpoint_every``
rows.

Usage:
  python -m scripts.70_update_categories [--file NAME.csv] [--delay-ms N]
"""
from __future__ import annotations

import argparse
import logging
import sys

from catalog_lib.csv_utils import read_fieldnames
from catalog_lib.errors import MissingPreconditionError, run_script
from catalog_lib.pipeline import EnrichmentPipeline
from catalog_lib.processors.categories import (
    CategoryEnricher,
    category_schema,
    empty_levels_skipper,
)
from catalog_lib.runtime import add_common_args, bootstrap, build_limiter, build_llm, build_prompts

logger = logging.getLogger("update_categories")


def main() -> int:
    ap = add_common_args(argparse.ArgumentParser())
    ap.add_argument("--file", default=None, help="Sheet under data/ (default from config)")
    args = ap.parse_args()
    settings = bootstrap("update_categories", args.config)

    path = settings.data_dir / args.file if args.file else settings.data_file("categories")
    if not path.exists():
        raise MissingPreconditionError(f"CSV file not found at: {path}")

    headers = read_fieldnames(path)
    logger.info("CSV Headers: %s", ", ".join(headers))
    schema = category_schema(headers)
    enricher = CategoryEnricher(headers, build_llm(settings), build_prompts(settings))
    delay = settings.categories_delay_ms if args.delay_ms is None else args.delay_ms

    pipeline = EnrichmentPipeline(
        schema,
        path,
        enricher,
        build_limiter(delay),
        settings.backups_dir,
        skip=empty_levels_skipper(headers),
        checkpoint_every=settings.categories_checkpoint_every,
    )
    report = pipeline.run()
    print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "update_categories"))
