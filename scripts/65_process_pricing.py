# scripts/65_process_pricing.py
# -*- coding: utf-8 -*-
"""
Enrich the pricing records of every platform. An empty file is seeded with
one record per platform.

Usage:
  python -m scripts.65_process_pricing [--delay-ms N]
"""
from __future__ import annotations

import argparse
import sys

from catalog_lib.entities import PRICING
from catalog_lib.errors import run_script
from catalog_lib.runtime import add_common_args, bootstrap, run_entity


def main() -> int:
    args = add_common_args(argparse.ArgumentParser()).parse_args()
    settings = bootstrap("process_pricing", args.config)
    report = run_entity(PRICING, settings, delay_ms=args.delay_ms)
    print(f"[OK] {report.summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(run_script(main, "process_pricing"))
