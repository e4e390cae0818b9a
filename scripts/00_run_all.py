# scripts/00_run_all.py
# Runs the catalog enrichment steps in dependency order.
# Companies before platforms (company matching), platforms before every
# platform-dependent entity, licenses before the join table. The extended
# catalog tables come last, parents before the join tables that pair them.

from __future__ import annotations

import argparse
import subprocess
import sys


def run_module(modname: str, *args: str) -> None:
    """Run a module like 'scripts.40_process_platforms'."""
    cmd = [sys.executable, "-m", modname]
    if args:
        cmd += list(args)
    subprocess.check_call(cmd)


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--import", dest="do_import", action="store_true",
                    help="Validate and import data/AI_Platform_List.csv first")
    ap.add_argument("--scaffold", action="store_true", help="Create missing tables with their headers first")
    ap.add_argument("--catalog", action="store_true",
                    help="Also process models, API, features and the other extended tables")
    ap.add_argument("--categories", action="store_true", help="Also update the categorisation sheet")
    args = ap.parse_args()

    if args.scaffold:
        run_module("scripts.05_scaffold_tables")

    if args.do_import:
        run_module("scripts.10_validate_platform_list")
        run_module("scripts.20_import_validated_platforms")

    run_module("scripts.30_process_companies")
    run_module("scripts.40_process_platforms")
    run_module("scripts.50_process_licenses")
    run_module("scripts.55_process_platform_licenses")
    run_module("scripts.60_process_support")
    run_module("scripts.65_process_pricing")

    if args.catalog:
        run_module("scripts.75_process_catalog_entity", "--all")

    if args.categories:
        run_module("scripts.70_update_categories")

    print("\n[OK] Pipeline complete. See data/ for updated files and logs/ for run logs.")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except subprocess.CalledProcessError as e:
        print(f"[ERROR] step failed: {' '.join(e.cmd)} (exit {e.returncode})")
        sys.exit(e.returncode or 1)
