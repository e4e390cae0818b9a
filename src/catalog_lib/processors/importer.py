# src/catalog_lib/processors/importer.py
"""
Import the ``valid`` entries of a platform validation report.

Every imported platform gets a company: an existing one whose name matches
the URL's second-level domain label (case-insensitive), or a new one. Both
files are backed up before they are rewritten; existing rows are kept and
new rows appended.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..backup import create_backup
from ..csv_utils import load_records, save_records
from ..entities import COMPANIES, PLATFORMS
from ..errors import MissingPreconditionError
from ..platform_list import NewPlatform, load_validation_report, valid_platforms
from ..records import Record, generate_id, now_iso, stamp_new
from ..text_utils import capitalize, same_name, second_level_label

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    new_companies: List[Record] = field(default_factory=list)
    new_platforms: List[Record] = field(default_factory=list)
    total_companies: int = 0
    total_platforms: int = 0


def find_or_create_company(
    platform: NewPlatform,
    companies: List[Record],
    now: Optional[str] = None,
) -> Tuple[Optional[Record], bool]:
    """Return ``(company, is_new)``; ``(None, False)`` when no name can be derived."""
    name = capitalize(second_level_label(platform.url))
    if not name:
        return None, False
    for c in companies:
        if same_name(c.get("company_name"), name):
            return c, False
    company: Record = {
        "company_id": generate_id(COMPANIES.id_prefix),
        "company_name": name,
        "company_website_url": platform.url,
    }
    return stamp_new(company, now), True


def import_platforms(
    entries: List[NewPlatform],
    platforms: List[Record],
    companies: List[Record],
    now: Optional[str] = None,
) -> ImportResult:
    """Build the new company and platform rows for ``entries`` (no I/O)."""
    ts = now or now_iso()
    result = ImportResult()
    for entry in entries:
        company, is_new = find_or_create_company(entry, companies + result.new_companies, ts)
        if company is None:
            logger.warning("Could not derive a company name from %s, leaving company_id empty", entry.url)
        elif is_new:
            result.new_companies.append(company)
            logger.info("Created new company: %s", company["company_name"])

        platform: Record = {
            "platform_id": generate_id(PLATFORMS.id_prefix),
            "platform_name": entry.name,
            "platform_url": entry.url,
            "company_id": company.get("company_id") if company else "",
            "platform_status": "Active",
        }
        result.new_platforms.append(stamp_new(platform, ts))
        logger.info("Created new platform: %s", entry.name)

    result.total_companies = len(companies) + len(result.new_companies)
    result.total_platforms = len(platforms) + len(result.new_platforms)
    return result


def import_validated_platforms(
    report_path: Union[str, Path],
    platforms_path: Union[str, Path],
    companies_path: Union[str, Path],
    backup_dir: Union[str, Path],
    now: Optional[str] = None,
) -> ImportResult:
    report_path = Path(report_path)
    if not report_path.exists():
        raise MissingPreconditionError(f"Validation report not found at: {report_path}")
    logger.info("Importing platforms from validation report: %s", report_path)

    entries = valid_platforms(load_validation_report(report_path))
    if not entries:
        logger.warning("No valid platforms to import")
        return ImportResult()
    logger.info("Found %d valid platforms to import", len(entries))

    companies = load_records(companies_path)
    platforms = load_records(platforms_path)
    result = import_platforms(entries, platforms, companies, now=now)

    create_backup(companies_path, backup_dir)
    create_backup(platforms_path, backup_dir)
    save_records(companies_path, companies + result.new_companies)
    logger.info(
        "Saved %d companies (%d new)", result.total_companies, len(result.new_companies)
    )
    save_records(platforms_path, platforms + result.new_platforms)
    logger.info(
        "Saved %d platforms (%d new)", result.total_platforms, len(result.new_platforms)
    )
    return result
