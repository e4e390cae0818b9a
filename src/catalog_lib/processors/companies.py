from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..entities import COMPANIES
from ..records import Record, generate_id, now_iso, stamp_new
from ..text_utils import company_name_from_url, extract_domain

logger = logging.getLogger(__name__)


def derive_companies(platforms: List[Record], now: Optional[str] = None) -> List[Record]:
    """One company per distinct name derived from the platform URLs.

    The name comes from the first label of the host (``openai.com`` ->
    ``Openai``); the first platform seen for a name supplies the website.
    """
    ts = now or now_iso()
    seen: Dict[str, Record] = {}
    for p in platforms:
        url = p.get("platform_url") or ""
        domain = extract_domain(url)
        if not domain:
            continue
        name = company_name_from_url(url)
        if not name or name.lower() in seen:
            continue
        company: Record = {
            "company_id": generate_id(COMPANIES.id_prefix),
            "company_name": name,
            "company_website_url": f"https://{domain}",
        }
        seen[name.lower()] = stamp_new(company, ts)
        logger.info("Extracted company: %s from %s", name, url)
    return list(seen.values())


def merge_companies(existing: List[Record], derived: List[Record]) -> List[Record]:
    """Existing companies first and untouched; unseen derived names appended."""
    names = {(c.get("company_name") or "").strip().lower() for c in existing}
    out = list(existing)
    added = 0
    for c in derived:
        key = (c.get("company_name") or "").strip().lower()
        if key in names:
            continue
        names.add(key)
        out.append(c)
        added += 1
    logger.info("Merged companies: %d existing, %d new", len(existing), added)
    return out


def company_preparer(platforms: List[Record], now: Optional[str] = None):
    """Pipeline ``prepare`` hook adding companies derived from ``platforms``."""

    def prepare(records: List[Record]) -> List[Record]:
        derived = derive_companies(platforms, now=now)
        logger.info("Extracted %d unique companies", len(derived))
        return merge_companies(records, derived)

    return prepare
