from __future__ import annotations

import logging
from typing import List, Optional

from ..records import Record, is_blank
from ..text_utils import extract_domain
from ..validators import is_valid_url, normalize_url

logger = logging.getLogger(__name__)


def _match_company(domain: str, companies: List[Record]) -> Optional[Record]:
    domains = [(extract_domain(c.get("company_website_url")), c) for c in companies]
    for d, c in domains:
        if d and d == domain:
            return c
    for d, c in domains:
        if d and (d in domain or domain in d):
            return c
    return None


def match_platforms_to_companies(platforms: List[Record], companies: List[Record]) -> List[Record]:
    """Set ``company_id`` on platforms lacking one, matching by website domain.

    Exact domain equality wins; otherwise the first company whose domain
    contains, or is contained in, the platform's domain. Platforms that
    already carry a company are left alone.
    """
    logger.info("Matching platforms to companies...")
    for p in platforms:
        if not is_blank(p.get("company_id")):
            continue
        domain = extract_domain(p.get("platform_url"))
        if not domain:
            continue
        company = _match_company(domain, companies)
        if company is not None:
            p["company_id"] = company.get("company_id")
            logger.info(
                "Matched platform %s to company %s", p.get("platform_name"), company.get("company_name")
            )
    matched = sum(1 for p in platforms if not is_blank(p.get("company_id")))
    logger.info("Matched %d/%d platforms to companies", matched, len(platforms))
    return platforms


def normalize_platform_urls(platforms: List[Record]) -> List[Record]:
    """Prefix ``https://`` on scheme-less platform URLs; bad URLs are only logged."""
    for p in platforms:
        url = p.get("platform_url")
        if is_blank(url):
            continue
        fixed = normalize_url(url)
        if not is_valid_url(fixed):
            logger.warning("Invalid URL for platform %s: %s", p.get("platform_name"), url)
            continue
        if fixed != url:
            logger.info("Corrected URL for %s: %s -> %s", p.get("platform_name"), url, fixed)
            p["platform_url"] = fixed
    return platforms


def platform_preparer(companies: List[Record]):
    """Pipeline ``prepare`` hook: company matching, then URL normalisation."""

    def prepare(records: List[Record]) -> List[Record]:
        return normalize_platform_urls(match_platforms_to_companies(records, companies))

    return prepare
