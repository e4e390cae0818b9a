# src/catalog_lib/platform_list.py
"""
Validate a tab-separated list of candidate platforms before import.

Each entry ends up in exactly one bucket of the report:
  * invalid     empty name or URL, malformed or unreachable URL
  * duplicates  name or URL already present in the platforms file
  * valid       everything else

The report is a JSON file under the logs directory,
``platform_validation_<stamp>.json``; the importer picks up the newest.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

import requests

from .backup import backup_timestamp
from .records import Record

logger = logging.getLogger(__name__)

REPORT_PREFIX = "platform_validation_"
URL_TIMEOUT_S = 5.0

# (ok, reason) for one URL
UrlChecker = Callable[[str], Tuple[bool, Optional[str]]]


@dataclass
class NewPlatform:
    name: str
    url: str

    def to_dict(self) -> Dict[str, str]:
        return {"platformName": self.name, "platformUrl": self.url}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "NewPlatform":
        return cls(name=(d.get("platformName") or "").strip(), url=(d.get("platformUrl") or "").strip())


@dataclass
class ValidationReport:
    valid: List[NewPlatform]
    invalid: List[Tuple[NewPlatform, str]]
    duplicates: List[Tuple[NewPlatform, Record]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": [p.to_dict() for p in self.valid],
            "invalid": [{"platform": p.to_dict(), "reason": r} for p, r in self.invalid],
            "duplicates": [
                {"platform": p.to_dict(), "existingPlatform": dict(e)} for p, e in self.duplicates
            ],
        }


def parse_new_platforms_file(path: Union[str, Path]) -> List[NewPlatform]:
    """Read ``name<TAB>url`` lines, skipping the header row and blank lines."""
    text = Path(path).read_text(encoding="utf-8")
    out: List[NewPlatform] = []
    for line in text.split("\n")[1:]:
        line = line.strip()
        if not line:
            continue
        cols = line.split("\t")
        name = cols[0].strip() if cols else ""
        url = cols[1].strip() if len(cols) > 1 else ""
        out.append(NewPlatform(name=name, url=url))
    return out


def check_url(url: str, timeout: float = URL_TIMEOUT_S) -> Tuple[bool, Optional[str]]:
    """HEAD ``url``; only a 2xx answer counts as reachable."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False, "Invalid URL format"
    if not parsed.scheme or not parsed.netloc:
        return False, "Invalid URL format"

    try:
        r = requests.head(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        return False, f"Failed to connect to URL: {exc}"
    if not 200 <= r.status_code < 300:
        return False, f"URL returned status {r.status_code}"
    return True, None


def find_duplicate(platform: NewPlatform, existing: List[Record]) -> Optional[Record]:
    """First existing record with the same name or URL (case-insensitive)."""
    name, url = platform.name.lower(), platform.url.lower()
    for rec in existing:
        if (rec.get("platform_name") or "").lower() == name:
            return rec
        rec_url = rec.get("platform_url") or ""
        if rec_url and rec_url.lower() == url:
            return rec
    return None


def validate_platforms(
    new_platforms: List[NewPlatform],
    existing: List[Record],
    url_checker: Optional[UrlChecker] = None,
) -> ValidationReport:
    checker = url_checker or check_url
    report = ValidationReport(valid=[], invalid=[], duplicates=[])
    total = len(new_platforms)
    logger.info("Validating %d platforms...", total)

    for i, platform in enumerate(new_platforms, start=1):
        logger.info("Validating platform %d/%d: %s", i, total, platform.name)
        if not platform.name:
            report.invalid.append((platform, "Platform name is empty"))
            continue
        if not platform.url:
            report.invalid.append((platform, "Platform URL is empty"))
            continue

        dup = find_duplicate(platform, existing)
        if dup is not None:
            report.duplicates.append((platform, dup))
            continue

        ok, reason = checker(platform.url)
        if not ok:
            report.invalid.append((platform, reason or "URL validation failed"))
            continue
        report.valid.append(platform)

    return report


def report_path(logs_dir: Union[str, Path], now: Optional[dt.datetime] = None) -> Path:
    return Path(logs_dir) / f"{REPORT_PREFIX}{backup_timestamp(now)}.json"


def save_validation_report(report: ValidationReport, path: Union[str, Path]) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(report.to_dict(), indent=2), encoding="utf-8")
    logger.info("Validation report saved to: %s", p)
    return p


def find_latest_report(logs_dir: Union[str, Path]) -> Optional[Path]:
    """Newest report by file name (the embedded timestamp sorts lexically)."""
    d = Path(logs_dir)
    if not d.exists():
        return None
    reports = sorted(
        (p for p in d.iterdir() if p.name.startswith(REPORT_PREFIX) and p.suffix == ".json"),
        key=lambda p: p.name,
        reverse=True,
    )
    return reports[0] if reports else None


def load_validation_report(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def valid_platforms(report: Dict[str, Any]) -> List[NewPlatform]:
    return [NewPlatform.from_dict(d) for d in report.get("valid") or []]
