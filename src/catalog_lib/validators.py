from __future__ import annotations

import logging
import re
from typing import List, Optional
from urllib.parse import urlparse

from .models import EntitySchema, ValidationResult
from .records import Record, is_blank

logger = logging.getLogger(__name__)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when ``url`` carries no http(s) scheme."""
    url = (url or "").strip()
    if url and not (url.startswith("http://") or url.startswith("https://")):
        return "https://" + url
    return url


def is_valid_url(url: Optional[str]) -> bool:
    """Best-effort URL parse check, injecting a protocol first.

    Parameters
    ----------
    url: str | None
        Candidate URL, with or without scheme.

    Returns
    -------
    bool
        ``True`` if the URL parses with a host and no embedded whitespace.
    """

    if is_blank(url):
        return False
    candidate = normalize_url(url)
    try:
        parsed = urlparse(candidate)
        host = parsed.hostname
        parsed.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if not host or any(ch.isspace() for ch in parsed.netloc):
        return False
    return True


def validate_record(record: Record, schema: EntitySchema) -> ValidationResult:
    """Check ``record`` against the constraint table of ``schema``.

    Every rule is evaluated and every violation reported, in the order the
    rules are declared: required fields, enums, URL fields, then dates.
    Fields that hold only whitespace produce warnings, which do not affect
    ``valid``.
    """
    errors: List[str] = []
    warnings: List[str] = []

    for f in schema.required:
        if is_blank(record.get(f)):
            errors.append(f"{f} is required")

    for rule in schema.enums:
        value = record.get(rule.field)
        if not is_blank(value) and not rule.accepts(value):
            errors.append(rule.error())

    for f in schema.url_fields:
        value = record.get(f)
        if not is_blank(value) and not is_valid_url(value):
            errors.append(f"{f} must be a valid URL")

    for f in schema.date_fields:
        value = record.get(f)
        if not is_blank(value) and not DATE_RE.match(value):
            errors.append(f"{f} must be in YYYY-MM-DD format")

    for f, value in record.items():
        if isinstance(value, str) and value != "" and value.strip() == "":
            warnings.append(f"Field {f} contains only whitespace")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def log_validation_result(schema: EntitySchema, record: Record, result: ValidationResult) -> None:
    if not result.valid:
        logger.warning(
            "Validation issues with %s record %s: %s",
            schema.name,
            schema.label(record),
            ", ".join(result.errors),
        )
    for w in result.warnings:
        logger.warning("Validation warning for %s record %s: %s", schema.name, schema.label(record), w)
