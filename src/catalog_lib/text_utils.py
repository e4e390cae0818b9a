import re
from typing import Optional
from urllib.parse import urlparse

from .validators import normalize_url

_TLD_SUFFIX = re.compile(r"\.(com|org|net|io|ai)$", re.I)
_SEPARATORS = re.compile(r"[-_]+")
_WORD = re.compile(r"\b\w")
_LEGAL_WORDS = re.compile(r"\b(Inc|LLC|Ltd|Corp|Corporation|Company)\b")

# Acronyms kept upper-case in company names.
_SPECIAL_CASES = {
    "Api": "API",
    "Ai": "AI",
    "Ml": "ML",
    "Nlp": "NLP",
    "Aws": "AWS",
    "Ibm": "IBM",
    "Hp": "HP",
    "Sap": "SAP",
}


def extract_domain(url: Optional[str]) -> str:
    """Return the lower-cased host of ``url`` without a leading ``www.``.

    Parameters
    ----------
    url: str | None
        URL with or without scheme.

    Returns
    -------
    str
        Host name, or ``""`` when ``url`` is empty or unparsable.
    """

    if not url or not url.strip():
        return ""
    try:
        host = urlparse(normalize_url(url)).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def second_level_label(url: Optional[str]) -> str:
    """``https://app.openai.com`` -> ``openai``; empty when no domain."""
    parts = [p for p in extract_domain(url).split(".") if p]
    if len(parts) >= 2:
        return parts[-2]
    return parts[0] if parts else ""


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:] if s else s


def normalize_company_name(domain: str) -> str:
    """Turn a bare domain into a display company name.

    ``deep-mind.ai`` becomes ``Deep Mind``, ``aws.com`` becomes ``AWS``;
    legal words (Inc, Ltd, Corp, Company, ...) are dropped.
    """
    name = _TLD_SUFFIX.sub("", (domain or "").strip().lower())
    name = _SEPARATORS.sub(" ", name)
    name = _WORD.sub(lambda m: m.group(0).upper(), name)
    words = [_SPECIAL_CASES.get(w, w) for w in name.split()]
    name = _LEGAL_WORDS.sub("", " ".join(words))
    return " ".join(name.split())


def company_name_from_url(url: Optional[str]) -> str:
    """Company display name from the first label of the URL's host."""
    domain = extract_domain(url)
    if not domain:
        return ""
    return normalize_company_name(domain.split(".")[0])


def same_name(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive, whitespace-trimmed equality."""
    return (a or "").strip().lower() == (b or "").strip().lower()
