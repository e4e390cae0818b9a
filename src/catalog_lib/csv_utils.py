import csv
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_records(path: PathLike, delimiter: str = ",") -> List[Dict[str, Optional[str]]]:
    """Load a delimited file into a list of string-valued records.

    Parameters
    ----------
    path: str | Path
        Source file. A header row is expected.
    delimiter: str
        Field separator (``","`` or ``"\\t"``).

    Returns
    -------
    List[Dict[str, Optional[str]]]
        One mapping per data row, in file order. Every cell is a string and
        empty cells stay ``""``. Returns an empty list when the file does
        not exist or holds no header.
    """

    p = Path(path)
    if not p.exists():
        logger.warning("File not found: %s", p)
        return []
    try:
        df = pd.read_csv(p, sep=delimiter, dtype=str, keep_default_na=False, encoding="utf-8")
    except pd.errors.EmptyDataError:
        logger.warning("File is empty: %s", p)
        return []
    records = df.to_dict(orient="records")
    logger.info("Loaded %d records from %s", len(records), p)
    return records


def collect_fieldnames(rows: Iterable[Dict[str, Any]]) -> List[str]:
    """Return the union of keys across ``rows`` in first-seen order."""
    seen: Dict[str, None] = {}
    for r in rows:
        for k in r.keys():
            seen.setdefault(k, None)
    return list(seen)


def write_csv(
    path: PathLike,
    rows: List[Dict[str, Any]],
    fieldnames: List[str],
    delimiter: str = ",",
) -> None:
    """Write rows to a CSV file, overwriting any existing content.

    Parameters
    ----------
    path: str | Path
        Destination file path.
    rows: List[Dict[str, Any]]
        Rows to write, each mapping field names to values. Missing keys and
        ``None`` values are written as empty cells.
    fieldnames: List[str]
        Ordered list of column names.
    delimiter: str
        Field separator.

    Raises
    ------
    OSError
        If the file cannot be written.
    """

    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, restval="", delimiter=delimiter)
        w.writeheader()
        for r in rows:
            w.writerow(r)


def read_fieldnames(path: PathLike, delimiter: str = ",") -> List[str]:
    """Column names of ``path`` in file order; empty when the file is absent or blank."""
    p = Path(path)
    if not p.exists():
        return []
    try:
        df = pd.read_csv(p, sep=delimiter, dtype=str, keep_default_na=False, nrows=0, encoding="utf-8")
    except pd.errors.EmptyDataError:
        return []
    return [str(c) for c in df.columns]


def save_records(
    path: PathLike,
    records: List[Dict[str, Optional[str]]],
    delimiter: str = ",",
    fieldnames: Optional[List[str]] = None,
) -> Path:
    """Persist ``records`` to ``path``, inferring the header from all keys.

    ``fieldnames`` (usually the header the file was loaded with) lead the
    header, so an empty collection still keeps its columns. With neither
    records nor fieldnames nothing is written. The destination is rewritten
    wholesale; parent directories are created.
    """
    p = Path(path)
    header = collect_fieldnames([dict.fromkeys(fieldnames or [])] + list(records))
    if not header:
        logger.warning("Nothing to save to %s: no records and no columns", p)
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    write_csv(p, records, header, delimiter=delimiter)
    logger.info("Saved %d records to %s", len(records), p)
    return p
