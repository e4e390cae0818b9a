from __future__ import annotations

import datetime as dt
import logging
import shutil
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def backup_timestamp(now: Optional[dt.datetime] = None) -> str:
    """ISO-8601 UTC timestamp with colons replaced, safe for file names."""
    now = now or dt.datetime.now(dt.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z").replace(":", "-")


def create_backup(
    path: Union[str, Path],
    backup_dir: Union[str, Path],
    now: Optional[dt.datetime] = None,
) -> Optional[Path]:
    """Copy ``path`` into ``backup_dir`` as ``<stem>_backup_<stamp><suffix>``.

    Returns the backup path, or ``None`` when the source does not exist.
    """
    src = Path(path)
    if not src.exists():
        logger.warning("Cannot create backup: file not found: %s", src)
        return None

    dest_dir = Path(backup_dir)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / f"{src.stem}_backup_{backup_timestamp(now)}{src.suffix}"
    shutil.copy2(src, dest)
    logger.info("Created backup: %s", dest)
    return dest
