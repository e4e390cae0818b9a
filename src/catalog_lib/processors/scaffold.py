from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

from ..backup import create_backup
from ..csv_utils import write_csv
from ..entities import SCHEMAS
from ..models import EntitySchema

logger = logging.getLogger(__name__)


def scaffold_tables(
    data_dir: Union[str, Path],
    files: Mapping[str, str],
    schemas: Optional[Iterable[EntitySchema]] = None,
    force: bool = False,
    backup_dir: Optional[Union[str, Path]] = None,
) -> List[Path]:
    """Write a header-only CSV for every schema whose file is missing.

    ``files`` maps entity names to file names (the ``files`` config section);
    schemas without an entry are skipped. Existing files are left alone
    unless ``force`` is set, in which case they are backed up to
    ``backup_dir`` (when given) and replaced. Returns the files written.
    """
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for schema in schemas if schemas is not None else SCHEMAS.values():
        name = files.get(schema.name)
        if not name:
            logger.debug("No file configured for %s, not scaffolding", schema.name)
            continue
        path = data_dir / name
        if path.exists():
            if not force:
                logger.info("Keeping existing %s", path.name)
                continue
            if backup_dir is not None:
                create_backup(path, backup_dir)
        write_csv(path, [], schema.columns())
        logger.info("Created %s with columns: %s", path.name, ", ".join(schema.columns()))
        written.append(path)
    return written
