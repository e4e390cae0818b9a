import logging
import os
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(
    level: Union[str, int, None] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    """Configure basic logging with consistent format.

    Parameters
    ----------
    level: str | int | None
        Desired log level (e.g., "DEBUG", "INFO"). If ``None``, the
        ``LOG_LEVEL`` environment variable is consulted. Defaults to
        ``INFO`` if neither is provided.
    log_file: str | Path | None
        Optional file that receives the same records as the console. Its
        parent directory is created if missing.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
