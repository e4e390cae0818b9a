"""Exception types and the top-level script wrapper."""
from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for catalog pipeline failures."""


class MissingPreconditionError(CatalogError):
    """Raised when a run cannot start (input file absent, nothing to import)."""


class MissingCredentialError(MissingPreconditionError):
    """Raised when a required credential is not configured."""


def get_error_message(error: object) -> str:
    """Extract a readable message from an exception or arbitrary error value."""
    if error is None:
        return "Unknown error occurred"
    if isinstance(error, str):
        return error
    message = str(error)
    return message or type(error).__name__


def run_script(main: Callable[[], Optional[int]], name: str) -> int:
    """Run ``main`` and translate its outcome into a process exit code.

    Precondition failures are logged without a traceback; anything else is
    logged with one. Both exit non-zero.
    """
    try:
        rc = main()
    except MissingPreconditionError as exc:
        logger.error("%s aborted: %s", name, get_error_message(exc))
        return 1
    except Exception as exc:
        logger.exception("Critical error in %s: %s", name, get_error_message(exc))
        return 1
    return int(rc or 0)
