"""Logging configuration for the ``ynab_sync`` package.

Library modules call ``get_logger(__name__)`` and never attach handlers. The
CLI calls ``configure_logging`` at startup.
"""

import logging
import os
import sys
from typing import IO

from ynab_sync.errors import ArgumentError

LOG_LEVEL_ENV = "YNAB_SYNC_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_PKG_LOGGER_NAME = "ynab_sync"
_handler: logging.StreamHandler | None = None  # type: ignore[type-arg]

logging.getLogger(_PKG_LOGGER_NAME).addHandler(logging.NullHandler())


def resolve_level(level: int | None = None) -> int:
    """Return ``level``, else the level named by YNAB_SYNC_LOG_LEVEL, else INFO.

    Raises:
        ArgumentError: If YNAB_SYNC_LOG_LEVEL is not a level name
    """
    if level is not None:
        return level
    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return logging.INFO
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ArgumentError(f"Invalid {LOG_LEVEL_ENV} {name!r}, expected e.g. DEBUG or INFO")
    return numeric


def configure_logging(level: int | None = None, stream: IO[str] | None = None) -> None:
    """Send package log records to ``stream`` (stderr by default).

    Calling it again reuses the handler, so the package never logs a record
    twice; the new level and stream replace the old ones.
    """
    global _handler
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    if _handler is None:
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
        logger.propagate = False
    else:
        _handler.setStream(stream or sys.stderr)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
