"""Logging setup for DeviceDB.

All package loggers live under the ``devicedb`` hierarchy and write to
STDERR only, so command output on STDOUT stays clean. The level comes from
``DEVICEDB_LOG_LEVEL`` (default WARNING) unless the CLI overrides it.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "devicedb"
LOG_LEVEL_ENV = "DEVICEDB_LOG_LEVEL"
_FORMAT = "%(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.StreamHandler] = None


def _root_logger() -> logging.Logger:
    global _handler
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is None:
        _handler = logging.StreamHandler(stream=sys.stderr)
        _handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(_handler)
        level = logging.getLevelName(os.getenv(LOG_LEVEL_ENV, "WARNING").upper())
        root.setLevel(level if isinstance(level, int) else logging.WARNING)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a package module (pass ``__name__``)."""
    _root_logger()
    return logging.getLogger(name)


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Set the package log level explicitly (CLI ``--log-level``).

    The stderr handler is re-pointed at the current ``sys.stderr``, so a
    redirected stderr receives the messages.
    """
    root = _root_logger()
    _handler.setStream(sys.stderr)
    if level is not None:
        root.setLevel(level.upper() if isinstance(level, str) else level)
    return root
