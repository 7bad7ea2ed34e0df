"""Root logger setup for the ladder scripts.

``LOG_LEVEL`` (DEBUG|INFO|WARNING|ERROR|CRITICAL) picks the level when none is
passed explicitly. DEBUG switches to a verbose format and lets SQLAlchemy's
engine logger through.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Literal

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    if not name:
        return default
    return _LEVELS.get(name.upper(), default)


def setup_logging(level: LogLevel | str | None = None) -> None:
    """Configure the root logger, replacing any handlers already installed."""
    numeric_level = level_from_name(level or os.getenv("LOG_LEVEL"))

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    is_debug = numeric_level <= logging.DEBUG
    fmt = (
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
        if is_debug
        else "%(levelname).1s %(name)s: %(message)s"
    )
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))

    root.setLevel(numeric_level)
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if is_debug else logging.WARNING)
