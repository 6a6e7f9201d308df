"""Logging for ``statement_report``.

Every module logs through ``get_logger("statement_report.<module>")``. Only the
CLI (or a host application) calls :func:`configure_logging`, which installs the
one stream handler on the ``statement_report`` logger. Until then the package
stays silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_report"
LOG_LEVEL_ENV = "STATEMENT_REPORT_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def level_number(level: int | str | None) -> int | None:
    """Map ``"debug"``, ``" WARNING "``, ``"15"`` or ``10`` to a level; else ``None``."""

    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        return logging.getLevelNamesMapping().get(name)
    return None


def _parse_level(level: int | str | None) -> int:
    resolved = level_number(level)
    if resolved is None:
        resolved = level_number(os.getenv(LOG_LEVEL_ENV))
    return logging.INFO if resolved is None else resolved


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Send package log records to ``stream``. Later calls are no-ops.

    ``level`` falls back to ``STATEMENT_REPORT_LOG_LEVEL`` and then ``INFO``.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    # Records stop here; the root logger would print them twice.
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "level_number"]
