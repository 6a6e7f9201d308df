"""Public orchestration surface for the ``statement_report`` package.

The CLI and any host application go through these helpers; the underlying
modules (tokenizer, classifier, assembler, aggregate) stay importable for
finer-grained use.
"""

from __future__ import annotations

from collections.abc import Mapping
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .models import AssemblyResult, ColumnRole
from .session import ImportSession
from .settings import ImportSettings

_logger = get_logger("statement_report.api")


def read_statement_text(path: str | PathLike[str], *, encoding: str = "utf-8") -> str:
    """Read the whole statement file as one text blob.

    ``newline=""`` keeps ``\\r\\n`` intact; the tokenizer splits on it.
    Errors (missing file, permissions, decoding) propagate to the caller.
    """

    with Path(path).open(encoding=encoding, newline="") as f:
        return f.read()


def load_statement(
    text: str, *, settings: ImportSettings | None = None
) -> ImportSession:
    """Start an import session over ``text``, ready for column definition."""

    settings = settings or ImportSettings()
    session = ImportSession()
    session.begin_loading()
    session.load_text(text, has_headers=settings.has_headers)
    return session


def build_report(
    text: str,
    roles: Mapping[int, ColumnRole],
    *,
    settings: ImportSettings | None = None,
) -> AssemblyResult:
    """Tokenize, classify with ``roles`` (column index -> role) and assemble.

    Roles are applied in mapping order, so a later payment role for the same
    kind takes the slot over from an earlier column.
    """

    session = load_statement(text, settings=settings)
    for column_index, role in roles.items():
        session.assign_role(column_index, role)
    if not session.is_complete():
        _logger.warning("building report with incomplete column roles")
    rows = session.finish()
    return AssemblyResult(rows=rows, dropped=session.dropped)


__all__ = ["build_report", "load_statement", "read_statement_text"]
