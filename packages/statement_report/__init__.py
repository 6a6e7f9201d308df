"""Public interface for the ``statement_report`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .aggregate import group_by_payer, payer_summary, to_yearly_buckets
from .api import build_report, load_statement, read_statement_text
from .assembler import assemble_rows
from .cells import normalize_cell
from .classifier import ColumnClassifier, RoleError, suggest_roles
from .models import (
    AssemblyResult,
    ColumnRole,
    DroppedRow,
    PayerGroup,
    RawColumn,
    ReportState,
    RoleKind,
    TokenizedStatement,
    TypedRow,
    YearBucket,
)
from .session import ImportSession, SessionStateError
from .settings import ImportSettings
from .tokenizer import tokenize

__version__ = "0.1.0"

__all__ = [
    # API
    "build_report",
    "load_statement",
    "read_statement_text",
    # Pipeline stages
    "normalize_cell",
    "tokenize",
    "ColumnClassifier",
    "suggest_roles",
    "assemble_rows",
    "group_by_payer",
    "to_yearly_buckets",
    "payer_summary",
    "ImportSession",
    "ImportSettings",
    # Models / types
    "AssemblyResult",
    "ColumnRole",
    "DroppedRow",
    "PayerGroup",
    "RawColumn",
    "ReportState",
    "RoleKind",
    "TokenizedStatement",
    "TypedRow",
    "YearBucket",
    # Errors
    "RoleError",
    "SessionStateError",
]
