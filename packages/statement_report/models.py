"""Data models for ``statement_report``.

The pipeline moves through three shapes:

- :class:`RawColumn`: column-major raw cells straight out of the tokenizer.
- :class:`TypedRow`: one fully parsed payment (payer, date, amount) plus any
  auxiliary ``(label, value)`` pairs, keyed by its original row index.
- Derived aggregates (:class:`PayerGroup`, :data:`YearBucket`) recomputed on
  demand from a row collection. They hold no back-references.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Column roles
# ---------------------------------------------------------------------------


class RoleKind(Enum):
    """Semantic meaning a column can be given."""

    PAYMENT_RECIPIENT = "payer"
    PAYMENT_DATE = "date"
    PAYMENT_AMOUNT = "amount"
    COMMON_INFO = "info"

    @property
    def is_singleton(self) -> bool:
        return self is not RoleKind.COMMON_INFO


SINGLETON_KINDS: tuple[RoleKind, ...] = (
    RoleKind.PAYMENT_RECIPIENT,
    RoleKind.PAYMENT_DATE,
    RoleKind.PAYMENT_AMOUNT,
)


@dataclass(frozen=True, slots=True)
class ColumnRole:
    """A role assignment; ``label`` is set only for ``COMMON_INFO``."""

    kind: RoleKind
    label: str | None = None

    def __post_init__(self) -> None:
        if self.kind is RoleKind.COMMON_INFO:
            if self.label is None:
                raise ValueError("CommonInfo role requires a label")
        elif self.label is not None:
            raise ValueError(f"{self.kind.name} role does not carry a label")

    @classmethod
    def recipient(cls) -> ColumnRole:
        return cls(RoleKind.PAYMENT_RECIPIENT)

    @classmethod
    def date(cls) -> ColumnRole:
        return cls(RoleKind.PAYMENT_DATE)

    @classmethod
    def amount(cls) -> ColumnRole:
        return cls(RoleKind.PAYMENT_AMOUNT)

    @classmethod
    def common_info(cls, label: str) -> ColumnRole:
        return cls(RoleKind.COMMON_INFO, label)

    def __str__(self) -> str:
        if self.kind is RoleKind.COMMON_INFO:
            return f"info:{self.label}"
        return self.kind.value


# ---------------------------------------------------------------------------
# Tokenizer output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawColumn:
    """One field position of the statement, in row order.

    ``cells`` has one entry per data row that actually had a field at this
    position. ``rows`` is parallel to ``cells`` and names the original data
    row index of each cell, so ragged input never shifts a cell onto the
    wrong row.
    """

    index: int
    cells: tuple[str, ...]
    rows: tuple[int, ...]
    header: str | None = None

    def __post_init__(self) -> None:
        if len(self.cells) != len(self.rows):
            raise ValueError("cells and rows must have the same length")

    def items(self) -> list[tuple[int, str]]:
        """Return ``(row, cell)`` pairs in row order."""

        return list(zip(self.rows, self.cells, strict=True))

    @property
    def display_name(self) -> str:
        """Header text, or ``Column <n>`` (1-based) when there is none."""

        return self.header if self.header else f"Column {self.index + 1}"


@dataclass(frozen=True, slots=True)
class TokenizedStatement:
    headers: dict[int, str]
    columns: tuple[RawColumn, ...]
    row_count: int


# ---------------------------------------------------------------------------
# Assembled rows and diagnostics
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TypedRow:
    """A fully parsed payment.

    ``date`` is timezone-aware (UTC midnight of the statement day). The
    original row index is not part of a row's identity; it only keys the
    mapping returned by the assembler.
    """

    payer: str
    date: datetime
    amount: float
    extra: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class DroppedRow:
    """Why a row produced no :class:`TypedRow`."""

    row: int
    reasons: tuple[str, ...]


@dataclass(slots=True)
class AssemblyResult:
    rows: dict[int, TypedRow] = field(default_factory=dict)
    dropped: list[DroppedRow] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PayerGroup:
    payer: str
    total_amount: float
    rows: tuple[TypedRow, ...]


# year -> month (1..12) -> summed amount; every month is always present.
YearBucket: TypeAlias = dict[int, dict[int, float]]


# ---------------------------------------------------------------------------
# Import session state
# ---------------------------------------------------------------------------


class ReportState(Enum):
    NOT_ASKED = "not_asked"
    LOADING = "loading"
    DEFINING_COLUMNS = "defining_columns"
    READY = "ready"


__all__ = [
    "AssemblyResult",
    "ColumnRole",
    "DroppedRow",
    "PayerGroup",
    "RawColumn",
    "ReportState",
    "RoleKind",
    "SINGLETON_KINDS",
    "TokenizedStatement",
    "TypedRow",
    "YearBucket",
]
