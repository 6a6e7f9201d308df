"""Column role classification.

The three payment roles (recipient, date, amount) are single-owner slots:
assigning one to a column evicts whichever column held it before, so at most
one column can ever hold each of them. CommonInfo is an open label map that
any number of columns may share. Columns in neither structure are unset.

Nothing here assigns a role on its own. :func:`suggest_roles` only proposes
roles for a caller (e.g. an interactive prompt) to confirm.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from .fields import parse_amount, parse_date
from .logging_setup import get_logger
from .models import SINGLETON_KINDS, ColumnRole, RawColumn, RoleKind

_logger = get_logger("statement_report.classifier")


class RoleError(ValueError):
    """Invalid classifier edit (unknown column, label on a non-info column)."""


class ColumnClassifier:
    """Role assignments for one set of tokenized columns."""

    def __init__(self, column_indices: Iterable[int]) -> None:
        self._known: tuple[int, ...] = tuple(sorted(set(column_indices)))
        self._slots: dict[RoleKind, int | None] = dict.fromkeys(SINGLETON_KINDS)
        self._info_labels: dict[int, str] = {}

    @classmethod
    def for_columns(cls, columns: Iterable[RawColumn]) -> ColumnClassifier:
        return cls(c.index for c in columns)

    @property
    def column_indices(self) -> tuple[int, ...]:
        return self._known

    def _check_known(self, column_index: int) -> None:
        if column_index not in self._known:
            raise RoleError(f"unknown column index: {column_index}")

    def _release(self, column_index: int) -> None:
        for kind, owner in self._slots.items():
            if owner == column_index:
                self._slots[kind] = None
        self._info_labels.pop(column_index, None)

    def assign_role(self, column_index: int, role: ColumnRole) -> None:
        """Give ``role`` to a column.

        A payment role held by another column is cleared from it first, which
        leaves that column unset. CommonInfo never affects other columns.
        """

        self._check_known(column_index)
        self._release(column_index)
        if role.kind is RoleKind.COMMON_INFO:
            self._info_labels[column_index] = role.label or ""
            return
        previous = self._slots[role.kind]
        if previous is not None and previous != column_index:
            _logger.debug(
                "column %d loses %s to column %d", previous, role.kind.value, column_index
            )
        self._slots[role.kind] = column_index

    def set_common_info_label(self, column_index: int, label: str) -> None:
        self._check_known(column_index)
        if column_index not in self._info_labels:
            raise RoleError(f"column {column_index} is not a CommonInfo column")
        self._info_labels[column_index] = label

    def clear_role(self, column_index: int) -> None:
        self._check_known(column_index)
        self._release(column_index)

    def owner(self, kind: RoleKind) -> int | None:
        """Column currently holding a payment role, if any."""

        if not kind.is_singleton:
            raise RoleError("CommonInfo has no single owner")
        return self._slots[kind]

    def role_of(self, column_index: int) -> ColumnRole | None:
        self._check_known(column_index)
        for kind, owner in self._slots.items():
            if owner == column_index:
                return ColumnRole(kind)
        label = self._info_labels.get(column_index)
        if label is not None:
            return ColumnRole.common_info(label)
        return None

    def roles(self) -> dict[int, ColumnRole | None]:
        return {i: self.role_of(i) for i in self._known}

    def info_labels(self) -> dict[int, str]:
        return dict(self._info_labels)

    def missing_roles(self) -> list[RoleKind]:
        return [kind for kind, owner in self._slots.items() if owner is None]

    def is_complete(self) -> bool:
        return not self.missing_roles()


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

# Header keywords commonly seen in semicolon-separated (mostly German) exports.
_HEADER_HINTS: dict[RoleKind, tuple[str, ...]] = {
    RoleKind.PAYMENT_RECIPIENT: (
        "payer",
        "payee",
        "recipient",
        "name",
        "empfänger",
        "empfaenger",
        "auftraggeber",
        "zahlungspflichtige",
    ),
    RoleKind.PAYMENT_DATE: ("date", "datum", "buchungstag", "valuta", "wertstellung"),
    RoleKind.PAYMENT_AMOUNT: ("amount", "betrag", "umsatz", "summe"),
}

_MIN_SHAPE_SHARE = 0.8
_LETTERS_RE = re.compile(r"[^\W\d_]", re.UNICODE)


def _share(cells: Sequence[str], predicate) -> float:
    filled = [c for c in cells if c.strip()]
    if not filled:
        return 0.0
    return sum(1 for c in filled if predicate(c)) / len(filled)


def _header_kind(header: str | None) -> RoleKind | None:
    if not header:
        return None
    lowered = header.strip().lower()
    for kind, hints in _HEADER_HINTS.items():
        if any(h in lowered for h in hints):
            return kind
    return None


def _shape_kind(column: RawColumn) -> RoleKind | None:
    cells = column.cells
    if _share(cells, lambda c: parse_date(c) is not None) >= _MIN_SHAPE_SHARE:
        return RoleKind.PAYMENT_DATE
    if _share(cells, lambda c: parse_amount(c) is not None) >= _MIN_SHAPE_SHARE:
        return RoleKind.PAYMENT_AMOUNT
    if _share(cells, lambda c: bool(_LETTERS_RE.search(c))) >= _MIN_SHAPE_SHARE:
        return RoleKind.PAYMENT_RECIPIENT
    return None


def suggest_roles(columns: Sequence[RawColumn]) -> dict[int, ColumnRole]:
    """Propose a role for every column without touching any classifier.

    Header keywords win over cell shapes. Each payment role is proposed for at
    most one column (the first candidate in column order); every other column
    is proposed as CommonInfo labelled with its display name.
    """

    proposals: dict[int, ColumnRole] = {}
    taken: set[RoleKind] = set()

    for pass_fn in (lambda c: _header_kind(c.header), _shape_kind):
        for column in columns:
            if column.index in proposals:
                continue
            kind = pass_fn(column)
            if kind is None or kind in taken:
                continue
            proposals[column.index] = ColumnRole(kind)
            taken.add(kind)

    for column in columns:
        proposals.setdefault(column.index, ColumnRole.common_info(column.display_name))
    return dict(sorted(proposals.items()))


__all__ = ["ColumnClassifier", "RoleError", "suggest_roles"]
