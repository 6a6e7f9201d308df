"""Assemble typed payment rows from classified raw columns.

Each role-tagged column is parsed on its own into a ``row index -> value``
map. A :class:`~statement_report.models.TypedRow` exists for a row only when
the payer, date and amount maps all have an entry for it; any row missing one
of them is left out of ``AssemblyResult.rows`` and recorded in
``AssemblyResult.dropped`` with the reasons. Parse failures are never raised.

CommonInfo columns and unset columns contribute ``(label, value)`` pairs to
``TypedRow.extra``; they never cause a row to be dropped.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from .classifier import ColumnClassifier
from .fields import parse_amount, parse_date, parse_payer
from .logging_setup import get_logger
from .models import AssemblyResult, DroppedRow, RawColumn, RoleKind, TypedRow

T = TypeVar("T")

_logger = get_logger("statement_report.assembler")


def _parse_column(
    column: RawColumn,
    parser: Callable[[str], T | None],
    field_name: str,
    failures: dict[int, list[str]],
) -> dict[int, T]:
    parsed: dict[int, T] = {}
    for row, cell in column.items():
        value = parser(cell)
        if value is None:
            detail = "empty" if cell == "" else f"unparsable {cell!r}"
            failures.setdefault(row, []).append(f"{field_name}: {detail}")
            continue
        parsed[row] = value
    return parsed


def _collect_extra(
    columns: Sequence[RawColumn], classifier: ColumnClassifier
) -> dict[int, list[tuple[str, str]]]:
    labels = classifier.info_labels()
    extra: dict[int, list[tuple[str, str]]] = {}
    for column in columns:
        role = classifier.role_of(column.index)
        if role is not None and role.kind is not RoleKind.COMMON_INFO:
            continue
        label = labels.get(column.index) or column.display_name
        for row, cell in column.items():
            extra.setdefault(row, []).append((label, cell))
    return extra


def assemble_rows(
    columns: Sequence[RawColumn], classifier: ColumnClassifier
) -> AssemblyResult:
    """Parse ``columns`` by role and join them on row index.

    Returns an empty result when the classifier is incomplete.
    """

    if not classifier.is_complete():
        _logger.warning(
            "column roles incomplete; missing %s",
            ", ".join(k.value for k in classifier.missing_roles()),
        )
        return AssemblyResult()

    by_index = {c.index: c for c in columns}
    payer_col = by_index[classifier.owner(RoleKind.PAYMENT_RECIPIENT)]
    date_col = by_index[classifier.owner(RoleKind.PAYMENT_DATE)]
    amount_col = by_index[classifier.owner(RoleKind.PAYMENT_AMOUNT)]

    failures: dict[int, list[str]] = {}
    payers = _parse_column(payer_col, parse_payer, "payer", failures)
    dates = _parse_column(date_col, parse_date, "date", failures)
    amounts = _parse_column(amount_col, parse_amount, "amount", failures)
    extra = _collect_extra(columns, classifier)

    seen_rows: set[int] = set()
    for column in columns:
        seen_rows.update(column.rows)
    for name, column in (("payer", payer_col), ("date", date_col), ("amount", amount_col)):
        for row in seen_rows.difference(column.rows):
            failures.setdefault(row, []).append(f"{name}: missing cell")

    result = AssemblyResult()
    for row in sorted(payers.keys() & dates.keys() & amounts.keys()):
        result.rows[row] = TypedRow(
            payer=payers[row],
            date=dates[row],
            amount=amounts[row],
            extra=tuple(extra.get(row, ())),
        )

    for row in sorted(seen_rows.difference(result.rows)):
        reasons = tuple(failures.get(row, ()))
        result.dropped.append(DroppedRow(row=row, reasons=reasons))
        _logger.debug("dropped row %d: %s", row, "; ".join(reasons))

    _logger.info("assembled %d rows, dropped %d", len(result.rows), len(result.dropped))
    return result


__all__ = ["assemble_rows"]
