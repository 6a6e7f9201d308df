"""One import in progress, modelled as a small state machine.

States (:class:`~statement_report.models.ReportState`)::

    NOT_ASKED --begin_loading--> LOADING --load_text--> DEFINING_COLUMNS
    DEFINING_COLUMNS --assign_role/clear_role/...--> DEFINING_COLUMNS
    DEFINING_COLUMNS --finish--> READY(rows)

``load_text`` may be called from any state; starting a new import simply
replaces whatever the previous one left behind. Raw columns are discarded
once the report is ready.
"""

from __future__ import annotations

from .aggregate import group_by_payer, to_yearly_buckets
from .assembler import assemble_rows
from .classifier import ColumnClassifier
from .logging_setup import get_logger
from .models import (
    ColumnRole,
    DroppedRow,
    PayerGroup,
    RawColumn,
    ReportState,
    TypedRow,
    YearBucket,
)
from .tokenizer import tokenize

_logger = get_logger("statement_report.session")


class SessionStateError(RuntimeError):
    """A session operation was called in a state that does not allow it."""


class ImportSession:
    def __init__(self) -> None:
        self._clear(ReportState.NOT_ASKED)

    def _clear(self, state: ReportState) -> None:
        self._state = state
        self._headers: dict[int, str] = {}
        self._columns: tuple[RawColumn, ...] = ()
        self._classifier: ColumnClassifier | None = None
        self._rows: dict[int, TypedRow] = {}
        self._dropped: list[DroppedRow] = []

    # -- state -----------------------------------------------------------

    @property
    def state(self) -> ReportState:
        return self._state

    def _require(self, *allowed: ReportState) -> None:
        if self._state not in allowed:
            names = ", ".join(s.name for s in allowed)
            raise SessionStateError(f"session is {self._state.name}; expected {names}")

    def reset(self) -> None:
        self._clear(ReportState.NOT_ASKED)

    def begin_loading(self) -> None:
        self._clear(ReportState.LOADING)

    def load_text(self, text: str, *, has_headers: bool) -> tuple[RawColumn, ...]:
        if self._state is not ReportState.LOADING:
            self.begin_loading()
        statement = tokenize(text, has_headers=has_headers)
        self._headers = statement.headers
        self._columns = statement.columns
        self._classifier = ColumnClassifier.for_columns(statement.columns)
        self._state = ReportState.DEFINING_COLUMNS
        _logger.info(
            "loaded statement: %d rows, %d columns", statement.row_count, len(statement.columns)
        )
        return self._columns

    # -- column definition -------------------------------------------------

    @property
    def headers(self) -> dict[int, str]:
        return dict(self._headers)

    @property
    def columns(self) -> tuple[RawColumn, ...]:
        self._require(ReportState.DEFINING_COLUMNS)
        return self._columns

    @property
    def classifier(self) -> ColumnClassifier:
        self._require(ReportState.DEFINING_COLUMNS)
        if self._classifier is None:
            raise SessionStateError("no columns loaded")
        return self._classifier

    def assign_role(self, column_index: int, role: ColumnRole) -> None:
        self.classifier.assign_role(column_index, role)

    def set_common_info_label(self, column_index: int, label: str) -> None:
        self.classifier.set_common_info_label(column_index, label)

    def clear_role(self, column_index: int) -> None:
        self.classifier.clear_role(column_index)

    def is_complete(self) -> bool:
        return self._classifier is not None and self._classifier.is_complete()

    def finish(self) -> dict[int, TypedRow]:
        """Assemble rows and move to ``READY``.

        An incomplete classification still moves to ``READY``, with no rows.
        """

        result = assemble_rows(self._columns, self.classifier)
        self._rows = result.rows
        self._dropped = result.dropped
        self._columns = ()
        self._classifier = None
        self._state = ReportState.READY
        return dict(self._rows)

    # -- ready -------------------------------------------------------------

    @property
    def rows(self) -> dict[int, TypedRow]:
        self._require(ReportState.READY)
        return dict(self._rows)

    @property
    def dropped(self) -> list[DroppedRow]:
        self._require(ReportState.READY)
        return list(self._dropped)

    def payer_groups(self) -> list[PayerGroup]:
        return group_by_payer(self.rows.values())

    def year_buckets(self, payer: str) -> YearBucket:
        """Buckets for one payer's rows; empty when the payer is unknown."""

        return to_yearly_buckets(r for r in self.rows.values() if r.payer == payer)


__all__ = ["ImportSession", "SessionStateError"]
