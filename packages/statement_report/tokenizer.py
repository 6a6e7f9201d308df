"""Split raw statement text into column-major raw cells.

Input format
------------
- Rows are separated by ``\\r\\n``; fields by ``;``.
- Cells may be wrapped in one layer of string-literal quoting (see
  :func:`statement_report.cells.normalize_cell`).
- An optional first header row, declared by the caller (never auto-detected).

Ragged rows are kept as-is: a row with fewer fields simply contributes no cell
to the columns it lacks, and every cell remembers its original row index.
Columns whose cells are all empty are dropped from the output.
"""

from __future__ import annotations

from .cells import normalize_cell
from .logging_setup import get_logger
from .models import RawColumn, TokenizedStatement

ROW_SEPARATOR = "\r\n"
FIELD_DELIMITER = ";"

_logger = get_logger("statement_report.tokenizer")


def split_rows(text: str) -> list[str]:
    if not text:
        return []
    return text.split(ROW_SEPARATOR)


def split_fields(row: str) -> list[str]:
    return [normalize_cell(cell) for cell in row.split(FIELD_DELIMITER)]


def _is_empty(cell: str) -> bool:
    return cell == ""


def tokenize(text: str, *, has_headers: bool = False) -> TokenizedStatement:
    """Tokenize ``text`` into headers and non-empty :class:`RawColumn` values.

    Never raises for malformed input; such input yields no columns.
    """

    lines = split_rows(text)
    headers: dict[int, str] = {}
    if has_headers and lines:
        headers = dict(enumerate(split_fields(lines[0])))
        lines = lines[1:]

    cells_by_index: dict[int, list[str]] = {}
    rows_by_index: dict[int, list[int]] = {}
    row_count = 0
    for row_idx, line in enumerate(lines):
        # Blank lines (e.g. the one after a trailing CRLF) are not data rows.
        if line == "":
            continue
        row_count += 1
        for field_idx, cell in enumerate(split_fields(line)):
            cells_by_index.setdefault(field_idx, []).append(cell)
            rows_by_index.setdefault(field_idx, []).append(row_idx)

    columns: list[RawColumn] = []
    for field_idx in sorted(cells_by_index):
        cells = cells_by_index[field_idx]
        if all(_is_empty(c) for c in cells):
            _logger.debug("dropping empty column %d", field_idx)
            continue
        columns.append(
            RawColumn(
                index=field_idx,
                cells=tuple(cells),
                rows=tuple(rows_by_index[field_idx]),
                header=headers.get(field_idx),
            )
        )

    _logger.debug(
        "tokenized %d data rows into %d columns (headers=%s)",
        row_count,
        len(columns),
        has_headers,
    )
    return TokenizedStatement(headers=headers, columns=tuple(columns), row_count=row_count)


__all__ = ["FIELD_DELIMITER", "ROW_SEPARATOR", "split_fields", "split_rows", "tokenize"]
