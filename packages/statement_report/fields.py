"""Per-field parsers for the three required payment fields.

Each parser returns ``None`` when the cell cannot be used; callers decide what
a missing value means (the assembler drops the row).

Formats are fixed:

- date: ``DD.MM.YYYY`` (day first, dot separated), interpreted as a UTC
  calendar day after reordering to ``YYYY-MM-DD``.
- amount: ``,`` as the decimal separator. Every comma is replaced with a
  dot before parsing, so ``"1,234,56"`` becomes ``"1.234.56"`` and fails;
  there is no thousands-separator handling.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, date, datetime

DATE_SEPARATOR = "."
DECIMAL_COMMA = ","

_DATE_PART_RE = re.compile(r"^\d{1,4}$")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_payer(cell: str) -> str | None:
    return cell if cell != "" else None


def to_iso_date_text(cell: str) -> str | None:
    """Reorder ``DD.MM.YYYY`` into ``YYYY-MM-DD`` text (no calendar check)."""

    parts = cell.strip().split(DATE_SEPARATOR)
    if len(parts) != 3 or not all(_DATE_PART_RE.match(p) for p in parts):
        return None
    day, month, year = parts
    return f"{year}-{month}-{day}"


def parse_date(cell: str) -> datetime | None:
    iso = to_iso_date_text(cell)
    if iso is None:
        return None
    year, month, day = (int(p) for p in iso.split("-"))
    try:
        d = date(year, month, day)
    except ValueError:
        return None
    return datetime(d.year, d.month, d.day, tzinfo=UTC)


def parse_amount(cell: str) -> float | None:
    text = cell.strip().replace(DECIMAL_COMMA, ".")
    if not _NUMBER_RE.match(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


__all__ = ["parse_amount", "parse_date", "parse_payer", "to_iso_date_text"]
