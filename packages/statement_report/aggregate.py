"""Grouping and time-bucketing of typed rows for charting.

Every function here is a pure function of its input rows. Aggregates are
cheap at statement scale (hundreds to low thousands of rows), so callers are
expected to recompute them on demand instead of caching them.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC

from .models import PayerGroup, TypedRow, YearBucket

# An empty quoted cell that was not unquoted upstream; it means "no payer".
EMPTY_QUOTED_PAYER = '""'

MONTHS = tuple(range(1, 13))


def group_by_payer(rows: Iterable[TypedRow]) -> list[PayerGroup]:
    """Group rows by exact payer text, ascending by total amount.

    Rows whose payer is the literal ``""`` are skipped. Groups with equal
    totals keep the order in which their payer first appeared.
    """

    grouped: dict[str, list[TypedRow]] = {}
    for row in rows:
        if row.payer == EMPTY_QUOTED_PAYER:
            continue
        grouped.setdefault(row.payer, []).append(row)

    groups = [
        PayerGroup(payer=payer, total_amount=sum(r.amount for r in members), rows=tuple(members))
        for payer, members in grouped.items()
    ]
    groups.sort(key=lambda g: g.total_amount)
    return groups


def to_yearly_buckets(rows: Iterable[TypedRow]) -> YearBucket:
    """Sum amounts per calendar month (UTC) within each calendar year.

    Each year present in ``rows`` maps all twelve months, zero-filled.
    """

    buckets: YearBucket = {}
    for row in rows:
        when = row.date.astimezone(UTC) if row.date.tzinfo is not None else row.date
        months = buckets.get(when.year)
        if months is None:
            months = buckets[when.year] = dict.fromkeys(MONTHS, 0.0)
        months[when.month] += row.amount
    return dict(sorted(buckets.items()))


def payer_summary(rows: Iterable[TypedRow]) -> tuple[float, int]:
    """Return ``(total_amount, row_count)`` over ``rows``."""

    total = 0.0
    count = 0
    for row in rows:
        total += row.amount
        count += 1
    return total, count


__all__ = ["EMPTY_QUOTED_PAYER", "MONTHS", "group_by_payer", "payer_summary", "to_yearly_buckets"]
