"""Visualizer-facing payloads and a plain-text report.

``build_payload`` produces the JSON-serializable data model a chart front end
consumes: payer groups ascending by total, plus zero-filled month buckets for
each expanded payer. ``render_report`` returns the same information as a
pretty-printed table; printing it is the caller's responsibility.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from .aggregate import MONTHS, group_by_payer, payer_summary, to_yearly_buckets
from .models import PayerGroup, TypedRow, YearBucket


class MonthTotal(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    month: int = Field(ge=1, le=12)
    total_amount: float


class YearBucketView(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    year: int
    months: list[MonthTotal]


class PayerGroupView(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    payer: str
    total_amount: float
    row_count: int
    years: list[YearBucketView] | None = None


class ReportPayload(BaseModel):
    """Top-level document handed to the Visualizer."""

    model_config = ConfigDict(strict=True, extra="forbid")

    total_amount: float
    row_count: int
    dropped_count: int = 0
    groups: list[PayerGroupView]


def _bucket_views(buckets: YearBucket) -> list[YearBucketView]:
    return [
        YearBucketView(
            year=year,
            months=[MonthTotal(month=m, total_amount=months[m]) for m in MONTHS],
        )
        for year, months in buckets.items()
    ]


def build_payload(
    rows: Iterable[TypedRow],
    *,
    expanded: Sequence[str] = (),
    dropped_count: int = 0,
) -> ReportPayload:
    rows = list(rows)
    total, count = payer_summary(rows)
    wanted = set(expanded)
    groups: list[PayerGroupView] = []
    for group in group_by_payer(rows):
        years = _bucket_views(to_yearly_buckets(group.rows)) if group.payer in wanted else None
        groups.append(
            PayerGroupView(
                payer=group.payer,
                total_amount=group.total_amount,
                row_count=len(group.rows),
                years=years,
            )
        )
    return ReportPayload(
        total_amount=total, row_count=count, dropped_count=dropped_count, groups=groups
    )


# ---------------------------------------------------------------------------
# Plain-text rendering
# ---------------------------------------------------------------------------

_MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _fmt(amount: float) -> str:
    return f"{amount:,.2f}"


def _render_groups(groups: Sequence[PayerGroup]) -> list[str]:
    width = max([len("Payer")] + [len(g.payer) for g in groups])
    lines = [f"{'Payer':<{width}}  {'Rows':>5}  {'Total':>14}"]
    lines.append("-" * len(lines[0]))
    for g in groups:
        lines.append(f"{g.payer:<{width}}  {len(g.rows):>5}  {_fmt(g.total_amount):>14}")
    return lines


def _render_buckets(payer: str, buckets: YearBucket) -> list[str]:
    lines = [f"{payer}:"]
    header = "  Year  " + " ".join(f"{name:>10}" for name in _MONTH_NAMES)
    lines.append(header)
    for year, months in buckets.items():
        cells = " ".join(f"{_fmt(months[m]):>10}" for m in MONTHS)
        lines.append(f"  {year:<4}  {cells}")
    return lines


def render_report(
    rows: Iterable[TypedRow],
    *,
    expanded: Sequence[str] = (),
    dropped_count: int = 0,
) -> str:
    rows = list(rows)
    groups = group_by_payer(rows)
    if not groups:
        return "No payments."

    lines = _render_groups(groups)
    total, count = payer_summary(rows)
    lines.append("")
    lines.append(f"Total: {_fmt(total)} across {count} rows")
    if dropped_count:
        lines.append(f"Dropped rows: {dropped_count}")

    by_payer = {g.payer: g for g in groups}
    for payer in expanded:
        group = by_payer.get(payer)
        if group is None:
            continue
        lines.append("")
        lines.extend(_render_buckets(payer, to_yearly_buckets(group.rows)))
    return "\n".join(lines)


__all__ = [
    "MonthTotal",
    "PayerGroupView",
    "ReportPayload",
    "YearBucketView",
    "build_payload",
    "render_report",
]
