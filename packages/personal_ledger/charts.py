"""Data series behind the dashboard charts.

These helpers turn a :class:`RecordManager` snapshot into plain values; the
terminal UI only draws them.
"""

from __future__ import annotations

from datetime import date

from .models import Category, format_date
from .record_manager import RecordManager


def category_bars(manager: RecordManager) -> list[tuple[str, int]]:
    """``(label, whole-unit total)`` for every category, in declaration order."""

    totals = manager.category_totals()
    return [(c.label, int(totals[c])) for c in Category]


def balance_series(manager: RecordManager) -> list[tuple[date, float]]:
    """Cumulative balance per distinct date, oldest first.

    Records are ordered by date (stable for equal dates) before accumulating;
    each point holds the balance after the last record of that date.
    """

    points: dict[date, float] = {}
    running = 0.0
    for r in sorted(manager.get_all(), key=lambda rec: rec.date):
        running += r.signed_amount
        points[r.date] = running
    return list(points.items())


def x_labels(manager: RecordManager, label_count: int) -> list[str]:
    """Date labels for the balance chart's x axis.

    All distinct dates when they fit into ``label_count``; otherwise every
    ``len // label_count``-th date, always ending with the latest date.
    """

    dates = sorted({r.date for r in manager.get_all()})
    if not dates:
        return []
    if len(dates) <= label_count:
        return [format_date(d) for d in dates]

    step = max(1, len(dates) // max(1, label_count))
    labels = [format_date(d) for d in dates[::step]]
    last = format_date(dates[-1])
    if labels[-1] != last:
        labels.append(last)
    return labels


def y_bounds(series: list[tuple[date, float]]) -> tuple[float, float]:
    if not series:
        return 0.0, 0.0
    values = [v for _, v in series]
    return min(values), max(values)


__all__ = ["balance_series", "category_bars", "x_labels", "y_bounds"]
