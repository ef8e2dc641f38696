"""Daily aggregation: the fold every time-series view starts from.

``aggregate`` groups records by a projected key and sums ``result`` per
bucket.  Keys are ISO date strings, optionally paired with a strategy
label or an hour, so sorting the keys gives chronological order first and
the secondary dimension second.

Usage::

    daily = aggregate(records, by_date)
    # [("2024-01-02", 150.0), ("2024-01-03", -40.0), ...]
    per_strategy = aggregate(records, by_date_strategy)
    # [(("2024-01-02", "Apollo"), 100.0), (("2024-01-02", "Orion"), 50.0), ...]
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Hashable, Iterable, TypeVar

from .record import TradeRecord

K = TypeVar("K", bound=Hashable)


def by_date(record: TradeRecord) -> str:
    return record.date


def by_date_strategy(record: TradeRecord) -> tuple[str, str]:
    return (record.date, record.strategy)


def by_date_hour(record: TradeRecord) -> tuple[str, int] | None:
    hour = record.hour
    if hour is None:
        return None
    return (record.date, hour)


def by_month(record: TradeRecord) -> str:
    return record.month_key


def aggregate(
    records: Iterable[TradeRecord],
    key_fn: Callable[[TradeRecord], K | None],
) -> list[tuple[K, float]]:
    """Sum ``result`` per projected key, sorted by key.

    A projection returning ``None`` drops the record from this fold.

    Records sharing a key merge by addition.  Empty input yields ``[]``.
    """
    totals: dict[K, float] = defaultdict(float)
    for record in records:
        key = key_fn(record)
        if key is None:
            continue
        totals[key] += record.result
    return sorted(totals.items(), key=lambda item: item[0])


def daily_results(records: Iterable[TradeRecord]) -> list[tuple[str, float]]:
    """Whole-portfolio daily totals in chronological order."""
    return aggregate(records, by_date)


def daily_results_by_strategy(
    records: Iterable[TradeRecord],
) -> dict[str, dict[str, float]]:
    """``{strategy: {date: total}}`` built from the (date, strategy) fold."""
    nested: dict[str, dict[str, float]] = defaultdict(dict)
    for (day, strategy), total in aggregate(records, by_date_strategy):
        nested[strategy][day] = total
    return dict(nested)


def trading_dates(records: Iterable[TradeRecord]) -> list[str]:
    """Sorted distinct dates with at least one trade."""
    return sorted({r.date for r in records})
