"""Equity curve and peak-to-trough drawdown.

Walks the chronologically ordered daily buckets once, tracking the
cumulative result and the running high-water mark.  The high-water mark
starts at zero: a series that never makes money still has a drawdown,
measured from the starting point.

Example::

    curve = build_equity_curve([("d1", 100.0), ("d2", -40.0), ("d3", 60.0)])
    [p.cumulative_result for p in curve.points]  # [100.0, 60.0, 120.0]
    curve.max_drawdown                            # 40.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from .daily import daily_results_by_strategy, trading_dates
from .numeric import mean
from .record import TradeRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquityPoint:
    """One daily step on the equity curve."""

    date: str
    daily_result: float
    cumulative_result: float
    peak: float
    drawdown: float

    @property
    def drawdown_pct(self) -> float | None:
        """Drawdown relative to the peak, 0-100 scaled.

        ``None`` while the peak is not positive: there is no base to
        express a percentage against.
        """
        if self.peak <= 0:
            return None
        return self.drawdown / abs(self.peak) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "daily_result": self.daily_result,
            "cumulative_result": self.cumulative_result,
            "peak": self.peak,
            "drawdown": self.drawdown,
        }


@dataclass(frozen=True)
class EquityCurve:
    points: tuple[EquityPoint, ...] = ()
    max_drawdown: float = 0.0

    @property
    def final_result(self) -> float:
        return self.points[-1].cumulative_result if self.points else 0.0

    @property
    def peak(self) -> float:
        return self.points[-1].peak if self.points else 0.0

    @property
    def daily_values(self) -> list[float]:
        return [p.daily_result for p in self.points]

    @property
    def max_drawdown_pct(self) -> float | None:
        """Largest percent drawdown over points with a positive peak."""
        pcts = [p.drawdown_pct for p in self.points if p.drawdown_pct is not None]
        return max(pcts) if pcts else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [p.to_dict() for p in self.points],
            "max_drawdown": self.max_drawdown,
            "final_result": self.final_result,
        }


def build_equity_curve(daily: Iterable[tuple[str, float]]) -> EquityCurve:
    """Cumulative equity and max drawdown from ordered daily totals."""
    accumulated = 0.0
    peak = 0.0
    max_dd = 0.0
    points: list[EquityPoint] = []

    for day, result in daily:
        accumulated += result
        if accumulated > peak:
            peak = accumulated
        dd = peak - accumulated
        if dd > max_dd:
            max_dd = dd
        points.append(EquityPoint(
            date=day,
            daily_result=result,
            cumulative_result=accumulated,
            peak=peak,
            drawdown=dd,
        ))

    return EquityCurve(points=tuple(points), max_drawdown=max_dd)


def drawdown_periods(curve: EquityCurve) -> list[int]:
    """Length in trading days of each drawdown episode.

    An episode opens on the first day below the running peak and closes on
    the day a new peak is set; the duration is the number of buckets between
    those two days.  An episode still open at the end is counted up to the
    last bucket.
    """
    durations: list[int] = []
    start: int | None = None
    peak = 0.0

    for i, point in enumerate(curve.points):
        value = point.cumulative_result
        if value > peak:
            if start is not None:
                durations.append(i - start)
                start = None
            peak = value
        elif value < peak and start is None:
            start = i

    if start is not None:
        durations.append(len(curve.points) - 1 - start)
    return durations


def avg_drawdown_duration(curve: EquityCurve) -> float:
    return mean(drawdown_periods(curve))


@dataclass(frozen=True)
class StrategyEvolution:
    """Per-strategy cumulative result on a shared date axis."""

    dates: tuple[str, ...] = ()
    series: dict[str, tuple[float, ...]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dates": list(self.dates),
            "series": {k: list(v) for k, v in self.series.items()},
        }


def strategy_evolution(records: Sequence[TradeRecord]) -> StrategyEvolution:
    """Cumulative curve per strategy, days without trades carry forward."""
    dates = trading_dates(records)
    per_strategy = daily_results_by_strategy(records)

    series: dict[str, tuple[float, ...]] = {}
    for strategy in sorted(per_strategy):
        daily = per_strategy[strategy]
        accumulated = 0.0
        values: list[float] = []
        for day in dates:
            accumulated += daily.get(day, 0.0)
            values.append(accumulated)
        series[strategy] = tuple(values)

    return StrategyEvolution(dates=tuple(dates), series=series)
