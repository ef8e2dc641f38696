"""Time-of-day and day-of-week performance analysis.

Breaks down trading performance by hour and weekday to reveal temporal
patterns, and derives the intraday views used for session planning:

- **intraday decay**: the cumulative sum of *per-hour mean results* across
  the trading window.  Its peak marks the hour after which staying in the
  market has historically given back gains.
- **position sizing**: per-hour recommended gain target and stop, taken
  from (date, hour) result buckets, plus the average margin tied up.
- **weekday x hour heatmap**: result per (weekday, hour) slot, Monday to
  Friday across the trading window.
- **best buckets**: for one strategy, the profitable hours, weekdays and
  months ranked by result.

Usage::

    decay = intraday_decay(records, HourlyConfig())
    print(decay.peak_hour, decay.decay, decay.has_decay)
    sizing = position_sizing(records, HourlyConfig())
    print(sizing.hours[0].stop, sizing.summary.overall_gain)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Sequence

from journal_analytics.core.config import HourlyConfig

from .daily import aggregate, by_date_hour
from .numeric import round_half_up, safe_div
from .record import TradeRecord

logger = logging.getLogger(__name__)

DAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

NO_DECAY_LABEL = "no decay"


@dataclass
class BucketStats:
    """Accumulator for a time bucket."""

    trades: int = 0
    wins: int = 0
    losses: int = 0
    total: float = 0.0

    def record(self, trade: TradeRecord) -> None:
        self.trades += 1
        self.total += trade.result
        if trade.result > 0:
            self.wins += 1
        elif trade.result < 0:
            self.losses += 1

    @property
    def avg(self) -> float:
        return safe_div(self.total, self.trades)

    def to_dict(self) -> dict[str, Any]:
        if self.trades == 0:
            return {"trades": 0}
        return {
            "trades": self.trades,
            "wins": self.wins,
            "losses": self.losses,
            "total_result": self.total,
            "avg_result": self.avg,
            "win_rate": self.wins / self.trades * 100,
        }


@dataclass(frozen=True)
class TimeBreakdown:
    """Per-bucket stats with the best and worst bucket by mean result."""

    buckets: dict[Any, dict[str, Any]] = field(default_factory=dict)
    best: Any = None
    worst: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"buckets": self.buckets, "best": self.best, "worst": self.worst}


def _breakdown(stats: dict[Any, BucketStats]) -> TimeBreakdown:
    if not stats:
        return TimeBreakdown()
    # max/min keep the first key on ties; keys are already in display order
    best = max(stats, key=lambda k: stats[k].avg)
    worst = min(stats, key=lambda k: stats[k].avg)
    return TimeBreakdown(
        buckets={k: s.to_dict() for k, s in stats.items()},
        best=best,
        worst=worst,
    )


def hourly_stats(records: Sequence[TradeRecord]) -> TimeBreakdown:
    """Performance per hour of day (0-23), trades without a time skipped."""
    by_hour: dict[int, BucketStats] = defaultdict(BucketStats)
    for trade in records:
        if trade.hour is not None:
            by_hour[trade.hour].record(trade)
    return _breakdown(dict(sorted(by_hour.items())))


def weekday_stats(records: Sequence[TradeRecord]) -> TimeBreakdown:
    """Performance per day of week, Monday first."""
    by_day: dict[int, BucketStats] = defaultdict(BucketStats)
    for trade in records:
        by_day[date.fromisoformat(trade.date).weekday()].record(trade)
    return _breakdown({DAY_NAMES[d]: by_day[d] for d in sorted(by_day)})


# ---------------------------------------------------------------------- #
# Intraday decay                                                           #
# ---------------------------------------------------------------------- #

@dataclass(frozen=True)
class HourPoint:
    hour: int
    trades: int
    avg_result: float
    accumulated: float


@dataclass(frozen=True)
class IntradayDecay:
    """Cumulative-of-means curve across the trading window.

    Hours without trades appear with ``trades == 0`` and carry the
    accumulator forward unchanged.
    """

    points: tuple[HourPoint, ...] = ()
    best_hour: int | None = None
    worst_hour: int | None = None
    peak_hour: int | None = None
    peak_value: float = 0.0
    final_value: float = 0.0

    @property
    def decay(self) -> float:
        return self.peak_value - self.final_value

    @property
    def has_decay(self) -> bool:
        return self.decay > 0

    @property
    def decay_label(self) -> str | float:
        """Decay amount, or ``"no decay"`` when nothing was given back."""
        return self.decay if self.has_decay else NO_DECAY_LABEL

    def to_dict(self) -> dict[str, Any]:
        return {
            "points": [
                {
                    "hour": p.hour,
                    "trades": p.trades,
                    "avg_result": p.avg_result,
                    "accumulated": p.accumulated,
                }
                for p in self.points
            ],
            "best_hour": self.best_hour,
            "worst_hour": self.worst_hour,
            "peak_hour": self.peak_hour,
            "peak_value": self.peak_value,
            "final_value": self.final_value,
            "decay": self.decay,
            "has_decay": self.has_decay,
        }


def _in_window(hour: int | None, config: HourlyConfig) -> bool:
    return hour is not None and config.start_hour <= hour <= config.end_hour


def intraday_decay(
    records: Sequence[TradeRecord],
    config: HourlyConfig | None = None,
) -> IntradayDecay:
    """Build the cumulative-of-means series across trading hours."""
    config = config or HourlyConfig()

    by_hour: dict[int, BucketStats] = defaultdict(BucketStats)
    for trade in records:
        if _in_window(trade.hour, config):
            by_hour[trade.hour].record(trade)

    if not by_hour:
        return IntradayDecay()

    points: list[HourPoint] = []
    accumulated = 0.0
    best: tuple[int, float] | None = None
    worst: tuple[int, float] | None = None
    peak: tuple[int, float] | None = None

    for hour in range(config.start_hour, config.end_hour + 1):
        stats = by_hour.get(hour)
        if stats is None:
            points.append(HourPoint(hour=hour, trades=0, avg_result=0.0, accumulated=accumulated))
            continue

        avg = stats.avg
        accumulated += avg
        if best is None or avg > best[1]:
            best = (hour, avg)
        if worst is None or avg < worst[1]:
            worst = (hour, avg)
        if peak is None or accumulated > peak[1]:
            peak = (hour, accumulated)
        points.append(HourPoint(
            hour=hour, trades=stats.trades, avg_result=avg, accumulated=accumulated,
        ))

    return IntradayDecay(
        points=tuple(points),
        best_hour=best[0],
        worst_hour=worst[0],
        peak_hour=peak[0],
        peak_value=peak[1],
        final_value=accumulated,
    )


# ---------------------------------------------------------------------- #
# Position sizing                                                          #
# ---------------------------------------------------------------------- #

@dataclass(frozen=True)
class HourSizing:
    """Recommendations for one hour, in whole currency units."""

    hour: int
    avg_margin: float
    gain: float
    stop: float
    payoff: float
    win_days: int
    loss_days: int


@dataclass(frozen=True)
class SizingSummary:
    avg_margin: float = 0.0
    avg_contracts_per_day: float = 0.0
    overall_stop: float = 0.0
    overall_gain: float = 0.0


@dataclass(frozen=True)
class PositionSizing:
    hours: tuple[HourSizing, ...] = ()
    summary: SizingSummary = field(default_factory=SizingSummary)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hours": [asdict(h) for h in self.hours],
            "summary": asdict(self.summary),
        }


@dataclass
class _HourAccumulator:
    margin_sum: float = 0.0
    margin_count: int = 0
    gain_sum: float = 0.0
    gain_count: int = 0
    loss_sum: float = 0.0
    loss_count: int = 0

    @property
    def empty(self) -> bool:
        return self.margin_count == 0 and self.gain_count == 0 and self.loss_count == 0


def position_sizing(
    records: Sequence[TradeRecord],
    config: HourlyConfig | None = None,
) -> PositionSizing:
    """Per-hour gain target, stop and margin recommendations.

    Results are first summed per (date, hour); a bucket counts as a gain
    day or loss day for that hour by its sign.  The stop is the mean loss
    magnitude inflated by ``config.stop_safety_margin``.
    """
    config = config or HourlyConfig()
    if not records:
        return PositionSizing()

    in_window = [r for r in records if _in_window(r.hour, config)]

    contracts: dict[tuple[str, int], float] = defaultdict(float)
    for trade in in_window:
        contracts[(trade.date, trade.hour)] += trade.contracts

    acc: dict[int, _HourAccumulator] = defaultdict(_HourAccumulator)
    for (_, hour), total in contracts.items():
        acc[hour].margin_sum += total * config.margin_per_contract
        acc[hour].margin_count += 1

    for (_, hour), result in aggregate(in_window, by_date_hour):
        if result > 0:
            acc[hour].gain_sum += result
            acc[hour].gain_count += 1
        elif result < 0:
            acc[hour].loss_sum += result
            acc[hour].loss_count += 1

    hours: list[HourSizing] = []
    for hour in range(config.start_hour, config.end_hour + 1):
        h = acc.get(hour)
        if h is None or h.empty:
            continue
        gain = round_half_up(safe_div(h.gain_sum, h.gain_count))
        stop = round_half_up(
            abs(safe_div(h.loss_sum, h.loss_count)) * config.stop_safety_margin
        )
        hours.append(HourSizing(
            hour=hour,
            avg_margin=round_half_up(safe_div(h.margin_sum, h.margin_count)),
            gain=gain,
            stop=stop,
            payoff=round_half_up(safe_div(gain, stop), 2),
            win_days=h.gain_count,
            loss_days=h.loss_count,
        ))

    unique_days = len({r.date for r in records})
    total_contracts = sum(r.contracts for r in records)
    gains = [h.gain for h in hours if h.gain > 0]
    stops = [h.stop for h in hours if h.stop > 0]

    summary = SizingSummary(
        avg_margin=round_half_up(safe_div(sum(h.avg_margin for h in hours), len(hours))),
        avg_contracts_per_day=round_half_up(safe_div(total_contracts, unique_days), 1),
        overall_stop=round_half_up(safe_div(sum(stops), len(stops))),
        overall_gain=round_half_up(safe_div(sum(gains), len(gains))),
    )
    logger.debug("Position sizing over %d hours, %d trading days", len(hours), unique_days)
    return PositionSizing(hours=tuple(hours), summary=summary)


# ---------------------------------------------------------------------- #
# Weekday x hour heatmap                                                   #
# ---------------------------------------------------------------------- #

TRADING_WEEKDAYS = 5  # Monday to Friday


@dataclass(frozen=True)
class HeatCell:
    weekday: str
    hour: int
    trades: int = 0
    total_result: float = 0.0
    avg_result: float = 0.0


@dataclass(frozen=True)
class WeekdayHourMatrix:
    """Result per (weekday, hour) slot over the trading window.

    Every slot of the grid is present, Monday first; slots without trades
    have ``trades == 0``.  ``best`` and ``worst`` rank slots with trades by
    total result, the earliest slot winning ties.
    """

    weekdays: tuple[str, ...] = ()
    hours: tuple[int, ...] = ()
    cells: tuple[HeatCell, ...] = ()
    best: HeatCell | None = None
    worst: HeatCell | None = None

    def cell(self, weekday: str, hour: int) -> HeatCell | None:
        for c in self.cells:
            if c.weekday == weekday and c.hour == hour:
                return c
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekdays": list(self.weekdays),
            "hours": list(self.hours),
            "cells": [asdict(c) for c in self.cells],
            "best": asdict(self.best) if self.best else None,
            "worst": asdict(self.worst) if self.worst else None,
        }


def weekday_hour_matrix(
    records: Sequence[TradeRecord],
    config: HourlyConfig | None = None,
) -> WeekdayHourMatrix:
    """Bucket trades by (weekday, hour); weekend and off-window trades are dropped."""
    config = config or HourlyConfig()

    slots: dict[tuple[int, int], BucketStats] = defaultdict(BucketStats)
    for trade in records:
        weekday = date.fromisoformat(trade.date).weekday()
        if weekday < TRADING_WEEKDAYS and _in_window(trade.hour, config):
            slots[(weekday, trade.hour)].record(trade)

    hours = tuple(range(config.start_hour, config.end_hour + 1))
    cells: list[HeatCell] = []
    best: HeatCell | None = None
    worst: HeatCell | None = None

    for weekday in range(TRADING_WEEKDAYS):
        for hour in hours:
            stats = slots.get((weekday, hour))
            if stats is None:
                cells.append(HeatCell(weekday=DAY_NAMES[weekday], hour=hour))
                continue
            cell = HeatCell(
                weekday=DAY_NAMES[weekday],
                hour=hour,
                trades=stats.trades,
                total_result=stats.total,
                avg_result=stats.avg,
            )
            cells.append(cell)
            if best is None or cell.total_result > best.total_result:
                best = cell
            if worst is None or cell.total_result < worst.total_result:
                worst = cell

    return WeekdayHourMatrix(
        weekdays=tuple(DAY_NAMES[:TRADING_WEEKDAYS]),
        hours=hours,
        cells=tuple(cells),
        best=best,
        worst=worst,
    )


# ---------------------------------------------------------------------- #
# Best buckets per strategy                                                #
# ---------------------------------------------------------------------- #

@dataclass(frozen=True)
class BucketRank:
    """One profitable bucket: an hour (int), weekday name or month (1-12)."""

    value: int | str
    result: float
    win_rate: float
    trades: int


@dataclass(frozen=True)
class BestBuckets:
    """Profitable hours, weekdays and months of one strategy, best first."""

    strategy: str
    trades: int = 0
    total_result: float = 0.0
    hours: tuple[BucketRank, ...] = ()
    weekdays: tuple[BucketRank, ...] = ()
    months: tuple[BucketRank, ...] = ()

    @property
    def estimated_result(self) -> float:
        """Sum of the profitable buckets across all three dimensions."""
        return sum(b.result for b in (*self.hours, *self.weekdays, *self.months))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["estimated_result"] = self.estimated_result
        return data


def _ranked(stats: dict[Any, BucketStats]) -> tuple[BucketRank, ...]:
    # Stable sort: equal results keep the key order of *stats*
    positive = sorted(
        ((key, s) for key, s in stats.items() if s.total > 0),
        key=lambda item: -item[1].total,
    )
    return tuple(
        BucketRank(
            value=key,
            result=s.total,
            win_rate=s.wins / s.trades * 100,
            trades=s.trades,
        )
        for key, s in positive
    )


def best_buckets(records: Sequence[TradeRecord], strategy: str) -> BestBuckets:
    """Rank the hours, weekdays and months where *strategy* made money."""
    by_hour: dict[int, BucketStats] = defaultdict(BucketStats)
    by_day: dict[int, BucketStats] = defaultdict(BucketStats)
    by_month: dict[int, BucketStats] = defaultdict(BucketStats)
    trades = 0
    total = 0.0

    for trade in records:
        if trade.strategy != strategy:
            continue
        trades += 1
        total += trade.result
        if trade.hour is not None:
            by_hour[trade.hour].record(trade)
        by_day[date.fromisoformat(trade.date).weekday()].record(trade)
        by_month[int(trade.date[5:7])].record(trade)

    return BestBuckets(
        strategy=strategy,
        trades=trades,
        total_result=total,
        hours=_ranked(dict(sorted(by_hour.items()))),
        weekdays=_ranked({DAY_NAMES[d]: by_day[d] for d in sorted(by_day)}),
        months=_ranked(dict(sorted(by_month.items()))),
    )


def best_buckets_by_strategy(records: Sequence[TradeRecord]) -> dict[str, BestBuckets]:
    """:func:`best_buckets` for every labelled strategy, sorted by label."""
    labels = sorted({r.strategy for r in records if r.has_strategy})
    return {s: best_buckets(records, s) for s in labels}
