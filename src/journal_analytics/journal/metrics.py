"""Risk-adjusted return and trade distribution metrics.

Two inputs feed a snapshot:

- the ordered **daily** series, for the Sharpe-style ratio and drawdown;
- the raw **per-trade** results, for win/loss statistics.  These are never
  derived from daily sums, since one day can hold winners and losers that
  cancel out.

Every ratio goes through the helpers in :mod:`.numeric`; only the profit
factor may surface as ``float("inf")``.

Usage::

    snap = compute_metrics(records)
    print(snap.sharpe_ratio, snap.profit_factor, snap.current_streak)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Sequence

from journal_analytics.core.enums import TradeOutcome

from .daily import aggregate, by_date, daily_results
from .equity import EquityCurve, avg_drawdown_duration, build_equity_curve
from .numeric import (
    finite_or_zero,
    mean,
    population_std,
    ratio_or_infinite,
    safe_div,
)
from .record import TradeRecord, chronological

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Scalar performance summary of one record set.

    Rates are 0-100 scaled.  ``avg_loss`` and ``gross_loss`` are magnitudes.
    ``current_streak`` is positive for a trailing run of wins, negative for
    losses and zero after a break-even trade.
    """

    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    breakeven_trades: int = 0
    trading_days: int = 0
    total_result: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    total_costs: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    recovery_factor: float = 0.0
    win_rate: float = 0.0
    loss_rate: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    payoff_ratio: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    current_streak: int = 0
    max_consecutive_wins: int = 0
    max_consecutive_losses: int = 0
    avg_drawdown_duration: float = 0.0

    @property
    def has_infinite_profit_factor(self) -> bool:
        return self.profit_factor == float("inf")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["profit_factor_infinite"] = self.has_infinite_profit_factor
        return data


# ---------------------------------------------------------------------- #
# Individual metrics                                                       #
# ---------------------------------------------------------------------- #

def sharpe_ratio(daily_values: Sequence[float]) -> float:
    """Mean over population standard deviation of daily results."""
    std = population_std(daily_values)
    if std == 0:
        return 0.0
    return finite_or_zero(mean(daily_values) / std)


def profit_factor(results: Sequence[float]) -> float:
    gains = sum(r for r in results if r > 0)
    losses = abs(sum(r for r in results if r < 0))
    return ratio_or_infinite(gains, losses)


def expectancy(results: Sequence[float]) -> float:
    """``win_rate * avg_win - loss_rate * avg_loss`` over all trades.

    Break-even trades only dilute both rates through the denominator.
    """
    total = len(results)
    if total == 0:
        return 0.0
    wins = [r for r in results if r > 0]
    losses = [abs(r) for r in results if r < 0]
    win_rate = len(wins) / total
    loss_rate = len(losses) / total
    return finite_or_zero(win_rate * mean(wins) - loss_rate * mean(losses))


def recovery_factor(total_result: float, max_drawdown: float) -> float:
    return safe_div(total_result, max_drawdown)


def current_streak(records: Sequence[TradeRecord]) -> int:
    """Signed length of the trailing win/loss run.

    Trades are scanned in (date, time, input order).  A break-even trade
    at the end yields ``0``.
    """
    ordered = chronological(records)
    if not ordered:
        return 0

    last = ordered[-1].outcome
    if last == TradeOutcome.BREAKEVEN:
        return 0

    streak = 0
    for record in reversed(ordered):
        if record.outcome != last:
            break
        streak += 1
    return streak if last == TradeOutcome.WIN else -streak


def max_consecutive(records: Sequence[TradeRecord], outcome: TradeOutcome) -> int:
    """Longest run of *outcome* in chronological order."""
    longest = 0
    run = 0
    for record in chronological(records):
        if record.outcome == outcome:
            run += 1
            if run > longest:
                longest = run
        else:
            run = 0
    return longest


def max_consecutive_losses(records: Sequence[TradeRecord]) -> int:
    return max_consecutive(records, TradeOutcome.LOSS)


# ---------------------------------------------------------------------- #
# Snapshot                                                                 #
# ---------------------------------------------------------------------- #

def compute_metrics(
    records: Sequence[TradeRecord],
    curve: EquityCurve | None = None,
) -> MetricsSnapshot:
    """Compute the full metrics snapshot.

    Parameters
    ----------
    records : Sequence[TradeRecord]
        Normalized trades, any order.
    curve : EquityCurve | None
        Pre-built whole-portfolio curve for *records*.  Built here when
        not supplied.
    """
    if not records:
        return MetricsSnapshot()

    if curve is None:
        curve = build_equity_curve(daily_results(records))

    results = [r.result for r in records]
    wins = [r for r in results if r > 0]
    losses = [abs(r) for r in results if r < 0]
    total = len(results)
    total_result = sum(results)

    avg_win = mean(wins)
    avg_loss = mean(losses)

    return MetricsSnapshot(
        total_trades=total,
        winning_trades=len(wins),
        losing_trades=len(losses),
        breakeven_trades=total - len(wins) - len(losses),
        trading_days=len(curve.points),
        total_result=total_result,
        gross_profit=sum(wins),
        gross_loss=sum(losses),
        total_costs=sum(r.costs for r in records),
        sharpe_ratio=sharpe_ratio(curve.daily_values),
        max_drawdown=curve.max_drawdown,
        profit_factor=profit_factor(results),
        expectancy=expectancy(results),
        recovery_factor=recovery_factor(total_result, curve.max_drawdown),
        win_rate=safe_div(len(wins), total) * 100,
        loss_rate=safe_div(len(losses), total) * 100,
        avg_win=avg_win,
        avg_loss=avg_loss,
        payoff_ratio=safe_div(avg_win, avg_loss),
        best_trade=max(results),
        worst_trade=min(results),
        current_streak=current_streak(records),
        max_consecutive_wins=max_consecutive(records, TradeOutcome.WIN),
        max_consecutive_losses=max_consecutive(records, TradeOutcome.LOSS),
        avg_drawdown_duration=avg_drawdown_duration(curve),
    )


def metrics_by_strategy(records: Sequence[TradeRecord]) -> dict[str, MetricsSnapshot]:
    """One snapshot per strategy label, sorted by label."""
    grouped: dict[str, list[TradeRecord]] = {}
    for record in records:
        grouped.setdefault(record.strategy, []).append(record)
    return {s: compute_metrics(grouped[s]) for s in sorted(grouped)}


@dataclass(frozen=True)
class DayPerformance:
    date: str
    result: float
    trades: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def top_days(
    records: Sequence[TradeRecord], n: int = 5
) -> tuple[list[DayPerformance], list[DayPerformance]]:
    """Best and worst *n* trading days by net result.

    Equal results keep chronological order.
    """
    counts: dict[str, int] = {}
    for record in records:
        counts[record.date] = counts.get(record.date, 0) + 1

    days = [
        DayPerformance(date=day, result=total, trades=counts[day])
        for day, total in aggregate(records, by_date)
    ]
    best = sorted(days, key=lambda d: -d.result)[:n]
    worst = sorted(days, key=lambda d: d.result)[:n]
    return best, worst
