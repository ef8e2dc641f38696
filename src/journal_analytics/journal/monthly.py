"""Monthly breakdowns: strategy x month matrix and percent-return table.

The matrix keeps *missing* cells (``None``: no trades that month) apart
from cells whose trades happen to net to exactly zero.  The percent table
does the same for months without trades ("no data", not ``0%``).

Usage::

    matrix = monthly_strategy_matrix(records)
    matrix.cell("Apollo", "2024-03")    # MonthlyCell(result=..., trades=..., wins=...)
    table = monthly_return_table(records, capital_base=10_000)
    table[0].months[2]                  # percent for March, or None
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Sequence

from .numeric import safe_div
from .record import TradeRecord

logger = logging.getLogger(__name__)


@dataclass
class MonthlyCell:
    """Accumulated trades of one (strategy, month) cell."""

    result: float = 0.0
    trades: int = 0
    wins: int = 0

    def add(self, other: "MonthlyCell") -> None:
        self.result += other.result
        self.trades += other.trades
        self.wins += other.wins

    @property
    def win_rate(self) -> float:
        return safe_div(self.wins, self.trades) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "result": self.result,
            "trades": self.trades,
            "wins": self.wins,
            "win_rate": self.win_rate,
        }


@dataclass(frozen=True)
class MonthlyStrategyMatrix:
    """Strategies (rows, sorted) by ``YYYY-MM`` months (columns, sorted)."""

    strategies: tuple[str, ...] = ()
    months: tuple[str, ...] = ()
    cells: dict[str, dict[str, MonthlyCell]] = field(default_factory=dict)
    row_totals: dict[str, MonthlyCell] = field(default_factory=dict)
    column_totals: dict[str, MonthlyCell] = field(default_factory=dict)
    grand_total: MonthlyCell = field(default_factory=MonthlyCell)

    def cell(self, strategy: str, month: str) -> MonthlyCell | None:
        """The cell, or ``None`` when the strategy had no trades that month."""
        return self.cells.get(strategy, {}).get(month)

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategies": list(self.strategies),
            "months": list(self.months),
            "rows": {
                s: {
                    m: (c.to_dict() if (c := self.cell(s, m)) is not None else None)
                    for m in self.months
                }
                for s in self.strategies
            },
            "row_totals": {s: c.to_dict() for s, c in self.row_totals.items()},
            "column_totals": {m: c.to_dict() for m, c in self.column_totals.items()},
            "grand_total": self.grand_total.to_dict(),
        }


def monthly_strategy_matrix(records: Sequence[TradeRecord]) -> MonthlyStrategyMatrix:
    """Sum, trade count and win count per (strategy, month)."""
    cells: dict[str, dict[str, MonthlyCell]] = defaultdict(dict)
    for trade in records:
        cell = cells[trade.strategy].setdefault(trade.month_key, MonthlyCell())
        cell.result += trade.result
        cell.trades += 1
        if trade.result > 0:
            cell.wins += 1

    strategies = tuple(sorted(cells))
    months = tuple(sorted({m for row in cells.values() for m in row}))

    row_totals: dict[str, MonthlyCell] = {}
    column_totals: dict[str, MonthlyCell] = {m: MonthlyCell() for m in months}
    grand = MonthlyCell()
    for strategy in strategies:
        total = MonthlyCell()
        for month in months:
            cell = cells[strategy].get(month)
            if cell is None:
                continue
            total.add(cell)
            column_totals[month].add(cell)
        row_totals[strategy] = total
        grand.add(total)

    return MonthlyStrategyMatrix(
        strategies=strategies,
        months=months,
        cells={s: dict(sorted(cells[s].items())) for s in strategies},
        row_totals=row_totals,
        column_totals=column_totals,
        grand_total=grand,
    )


# ---------------------------------------------------------------------- #
# Percent return                                                           #
# ---------------------------------------------------------------------- #

@dataclass(frozen=True)
class YearReturns:
    """Monthly percent returns for one calendar year.

    ``months`` has twelve entries, January first; ``None`` marks a month
    with no recorded trades.
    """

    year: str
    months: tuple[float | None, ...]
    accumulated: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "months": list(self.months),
            "accumulated": self.accumulated,
        }


def monthly_return_table(
    records: Sequence[TradeRecord],
    capital_base: float = 10_000.0,
) -> list[YearReturns]:
    """Percent return per month on a running notional capital, newest year first.

    Each year restarts from *capital_base*.  A month's percentage is taken
    against the capital at the start of that month; the year's total
    compounds the monthly percentages.
    """
    by_year: dict[str, dict[int, float]] = defaultdict(dict)
    for trade in records:
        year, month = trade.date[:4], int(trade.date[5:7])
        by_year[year][month] = by_year[year].get(month, 0.0) + trade.result

    table: list[YearReturns] = []
    for year in sorted(by_year, reverse=True):
        months = by_year[year]
        capital = capital_base
        compounded = 1.0
        pcts: list[float | None] = []

        for m in range(1, 13):
            if m not in months:
                pcts.append(None)
                continue
            result = months[m]
            pct = result / capital * 100 if capital > 0 else 0.0
            pcts.append(pct)
            compounded *= 1 + pct / 100
            capital += result

        table.append(YearReturns(
            year=year,
            months=tuple(pcts),
            accumulated=(compounded - 1) * 100,
        ))
    return table
