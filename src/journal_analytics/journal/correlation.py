"""Cross-strategy correlation analysis.

Measures how strategy daily results co-move.  High positive correlation
between strategies means less diversification benefit; negative
correlation is ideal for portfolio construction.

Every strategy series is aligned on the same date axis (days where the
strategy did not trade contribute 0), then Pearson's r is computed once
per unordered pair and mirrored, so ``get(a, b) == get(b, a)`` exactly.

Usage::

    matrix = correlation_matrix(records)
    if not matrix.insufficient_data:
        print(matrix.get("Apollo", "Orion"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from .daily import daily_results_by_strategy, trading_dates
from .numeric import pearson
from .record import TradeRecord

logger = logging.getLogger(__name__)

MIN_STRATEGIES = 2


@dataclass(frozen=True)
class CorrelationMatrix:
    """Symmetric Pearson matrix indexed by sorted strategy labels."""

    strategies: tuple[str, ...] = ()
    values: tuple[tuple[float, ...], ...] = ()
    dates: tuple[str, ...] = ()

    @property
    def insufficient_data(self) -> bool:
        return len(self.strategies) < MIN_STRATEGIES

    def get(self, a: str, b: str) -> float:
        i = self.strategies.index(a)
        j = self.strategies.index(b)
        return self.values[i][j]

    def pairs(self) -> dict[str, float]:
        """Off-diagonal upper-triangle entries keyed ``"a|b"``."""
        out: dict[str, float] = {}
        for i, a in enumerate(self.strategies):
            for j in range(i + 1, len(self.strategies)):
                out[f"{a}|{self.strategies[j]}"] = self.values[i][j]
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategies": list(self.strategies),
            "matrix": [list(row) for row in self.values],
            "data_days": len(self.dates),
            "insufficient_data": self.insufficient_data,
        }


def correlation_matrix(records: Sequence[TradeRecord]) -> CorrelationMatrix:
    """Pearson correlation of daily results between labelled strategies.

    Trades without a strategy label take no part.  Fewer than two labelled
    strategies yields an empty matrix flagged ``insufficient_data``.
    """
    labelled = [r for r in records if r.has_strategy]
    per_strategy = daily_results_by_strategy(labelled)
    strat_ids = sorted(per_strategy)

    if len(strat_ids) < MIN_STRATEGIES:
        logger.debug("Correlation needs %d strategies, got %d", MIN_STRATEGIES, len(strat_ids))
        return CorrelationMatrix(strategies=tuple(strat_ids))

    dates = trading_dates(labelled)
    series = {
        sid: [per_strategy[sid].get(d, 0.0) for d in dates]
        for sid in strat_ids
    }

    n = len(strat_ids)
    grid = [[0.0] * n for _ in range(n)]
    for i in range(n):
        grid[i][i] = 1.0
        for j in range(i + 1, n):
            r = pearson(series[strat_ids[i]], series[strat_ids[j]])
            grid[i][j] = r
            grid[j][i] = r

    return CorrelationMatrix(
        strategies=tuple(strat_ids),
        values=tuple(tuple(row) for row in grid),
        dates=tuple(dates),
    )
