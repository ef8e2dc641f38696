"""Analytics engine: the single entry point every dashboard view calls.

Holds configuration only; every call normalizes the record set it is
given and recomputes from scratch, so two views asking for "the same"
statistic always agree and concurrent calls share nothing mutable.

Usage::

    engine = AnalyticsEngine(load_settings("configs/analytics.toml"))
    report = engine.dashboard(rows_from_store)
    print(report.metrics.sharpe_ratio, len(report.alerts), report.skipped)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from journal_analytics.core.config import Settings
from journal_analytics.observability.logger import get_logger, new_run_id

from .alerts import RiskAlert, evaluate_alerts
from .correlation import CorrelationMatrix, correlation_matrix
from .daily import daily_results
from .equity import EquityCurve, StrategyEvolution, build_equity_curve, strategy_evolution
from .metrics import DayPerformance, MetricsSnapshot, compute_metrics, metrics_by_strategy, top_days
from .monthly import MonthlyStrategyMatrix, YearReturns, monthly_return_table, monthly_strategy_matrix
from .record import NormalizedBatch, normalize_records
from .session_analysis import (
    BestBuckets,
    IntradayDecay,
    PositionSizing,
    TimeBreakdown,
    WeekdayHourMatrix,
    best_buckets,
    best_buckets_by_strategy,
    hourly_stats,
    intraday_decay,
    position_sizing,
    weekday_hour_matrix,
    weekday_stats,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardReport:
    """Every view of one record set, computed in a single pass."""

    total_records: int
    skipped: int
    skip_reasons: dict[str, int]
    equity: EquityCurve
    metrics: MetricsSnapshot
    metrics_by_strategy: dict[str, MetricsSnapshot]
    best_days: list[DayPerformance]
    worst_days: list[DayPerformance]
    evolution: StrategyEvolution
    hourly: TimeBreakdown
    weekday: TimeBreakdown
    intraday: IntradayDecay
    sizing: PositionSizing
    monthly_matrix: MonthlyStrategyMatrix
    monthly_returns: list[YearReturns]
    correlation: CorrelationMatrix
    weekday_hour: WeekdayHourMatrix = field(default_factory=WeekdayHourMatrix)
    best_buckets: dict[str, BestBuckets] = field(default_factory=dict)
    alerts: list[RiskAlert] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_records": self.total_records,
            "skipped": self.skipped,
            "skip_reasons": self.skip_reasons,
            "equity": self.equity.to_dict(),
            "metrics": self.metrics.to_dict(),
            "metrics_by_strategy": {
                s: m.to_dict() for s, m in self.metrics_by_strategy.items()
            },
            "best_days": [d.to_dict() for d in self.best_days],
            "worst_days": [d.to_dict() for d in self.worst_days],
            "evolution": self.evolution.to_dict(),
            "hourly": self.hourly.to_dict(),
            "weekday": self.weekday.to_dict(),
            "intraday": self.intraday.to_dict(),
            "sizing": self.sizing.to_dict(),
            "monthly_matrix": self.monthly_matrix.to_dict(),
            "monthly_returns": [y.to_dict() for y in self.monthly_returns],
            "correlation": self.correlation.to_dict(),
            "weekday_hour": self.weekday_hour.to_dict(),
            "best_buckets": {s: b.to_dict() for s, b in self.best_buckets.items()},
            "alerts": [a.to_dict() for a in self.alerts],
        }


class AnalyticsEngine:
    """Stateless facade over the analytics modules.

    Parameters
    ----------
    settings : Settings | None
        Tunable constants (trading hours, safety margin, alert
        thresholds, capital base).  Defaults apply when omitted.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or Settings()

    @property
    def settings(self) -> Settings:
        return self._settings

    # ------------------------------------------------------------------ #
    # Individual views                                                     #
    # ------------------------------------------------------------------ #

    def normalize(self, raw_records: Iterable[Any]) -> NormalizedBatch:
        return normalize_records(raw_records)

    def equity_curve(self, raw_records: Iterable[Any]) -> EquityCurve:
        return build_equity_curve(daily_results(self.normalize(raw_records).records))

    def metrics(self, raw_records: Iterable[Any]) -> MetricsSnapshot:
        return compute_metrics(self.normalize(raw_records).records)

    def metrics_by_strategy(self, raw_records: Iterable[Any]) -> dict[str, MetricsSnapshot]:
        return metrics_by_strategy(self.normalize(raw_records).records)

    def intraday_decay(self, raw_records: Iterable[Any]) -> IntradayDecay:
        return intraday_decay(self.normalize(raw_records).records, self._settings.hourly)

    def position_sizing(self, raw_records: Iterable[Any]) -> PositionSizing:
        return position_sizing(self.normalize(raw_records).records, self._settings.hourly)

    def weekday_hour_matrix(self, raw_records: Iterable[Any]) -> WeekdayHourMatrix:
        return weekday_hour_matrix(self.normalize(raw_records).records, self._settings.hourly)

    def best_buckets(self, raw_records: Iterable[Any], strategy: str) -> BestBuckets:
        return best_buckets(self.normalize(raw_records).records, strategy)

    def monthly_matrix(self, raw_records: Iterable[Any]) -> MonthlyStrategyMatrix:
        return monthly_strategy_matrix(self.normalize(raw_records).records)

    def monthly_returns(self, raw_records: Iterable[Any]) -> list[YearReturns]:
        return monthly_return_table(
            self.normalize(raw_records).records,
            capital_base=self._settings.monthly.capital_base,
        )

    def correlation(self, raw_records: Iterable[Any]) -> CorrelationMatrix:
        return correlation_matrix(self.normalize(raw_records).records)

    def alerts(
        self, raw_records: Iterable[Any], as_of: date | None = None
    ) -> list[RiskAlert]:
        return evaluate_alerts(
            self.normalize(raw_records).records, self._settings.alerts, as_of
        )

    # ------------------------------------------------------------------ #
    # Full dashboard                                                       #
    # ------------------------------------------------------------------ #

    def dashboard(
        self, raw_records: Iterable[Any], as_of: date | None = None
    ) -> DashboardReport:
        """Compute every view from one normalization of *raw_records*."""
        new_run_id()
        batch = self.normalize(raw_records)
        records = batch.records

        curve = build_equity_curve(daily_results(records))
        best, worst = top_days(records)

        report = DashboardReport(
            total_records=len(records),
            skipped=batch.skipped,
            skip_reasons=batch.skip_reasons,
            equity=curve,
            metrics=compute_metrics(records, curve),
            metrics_by_strategy=metrics_by_strategy(records),
            best_days=best,
            worst_days=worst,
            evolution=strategy_evolution(records),
            hourly=hourly_stats(records),
            weekday=weekday_stats(records),
            intraday=intraday_decay(records, self._settings.hourly),
            sizing=position_sizing(records, self._settings.hourly),
            monthly_matrix=monthly_strategy_matrix(records),
            monthly_returns=monthly_return_table(
                records, capital_base=self._settings.monthly.capital_base
            ),
            correlation=correlation_matrix(records),
            weekday_hour=weekday_hour_matrix(records, self._settings.hourly),
            best_buckets=best_buckets_by_strategy(records),
            alerts=evaluate_alerts(records, self._settings.alerts, as_of),
        )
        logger.info(
            "dashboard_computed",
            records=len(records),
            skipped=batch.skipped,
            alerts=len(report.alerts),
        )
        return report
