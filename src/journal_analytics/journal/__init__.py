"""Trade Journal Analytics: performance metrics over recorded trades.

Turns a list of discrete trade records into equity curves, risk ratios,
time-bucketed breakdowns, cross-strategy correlation and advisory alerts.
Every function is a pure computation over the records it is handed.

Key components
--------------
**Foundation**

TradeRecord           Normalized trade (date, time, strategy, result, ...)
normalize_records     Coerces raw rows, counts malformed ones
aggregate             Sum of results per date / (date, strategy) / (date, hour)

**Performance**

build_equity_curve    Cumulative equity and max drawdown
compute_metrics       Sharpe, profit factor, expectancy, streaks, ...
correlation_matrix    Pearson matrix of strategy daily results

**Time buckets**

intraday_decay        Cumulative-of-means across trading hours
position_sizing       Per-hour gain / stop / margin recommendations
weekday_hour_matrix   Weekday x hour result heatmap
best_buckets          Profitable hours, weekdays and months of a strategy
monthly_strategy_matrix  Strategy x month result table
monthly_return_table  Monthly percent return on a notional capital

**Advisory**

evaluate_alerts       Drawdown, losing-streak and strategy win-rate alerts
AnalyticsEngine       Facade computing every view with shared settings
"""

from .alerts import RiskAlert, evaluate_alerts
from .correlation import CorrelationMatrix, correlation_matrix
from .daily import aggregate, by_date, by_date_hour, by_date_strategy, daily_results
from .engine import AnalyticsEngine, DashboardReport
from .equity import EquityCurve, EquityPoint, build_equity_curve
from .metrics import MetricsSnapshot, compute_metrics
from .monthly import monthly_return_table, monthly_strategy_matrix
from .record import NO_STRATEGY, NormalizedBatch, TradeRecord, normalize_records
from .session_analysis import best_buckets, intraday_decay, position_sizing, weekday_hour_matrix

__all__ = [
    "TradeRecord",
    "NormalizedBatch",
    "NO_STRATEGY",
    "normalize_records",
    "aggregate",
    "by_date",
    "by_date_strategy",
    "by_date_hour",
    "daily_results",
    "EquityCurve",
    "EquityPoint",
    "build_equity_curve",
    "MetricsSnapshot",
    "compute_metrics",
    "intraday_decay",
    "position_sizing",
    "weekday_hour_matrix",
    "best_buckets",
    "monthly_strategy_matrix",
    "monthly_return_table",
    "CorrelationMatrix",
    "correlation_matrix",
    "RiskAlert",
    "evaluate_alerts",
    "AnalyticsEngine",
    "DashboardReport",
]
