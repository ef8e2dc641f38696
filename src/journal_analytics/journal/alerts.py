"""Advisory risk alerts.

Applies threshold rules to a record set and emits independent alerts:

- **Drawdown** over the trailing window (percent of the running peak).
  Skipped when the window never reaches a positive peak, since there is no
  base to express a percentage against.
- **Consecutive losses**: the longest run of losing trades.
- **Per-strategy win rate** for labelled strategies with enough trades:
  underperforming below the floor, performing well above the ceiling
  with a positive net result.

Rules read only immutable inputs, so any subset may fire and evaluation
order does not matter.  Thresholds come from :class:`AlertConfig`.

Usage::

    alerts = evaluate_alerts(records, AlertConfig())
    for alert in alerts:
        print(alert.severity, alert.title)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Sequence

from journal_analytics.core.config import AlertConfig
from journal_analytics.core.enums import Severity

from .daily import daily_results
from .equity import build_equity_curve
from .metrics import max_consecutive_losses
from .record import TradeRecord
from .session_analysis import BucketStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskAlert:
    """One advisory alert.  ``value`` is the measurement that triggered it."""

    id: str
    severity: Severity
    title: str
    message: str
    value: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "message": self.message,
            "value": self.value,
        }


# ---------------------------------------------------------------------- #
# Rules                                                                    #
# ---------------------------------------------------------------------- #

def trailing_window(
    records: Sequence[TradeRecord],
    days: int,
    as_of: date | None = None,
) -> list[TradeRecord]:
    """Records dated within *days* calendar days up to *as_of*.

    *as_of* defaults to the most recent record date so the result depends
    only on the records themselves.
    """
    if not records:
        return []
    end = as_of or date.fromisoformat(max(r.date for r in records))
    start = (end - timedelta(days=days)).isoformat()
    end_key = end.isoformat()
    return [r for r in records if start <= r.date <= end_key]


def drawdown_alert(
    records: Sequence[TradeRecord],
    config: AlertConfig,
    as_of: date | None = None,
) -> RiskAlert | None:
    window = trailing_window(records, config.drawdown_window_days, as_of)
    if not window:
        return None

    pct = build_equity_curve(daily_results(window)).max_drawdown_pct
    if pct is None:
        logger.debug("No positive peak in drawdown window, percent rule skipped")
        return None

    days = config.drawdown_window_days
    if pct > config.drawdown_high_pct:
        return RiskAlert(
            id="drawdown-high",
            severity=Severity.HIGH,
            title="High drawdown detected",
            message=(
                f"Drawdown reached {pct:.1f}% over the last {days} days. "
                "Consider reducing position size."
            ),
            value=pct,
        )
    if pct > config.drawdown_medium_pct:
        return RiskAlert(
            id="drawdown-warning",
            severity=Severity.MEDIUM,
            title="Drawdown warning",
            message=(
                f"Current drawdown of {pct:.1f}% over the last {days} days. "
                "Monitor the next trades closely."
            ),
            value=pct,
        )
    return None


def consecutive_losses_alert(
    records: Sequence[TradeRecord],
    config: AlertConfig,
) -> RiskAlert | None:
    streak = max_consecutive_losses(records)
    if streak >= config.losses_high:
        return RiskAlert(
            id="consecutive-losses-high",
            severity=Severity.HIGH,
            title="Losing streak",
            message=(
                f"{streak} consecutive losing trades detected. "
                "Review the strategy and risk management."
            ),
            value=float(streak),
        )
    if streak >= config.losses_medium:
        return RiskAlert(
            id="consecutive-losses-medium",
            severity=Severity.MEDIUM,
            title="Consecutive losses",
            message=f"{streak} losing trades in a row. Consider pausing to review.",
            value=float(streak),
        )
    return None


def strategy_alerts(
    records: Sequence[TradeRecord],
    config: AlertConfig,
) -> list[RiskAlert]:
    """Win-rate alerts for labelled strategies above the trade floor."""
    stats: dict[str, BucketStats] = defaultdict(BucketStats)
    for trade in records:
        if trade.has_strategy:
            stats[trade.strategy].record(trade)

    alerts: list[RiskAlert] = []
    for strategy in sorted(stats):
        bucket = stats[strategy]
        if bucket.trades < config.strategy_min_trades:
            continue
        win_rate = bucket.wins / bucket.trades * 100
        if win_rate < config.strategy_poor_win_rate:
            alerts.append(RiskAlert(
                id=f"strategy-poor-{strategy}",
                severity=Severity.MEDIUM,
                title="Strategy underperforming",
                message=(
                    f'Strategy "{strategy}" has a {win_rate:.1f}% win rate. '
                    "Consider reviewing or adjusting it."
                ),
                value=win_rate,
            ))
        elif win_rate > config.strategy_good_win_rate and bucket.total > 0:
            alerts.append(RiskAlert(
                id=f"strategy-excellent-{strategy}",
                severity=Severity.LOW,
                title="Strategy performing well",
                message=(
                    f'Strategy "{strategy}" has a {win_rate:.1f}% win rate '
                    "with a positive result."
                ),
                value=win_rate,
            ))
    return alerts


def evaluate_alerts(
    records: Sequence[TradeRecord],
    config: AlertConfig | None = None,
    as_of: date | None = None,
) -> list[RiskAlert]:
    """Run every rule; returns drawdown, streak, then strategy alerts."""
    config = config or AlertConfig()
    if not records:
        return []

    alerts: list[RiskAlert] = []
    for alert in (
        drawdown_alert(records, config, as_of),
        consecutive_losses_alert(records, config),
    ):
        if alert is not None:
            alerts.append(alert)
    alerts.extend(strategy_alerts(records, config))

    if alerts:
        logger.info(
            "Risk alerts raised: %s",
            ", ".join(f"{a.id}({a.severity.value})" for a in alerts),
        )
    return alerts
