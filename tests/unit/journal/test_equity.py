"""Tests for the equity curve and drawdown episodes."""

import pytest

from journal_analytics.journal.daily import daily_results
from journal_analytics.journal.equity import (
    EquityCurve,
    avg_drawdown_duration,
    build_equity_curve,
    drawdown_periods,
    strategy_evolution,
)

from .conftest import daily_rows, make_records, make_row


def _curve(values):
    return build_equity_curve([(f"2024-01-{i + 1:02d}", v) for i, v in enumerate(values)])


class TestBuildEquityCurve:
    def test_cumulative_and_drawdown(self):
        curve = _curve([100.0, -40.0, 60.0])
        assert [p.cumulative_result for p in curve.points] == [100.0, 60.0, 120.0]
        assert curve.max_drawdown == 40.0
        assert curve.final_result == 120.0
        assert curve.peak == 120.0

    def test_peak_starts_at_zero(self):
        curve = _curve([-10.0, -20.0])
        assert curve.max_drawdown == 30.0
        assert curve.points[0].peak == 0.0

    def test_percent_undefined_without_positive_peak(self):
        curve = _curve([-10.0, -20.0])
        assert curve.max_drawdown_pct is None
        assert curve.points[1].drawdown_pct is None

    def test_percent_against_peak(self):
        curve = _curve([200.0, -20.0])
        assert curve.max_drawdown_pct == pytest.approx(10.0)

    def test_monotonic_series_has_no_drawdown(self):
        curve = _curve([10.0, 0.0, 5.0, 20.0])
        assert curve.max_drawdown == 0.0
        assert all(p.drawdown == 0.0 for p in curve.points)

    def test_empty(self):
        curve = build_equity_curve([])
        assert curve == EquityCurve()
        assert curve.final_result == 0.0
        assert curve.max_drawdown_pct is None

    def test_built_from_records(self):
        records = make_records(daily_rows([100, -40, 60]))
        curve = build_equity_curve(daily_results(records))
        assert curve.max_drawdown == 40.0
        assert curve.daily_values == [100.0, -40.0, 60.0]

    def test_to_dict(self):
        data = _curve([100.0, -40.0]).to_dict()
        assert data["max_drawdown"] == 40.0
        assert data["final_result"] == 60.0
        assert data["points"][1]["drawdown"] == 40.0


class TestDrawdownPeriods:
    def test_closed_episode(self):
        # below peak on day 2, new peak on day 3
        assert drawdown_periods(_curve([100.0, -40.0, 60.0])) == [1]

    def test_open_episode_counts_to_end(self):
        assert drawdown_periods(_curve([100.0, -50.0, -10.0])) == [1]

    def test_multiple_episodes(self):
        curve = _curve([100.0, -10.0, -10.0, 50.0, -5.0, 10.0])
        assert drawdown_periods(curve) == [2, 1]
        assert avg_drawdown_duration(curve) == 1.5

    def test_no_drawdown(self):
        curve = _curve([10.0, 10.0])
        assert drawdown_periods(curve) == []
        assert avg_drawdown_duration(curve) == 0.0


class TestStrategyEvolution:
    def test_days_without_trades_carry_forward(self):
        records = make_records([
            make_row(day="2024-01-02", result=100, strategy="Apollo"),
            make_row(day="2024-01-03", result=50, strategy="Orion"),
            make_row(day="2024-01-04", result=-30, strategy="Apollo"),
        ])
        evo = strategy_evolution(records)
        assert evo.dates == ("2024-01-02", "2024-01-03", "2024-01-04")
        assert evo.series["Apollo"] == (100.0, 100.0, 70.0)
        assert evo.series["Orion"] == (0.0, 50.0, 50.0)

    def test_empty(self):
        evo = strategy_evolution([])
        assert evo.dates == ()
        assert evo.to_dict() == {"dates": [], "series": {}}
