"""Tests for the analytics engine facade."""

import json
from datetime import date

import pytest

from journal_analytics.core.config import load_settings
from journal_analytics.journal.engine import AnalyticsEngine, DashboardReport

from .conftest import daily_rows, make_row


@pytest.fixture
def engine(settings):
    return AnalyticsEngine(settings)


@pytest.fixture
def rows():
    data = daily_rows([100, -40, 60], strategy="Apollo")
    data += daily_rows([20, 30, -10], strategy="Orion")
    data.append({"result": 5})  # no date
    return data


class TestAnalyticsEngine:
    def test_default_settings(self):
        assert AnalyticsEngine().settings.hourly.start_hour == 9

    def test_dashboard_views_agree(self, engine, rows):
        report = engine.dashboard(rows)
        assert isinstance(report, DashboardReport)
        assert report.total_records == 6
        assert report.skipped == 1
        assert report.skip_reasons == {"missing_date": 1}
        assert report.metrics.total_result == report.equity.final_result
        assert report.metrics.max_drawdown == report.equity.max_drawdown
        assert report.monthly_matrix.grand_total.result == report.metrics.total_result
        assert report.correlation.strategies == ("Apollo", "Orion")
        assert list(report.best_buckets) == ["Apollo", "Orion"]
        assert len(report.weekday_hour.cells) == 45

    def test_individual_views_match_dashboard(self, engine, rows):
        report = engine.dashboard(rows)
        assert engine.metrics(rows) == report.metrics
        assert engine.equity_curve(rows) == report.equity
        assert engine.correlation(rows) == report.correlation
        assert engine.intraday_decay(rows) == report.intraday
        assert engine.position_sizing(rows) == report.sizing
        assert engine.monthly_returns(rows) == report.monthly_returns
        assert engine.alerts(rows) == report.alerts
        assert engine.weekday_hour_matrix(rows) == report.weekday_hour
        assert engine.best_buckets(rows, "Apollo") == report.best_buckets["Apollo"]

    def test_deterministic(self, engine, rows):
        first = engine.dashboard(rows).to_dict()
        second = engine.dashboard(list(rows)).to_dict()
        assert first == second

    def test_input_is_not_mutated(self, engine, rows):
        snapshot = json.dumps(rows, sort_keys=True)
        engine.dashboard(rows)
        assert json.dumps(rows, sort_keys=True) == snapshot

    def test_empty_dataset(self, engine):
        report = engine.dashboard([])
        assert report.total_records == 0
        assert report.metrics.total_trades == 0
        assert report.equity.points == ()
        assert report.correlation.insufficient_data
        assert report.alerts == []
        assert report.monthly_returns == []

    def test_to_dict_is_json_serializable(self, engine, rows):
        data = engine.dashboard(rows).to_dict()
        encoded = json.dumps(data, default=str)
        assert "metrics_by_strategy" in encoded
        assert data["correlation"]["strategies"] == ["Apollo", "Orion"]

    def test_settings_flow_through(self, rows):
        settings = load_settings(overrides={"monthly": {"capital_base": 1000.0}})
        report = AnalyticsEngine(settings).dashboard(rows)
        jan = report.monthly_returns[0].months[0]
        total = report.metrics.total_result
        assert jan == pytest.approx(total / 1000.0 * 100)

    def test_as_of_is_forwarded(self, engine):
        rows = daily_rows([1000, -90], start=date(2024, 1, 1))
        assert engine.alerts(rows, as_of=date(2024, 1, 2))
        assert engine.alerts(rows, as_of=date(2024, 9, 1)) == []

    def test_normalize(self, engine):
        batch = engine.normalize([make_row(), None])
        assert len(batch) == 1
        assert batch.skipped == 1
