"""Property tests: invariants that hold for any record set.

Records are generated over a short date range with a handful of strategy
labels, so days and strategies collide often enough to exercise the
merge paths of every fold.
"""

import math
from datetime import date, timedelta

from hypothesis import given, settings, strategies as st

from journal_analytics.journal.correlation import correlation_matrix
from journal_analytics.journal.daily import aggregate, by_date, by_date_strategy, daily_results
from journal_analytics.journal.equity import build_equity_curve
from journal_analytics.journal.metrics import compute_metrics, current_streak, profit_factor
from journal_analytics.journal.monthly import monthly_strategy_matrix
from journal_analytics.journal.record import normalize_records
from journal_analytics.journal.session_analysis import intraday_decay

_BASE = date(2024, 1, 1)

results = st.integers(min_value=-500, max_value=500).map(float)

raw_row = st.fixed_dictionaries({
    "date": st.integers(min_value=0, max_value=45).map(
        lambda d: (_BASE + timedelta(days=d)).isoformat()
    ),
    "time": st.one_of(
        st.none(),
        st.integers(min_value=0, max_value=23).map(lambda h: f"{h:02d}:30:00"),
    ),
    "strategy": st.sampled_from([None, "", "Apollo", "Orion", "Vega"]),
    "contracts": st.integers(min_value=1, max_value=5),
    "result": results,
})

raw_rows = st.lists(raw_row, max_size=60)


def _records(rows):
    return normalize_records(rows).records


@given(rows=raw_rows)
@settings(max_examples=100)
def test_aggregation_preserves_total(rows):
    records = _records(rows)
    total = sum(r.result for r in records)
    assert math.isclose(sum(v for _, v in aggregate(records, by_date)), total, abs_tol=1e-6)
    assert math.isclose(
        sum(v for _, v in aggregate(records, by_date_strategy)), total, abs_tol=1e-6
    )
    assert math.isclose(monthly_strategy_matrix(records).grand_total.result, total, abs_tol=1e-6)


@given(rows=raw_rows)
@settings(max_examples=100)
def test_equity_curve_invariants(rows):
    records = _records(rows)
    curve = build_equity_curve(daily_results(records))

    assert curve.max_drawdown >= 0
    if curve.points:
        assert math.isclose(
            curve.final_result, sum(r.result for r in records), abs_tol=1e-6
        )
        assert all(p.peak >= p.cumulative_result for p in curve.points)
        peaks = [p.peak for p in curve.points]
        assert peaks == sorted(peaks)


@given(values=st.lists(st.integers(min_value=0, max_value=1000).map(float), max_size=30))
@settings(max_examples=50)
def test_non_decreasing_curve_has_no_drawdown(values):
    daily = [(f"d{i:03d}", v) for i, v in enumerate(values)]
    assert build_equity_curve(daily).max_drawdown == 0.0


@given(rows=raw_rows)
@settings(max_examples=100)
def test_metrics_are_finite_and_bounded(rows):
    snap = compute_metrics(_records(rows))
    for name, value in snap.to_dict().items():
        if name == "profit_factor":
            continue
        assert math.isfinite(value), name
    assert 0 <= snap.win_rate <= 100
    assert 0 <= snap.loss_rate <= 100
    assert snap.winning_trades + snap.losing_trades + snap.breakeven_trades == snap.total_trades


@given(gains=st.lists(st.integers(min_value=1, max_value=1000).map(float), min_size=1))
def test_profit_factor_without_losses_is_infinite(gains):
    assert profit_factor(gains) == float("inf")


@given(rows=raw_rows)
@settings(max_examples=100)
def test_current_streak_bounded_by_trade_count(rows):
    records = _records(rows)
    assert abs(current_streak(records)) <= len(records)


@given(rows=raw_rows)
@settings(max_examples=100)
def test_correlation_symmetric_with_unit_diagonal(rows):
    matrix = correlation_matrix(_records(rows))
    n = len(matrix.values)
    for i in range(n):
        assert matrix.values[i][i] == 1.0
        for j in range(n):
            assert matrix.values[i][j] == matrix.values[j][i]
            assert -1.0 <= matrix.values[i][j] <= 1.0


@given(rows=raw_rows)
@settings(max_examples=50)
def test_intraday_peak_not_below_final(rows):
    decay = intraday_decay(_records(rows))
    if decay.points:
        assert decay.peak_value >= decay.final_value or math.isclose(
            decay.peak_value, decay.final_value
        )
        assert decay.decay_label == "no decay" or decay.decay > 0


@given(rows=raw_rows)
@settings(max_examples=50)
def test_views_are_deterministic(rows):
    first = compute_metrics(_records(rows))
    second = compute_metrics(_records(list(rows)))
    assert first == second
