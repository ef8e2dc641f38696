"""Tests for the safe-ratio helpers."""

import math

import pytest

from journal_analytics.journal.numeric import (
    INFINITE,
    finite_or_zero,
    mean,
    pearson,
    population_std,
    ratio_or_infinite,
    round_half_up,
    safe_div,
)


class TestSafeDiv:
    def test_zero_denominator_returns_default(self):
        assert safe_div(5.0, 0.0) == 0.0
        assert safe_div(5.0, 0.0, default=-1.0) == -1.0

    def test_regular_division(self):
        assert safe_div(6.0, 3.0) == 2.0

    def test_non_finite_result_returns_default(self):
        assert safe_div(float("inf"), 1.0) == 0.0

    def test_finite_or_zero(self):
        assert finite_or_zero(float("nan")) == 0.0
        assert finite_or_zero(float("-inf")) == 0.0
        assert finite_or_zero(1.5) == 1.5


class TestRatioOrInfinite:
    def test_no_losses_with_gains_is_infinite(self):
        assert ratio_or_infinite(100.0, 0.0) == INFINITE

    def test_no_trades_is_zero(self):
        assert ratio_or_infinite(0.0, 0.0) == 0.0

    def test_only_losses_is_zero(self):
        assert ratio_or_infinite(0.0, 50.0) == 0.0

    def test_ratio(self):
        assert ratio_or_infinite(160.0, 40.0) == 4.0


class TestStatistics:
    def test_population_std_divides_by_n(self):
        # mean 2, squared deviations 1 + 0 + 1, / 3
        assert population_std([1.0, 2.0, 3.0]) == pytest.approx(math.sqrt(2 / 3))

    def test_population_std_flat_series_is_exact_zero(self):
        assert population_std([0.1, 0.1, 0.1]) == 0.0
        assert population_std([7.0]) == 0.0
        assert population_std([]) == 0.0

    def test_mean_of_empty_is_zero(self):
        assert mean([]) == 0.0
        assert mean([1.0, 2.0]) == 1.5


class TestPearson:
    def test_perfect_positive(self):
        assert pearson([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)

    def test_constant_series_is_zero(self):
        assert pearson([1, 1, 1], [1, 2, 3]) == 0.0

    def test_length_mismatch_is_zero(self):
        assert pearson([1, 2, 3], [1, 2]) == 0.0

    def test_result_is_bounded(self):
        r = pearson([0.1, 0.2, 0.3, 0.4], [0.3, 0.6, 0.9, 1.2])
        assert -1.0 <= r <= 1.0


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [
        (2.5, 3.0),
        (3.5, 4.0),
        (-2.5, -3.0),
        (84.0, 84.0),
        (83.99999, 84.0),
    ])
    def test_halves_round_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected

    def test_places(self):
        assert round_half_up(1.005, 2) == 1.01
        assert round_half_up(0.25, 1) == 0.3

    def test_non_finite_is_zero(self):
        assert round_half_up(float("nan")) == 0.0
