"""Tests for the strategy x month matrix and percent-return table."""

import pytest

from journal_analytics.journal.monthly import monthly_return_table, monthly_strategy_matrix
from journal_analytics.journal.record import NO_STRATEGY

from .conftest import make_records, make_row


class TestMonthlyStrategyMatrix:
    def _matrix(self):
        return monthly_strategy_matrix(make_records([
            make_row(day="2024-01-05", result=100, strategy="Apollo"),
            make_row(day="2024-01-20", result=-20, strategy="Apollo"),
            make_row(day="2024-02-02", result=0, strategy="Orion"),
            make_row(day="2024-01-09", result=10, strategy=None),
        ]))

    def test_axes_are_sorted(self):
        matrix = self._matrix()
        assert matrix.strategies == ("Apollo", "Orion", NO_STRATEGY)
        assert matrix.months == ("2024-01", "2024-02")

    def test_cell_values(self):
        cell = self._matrix().cell("Apollo", "2024-01")
        assert (cell.result, cell.trades, cell.wins) == (80.0, 2, 1)
        assert cell.win_rate == 50.0

    def test_missing_cell_differs_from_zero_cell(self):
        matrix = self._matrix()
        assert matrix.cell("Apollo", "2024-02") is None
        zero = matrix.cell("Orion", "2024-02")
        assert zero is not None
        assert zero.result == 0.0
        assert zero.trades == 1

    def test_totals(self):
        matrix = self._matrix()
        assert matrix.row_totals["Apollo"].result == 80.0
        assert matrix.column_totals["2024-01"].result == 90.0
        assert matrix.column_totals["2024-01"].trades == 3
        assert matrix.grand_total.result == 90.0
        assert matrix.grand_total.trades == 4

    def test_to_dict_keeps_missing_cells(self):
        rows = self._matrix().to_dict()["rows"]
        assert rows["Apollo"]["2024-02"] is None
        assert rows["Orion"]["2024-02"]["trades"] == 1

    def test_empty(self):
        matrix = monthly_strategy_matrix([])
        assert matrix.strategies == ()
        assert matrix.grand_total.trades == 0


class TestMonthlyReturnTable:
    def _table(self, capital_base=10_000.0):
        return monthly_return_table(make_records([
            make_row(day="2024-01-10", result=300),
            make_row(day="2024-01-11", result=200),
            make_row(day="2024-03-01", result=-210),
            make_row(day="2023-12-15", result=100),
        ]), capital_base=capital_base)

    def test_years_newest_first(self):
        assert [y.year for y in self._table()] == ["2024", "2023"]

    def test_percent_on_running_capital(self):
        year = self._table()[0]
        assert year.months[0] == pytest.approx(5.0)
        assert year.months[1] is None
        assert year.months[2] == pytest.approx(-2.0)
        assert len(year.months) == 12

    def test_accumulated_compounds(self):
        year = self._table()[0]
        assert year.accumulated == pytest.approx((1.05 * 0.98 - 1) * 100)

    def test_capital_resets_each_year(self):
        assert self._table()[1].months[11] == pytest.approx(1.0)

    def test_non_positive_capital(self):
        table = self._table(capital_base=0.0)
        assert table[0].months[0] == 0.0

    def test_empty(self):
        assert monthly_return_table([]) == []
