"""Shared fixtures for journal analytics tests."""

from datetime import date, timedelta

import pytest

from journal_analytics.core.config import AlertConfig, HourlyConfig, Settings
from journal_analytics.journal.record import TradeRecord, normalize_records


@pytest.fixture
def base_date():
    return date(2024, 1, 1)


@pytest.fixture
def hourly_config():
    return HourlyConfig()


@pytest.fixture
def alert_config():
    return AlertConfig()


@pytest.fixture
def settings():
    return Settings()


def make_row(
    day: str = "2024-01-02",
    result: float = 100.0,
    strategy: str | None = "trend",
    time: str | None = "10:00:00",
    contracts: int | None = 1,
    costs: float | None = 0.0,
    asset: str = "WINFUT",
) -> dict:
    """Raw record as the data store exports it."""
    return {
        "operation_date": day,
        "operation_time": time,
        "asset": asset,
        "strategy": strategy,
        "contracts": contracts,
        "costs": costs,
        "result": result,
    }


def make_records(rows: list[dict]) -> tuple[TradeRecord, ...]:
    """Normalize raw rows, asserting none were dropped."""
    batch = normalize_records(rows)
    assert batch.skipped == 0
    return batch.records


def daily_rows(
    results: list[float],
    strategy: str | None = "trend",
    start: date = date(2024, 1, 1),
) -> list[dict]:
    """One trade per consecutive calendar day."""
    return [
        make_row(day=(start + timedelta(days=i)).isoformat(), result=r, strategy=strategy)
        for i, r in enumerate(results)
    ]


def sequential_rows(
    results: list[float],
    strategy: str | None = "trend",
    day: str = "2024-01-02",
) -> list[dict]:
    """Several trades on one day, one minute apart starting 10:00."""
    return [
        make_row(day=day, result=r, strategy=strategy, time=f"10:{i:02d}:00")
        for i, r in enumerate(results)
    ]
