"""Shared fixtures for the journal-analytics test suite."""

from __future__ import annotations

import pytest

from journal_analytics.observability.logger import setup_logging


@pytest.fixture(autouse=True, scope="session")
def _structured_logging():
    """Route structlog through stdlib logging before any logger is cached."""
    setup_logging(level="WARNING", format="json")
