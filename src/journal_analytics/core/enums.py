"""Enumerations used across the analytics engine."""

from enum import Enum


class TradeOutcome(str, Enum):
    """Win / loss / break-even classification."""

    WIN = "win"
    LOSS = "loss"
    BREAKEVEN = "breakeven"


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"
