"""Safe-ratio and small statistics helpers shared by every metric.

Division by zero, NaN and infinity are resolved here, once, so that the
"infinite profit factor" and "undefined correlation" policies read the same
everywhere they are applied.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

import numpy as np

INFINITE = float("inf")


def finite_or_zero(value: float) -> float:
    """Return *value* unchanged when finite, ``0.0`` for NaN or +/-inf."""
    return value if math.isfinite(value) else 0.0


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """``numerator / denominator`` with *default* for a zero or non-finite result."""
    if denominator == 0:
        return default
    result = numerator / denominator
    return result if math.isfinite(result) else default


def ratio_or_infinite(gains: float, losses: float) -> float:
    """Gain/loss ratio where an absent loss side means "infinite".

    ``losses`` is a magnitude.  Returns ``INFINITE`` when there are gains
    but no losses and ``0.0`` when both sides are empty.
    """
    if losses == 0:
        return INFINITE if gains > 0 else 0.0
    return finite_or_zero(gains / losses)


def is_constant(values: Sequence[float]) -> bool:
    """True for empty, single-point or flat series."""
    return len(values) < 2 or min(values) == max(values)


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation (divide by ``n``).

    Flat series return exactly ``0.0`` so callers never divide by float
    residue of a mean that is not exactly representable.
    """
    if is_constant(values):
        return 0.0
    return float(np.std(np.asarray(values, dtype=float), ddof=0))


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation of two aligned series.

    Returns ``0.0`` when either series has zero variance, the lengths
    differ, or the result is not finite.
    """
    if len(xs) != len(ys) or is_constant(xs) or is_constant(ys):
        return 0.0

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()

    denom = math.sqrt(float(np.dot(dx, dx)) * float(np.dot(dy, dy)))
    if denom == 0:
        return 0.0
    r = float(np.dot(dx, dy)) / denom
    # Clamp float residue just outside [-1, 1]
    return finite_or_zero(max(-1.0, min(1.0, r)))


def round_half_up(value: float, places: int = 0) -> float:
    """Round to *places* decimals with halves away from zero.

    Currency rounding for presentation-ready recommendations; Python's
    built-in ``round`` uses banker's rounding.
    """
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
