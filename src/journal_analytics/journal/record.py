"""Normalized trade record: the core data model.

A TradeRecord is the canonical, typed form of one row handed over by the
data store.  Raw rows arrive as mappings (or attribute objects) whose
numeric fields may be missing, ``None`` or strings; the normalizer coerces
them so that every downstream fold can add and compare without guarding.

Normalization rules
-------------------
- ``result`` / ``costs``: float, missing or malformed => ``0.0``
- ``contracts``: float count, missing => ``1``, malformed => ``0``
- ``strategy``: ``None`` / blank => the single ``NO_STRATEGY`` bucket
- ``date``: required; missing or unparsable => record skipped and counted
- ``time``: optional; unparsable => kept, but excluded from hourly views

Example::

    batch = normalize_records(rows)
    print(len(batch.records), batch.skipped, batch.skip_reasons)
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Any, Iterable, Mapping

from journal_analytics.core.enums import TradeOutcome
from journal_analytics.core.errors import MalformedRecordError

logger = logging.getLogger(__name__)

NO_STRATEGY = "Sem Estratégia"

# Accepted field names, canonical first (the store exports operation_*)
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("date", "operation_date"),
    "time": ("time", "operation_time"),
    "asset": ("asset", "symbol"),
    "strategy": ("strategy", "strategy_id"),
    "contracts": ("contracts",),
    "costs": ("costs",),
    "result": ("result",),
}


@dataclass(frozen=True)
class TradeRecord:
    """One normalized trade.

    Parameters
    ----------
    date : str
        Calendar day as ``YYYY-MM-DD``; lexicographic order is chronological.
    time : str | None
        Wall-clock ``HH:MM:SS`` or ``None`` when absent/unparsable.
    result : float
        Signed net P&L of the trade.
    sequence : int
        Position in the caller's input, the final ordering tie-breaker.
    """

    date: str
    time: str | None = None
    asset: str = ""
    strategy: str = NO_STRATEGY
    contracts: float = 1.0
    costs: float = 0.0
    result: float = 0.0
    sequence: int = 0

    @property
    def hour(self) -> int | None:
        if self.time is None:
            return None
        return int(self.time[:2])

    @property
    def month_key(self) -> str:
        """``YYYY-MM`` bucket key."""
        return self.date[:7]

    @property
    def has_strategy(self) -> bool:
        return self.strategy != NO_STRATEGY

    @property
    def sort_key(self) -> tuple[str, str, int]:
        return (self.date, self.time or "", self.sequence)

    @property
    def outcome(self) -> TradeOutcome:
        if self.result > 0:
            return TradeOutcome.WIN
        if self.result < 0:
            return TradeOutcome.LOSS
        return TradeOutcome.BREAKEVEN

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "time": self.time,
            "asset": self.asset,
            "strategy": self.strategy,
            "contracts": self.contracts,
            "costs": self.costs,
            "result": self.result,
        }


@dataclass(frozen=True)
class NormalizedBatch:
    """Output of :func:`normalize_records`."""

    records: tuple[TradeRecord, ...] = ()
    skipped: int = 0
    skip_reasons: dict[str, int] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)


# ---------------------------------------------------------------------- #
# Field coercion                                                           #
# ---------------------------------------------------------------------- #

def _get(raw: Any, name: str) -> Any:
    for key in _FIELD_ALIASES[name]:
        if isinstance(raw, Mapping):
            if key in raw:
                return raw[key]
        elif hasattr(raw, key):
            return getattr(raw, key)
    return None


def _to_float(value: Any, missing: float) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        return missing
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _parse_date(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedRecordError("missing_date")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if not isinstance(value, str):
        raise MalformedRecordError("invalid_date", repr(value))

    text = value.strip()
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date().isoformat()
    except ValueError as exc:
        raise MalformedRecordError("invalid_date", text) from exc


def _parse_time(value: Any) -> str | None:
    """Canonical ``HH:MM:SS`` or ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if not isinstance(value, str):
        return None

    parts = value.strip().split(":")
    if len(parts) < 2 or len(parts) > 3:
        return None
    try:
        hour = int(parts[0])
        minute = int(parts[1])
        second = int(float(parts[2])) if len(parts) == 3 else 0
    except (ValueError, OverflowError):
        return None
    if not (0 <= hour <= 23 and 0 <= minute <= 59 and 0 <= second <= 59):
        return None
    return f"{hour:02d}:{minute:02d}:{second:02d}"


def _normalize_strategy(value: Any) -> str:
    if value is None:
        return NO_STRATEGY
    text = str(value).strip()
    return text or NO_STRATEGY


# ---------------------------------------------------------------------- #
# Public API                                                               #
# ---------------------------------------------------------------------- #

def normalize_record(raw: Any, sequence: int = 0) -> TradeRecord:
    """Canonicalize one raw record.

    Raises
    ------
    MalformedRecordError
        If the record has no usable date.
    """
    if raw is None:
        raise MalformedRecordError("empty_record")

    asset = _get(raw, "asset")
    return TradeRecord(
        date=_parse_date(_get(raw, "date")),
        time=_parse_time(_get(raw, "time")),
        asset=str(asset).strip() if asset is not None else "",
        strategy=_normalize_strategy(_get(raw, "strategy")),
        contracts=_to_float(_get(raw, "contracts"), missing=1.0),
        costs=_to_float(_get(raw, "costs"), missing=0.0),
        result=_to_float(_get(raw, "result"), missing=0.0),
        sequence=sequence,
    )


def normalize_records(raw_records: Iterable[Any]) -> NormalizedBatch:
    """Normalize a batch, excluding and counting malformed records.

    Already-normalized :class:`TradeRecord` instances pass through with
    their sequence reassigned to the batch position.
    """
    records: list[TradeRecord] = []
    reasons: Counter[str] = Counter()

    for seq, raw in enumerate(raw_records):
        if isinstance(raw, TradeRecord):
            records.append(
                raw if raw.sequence == seq else _with_sequence(raw, seq)
            )
            continue
        try:
            records.append(normalize_record(raw, sequence=seq))
        except MalformedRecordError as exc:
            reasons[exc.reason] += 1
            logger.debug("Skipping record %d: %s", seq, exc)

    skipped = sum(reasons.values())
    if skipped:
        logger.info(
            "Normalized %d records, skipped %d malformed (%s)",
            len(records), skipped, dict(reasons),
        )
    return NormalizedBatch(
        records=tuple(records),
        skipped=skipped,
        skip_reasons=dict(reasons),
    )


def _with_sequence(record: TradeRecord, sequence: int) -> TradeRecord:
    return replace(record, sequence=sequence)


def chronological(records: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Trades ordered by (date, time, input order)."""
    return sorted(records, key=lambda r: r.sort_key)
