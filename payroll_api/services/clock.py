# payroll_api/services/clock.py
"""
Clock & interval helpers for attendance reconciliation.

Raw punch values arrive as datetimes (ORM), ISO strings (API / seeds) or
bare times of day. Everything is normalised to naive wall-clock datetimes
so that expected and actual events can be compared directly. Deltas are
whole minutes, truncated, and never negative.
"""
from __future__ import annotations

from datetime import datetime, date, time as _time, timedelta
from decimal import Decimal
from typing import Optional

from .numbers import ZERO, SIXTY, qty


def to_datetime(value, on_date: Optional[date] = None) -> Optional[datetime]:
    """
    Normalise a raw clock value.

      datetime      -> itself (tz dropped, wall-clock kept)
      time          -> combined with on_date (None if on_date missing)
      date          -> midnight of that date
      "HH:MM[:SS]"  -> combined with on_date
      ISO datetime  -> parsed
      None / ""     -> None
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, _time):
        return datetime.combine(on_date, value.replace(tzinfo=None)) if on_date else None
    if isinstance(value, date):
        return datetime.combine(value, _time.min)

    s = str(value).strip()
    if not s:
        return None
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        return dt.replace(tzinfo=None) if dt.tzinfo else dt
    except ValueError:
        pass
    try:
        t = _time.fromisoformat(s)
    except ValueError:
        return None
    return datetime.combine(on_date, t) if on_date else None


def minutes_between(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Whole minutes from start to end; 0 if either side missing or end <= start."""
    if start is None or end is None or end <= start:
        return 0
    return int((end - start).total_seconds() // 60)


def minutes_late(actual: Optional[datetime], expected: Optional[datetime], tolerance_minutes: int = 0) -> int:
    """Minutes `actual` falls after `expected + tolerance`."""
    if actual is None or expected is None:
        return 0
    return minutes_between(expected + timedelta(minutes=int(tolerance_minutes or 0)), actual)


def minutes_early(actual: Optional[datetime], expected: Optional[datetime]) -> int:
    """Minutes `actual` falls before `expected`."""
    return minutes_between(actual, expected)


def hours_between(start: Optional[datetime], end: Optional[datetime]) -> Decimal:
    mins = minutes_between(start, end)
    if not mins:
        return ZERO
    return qty(Decimal(mins) / SIXTY)
