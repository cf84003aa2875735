# pdt/timeparse.py
"""
Public entry points. Each one runs parse_items() then resolve().

  parse_datetime("next friday 3pm")          -> aware datetime
  parse_relative_time("1 hour, 30 minutes")  -> timedelta
  add_relative("2 months ago", start)        -> datetime
"""
from __future__ import annotations
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from .errors import InvalidInput, OutOfRange
from .items import EpochSeconds, Weekday, parse_items
from .resolver import resolve, start_of_day

__all__ = [
    "now_local", "start_of_day", "parse_datetime", "parse_datetime_at",
    "parse_relative", "parse_relative_time", "parse_relative_time_at",
    "add_relative", "parse_timestamp", "parse_weekday",
]

def now_local() -> datetime:
    return datetime.now().astimezone()

def _aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=now_local().tzinfo)
    return dt

# ---------- absolute ----------

def parse_datetime_at(text: str, reference: datetime) -> datetime:
    return resolve(parse_items(text), _aware(reference))

def parse_datetime(text: str) -> datetime:
    return parse_datetime_at(text, now_local())

# ---------- durations ----------

def parse_relative(text: str) -> relativedelta:
    """Calendar-aware delta; month and year lengths are not fixed yet."""
    return resolve(parse_items(text))

def parse_relative_time_at(text: str, reference: datetime) -> timedelta:
    ref = _aware(reference)
    delta = parse_relative(text)
    try:
        return (ref + delta) - ref
    except (ValueError, OverflowError) as e:
        raise OutOfRange(str(e)) from e

def parse_relative_time(text: str) -> timedelta:
    return parse_relative_time_at(text, now_local())

def add_relative(text: str, start: datetime) -> datetime:
    """Shift `start` by a relative-only expression, keeping its tzinfo."""
    delta = parse_relative(text)
    try:
        return start + delta
    except (ValueError, OverflowError) as e:
        raise OutOfRange(str(e)) from e

# ---------- single items ----------

def parse_timestamp(text: str) -> int:
    """'@1700000000' -> 1700000000 (fractions are floored)."""
    frags = parse_items(text)
    if len(frags) != 1 or not isinstance(frags[0], EpochSeconds):
        raise InvalidInput(text.strip(), f"not a timestamp: {text.strip()!r}")
    return frags[0].seconds

def parse_weekday(text: str) -> int:
    """'fri' -> 4 (Monday is 0)."""
    frags = parse_items(text)
    if len(frags) != 1 or not isinstance(frags[0], Weekday) or frags[0].offset:
        raise InvalidInput(text.strip(), f"not a weekday: {text.strip()!r}")
    return frags[0].day
