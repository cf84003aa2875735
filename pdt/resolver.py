# pdt/resolver.py
"""
Fragments -> datetime (absolute mode) or relativedelta (duration mode).

Absolute mode applies the fragments to a reference in a fixed order:
base date/time, weekday, relative offsets, then the zone label.
Fragment order in the input never matters.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple, Union

from dateutil.relativedelta import relativedelta

from .errors import Contradictory, DateParseError, NotADuration, OutOfRange
from .items import (
    CalendarDate, Empty, EpochSeconds, Fragment, Keyword, PlainNumber,
    RelativeOffset, TimeOfDay, Weekday, ZoneOffset, expand_year,
)

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_UNIT_FIELDS = {
    "year": ("years", 1),
    "month": ("months", 1),
    "fortnight": ("days", 14),
    "week": ("days", 7),
    "day": ("days", 1),
    "hour": ("hours", 1),
    "minute": ("minutes", 1),
    "second": ("seconds", 1),
}

_KEYWORD_DAYS = {"now": 0, "today": 0, "yesterday": -1, "tomorrow": 1}


@dataclass
class _Parts:
    date: Optional[CalendarDate] = None
    time: Optional[TimeOfDay] = None
    zone: Optional[ZoneOffset] = None
    weekday: Optional[Weekday] = None
    number: Optional[PlainNumber] = None
    epoch: Optional[EpochSeconds] = None
    empty: bool = False
    relative: List[RelativeOffset] = field(default_factory=list)
    keywords: List[Keyword] = field(default_factory=list)

    @property
    def anchored(self) -> bool:
        return any(x is not None for x in (self.date, self.time, self.zone, self.weekday,
                                           self.number, self.epoch)) or self.empty


_SINGLE = (
    (CalendarDate, "date"),
    (TimeOfDay, "time"),
    (ZoneOffset, "zone"),
    (Weekday, "weekday"),
    (PlainNumber, "number"),
    (EpochSeconds, "epoch"),
)

def _partition(fragments: Sequence[Fragment]) -> _Parts:
    parts = _Parts()
    for frag in fragments:
        if isinstance(frag, RelativeOffset):
            parts.relative.append(frag)
        elif isinstance(frag, Keyword):
            parts.keywords.append(frag)
        elif isinstance(frag, Empty):
            parts.empty = True
        else:
            for kind, attr in _SINGLE:
                if isinstance(frag, kind):
                    if getattr(parts, attr) is not None:
                        raise Contradictory(f"{attr} cannot appear more than once")
                    setattr(parts, attr, frag)
                    break
            else:
                raise TypeError(f"not a date fragment: {frag!r}")
    if parts.epoch is not None and len(fragments) > 1:
        raise Contradictory("a timestamp cannot be combined with other date/time items")
    return parts

# ---------- pieces ----------

def start_of_day(dt: datetime) -> datetime:
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)

def _fixed(reference: datetime) -> datetime:
    if reference.tzinfo is None or reference.utcoffset() is None:
        reference = reference.astimezone()
    return reference.replace(tzinfo=timezone(reference.utcoffset()))

def _relative_delta(parts: _Parts) -> relativedelta:
    totals = {"years": 0, "months": 0, "days": 0, "hours": 0, "minutes": 0, "seconds": 0,
              "microseconds": 0}
    for rel in parts.relative:
        name, factor = _UNIT_FIELDS[rel.unit]
        totals[name] += rel.count * factor
        totals["microseconds"] += rel.microsecond
    for kw in parts.keywords:
        totals["days"] += _KEYWORD_DAYS[kw.word]
    return relativedelta(**totals)

def _merge_number(parts: _Parts) -> Tuple[Optional[CalendarDate], Optional[TimeOfDay]]:
    """A bare number is the year of a year-less date, else a time (H, HMM, HHMM)."""
    date, time, num = parts.date, parts.time, parts.number
    if num is None:
        return date, time
    if date is not None and date.year is None:
        return CalendarDate(expand_year(num.digits), date.month, date.day), time
    if time is not None:
        raise Contradictory("time cannot appear more than once")
    digits = num.digits
    if len(digits) <= 2:
        return date, TimeOfDay(int(digits), 0)
    return date, TimeOfDay(int(digits[:-2]), int(digits[-2:]))

def _hour24(time: TimeOfDay) -> int:
    if time.meridiem is None:
        return time.hour
    if not 0 <= time.hour <= 12:
        raise OutOfRange(f"hour {time.hour} is invalid with {time.meridiem}")
    hour = time.hour % 12
    return hour + 12 if time.meridiem == "pm" else hour

def _apply_date(base: datetime, date: CalendarDate) -> datetime:
    if not 1 <= date.month <= 12:
        raise OutOfRange(f"month {date.month} must be between 1 and 12")
    year = base.year if date.year is None else date.year
    return base.replace(year=year, month=date.month, day=date.day)

def _apply_time(base: datetime, time: TimeOfDay) -> datetime:
    if not 0 <= time.second <= 60:
        raise OutOfRange(f"second {time.second} must be between 0 and 60")
    leap = time.second == 60
    base = base.replace(hour=_hour24(time), minute=time.minute,
                        second=59 if leap else time.second, microsecond=time.microsecond)
    return base + timedelta(seconds=1) if leap else base

def _weekday_days(current: int, wd: Weekday) -> int:
    offset = wd.offset
    if offset == 0:
        return (wd.day - current) % 7
    if offset > 0:
        first = (wd.day - current) % 7 or 7
        return first + 7 * (offset - 1)
    first = (current - wd.day) % 7 or 7
    return -(first + 7 * (-offset - 1))

def _zone(minutes: int) -> timezone:
    if abs(minutes) >= 24 * 60:
        raise OutOfRange(f"time zone offset of {minutes} minutes is out of range")
    return timezone(timedelta(minutes=minutes))

# ---------- modes ----------

def _absolute(parts: _Parts, reference: datetime) -> datetime:
    if parts.epoch is not None:
        return EPOCH + timedelta(seconds=parts.epoch.seconds, microseconds=parts.epoch.microsecond)
    base = _fixed(reference)
    if parts.empty:
        base = start_of_day(base)
    date, time = _merge_number(parts)
    if date is not None:
        base = _apply_date(base, date)
    if time is not None:
        base = _apply_time(base, time)
    if parts.weekday is not None:
        base += timedelta(days=_weekday_days(base.weekday(), parts.weekday))
    base = base + _relative_delta(parts)
    if parts.zone is not None:
        base = base.replace(tzinfo=_zone(parts.zone.minutes))
    return base

def _duration(parts: _Parts) -> relativedelta:
    if parts.anchored:
        raise NotADuration("expected a duration, got an absolute date/time")
    return _relative_delta(parts)

def resolve(
    fragments: Sequence[Fragment], reference: Optional[datetime] = None
) -> Union[datetime, relativedelta]:
    """Absolute mode with a reference, duration mode without one."""
    parts = _partition(fragments)
    logger.debug("resolving %d fragments in %s mode", len(fragments),
                 "duration" if reference is None else "absolute")
    try:
        if reference is None:
            return _duration(parts)
        return _absolute(parts, reference)
    except DateParseError:
        raise
    except (ValueError, OverflowError) as e:
        raise OutOfRange(str(e)) from e
