# pdt/items.py
"""
Item recognition: token stream -> ordered list of fragments.

A date string is a sequence of items in any order. Each recognizer
looks at the tokens from one position and either returns
(fragments, tokens_consumed) or None without consuming anything.
parse_items() tries them in RECOGNIZERS order, most specific first.

Recognizers check the shape of an item only. Field ranges (month 13,
hour 25, Feb 30) are the resolver's business.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple, Union

from .errors import InvalidInput
from .tokens import END, NUMBER, WORD, Token, tokenize

logger = logging.getLogger(__name__)

# ---------- fragments ----------

@dataclass(frozen=True)
class CalendarDate:
    year: Optional[int]
    month: int
    day: int

@dataclass(frozen=True)
class TimeOfDay:
    hour: int
    minute: int
    second: int = 0
    microsecond: int = 0
    meridiem: Optional[str] = None   # "am" | "pm"

@dataclass(frozen=True)
class ZoneOffset:
    minutes: int                     # east of UTC
    name: Optional[str] = None

@dataclass(frozen=True)
class Weekday:
    day: int                         # 0 = Monday
    modifier: Optional[str] = None   # "next" | "last" | "this"
    count: Optional[int] = None      # "3rd friday" -> 3

    @property
    def offset(self) -> int:
        """0: on or after the base day; +n: n-th later; -n: n-th earlier."""
        if self.count is not None:
            return self.count
        return DIRECTIONS.get(self.modifier or "this", 0)

@dataclass(frozen=True)
class RelativeOffset:
    count: int
    unit: str
    microsecond: int = 0             # "1.5 seconds"; always 0 <= us < 10**6

    def negated(self) -> "RelativeOffset":
        count, microsecond = divmod(-(self.count * 1_000_000 + self.microsecond), 1_000_000)
        return RelativeOffset(count, self.unit, microsecond)

@dataclass(frozen=True)
class EpochSeconds:
    seconds: int
    microsecond: int = 0

@dataclass(frozen=True)
class Keyword:
    word: str

@dataclass(frozen=True)
class PlainNumber:
    digits: str

@dataclass(frozen=True)
class Empty:
    pass

Fragment = Union[
    CalendarDate, TimeOfDay, ZoneOffset, Weekday, RelativeOffset,
    EpochSeconds, Keyword, PlainNumber, Empty,
]
Match = Tuple[List[Fragment], int]

# ---------- word tables ----------

MONTHS = {
    "january": 1, "jan": 1, "february": 2, "feb": 2, "march": 3, "mar": 3,
    "april": 4, "apr": 4, "may": 5, "june": 6, "jun": 6, "july": 7, "jul": 7,
    "august": 8, "aug": 8, "september": 9, "sept": 9, "sep": 9,
    "october": 10, "oct": 10, "november": 11, "nov": 11, "december": 12, "dec": 12,
}

WEEKDAYS = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2, "wednes": 2,
    "thursday": 3, "thu": 3, "thur": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

UNITS = {
    "year": "year", "years": "year",
    "month": "month", "months": "month",
    "fortnight": "fortnight", "fortnights": "fortnight",
    "week": "week", "weeks": "week",
    "day": "day", "days": "day",
    "hour": "hour", "hours": "hour",
    "minute": "minute", "minutes": "minute", "min": "minute", "mins": "minute",
    "second": "second", "seconds": "second", "sec": "second", "secs": "second",
}

DIRECTIONS = {"last": -1, "this": 0, "next": 1}

# no "second": it is a unit
ORDINAL_WORDS = {
    "first": 1, "third": 3, "fourth": 4, "fifth": 5, "sixth": 6,
    "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10, "eleventh": 11,
    "twelfth": 12,
}

SUFFIXES = ("st", "nd", "rd", "th")

KEYWORDS = ("now", "today", "yesterday", "tomorrow")

SEPARATORS = ("and", ",")

# minutes east of UTC
ZONES = {
    "utc": 0, "ut": 0, "gmt": 0, "z": 0, "wet": 0,
    "west": 60, "wat": 60, "cet": 60, "bst": 60,
    "cest": 120, "eet": 120, "sast": 120, "cat": 120,
    "eest": 180, "msk": 180, "eat": 180,
    "msd": 240, "gst": 240,
    "ist": 330, "sgt": 480, "jst": 540,
    "nzst": 720, "nzdt": 780,
    "ast": -240, "adt": -180, "art": -180, "brt": -180, "brst": -120,
    "clt": -240, "clst": -180, "nst": -210, "ndt": -150,
    "est": -300, "edt": -240, "cst": -360, "cdt": -300,
    "mst": -420, "mdt": -360, "pst": -480, "pdt": -420,
    "akst": -540, "akdt": -480, "hst": -600, "sst": -660,
    # military letters, no "j"
    "a": 60, "b": 120, "c": 180, "d": 240, "e": 300, "f": 360, "g": 420,
    "h": 480, "i": 540, "k": 600, "l": 660, "m": 720,
    "n": -60, "o": -120, "p": -180, "q": -240, "r": -300, "s": -360,
    "t": -420, "u": -480, "v": -540, "w": -600, "x": -660, "y": -720,
}

def expand_year(digits: str) -> int:
    """Two-digit years: 00-68 -> 20xx, 69-99 -> 19xx."""
    year = Token(NUMBER, digits).value
    if len(digits) == 2:
        year += 2000 if year <= 68 else 1900
    return year

# ---------- token helpers ----------

def _at(toks: List[Token], i: int) -> Token:
    return toks[i] if i < len(toks) else toks[-1]

def _is_unit(tok: Token) -> bool:
    return tok.kind == WORD and tok.text in UNITS

def _glued(tok: Token) -> bool:
    return not tok.spaced

def _fraction(toks: List[Token], i: int) -> Optional[Tuple[int, int]]:
    """'.123' or ',123' right after a number -> (microsecond, consumed)."""
    sep, num = _at(toks, i), _at(toks, i + 1)
    if sep.is_symbol(".", ",") and _glued(sep) and num.is_number() and _glued(num):
        return int((num.text + "000000")[:6]), 2
    return None

def _meridiem(toks: List[Token], i: int) -> Optional[Tuple[str, int]]:
    tok = _at(toks, i)
    if tok.is_word("am", "pm"):
        return tok.text, 1
    # a.m. / p.m.
    if tok.is_word("a", "p") and _at(toks, i + 1).is_symbol(".") and _at(toks, i + 2).is_word("m"):
        dot = _at(toks, i + 3)
        return tok.text + "m", 4 if dot.is_symbol(".") and _glued(dot) else 3
    return None

# ---------- calendar dates ----------

def _day(toks: List[Token], i: int, hyphen: bool = False) -> Optional[Tuple[int, int]]:
    tok = _at(toks, i)
    if tok.kind == WORD and tok.text in ORDINAL_WORDS:
        return ORDINAL_WORDS[tok.text], 1
    if tok.kind != NUMBER or len(tok.text) > 2:
        return None
    # "nov-14" keeps its hyphen glued to the number
    if tok.sign and not (hyphen and tok.sign == "-" and _glued(tok)):
        return None
    nxt = _at(toks, i + 1)
    if nxt.is_symbol(":") or _meridiem(toks, i + 1):
        return None
    if nxt.is_word(*SUFFIXES) and _glued(nxt):
        return int(tok.text), 2
    return int(tok.text), 1

def _month(toks: List[Token], i: int) -> Optional[Tuple[int, int]]:
    tok = _at(toks, i)
    if tok.kind != WORD or tok.text not in MONTHS:
        return None
    dot = _at(toks, i + 1)
    return MONTHS[tok.text], 2 if dot.is_symbol(".") and _glued(dot) else 1

def _year(toks: List[Token], i: int) -> Optional[Tuple[int, int]]:
    tok, used = _at(toks, i), 1
    if tok.is_symbol("-") and _glued(tok):
        tok, used = _at(toks, i + 1), 2
        if not tok.is_number() or not _glued(tok):
            return None
    elif tok.kind == NUMBER and tok.sign:
        # "14-nov-2022" folds the second hyphen into the year
        if tok.sign != "-" or not _glued(tok):
            return None
    elif not tok.is_number():
        return None
    nxt = _at(toks, i + used)
    if nxt.is_symbol(":") or _is_unit(nxt) or _meridiem(toks, i + used):
        return None
    return expand_year(tok.text), used

def _iso_date(toks: List[Token], i: int) -> Optional[Tuple[CalendarDate, int]]:
    a, s1, b, s2, c = (_at(toks, i + k) for k in range(5))
    if a.is_number() and s1.is_symbol("-") and b.is_number() and s2.is_symbol("-") and c.is_number():
        return CalendarDate(expand_year(a.text), b.value, c.value), 5
    # basic form YYYYMMDD, any number of year digits
    nxt = _at(toks, i + 1)
    if a.is_number() and len(a.text) >= 5 and not _is_unit(nxt) and not nxt.is_symbol(":", ".", ","):
        digits = a.text
        return CalendarDate(expand_year(digits[:-4]), int(digits[-4:-2]), int(digits[-2:])), 1
    return None

def _us_date(toks: List[Token], i: int) -> Optional[Tuple[CalendarDate, int]]:
    a, s1, b = _at(toks, i), _at(toks, i + 1), _at(toks, i + 2)
    if not (a.is_number() and s1.is_symbol("/") and b.is_number()):
        return None
    s2, c = _at(toks, i + 3), _at(toks, i + 4)
    if s2.is_symbol("/") and c.is_number():
        if len(a.text) >= 4:
            return CalendarDate(expand_year(a.text), b.value, c.value), 5
        return CalendarDate(expand_year(c.text), a.value, b.value), 5
    return CalendarDate(None, a.value, b.value), 3

def _named_date(toks: List[Token], i: int) -> Optional[Tuple[CalendarDate, int]]:
    # 14 nov [2022], 14-nov-2022, 14nov2022, first of nov
    day = _day(toks, i)
    if day:
        j = i + day[1]
        if _at(toks, j).is_word("of"):
            j += 1
        month = _month(toks, j)
        if month:
            j += month[1]
            year = _year(toks, j)
            if year:
                return CalendarDate(year[0], month[0], day[0]), j + year[1] - i
            return CalendarDate(None, month[0], day[0]), j - i

    # nov 14[,] [2022], nov-14-2022
    month = _month(toks, i)
    if month:
        j = i + month[1]
        day = _day(toks, j, hyphen=True)
        if day:
            j += day[1]
            k = j + 1 if _at(toks, j).is_symbol(",") else j
            year = _year(toks, k)
            if year:
                return CalendarDate(year[0], month[0], day[0]), k + year[1] - i
            return CalendarDate(None, month[0], day[0]), j - i
    return None

def match_date(toks: List[Token], i: int) -> Optional[Match]:
    found = _iso_date(toks, i) or _us_date(toks, i) or _named_date(toks, i)
    if found is None:
        return None
    return [found[0]], found[1]

# ---------- time of day ----------

def _clock(toks: List[Token], i: int) -> Optional[Match]:
    h, colon, m = _at(toks, i), _at(toks, i + 1), _at(toks, i + 2)
    if not (h.is_number() and len(h.text) <= 2 and colon.is_symbol(":")
            and m.is_number() and len(m.text) <= 2):
        return None
    j = i + 3
    second = microsecond = 0
    s = _at(toks, j + 1)
    if _at(toks, j).is_symbol(":") and s.is_number() and len(s.text) <= 2:
        second = int(s.text)
        j += 2
        frac = _fraction(toks, j)
        if frac:
            microsecond = frac[0]
            j += frac[1]
    meridiem = None
    mer = _meridiem(toks, j)
    if mer:
        meridiem = mer[0]
        j += mer[1]
    # either am/pm or a numeric correction, not both
    if meridiem and _glued(_at(toks, j)) and _numeric_offset(toks, j):
        return None
    frags: List[Fragment] = [TimeOfDay(int(h.text), int(m.text), second, microsecond, meridiem)]
    zone = _zone(toks, j)
    if zone and _glued(_at(toks, j)):
        frags.append(zone[0])
        j += zone[1]
    return frags, j - i

def _short_time(toks: List[Token], i: int) -> Optional[Match]:
    tok = _at(toks, i)
    if tok.is_word("noon"):
        return [TimeOfDay(12, 0)], 1
    if tok.is_word("midnight"):
        return [TimeOfDay(0, 0)], 1
    if tok.is_number() and len(tok.text) <= 2:
        mer = _meridiem(toks, i + 1)
        if mer:
            return [TimeOfDay(int(tok.text), 0, meridiem=mer[0])], 1 + mer[1]
    return None

def match_time(toks: List[Token], i: int) -> Optional[Match]:
    j = i + 1 if _at(toks, i).is_word("at") else i
    found = _clock(toks, j) or _short_time(toks, j)
    if found is None:
        return None
    return found[0], found[1] + (j - i)

def match_combined(toks: List[Token], i: int) -> Optional[Match]:
    date = _iso_date(toks, i)
    if date is None:
        return None
    j = i + date[1]
    if _at(toks, j).is_word("t"):
        j += 1
    clock = _clock(toks, j)
    if clock is None:
        return None
    return [date[0]] + clock[0], j + clock[1] - i

# ---------- time zones ----------

def _numeric_offset(toks: List[Token], i: int) -> Optional[Tuple[int, int]]:
    tok = _at(toks, i)
    if tok.kind == NUMBER and tok.sign:
        sign, digits, used = tok.sign, tok.text, 1
    elif tok.is_symbol("+", "-") and _at(toks, i + 1).is_number() and _glued(_at(toks, i + 1)):
        sign, digits, used = tok.text, _at(toks, i + 1).text, 2
    else:
        return None
    colon, mins = _at(toks, i + used), _at(toks, i + used + 1)
    if colon.is_symbol(":") and mins.is_number() and len(mins.text) <= 2 and len(digits) <= 2:
        hours, minutes = int(digits), int(mins.text)
        used += 2
    else:
        if len(digits) > 4:
            digits = digits.lstrip("0").rjust(4, "0")
            if len(digits) > 4:
                return None
        if len(digits) <= 2:
            hours, minutes = int(digits), 0
        else:
            hours, minutes = int(digits[:-2]), int(digits[-2:])
    total = hours * 60 + minutes
    return (-total if sign == "-" else total), used

def _zone(toks: List[Token], i: int) -> Optional[Tuple[ZoneOffset, int]]:
    tok = _at(toks, i)
    if tok.kind == WORD and tok.text in ZONES:
        minutes, used = ZONES[tok.text], 1
        if _at(toks, i + 1).is_word("dst"):
            minutes += 60
            used += 1
        # utc+05:30
        if _relative(toks, i + used) is None:
            corr = _numeric_offset(toks, i + used)
            if corr:
                minutes += corr[0]
                used += corr[1]
        return ZoneOffset(minutes, tok.text), used
    # "+3 days" is a relative item, not a zone
    if _relative(toks, i) is not None:
        return None
    off = _numeric_offset(toks, i)
    if off is None:
        return None
    return ZoneOffset(off[0]), off[1]

def match_zone(toks: List[Token], i: int) -> Optional[Match]:
    found = _zone(toks, i)
    if found is None:
        return None
    return [found[0]], found[1]

# ---------- weekdays ----------

def match_weekday(toks: List[Token], i: int) -> Optional[Match]:
    j = i
    tok = _at(toks, j)
    modifier = None
    number = None
    count = None
    if tok.kind == WORD and tok.text in DIRECTIONS:
        modifier = tok.text
        j += 1
    elif tok.kind == WORD and tok.text in ORDINAL_WORDS:
        count = ORDINAL_WORDS[tok.text]
        j += 1
    elif tok.kind == NUMBER:
        number = tok
        j += 1
        if _at(toks, j).is_word(*SUFFIXES) and _glued(_at(toks, j)):
            j += 1
    day = _at(toks, j)
    if day.kind != WORD or day.text not in WEEKDAYS:
        return None
    j += 1
    if _at(toks, j).is_symbol(".") and _glued(_at(toks, j)):
        j += 1
    if _at(toks, j).is_symbol(","):
        j += 1
    if number is not None:
        count = number.value
    return [Weekday(WEEKDAYS[day.text], modifier, count)], j - i

# ---------- relative items ----------

def _relative_element(toks: List[Token], i: int) -> Optional[Tuple[RelativeOffset, int]]:
    tok = _at(toks, i)
    if _is_unit(tok):
        return RelativeOffset(1, UNITS[tok.text]), 1
    frac = _fraction(toks, i + 1) if tok.kind == NUMBER else None
    if frac:
        # only seconds take a fraction; negatives floor like @-1.5
        unit = _at(toks, i + 1 + frac[1])
        if not _is_unit(unit) or UNITS[unit.text] != "second":
            return None
        total = abs(tok.value) * 1_000_000 + frac[0]
        count, microsecond = divmod(-total if tok.sign == "-" else total, 1_000_000)
        return RelativeOffset(count, "second", microsecond), 2 + frac[1]
    unit = _at(toks, i + 1)
    if not _is_unit(unit):
        return None
    if tok.kind == NUMBER:
        return RelativeOffset(tok.value, UNITS[unit.text]), 2
    if tok.kind == WORD and tok.text in DIRECTIONS:
        return RelativeOffset(DIRECTIONS[tok.text], UNITS[unit.text]), 2
    if tok.kind == WORD and tok.text in ORDINAL_WORDS:
        return RelativeOffset(ORDINAL_WORDS[tok.text], UNITS[unit.text]), 2
    return None

def _relative(toks: List[Token], i: int) -> Optional[Match]:
    frags: List[Fragment] = []
    j = i
    while True:
        el = _relative_element(toks, j)
        if el is None:
            sep = _at(toks, j)
            # "1 day and 2 hours", "1 day, 2 hours"
            if frags and (sep.is_word("and") or sep.is_symbol(",")) and _relative_element(toks, j + 1):
                j += 1
                continue
            break
        frags.append(el[0])
        j += el[1]
    if not frags:
        return None
    if _at(toks, j).is_word("ago"):
        frags = [f.negated() for f in frags]
        j += 1
    return frags, j - i

def match_relative(toks: List[Token], i: int) -> Optional[Match]:
    return _relative(toks, i)

# ---------- the rest ----------

def match_epoch(toks: List[Token], i: int) -> Optional[Match]:
    at, num = _at(toks, i), _at(toks, i + 1)
    if not (at.is_symbol("@") and num.kind == NUMBER):
        return None
    used = 2
    microsecond = 0
    frac = _fraction(toks, i + 2)
    if frac:
        microsecond = frac[0]
        used += frac[1]
    total = abs(num.value) * 1_000_000 + microsecond
    if num.sign == "-":
        total = -total
    seconds, microsecond = divmod(total, 1_000_000)
    return [EpochSeconds(seconds, microsecond)], used

def match_keyword(toks: List[Token], i: int) -> Optional[Match]:
    tok = _at(toks, i)
    if tok.is_word(*KEYWORDS):
        return [Keyword(tok.text)], 1
    return None

def match_number(toks: List[Token], i: int) -> Optional[Match]:
    tok = _at(toks, i)
    if tok.is_number() and len(tok.text) <= 4:
        return [PlainNumber(tok.text)], 1
    return None

def match_empty(toks: List[Token], i: int) -> Optional[Match]:
    if i == 0 and toks[0].kind == END:
        return [Empty()], 1
    return None

# ---------- dispatcher ----------

Recognizer = Callable[[List[Token], int], Optional[Match]]

RECOGNIZERS: Tuple[Recognizer, ...] = (
    match_epoch,
    match_combined,
    match_date,
    match_time,
    match_zone,
    match_weekday,
    match_relative,
    match_keyword,
    match_number,
)

def _is_separator(tok: Token) -> bool:
    return tok.is_word("and") or tok.is_symbol(",")

def parse_items(text: str) -> List[Fragment]:
    """Split `text` into fragments, in input order."""
    stream = tokenize(text)
    toks = list(stream)
    if len(toks) == 1:
        return match_empty(toks, 0)[0]

    frags: List[Fragment] = []
    i = 0
    while toks[i].kind != END:
        tok = toks[i]
        if frags and _is_separator(tok) and toks[i + 1].kind != END and not _is_separator(toks[i + 1]):
            i += 1
            continue
        for recognize in RECOGNIZERS:
            found = recognize(toks, i)
            if found:
                break
        else:
            raise InvalidInput(stream.remainder(tok))
        logger.debug("%s matched %r", recognize.__name__, found[0])
        frags.extend(found[0])
        i += found[1]
    return frags
