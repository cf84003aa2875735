# pdt/__init__.py
from .errors import (
    Contradictory, DateParseError, InvalidInput, LexError, NotADuration,
    OutOfRange, ParseError, ResolveError,
)
from .items import parse_items
from .resolver import resolve
from .timeparse import (
    add_relative, parse_datetime, parse_datetime_at, parse_relative,
    parse_relative_time, parse_relative_time_at, parse_timestamp, parse_weekday,
)
from .tokens import tokenize

__all__ = [
    "DateParseError", "LexError", "ParseError", "InvalidInput", "ResolveError",
    "Contradictory", "NotADuration", "OutOfRange",
    "tokenize", "parse_items", "resolve",
    "parse_datetime", "parse_datetime_at", "parse_relative",
    "parse_relative_time", "parse_relative_time_at", "add_relative",
    "parse_timestamp", "parse_weekday",
]

try:
    from importlib.metadata import PackageNotFoundError, version as _dist_version
    __version__ = _dist_version("pdt")
except PackageNotFoundError:
    # Fallback when running from a source checkout
    __version__ = "0.0.0"
