# pdt/errors.py
"""
Error types raised by the parser.

Everything derives from ValueError so callers that already guard
user input with `except ValueError` keep working.
"""
from __future__ import annotations
from typing import Optional


class DateParseError(ValueError):
    """Base class for every parse/resolve failure."""


class LexError(DateParseError):
    pass


class ParseError(DateParseError):
    pass


class InvalidInput(ParseError):
    def __init__(self, remainder: str, message: Optional[str] = None):
        self.remainder = remainder
        super().__init__(message or f"invalid date/time expression near {remainder!r}")


class ResolveError(DateParseError):
    pass


class Contradictory(ResolveError):
    pass


class NotADuration(ResolveError):
    pass


class OutOfRange(ResolveError):
    pass
