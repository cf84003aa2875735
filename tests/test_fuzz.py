"""Property-based tests: any input either parses or fails with a DateParseError."""

from datetime import datetime, timezone

from hypothesis import HealthCheck, given, settings, strategies as st

from pdt import DateParseError, add_relative, parse_datetime_at, parse_relative, parse_relative_time_at

REF = datetime(2022, 11, 14, 10, 30, 15, tzinfo=timezone.utc)

PIECES = [
    "2022", "-", "+", "11", "14", "/", ":", ".", ",", "@", "(", ")", " ", "t", "z",
    "nov", "friday", "next", "last", "ago", "and", "day", "hours", "pm", "a.m.",
    "utc", "est", "tomorrow", "now", "3rd", "of", "9" * 30, "0", "60", "99999",
    "seconds", "1.5", "dst", "noon",
]

grammar_like = st.lists(st.sampled_from(PIECES), max_size=10).map("".join)
inputs = st.one_of(st.text(max_size=40), grammar_like)

FUZZ = settings(max_examples=300, deadline=None, suppress_health_check=[HealthCheck.too_slow])


class TestFuzz:
    """Entry points are total over arbitrary text."""

    @FUZZ
    @given(text=inputs)
    def test_parse_datetime_at(self, text):
        try:
            result = parse_datetime_at(text, REF)
        except DateParseError:
            return
        assert result.utcoffset() is not None

    @FUZZ
    @given(text=inputs)
    def test_parse_relative(self, text):
        try:
            parse_relative(text)
        except DateParseError:
            pass

    @FUZZ
    @given(text=inputs)
    def test_parse_relative_time_at(self, text):
        try:
            parse_relative_time_at(text, REF)
        except DateParseError:
            pass

    @FUZZ
    @given(
        text=inputs,
        start=st.sampled_from([
            REF,
            datetime(1, 1, 1, tzinfo=timezone.utc),
            datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc),
        ]),
    )
    def test_add_relative(self, text, start):
        try:
            add_relative(text, start)
        except DateParseError:
            pass

    @FUZZ
    @given(data=st.binary(max_size=40))
    def test_arbitrary_bytes(self, data):
        try:
            parse_datetime_at(data.decode("utf-8", errors="replace"), REF)
        except DateParseError:
            pass
