"""Unit tests for item recognition."""

import pytest

from pdt.errors import InvalidInput, LexError
from pdt.items import (
    CalendarDate, Empty, EpochSeconds, Keyword, PlainNumber, RelativeOffset,
    TimeOfDay, Weekday, ZoneOffset, expand_year, parse_items,
)


class TestCalendarDates:
    """Numeric and named date forms."""

    @pytest.mark.parametrize("text", [
        "2022-11-14",
        "20221114",
        "11/14/2022",
        "2022/11/14",
        "14 nov 2022",
        "14-nov-2022",
        "14nov2022",
        "nov 14, 2022",
        "November 14 2022",
        "nov-14-2022",
        "14th of November 2022",
    ])
    def test_full_date(self, text):
        assert parse_items(text) == [CalendarDate(2022, 11, 14)]

    def test_two_digit_years(self):
        assert parse_items("11/14/22") == [CalendarDate(2022, 11, 14)]
        assert parse_items("11/14/69") == [CalendarDate(1969, 11, 14)]
        assert expand_year("68") == 2068
        assert expand_year("0068") == 68

    def test_year_less(self):
        assert parse_items("nov 14") == [CalendarDate(None, 11, 14)]
        assert parse_items("11/14") == [CalendarDate(None, 11, 14)]
        assert parse_items("first of march") == [CalendarDate(None, 3, 1)]

    def test_shape_only(self):
        # ranges are checked when resolving
        assert parse_items("2022-13-45") == [CalendarDate(2022, 13, 45)]


class TestTimes:
    """Clock times, meridiem and attached zones."""

    def test_clock(self):
        assert parse_items("10:30") == [TimeOfDay(10, 30)]
        assert parse_items("10:30:45") == [TimeOfDay(10, 30, 45)]
        assert parse_items("10:30:45.5") == [TimeOfDay(10, 30, 45, 500000)]

    def test_meridiem(self):
        assert parse_items("3pm") == [TimeOfDay(3, 0, meridiem="pm")]
        assert parse_items("3 p.m.") == [TimeOfDay(3, 0, meridiem="pm")]
        assert parse_items("11:15am") == [TimeOfDay(11, 15, meridiem="am")]

    def test_named_times(self):
        assert parse_items("at noon") == [TimeOfDay(12, 0)]
        assert parse_items("midnight") == [TimeOfDay(0, 0)]

    def test_attached_zone(self):
        assert parse_items("10:00z") == [TimeOfDay(10, 0), ZoneOffset(0, "z")]
        assert parse_items("10:10:55-0500") == [TimeOfDay(10, 10, 55), ZoneOffset(-300)]

    def test_meridiem_excludes_glued_offset(self):
        with pytest.raises(InvalidInput):
            parse_items("10:00pm+01:00")
        assert parse_items("10:00pm +01:00") == [TimeOfDay(10, 0, meridiem="pm"), ZoneOffset(60)]
        assert parse_items("10:00+01:00") == [TimeOfDay(10, 0), ZoneOffset(60)]

    def test_combined(self):
        assert parse_items("2022-11-14T06:37:47") == [CalendarDate(2022, 11, 14), TimeOfDay(6, 37, 47)]
        assert parse_items("2022-11-14 06:37:47 +01:00") == [
            CalendarDate(2022, 11, 14), TimeOfDay(6, 37, 47), ZoneOffset(60),
        ]


class TestZones:
    """Named and numeric offsets."""

    @pytest.mark.parametrize("text,minutes", [
        ("utc", 0),
        ("UTC", 0),
        ("est", -300),
        ("ist", 330),
        ("+0530", 330),
        ("-05:00", -300),
        ("+3", 180),
        ("utc+05:30", 330),
        ("cet dst", 120),
    ])
    def test_offsets(self, text, minutes):
        [zone] = parse_items(text)
        assert zone.minutes == minutes

    def test_signed_number_before_unit_is_relative(self):
        assert parse_items("-1 hour") == [RelativeOffset(-1, "hour")]


class TestWeekdays:
    """Weekday names with modifiers and counts."""

    def test_bare(self):
        assert parse_items("fri") == [Weekday(4)]
        assert parse_items("Friday,") == [Weekday(4)]

    def test_modifiers(self):
        assert parse_items("next monday") == [Weekday(0, "next")]
        assert parse_items("last sunday")[0].offset == -1

    def test_counts(self):
        assert parse_items("3rd friday") == [Weekday(4, count=3)]
        assert parse_items("first tue")[0].offset == 1


class TestRelative:
    """Relative offsets and chains."""

    def test_single(self):
        assert parse_items("2 days") == [RelativeOffset(2, "day")]
        assert parse_items("week") == [RelativeOffset(1, "week")]
        assert parse_items("next week") == [RelativeOffset(1, "week")]
        assert parse_items("last hour") == [RelativeOffset(-1, "hour")]

    def test_ago_negates_whole_chain(self):
        assert parse_items("1 year 2 months ago") == [
            RelativeOffset(-1, "year"), RelativeOffset(-2, "month"),
        ]

    def test_separators_inside_chain(self):
        assert parse_items("1 hour, 30 minutes and 5 secs") == [
            RelativeOffset(1, "hour"), RelativeOffset(30, "minute"), RelativeOffset(5, "second"),
        ]

    def test_ago_only_reaches_back_to_its_chain(self):
        assert parse_items("tomorrow 2 days ago") == [Keyword("tomorrow"), RelativeOffset(-2, "day")]

    def test_fractional_seconds(self):
        assert parse_items("1.5 seconds") == [RelativeOffset(1, "second", 500000)]
        assert parse_items("-2.25 secs") == [RelativeOffset(-3, "second", 750000)]
        assert parse_items("1.5 seconds ago") == [RelativeOffset(-2, "second", 500000)]

    def test_fraction_only_for_seconds(self):
        with pytest.raises(InvalidInput):
            parse_items("1.5 hours")

    def test_unit_glued_to_number(self):
        assert parse_items("2weeks 1hour") == [RelativeOffset(2, "week"), RelativeOffset(1, "hour")]


class TestMisc:
    """Epochs, keywords, plain numbers and empty input."""

    def test_epoch(self):
        assert parse_items("@1344000") == [EpochSeconds(1344000)]
        assert parse_items("@-1.5") == [EpochSeconds(-2, 500000)]

    def test_keywords(self):
        assert parse_items("now") == [Keyword("now")]
        assert parse_items("yesterday") == [Keyword("yesterday")]

    def test_plain_number(self):
        assert parse_items("2021") == [PlainNumber("2021")]
        assert parse_items("nov 14 2021") == [CalendarDate(2021, 11, 14)]

    @pytest.mark.parametrize("text", ["", "   ", "(just a comment)"])
    def test_empty(self, text):
        assert parse_items(text) == [Empty()]

    def test_mixed_order_kept(self):
        assert parse_items("3pm next friday") == [TimeOfDay(3, 0, meridiem="pm"), Weekday(4, "next")]


class TestFailures:
    """Inputs no recognizer accepts."""

    @pytest.mark.parametrize("text", ["blorp", "and", "1 day and", ", now", "@", "nov", "10:30 ;"])
    def test_invalid(self, text):
        with pytest.raises(InvalidInput):
            parse_items(text)

    def test_remainder_reported(self):
        with pytest.raises(InvalidInput) as exc:
            parse_items("tomorrow blorp 3pm")
        assert exc.value.remainder == "blorp 3pm"

    def test_lex_error(self):
        with pytest.raises(LexError):
            parse_items("tomorrow (")
