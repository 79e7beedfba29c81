"""
Tests for parsing, normalizing and formatting schedule times
"""

from datetime import datetime, time

import pytest

from eventplanner.schedule_generator.time_parser import (
    format_time,
    minutes_of,
    parse_time,
    time_from_minutes,
)


class TestParseTime:
    """Test suite for parse_time"""

    @pytest.mark.parametrize("text, expected", [
        ("9:00 AM", time(9, 0)),
        ("2:30pm", time(14, 30)),
        ("12:00 PM", time(12, 0)),
        ("12:15 AM", time(0, 15)),
        ("14:00", time(14, 0)),
        ("2.45 PM", time(14, 45)),
        ("  10:05 am ", time(10, 5)),
    ])
    def test_accepted_formats(self, text, expected):
        result = parse_time(text)
        assert result.ok
        assert result.value == expected
        assert result.error is None

    def test_time_value_is_returned_unchanged(self):
        """Parsing an already-normalized time gives the same value back"""
        value = time(10, 0, 1)
        assert parse_time(value).value == value
        assert parse_time(parse_time("4:15 PM").value).value == time(16, 15)

    def test_datetime_contributes_its_time(self):
        assert parse_time(datetime(2025, 6, 10, 8, 45)).value == time(8, 45)

    @pytest.mark.parametrize("text", [
        "", "noon", "25:00", "10:75", "13:00 PM", "0:30 AM", "9 AM", "9:00:00 AM",
    ])
    def test_rejected_values(self, text):
        result = parse_time(text)
        assert not result.ok
        assert result.value is None
        assert result.error

    def test_missing_value(self):
        assert parse_time(None).error == "missing time"


class TestTimeArithmetic:
    """Test suite for minute conversions and formatting"""

    def test_minutes_of_includes_seconds(self):
        assert minutes_of(time(10, 0, 30)) == pytest.approx(600.5)

    def test_time_from_minutes_wraps_past_midnight(self):
        assert time_from_minutes(24 * 60 + 15) == time(0, 15)
        assert time_from_minutes(9 * 60 + 44.6) == time(9, 45)

    @pytest.mark.parametrize("value, text", [
        (time(0, 5), "12:05 AM"),
        (time(9, 0), "9:00 AM"),
        (time(12, 30), "12:30 PM"),
        (time(17, 0), "5:00 PM"),
    ])
    def test_format_time(self, value, text):
        assert format_time(value) == text
        assert parse_time(text).value == value
