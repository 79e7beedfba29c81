"""
Tests for reconciling model replies into schedule rows
"""

import json
from datetime import date, time

import pytest

from eventplanner.models import EventWindow, StructuredCandidate
from eventplanner.schedule_generator.reconciler import (
    extract_unstructured,
    parse_structured,
    reconcile,
    resolve_date,
    validate_candidate,
)


@pytest.fixture
def window():
    return EventWindow(
        start_date=date(2025, 6, 10),
        end_date=date(2025, 6, 11),
        daily_start_time=time(9, 0),
        daily_end_time=time(17, 0),
    )


@pytest.fixture
def approved():
    return ["Main Hall", "Room 101"]


def schedule_reply(*sessions):
    return "Here is your schedule:\n```json\n" + json.dumps({"schedule": list(sessions)}) + "\n```"


class TestStructuredPath:
    """Test suite for replies that carry a JSON schedule"""

    def test_sessions_are_validated(self, window, approved):
        reply = schedule_reply({
            "date": "2025-06-10",
            "startTime": "10:00 AM",
            "endTime": "11:30 AM",
            "title": "Keynote",
            "speaker": "",
            "location": "main hall",
            "status": "Confirmed",
        })
        rows = reconcile(reply, window, approved)

        assert len(rows) == 1
        row = rows[0]
        assert row.date == date(2025, 6, 10)
        assert (row.start_time, row.end_time) == (time(10, 0), time(11, 30))
        assert row.title == "Keynote"
        assert row.location == "Main Hall"
        assert row.status == "Confirmed"
        assert row.origin == "structured"

    def test_sort_orders_by_date_then_time(self, window, approved):
        reply = schedule_reply(
            {"date": "2025-06-11", "startTime": "10:00 AM", "endTime": "11:00 AM", "title": "Day two"},
            {"date": "2025-06-10", "startTime": "2:00 PM", "endTime": "3:00 PM", "title": "Afternoon"},
            {"date": "2025-06-10", "startTime": "9:00 AM", "endTime": "10:00 AM", "title": "Morning"},
        )
        titles = [row.title for row in reconcile(reply, window, approved)]
        assert titles == ["Morning", "Afternoon", "Day two"]

    def test_speaker_is_always_empty(self, window, approved):
        reply = schedule_reply(
            {"date": "2025-06-10", "startTime": "9:00 AM", "endTime": "10:00 AM", "title": "Talk", "speaker": "Dr. Smith"},
            {"date": "2025-06-10", "startTime": "10:00 AM", "endTime": "11:00 AM", "title": "Panel", "lead": "Ada"},
        )
        assert all(row.speaker == "" for row in reconcile(reply, window, approved))

    def test_defaults_for_missing_fields(self, window, approved):
        rows = reconcile(schedule_reply({"startTime": "1:00 PM", "endTime": "2:00 PM"}), window, approved)

        row = rows[0]
        assert row.date == window.start_date
        assert row.title == "Untitled Session"
        assert row.status == "Tentative"
        assert row.location == "Main Hall"

    def test_out_of_window_session_is_clamped(self, window, approved):
        reply = schedule_reply(
            {"date": "2025-07-01", "startTime": "8:00 AM", "endTime": "8:45 AM", "title": "Breakfast"},
            {"date": "2025-06-01", "startTime": "4:50 PM", "endTime": "5:30 PM", "title": "Wrap up"},
        )
        rows = reconcile(reply, window, approved)

        assert [(row.date, row.start_time, row.end_time) for row in rows] == [
            (date(2025, 6, 10), time(16, 45), time(17, 0)),
            (date(2025, 6, 11), time(9, 0), time(9, 45)),
        ]

    def test_unparseable_times_get_defaults(self, window, approved):
        reply = schedule_reply({"date": "2025-06-10", "startTime": "morning", "endTime": "later", "title": "Intro"})
        row = reconcile(reply, window, approved)[0]
        assert (row.start_time, row.end_time) == (time(9, 0), time(10, 0))

    def test_truncated_reply_is_repaired(self, window, approved):
        reply = '{"schedule":[{"title":"A","startTime":"9:00 AM","endTime":"10:00 AM"'
        rows = reconcile(reply, window, approved)

        assert len(rows) == 1
        assert rows[0].title == "A"
        assert rows[0].origin == "structured"

    def test_malformed_items_are_skipped(self):
        reply = json.dumps({"schedule": ["not a session", {"title": "Real", "startTime": "9:00 AM"}]})
        candidates = parse_structured(reply)
        assert [c.title for c in candidates] == ["Real"]

    def test_missing_or_empty_schedule_is_not_structured(self):
        assert parse_structured('{"sessions": []}') is None
        assert parse_structured('{"schedule": []}') is None
        assert parse_structured('no json') is None


class TestUnstructuredPath:
    """Test suite for free-text fallback extraction"""

    def test_lines_and_day_markers(self, window, approved):
        text = (
            "Day 1\n"
            "9:00 AM - 10:00 AM Keynote (Main Hall)\n"
            "10:15 AM to 11:00 AM: Workshop [room 101]\n"
            "Day Two\n"
            "8:00 AM – 8:45 AM Breakfast\n"
        )
        candidates = extract_unstructured(text, window, approved)

        assert [c.title for c in candidates] == ["Keynote", "Workshop", "Breakfast"]
        assert [c.location for c in candidates] == ["Main Hall", "Room 101", "Main Hall"]
        assert [c.date for c in candidates] == [date(2025, 6, 10), date(2025, 6, 10), date(2025, 6, 11)]
        assert all(c.origin == "extracted" for c in candidates)

        # First session of the second day starts at the daily start, length kept
        assert (candidates[2].start_time, candidates[2].end_time) == ("9:00 AM", "9:45 AM")
        assert candidates[2].source_line == "8:00 AM – 8:45 AM Breakfast"

    def test_reconcile_uses_extraction_when_json_is_unusable(self, window, approved):
        text = "Schedule {draft}\nDay 2\n1:00 PM - 2:00 PM Lunch & Learn\nfirst day\n9:30 AM - 10:30 AM Welcome\n"
        rows = reconcile(text, window, approved)

        assert [(row.date, row.title) for row in rows] == [
            (date(2025, 6, 10), "Welcome"),
            (date(2025, 6, 11), "Lunch & Learn"),
        ]
        assert all(row.origin == "extracted" for row in rows)

    def test_day_marker_past_event_end(self, window, approved):
        rows = reconcile("Day 99999999\n9:00 AM - 10:00 AM Keynote\n", window, approved)

        assert [(row.date, row.title) for row in rows] == [(window.end_date, "Keynote")]
        assert (rows[0].start_time, rows[0].end_time) == (time(9, 0), time(10, 0))

    def test_late_day_marker_continues_last_day(self, window, approved):
        text = (
            "Day 2\n"
            "10:00 AM - 11:00 AM Talk\n"
            "Day 5\n"
            "8:00 AM - 8:45 AM Late Breakfast\n"
        )
        candidates = extract_unstructured(text, window, approved)

        assert [c.date for c in candidates] == [window.end_date, window.end_date]
        # Not the first session of its day, so extraction leaves the start alone
        assert (candidates[1].start_time, candidates[1].end_time) == ("8:00 AM", "8:45 AM")

    def test_deeply_nested_json_gives_opening_session(self, window, approved):
        rows = reconcile('{"schedule": ' + '[' * 100000 + '}', window, approved)

        assert [(row.title, row.origin) for row in rows] == [("Opening Session", "synthesized")]

    def test_empty_response_gives_opening_session(self, window, approved):
        for text in ["", "Sorry, I can't help with that."]:
            rows = reconcile(text, window, approved)

            assert len(rows) == 1
            row = rows[0]
            assert row.title == "Opening Session"
            assert row.date == window.start_date
            assert (row.start_time, row.end_time) == (time(9, 0), time(10, 0))
            assert row.location == "Main Hall"
            assert row.origin == "synthesized"

    def test_opening_session_without_locations(self, window):
        rows = reconcile("", window, [])
        assert rows[0].location == "TBD"


class TestValidation:
    """Test suite for per-candidate validation"""

    @pytest.mark.parametrize("value, expected", [
        ("2025-06-11", date(2025, 6, 11)),
        ("June 11, 2025", date(2025, 6, 11)),
        (date(2025, 5, 1), date(2025, 6, 10)),
        ("2025-12-31", date(2025, 6, 11)),
        ("whenever", date(2025, 6, 10)),
        (None, date(2025, 6, 10)),
    ])
    def test_resolve_date(self, window, value, expected):
        assert resolve_date(value, window) == expected

    def test_non_string_fields_are_ignored(self, window, approved):
        candidate = StructuredCandidate.model_validate({
            "startTime": "9:00 AM",
            "endTime": "10:00 AM",
            "title": {"text": "Nested"},
            "location": ["Room 101"],
            "status": 3,
        })
        row = validate_candidate(candidate, window, approved)

        assert row.title == "Untitled Session"
        assert row.location == "Main Hall"
        assert row.status == "3"
