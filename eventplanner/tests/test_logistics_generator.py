"""
Tests for the LogisticsGenerator action
"""

from datetime import date

import pytest

from eventplanner.lib.exceptions import PlannerError
from eventplanner.schedule_generator.logistics_generator import LogisticsGenerator
from eventplanner.models import EventDetails


class TestLogisticsGenerator:
    """Test suite for logistics prompts and replies"""

    @pytest.fixture
    def event(self):
        return EventDetails(
            event_name="Beach Day",
            start_date=date(2025, 7, 4),
            tagline="Sun and sand",
            attendance_goal=120,
        )

    @pytest.fixture
    def generator(self):
        return LogisticsGenerator(model="dummy")

    def test_prompt_includes_attendance_and_notes(self, generator, event):
        prompt = generator.build_prompt(
            event,
            ["General Event", "Volleyball Tournament", "BBQ"],
            {"Volleyball Tournament": "Four courts"},
        )

        assert "The total expected attendance is 120." in prompt
        assert "Tagline: Sun and sand" in prompt
        assert '- For the "General Event" (overall needs like registration, signage, etc.)' in prompt
        assert '- For "Volleyball Tournament": Note - Four courts' in prompt
        assert '- For "BBQ"\n' in prompt
        assert "exact names: General Event, Volleyball Tournament, BBQ." in prompt

    def test_generate_with_dummy_model(self, generator, event):
        rows = generator.generate_logistics(event, ["General Event", "Volleyball Tournament"])

        assert [(row.item, row.quantity, row.related_schedule_item) for row in rows] == [
            ("Guest Check-in Desks", "2", "General Event"),
            ("3 Volleyball Nets", "1", "Volleyball Tournament"),
        ]
        assert all(row.status == "Needed" for row in rows)

    def test_defaults_for_missing_values(self, generator, event, monkeypatch):
        reply = '{"logistics": [{"item": null, "quantity": 4}, {"item": "Cones"}]}'
        monkeypatch.setattr(generator, "prompt", lambda prompt, schema=None: reply)

        rows = generator.generate_logistics(event, ["General Event"])

        assert [(row.item, row.quantity, row.related_schedule_item) for row in rows] == [
            ("Unnamed Item", "4", "General Event"),
            ("Cones", "1", "General Event"),
        ]

    def test_schema_is_requested(self, generator, event, monkeypatch):
        captured = {}

        def fake_prompt(prompt, schema=None):
            captured["schema"] = schema
            return '{"logistics": [{"item": "Tables", "quantity": "10", "relatedScheduleItem": "General Event"}]}'

        monkeypatch.setattr(generator, "prompt", fake_prompt)
        generator.generate_logistics(event, ["General Event"])

        assert captured["schema"]["name"] == "logistics"
        assert "logistics" in captured["schema"]["properties"]

    @pytest.mark.parametrize("reply", [
        '{"logistics": []}',
        '{"items": [{"item": "Tables"}]}',
        '{"logistics": ["Tables"]}',
        'No logistics needed.',
    ])
    def test_invalid_reply_raises(self, generator, event, monkeypatch, reply):
        monkeypatch.setattr(generator, "prompt", lambda prompt, schema=None: reply)
        with pytest.raises(PlannerError):
            generator.generate_logistics(event, ["General Event"])

    def test_no_items_raises(self, generator, event):
        with pytest.raises(PlannerError):
            generator.generate_logistics(event, [])
