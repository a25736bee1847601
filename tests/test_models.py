"""Tests for canonical data models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from timekeeper.models import (
    AgendaItem,
    AnalyticsLog,
    CompletionRecord,
    Meeting,
    MeetingStatus,
    Template,
    UserSettings,
    new_id,
)


class TestNewId:
    """Tests for record id generation."""

    def test_prefixed(self):
        """Ids carry the entity prefix."""
        assert new_id("meeting").startswith("meeting_")

    def test_unique(self):
        """Two ids are never the same."""
        assert new_id("template") != new_id("template")


class TestAgendaItem:
    """Tests for AgendaItem model."""

    def test_rejects_empty_title(self):
        """Empty title should fail validation."""
        with pytest.raises(ValidationError):
            AgendaItem(title="", duration=5)

    def test_rejects_zero_duration(self):
        """Duration must be at least one minute."""
        with pytest.raises(ValidationError):
            AgendaItem(title="Intro", duration=0)


class TestTemplate:
    """Tests for Template model."""

    def test_accepts_legacy_duration_key(self):
        """Stored documents may use 'duration' instead of 'totalDuration'."""
        template = Template.model_validate(
            {"id": "t1", "name": "Sync", "duration": 20, "agenda": []}
        )
        assert template.total_duration == 20

    def test_document_uses_camel_case(self):
        """to_document writes camelCase keys."""
        template = Template(
            id="t1",
            name="Sync",
            total_duration=20,
            agenda=[AgendaItem(title="Updates", duration=20)],
        )
        doc = template.to_document()
        assert doc["totalDuration"] == 20
        assert "createdAt" in doc
        assert doc["agenda"] == [{"title": "Updates", "duration": 20}]

    def test_rejects_non_positive_duration(self):
        """Template duration must be positive."""
        with pytest.raises(ValidationError):
            Template(id="t1", name="Sync", total_duration=0)


class TestMeeting:
    """Tests for Meeting model."""

    def test_defaults_to_scheduled(self):
        """New meetings start in the scheduled state."""
        meeting = Meeting(
            id="m1", title="Standup", date_time=datetime.now(UTC), total_duration=15
        )
        assert meeting.status == MeetingStatus.SCHEDULED
        assert meeting.actual_start_time is None

    def test_round_trips_through_document(self):
        """A stored document validates back to the same meeting."""
        meeting = Meeting(
            id="m1",
            title="Standup",
            date_time=datetime(2030, 1, 18, 10, 0, tzinfo=UTC),
            template_id="template_daily_standup",
            agenda=[AgendaItem(title="Updates", duration=15)],
            total_duration=15,
        )
        doc = meeting.to_document()
        assert doc["templateId"] == "template_daily_standup"
        assert doc["status"] == "scheduled"
        assert Meeting.model_validate(doc) == meeting

    def test_naive_timestamps_are_utc(self):
        """Documents without an offset are read as UTC."""
        meeting = Meeting.model_validate(
            {
                "id": "m1",
                "title": "Standup",
                "dateTime": "2030-01-18T10:00:00",
                "totalDuration": 15,
                "actualStartTime": "2030-01-18T10:02:00",
            }
        )
        assert meeting.date_time == datetime(2030, 1, 18, 10, 0, tzinfo=UTC)
        assert meeting.actual_start_time.tzinfo is not None


class TestAnalyticsModels:
    """Tests for completion records and settings."""

    def test_on_time_at_exactly_100(self):
        """Efficiency of exactly 100 counts as on time."""
        record = CompletionRecord(
            meeting_id="m1",
            title="Standup",
            planned_duration=15,
            actual_duration=15,
            efficiency=100,
        )
        assert record.on_time is True

    def test_late_is_not_on_time(self):
        """Efficiency below 100 is late."""
        record = CompletionRecord(
            meeting_id="m1",
            title="Standup",
            planned_duration=15,
            actual_duration=20,
            efficiency=75,
        )
        assert record.on_time is False

    def test_empty_log(self):
        """An empty analytics document validates to an empty log."""
        log = AnalyticsLog.model_validate({})
        assert log.completed_meetings == []
        assert log.total_time == 0

    def test_settings_defaults(self):
        """Default preferences: light theme, sound on."""
        prefs = UserSettings()
        assert prefs.theme == "light"
        assert prefs.sound_enabled is True
        assert prefs.to_document() == {"theme": "light", "soundEnabled": True}
