"""Integration tests for the session (controller intent) endpoints."""

from datetime import UTC, datetime, timedelta

import pytest
from httpx import AsyncClient

from timekeeper.db.json_store import JsonStore
from timekeeper.main import app


def _tomorrow() -> str:
    return (datetime.now(UTC) + timedelta(days=1)).isoformat()


async def _schedule(client: AsyncClient, **extra) -> dict:
    body = {"title": "Planning", "dateTime": _tomorrow(), **extra}
    response = await client.post("/api/session/meetings", json=body)
    assert response.status_code == 201
    return response.json()


class TestState:
    """Tests for reading application state."""

    async def test_initial_state(self, client: AsyncClient):
        """A fresh app has defaults, no meetings and an idle timer."""
        response = await client.get("/api/session/state")
        assert response.status_code == 200
        data = response.json()
        assert data["meetings"] == []
        assert len(data["templates"]) == 3
        assert data["templates"][0]["agendaText"].startswith("Yesterday's progress (")
        assert data["timer"]["state"] == "idle"
        assert data["kpis"]["totalMeetings"] == 0
        assert data["completedMeetings"] == []
        assert data["totalTime"] == 0
        assert data["settings"] == {"theme": "light", "soundEnabled": True}
        assert data["degraded"] is False
        assert data["backend"] == "store"

    async def test_not_initialized(self, client: AsyncClient):
        """Without a controller the session API is unavailable."""
        timekeeper = app.state.timekeeper
        del app.state.timekeeper
        try:
            response = await client.get("/api/session/state")
        finally:
            app.state.timekeeper = timekeeper
        assert response.status_code == 503


class TestScheduling:
    """Tests for POST /api/session/meetings."""

    async def test_schedule_from_template(self, client: AsyncClient):
        """A template meeting copies its agenda."""
        meeting = await _schedule(client, templateId="template_daily_standup")
        assert meeting["status"] == "scheduled"
        assert meeting["totalDuration"] == 15
        assert len(meeting["agenda"]) == 4

    async def test_schedule_from_text(self, client: AsyncClient):
        """Free-text agendas are parsed."""
        meeting = await _schedule(client, agendaText="Intro (10 min)\nScope")
        assert [(i["title"], i["duration"]) for i in meeting["agenda"]] == [
            ("Intro", 10),
            ("Scope", 20),
        ]

    @pytest.mark.parametrize(
        ("body", "kind"),
        [
            ({"title": "", "dateTime": "2099-01-01T10:00"}, "EmptyTitle"),
            ({"title": "Planning"}, "MissingRequiredField"),
            (
                {"title": "Planning", "dateTime": "2000-01-01T10:00"},
                "PastOrInvalidDate",
            ),
            (
                {
                    "title": "Planning",
                    "dateTime": "2099-01-01T10:00",
                    "agendaText": "Intro (0 min)",
                },
                "MissingRequiredField",
            ),
        ],
    )
    async def test_validation_errors(self, client: AsyncClient, body: dict, kind: str):
        """Rejected input is a 400 naming the error kind."""
        response = await client.post("/api/session/meetings", json=body)
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == kind

    async def test_storage_failure(self, client: AsyncClient, store: JsonStore):
        """An unwritable store is a 503."""
        store.path.write_text("{broken")
        response = await client.post(
            "/api/session/meetings", json={"title": "Planning", "dateTime": _tomorrow()}
        )
        assert response.status_code == 503

    async def test_delete(self, client: AsyncClient):
        """Scheduled meetings can be deleted."""
        meeting = await _schedule(client)
        response = await client.delete(f"/api/session/meetings/{meeting['id']}")
        assert response.status_code == 204
        state = (await client.get("/api/session/state")).json()
        assert state["meetings"] == []

    async def test_delete_unknown(self, client: AsyncClient):
        """Deleting an unknown meeting is a 404."""
        response = await client.delete("/api/session/meetings/meeting_missing")
        assert response.status_code == 404


class TestTemplates:
    """Tests for template intents."""

    async def test_create_edit_delete(self, client: AsyncClient):
        """Templates are parsed from text and can be edited and deleted."""
        response = await client.post(
            "/api/session/templates",
            json={"name": "Retro", "totalDuration": 30, "agendaText": "Good\nBad"},
        )
        assert response.status_code == 201
        template = response.json()
        assert template["description"] == "Good, Bad"
        assert [i["duration"] for i in template["agenda"]] == [15, 15]

        response = await client.put(
            f"/api/session/templates/{template['id']}",
            json={"name": "Retro", "duration": 20, "agenda": "Actions"},
        )
        assert response.status_code == 200
        assert response.json()["totalDuration"] == 20

        response = await client.delete(f"/api/session/templates/{template['id']}")
        assert response.status_code == 204
        response = await client.delete(f"/api/session/templates/{template['id']}")
        assert response.status_code == 404

    async def test_missing_fields(self, client: AsyncClient):
        """A template without a name is a 400."""
        response = await client.post(
            "/api/session/templates",
            json={"totalDuration": 30, "agendaText": "Topic"},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "MissingRequiredField"

    async def test_zero_minute_item(self, client: AsyncClient, timekeeper):
        """An agenda line of 0 minutes is a 400 and leaves templates alone."""
        response = await client.post(
            "/api/session/templates",
            json={
                "name": "Retro",
                "totalDuration": 30,
                "agendaText": "Intro (0 min)\nMore",
            },
        )
        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "MissingRequiredField"
        assert len(timekeeper.state.templates) == 3

    async def test_edit_unknown(self, client: AsyncClient):
        """Editing an unknown template is a 404."""
        response = await client.put(
            "/api/session/templates/template_missing",
            json={"name": "X", "totalDuration": 10, "agendaText": "Topic"},
        )
        assert response.status_code == 404


class TestTimer:
    """Tests for timer intents."""

    async def test_full_session(self, client: AsyncClient, fake_ticker):
        """Start, pause, resume, stop and finish a meeting."""
        meeting = await _schedule(client, templateId="template_daily_standup")

        response = await client.post(f"/api/session/timer/start/{meeting['id']}")
        assert response.status_code == 200
        view = response.json()
        assert view["state"] == "running"
        assert view["remainingSeconds"] == 900
        assert view["meetingTitle"] == "Planning"

        fake_ticker.fire(300)
        view = (await client.post("/api/session/timer/pause")).json()
        assert view["state"] == "paused"
        assert view["remainingSeconds"] == 600

        view = (await client.post("/api/session/timer/resume")).json()
        assert view["state"] == "running"

        view = (await client.post("/api/session/timer/stop")).json()
        assert view["state"] == "stopped"
        assert view["plannedDuration"] == 15
        assert view["actualDuration"] == 5

        response = await client.post("/api/session/timer/finish")
        assert response.status_code == 200
        record = response.json()
        assert record["meetingId"] == meeting["id"]
        assert record["efficiency"] == 300

        state = (await client.get("/api/session/state")).json()
        assert state["meetings"] == []
        assert state["timer"]["state"] == "idle"
        assert state["totalTime"] == 5
        assert state["kpis"]["onTimeRatePercent"] == 100

    async def test_use_template_and_snooze(self, client: AsyncClient, fake_ticker):
        """A template meeting can be snoozed after it runs out."""
        response = await client.post(
            "/api/session/templates/template_daily_standup/use"
        )
        assert response.json()["state"] == "running"
        fake_ticker.fire(900)

        view = (await client.post("/api/session/timer/snooze")).json()
        assert view["state"] == "running"
        assert view["remainingSeconds"] == 300

        fake_ticker.fire(300)
        view = (
            await client.post("/api/session/timer/snooze", json={"extraSeconds": 60})
        ).json()
        assert view["totalDurationSeconds"] == 1260

    async def test_conflicts(self, client: AsyncClient):
        """Invalid transitions are 409s."""
        assert (await client.post("/api/session/timer/pause")).status_code == 409
        assert (await client.post("/api/session/timer/finish")).status_code == 409
        assert (await client.post("/api/session/timer/snooze")).status_code == 409

        first = await _schedule(client)
        second = await _schedule(client)
        await client.post(f"/api/session/timer/start/{first['id']}")
        response = await client.post(f"/api/session/timer/start/{second['id']}")
        assert response.status_code == 409

    async def test_unknown_meeting(self, client: AsyncClient):
        """Starting an unknown meeting is a 404."""
        response = await client.post("/api/session/timer/start/meeting_missing")
        assert response.status_code == 404

    async def test_invalid_snooze(self, client: AsyncClient):
        """Snooze lengths must be positive."""
        response = await client.post(
            "/api/session/timer/snooze", json={"extraSeconds": 0}
        )
        assert response.status_code == 422


class TestEventsAndSettings:
    """Tests for notifications, KPIs and preferences."""

    async def test_events(self, client: AsyncClient, timekeeper):
        """Recent notifications are listed oldest first."""
        await _schedule(client)
        await client.post("/api/session/meetings", json={"title": ""})
        await timekeeper.event_bus.drain()

        events = (await client.get("/api/session/events")).json()
        assert [e["event_type"] for e in events] == [
            "MeetingScheduled",
            "ValidationFailed",
        ]
        assert events[1]["data"]["kind"] == "EmptyTitle"

    async def test_kpis(self, client: AsyncClient):
        """KPIs start at zero."""
        response = await client.get("/api/session/kpis")
        assert response.json()["totalMeetings"] == 0

    async def test_settings(self, client: AsyncClient):
        """Preferences can be changed one at a time."""
        response = await client.put("/api/session/settings", json={"theme": "dark"})
        assert response.json() == {"theme": "dark", "soundEnabled": True}
        response = await client.put(
            "/api/session/settings", json={"soundEnabled": False}
        )
        assert response.json() == {"theme": "dark", "soundEnabled": False}
