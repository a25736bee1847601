"""Tests for the local fallback snapshot."""

import json
from pathlib import Path

import pytest

from timekeeper.adapters.base import TimekeeperBackend
from timekeeper.adapters.local_snapshot import LocalSnapshot
from timekeeper.agenda.catalog import default_templates
from timekeeper.errors import NotFoundError, PersistenceError
from timekeeper.models.analytics import AnalyticsLog, UserSettings


class TestKeyValue:
    """Tests for raw key access."""

    async def test_missing_file_reads_defaults(self, local_snapshot: LocalSnapshot):
        """An absent snapshot behaves like an empty one."""
        assert await local_snapshot.get("meetings", []) == []
        assert await local_snapshot.list_meetings() == []
        assert await local_snapshot.load_analytics() == AnalyticsLog()
        assert await local_snapshot.load_settings() == UserSettings()

    async def test_put_then_get(self, local_snapshot: LocalSnapshot):
        """Values are written to disk as JSON."""
        await local_snapshot.put("hasVisited", True)
        assert json.loads(local_snapshot.path.read_text()) == {"hasVisited": True}

    async def test_corrupt_file_treated_as_empty(self, tmp_path: Path):
        """A corrupt snapshot is ignored rather than fatal."""
        path = tmp_path / "local.json"
        path.write_text("][")
        snapshot = LocalSnapshot(path=path)
        assert await snapshot.list_templates() == []

    async def test_write_failure(self, tmp_path: Path):
        """Unwritable locations raise PersistenceError."""
        blocker = tmp_path / "file"
        blocker.write_text("")
        snapshot = LocalSnapshot(path=blocker / "local.json")
        with pytest.raises(PersistenceError):
            await snapshot.put("hasVisited", True)


class TestBackend:
    """Tests for the backend operations."""

    def test_satisfies_protocol(self, local_snapshot: LocalSnapshot):
        """LocalSnapshot is a TimekeeperBackend."""
        assert isinstance(local_snapshot, TimekeeperBackend)

    async def test_meetings(self, local_snapshot: LocalSnapshot, make_meeting):
        """Meetings support create, update, delete and bulk save."""
        await local_snapshot.create_meeting(make_meeting(meeting_id="m1"))
        await local_snapshot.create_meeting(make_meeting(meeting_id="m2"))

        updated = await local_snapshot.update_meeting("m1", {"status": "alerted"})
        assert updated.status.value == "alerted"

        await local_snapshot.delete_meeting("m2")
        assert [m.id for m in await local_snapshot.list_meetings()] == ["m1"]

        await local_snapshot.save_meetings([make_meeting(meeting_id="m3")])
        assert [m.id for m in await local_snapshot.list_meetings()] == ["m3"]

    async def test_update_unknown(self, local_snapshot: LocalSnapshot):
        """Unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await local_snapshot.update_template("missing", {"name": "X"})

    async def test_templates(self, local_snapshot: LocalSnapshot):
        """Template lists round-trip through the snapshot."""
        templates = default_templates()
        await local_snapshot.save_templates(templates)
        assert await local_snapshot.list_templates() == templates

    async def test_settings_and_first_visit(self, local_snapshot: LocalSnapshot):
        """Settings and the visited flag persist."""
        prefs = UserSettings(theme="dark", sound_enabled=False)
        await local_snapshot.save_settings(prefs)
        assert (await local_snapshot.load_settings()).theme == "dark"

        assert await local_snapshot.has_visited() is False
        await local_snapshot.mark_visited()
        assert await local_snapshot.has_visited() is True
