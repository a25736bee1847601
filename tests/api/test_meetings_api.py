"""Integration tests for the storage collection endpoints."""

from httpx import AsyncClient

from timekeeper.db.json_store import JsonStore


class TestMeetingsCollection:
    """Tests for /api/meetings."""

    async def test_create_and_list(self, client: AsyncClient, make_meeting):
        """Posted meetings are stored and listed."""
        doc = make_meeting().to_document()

        response = await client.post("/api/meetings", json=doc)
        assert response.status_code == 201
        assert response.json()["id"] == doc["id"]

        listed = (await client.get("/api/meetings")).json()
        assert [m["id"] for m in listed] == [doc["id"]]
        assert listed[0]["totalDuration"] == doc["totalDuration"]

    async def test_create_rejects_invalid(self, client: AsyncClient):
        """Bodies that are not meetings are rejected."""
        response = await client.post("/api/meetings", json={"title": ""})
        assert response.status_code == 422

    async def test_update_merges(self, client: AsyncClient, make_meeting):
        """PUT merges the given fields."""
        doc = make_meeting().to_document()
        await client.post("/api/meetings", json=doc)

        response = await client.put(
            f"/api/meetings/{doc['id']}", json={"status": "alerted"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "alerted"
        assert data["title"] == doc["title"]

    async def test_update_unknown(self, client: AsyncClient):
        """PUT on an unknown id is a 404."""
        response = await client.put("/api/meetings/missing", json={"status": "x"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Meeting not found"

    async def test_delete(self, client: AsyncClient, make_meeting, store: JsonStore):
        """DELETE removes the meeting and answers 204."""
        doc = make_meeting().to_document()
        await client.post("/api/meetings", json=doc)

        response = await client.delete(f"/api/meetings/{doc['id']}")

        assert response.status_code == 204
        assert await store.list("meetings") == []

    async def test_delete_unknown_is_ok(self, client: AsyncClient):
        """Deleting an unknown id still answers 204."""
        response = await client.delete("/api/meetings/missing")
        assert response.status_code == 204


class TestTemplatesCollection:
    """Tests for /api/templates."""

    async def test_lists_seeded_defaults(self, client: AsyncClient):
        """The loaded controller stored the built-in templates."""
        listed = (await client.get("/api/templates")).json()
        assert [t["id"] for t in listed] == [
            "template_daily_standup",
            "template_client_review",
            "template_brainstorming",
        ]

    async def test_create_update_delete(self, client: AsyncClient):
        """Templates support the same CRUD as meetings."""
        doc = {"id": "t1", "name": "Retro", "totalDuration": 30, "agenda": []}
        created = await client.post("/api/templates", json=doc)
        assert created.status_code == 201

        updated = await client.put("/api/templates/t1", json={"name": "Retro v2"})
        assert updated.json()["name"] == "Retro v2"
        assert updated.json()["totalDuration"] == 30

        assert (await client.delete("/api/templates/t1")).status_code == 204
        ids = [t["id"] for t in (await client.get("/api/templates")).json()]
        assert "t1" not in ids

    async def test_update_unknown(self, client: AsyncClient):
        """PUT on an unknown template is a 404."""
        response = await client.put("/api/templates/missing", json={"name": "x"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Template not found"


class TestAnalyticsCollection:
    """Tests for /api/analytics."""

    async def test_empty_by_default(self, client: AsyncClient):
        """A fresh store has an empty completion log."""
        response = await client.get("/api/analytics")
        assert response.json() == {"completedMeetings": [], "totalTime": 0}

    async def test_replace_and_kpis(self, client: AsyncClient):
        """PUT replaces the log; KPIs are computed from it."""
        log = {
            "completedMeetings": [
                {
                    "meetingId": "m1",
                    "title": "Sync",
                    "plannedDuration": 30,
                    "actualDuration": 20,
                    "efficiency": 150,
                },
                {
                    "meetingId": "m2",
                    "title": "Review",
                    "plannedDuration": 15,
                    "actualDuration": 20,
                    "efficiency": 75,
                },
            ],
            "totalTime": 40,
        }
        response = await client.put("/api/analytics", json=log)
        assert response.status_code == 200
        assert response.json()["totalTime"] == 40

        kpis = (await client.get("/api/analytics/kpis")).json()
        assert kpis == {
            "totalMeetings": 2,
            "avgEfficiency": 113,
            "timeSavedMinutes": 10,
            "onTimeRatePercent": 50,
        }
