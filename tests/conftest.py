"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from timekeeper.adapters.local_snapshot import LocalSnapshot
from timekeeper.adapters.store_backend import StoreBackend
from timekeeper.controller import Timekeeper
from timekeeper.db.json_store import JsonStore
from timekeeper.events.bus import EventBus
from timekeeper.main import app
from timekeeper.models.agenda import AgendaItem
from timekeeper.models.meeting import Meeting, MeetingStatus


class FakeTicker:
    """Tick source driven by the test instead of the clock."""

    def __init__(self):
        self.callback = None
        self.starts = 0
        self.stops = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, callback) -> None:
        self.callback = callback
        self.starts += 1

    def stop(self) -> None:
        self.callback = None
        self.stops += 1

    def fire(self, times: int = 1) -> None:
        """Deliver ticks while the ticker is active."""
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


@pytest.fixture
def make_meeting():
    """Factory for meetings with a single agenda item."""

    def _make(
        meeting_id: str = "meeting_1",
        title: str = "Sprint Review",
        total_duration: int = 30,
        status: MeetingStatus = MeetingStatus.SCHEDULED,
        date_time: datetime | None = None,
    ) -> Meeting:
        return Meeting(
            id=meeting_id,
            title=title,
            date_time=date_time or datetime.now(UTC) + timedelta(hours=1),
            status=status,
            agenda=[AgendaItem(title="Discussion", duration=max(total_duration, 1))],
            total_duration=total_duration,
        )

    return _make


@pytest.fixture
def fake_ticker() -> FakeTicker:
    """Manually driven tick source."""
    return FakeTicker()


@pytest.fixture
async def store(tmp_path: Path) -> AsyncIterator[JsonStore]:
    """Connected JSON store in a temporary directory."""
    json_store = JsonStore(path=tmp_path / "db.json")
    await json_store.connect()
    yield json_store
    await json_store.close()


@pytest.fixture
def local_snapshot(tmp_path: Path) -> LocalSnapshot:
    """Local fallback snapshot in a temporary directory."""
    return LocalSnapshot(path=tmp_path / "local.json")


@pytest.fixture
def event_bus() -> EventBus:
    """Fresh event bus."""
    return EventBus()


@pytest.fixture
async def timekeeper(
    store: JsonStore,
    local_snapshot: LocalSnapshot,
    event_bus: EventBus,
    fake_ticker: FakeTicker,
) -> Timekeeper:
    """Loaded controller over a temporary store."""
    controller = Timekeeper(
        backend=StoreBackend(store),
        local=local_snapshot,
        event_bus=event_bus,
        ticker=fake_ticker,
    )
    await controller.load()
    return controller


@pytest.fixture
async def client(
    store: JsonStore,
    timekeeper: Timekeeper,
    event_bus: EventBus,
) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with a temporary store."""
    app.state.store = store
    app.state.event_bus = event_bus
    app.state.timekeeper = timekeeper

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    # Clean up app state
    del app.state.store
    del app.state.event_bus
    del app.state.timekeeper
