"""Timekeeper controller: the single owner of application state.

Coordinates the scheduler, template catalog, timer engine and analytics
over one explicit AppState, persists through a TimekeeperBackend and
falls back to the local snapshot when the backend is unreachable.
Presentation code reads snapshots and calls intent methods; it never
touches state directly.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TypeVar

import structlog
from pydantic import Field

from timekeeper.adapters.base import TimekeeperBackend
from timekeeper.adapters.local_snapshot import LocalSnapshot
from timekeeper.agenda.catalog import TemplateCatalog
from timekeeper.agenda.parser import format_agenda_text
from timekeeper.analytics.aggregator import AnalyticsAggregator, compute_kpis
from timekeeper.config import settings
from timekeeper.errors import (
    NotFoundError,
    PersistenceError,
    TimerStateError,
    ValidationError,
)
from timekeeper.events.base import Event
from timekeeper.events.bus import EventBus
from timekeeper.events.types import (
    MeetingAlert,
    MeetingCompleted,
    MeetingScheduled,
    PersistenceFailed,
    ValidationFailed,
)
from timekeeper.models.agenda import Template
from timekeeper.models.analytics import (
    AnalyticsLog,
    CompletionRecord,
    KPISummary,
    UserSettings,
)
from timekeeper.models.base import CamelModel
from timekeeper.models.meeting import Meeting, MeetingStatus
from timekeeper.scheduling.scheduler import MeetingScheduler
from timekeeper.timer.engine import TimerEngine
from timekeeper.timer.session import TimerDecision, TimerSession, TimerState
from timekeeper.timer.ticker import IntervalTicker, TickSource

logger = structlog.get_logger()

T = TypeVar("T")


@dataclass
class AppState:
    """Everything the application knows, in one place."""

    meetings: list[Meeting] = field(default_factory=list)
    templates: list[Template] = field(default_factory=list)
    analytics: AnalyticsLog = field(default_factory=AnalyticsLog)
    user_settings: UserSettings = field(default_factory=UserSettings)
    degraded: bool = False


class TimerView(CamelModel):
    """Read-only view of the timer for rendering."""

    state: TimerState
    meeting_id: str | None = None
    meeting_title: str | None = None
    total_duration_seconds: int = 0
    remaining_seconds: int = 0
    running: bool = False
    planned_duration: int | None = Field(
        default=None, description="Pending planned minutes at a decision point"
    )
    actual_duration: int | None = Field(
        default=None, description="Pending actual minutes at a decision point"
    )


class TemplateView(Template):
    """Template plus its agenda as editable text."""

    agenda_text: str = Field(description="Agenda as <title> (<N> min) lines")

    @classmethod
    def of(cls, template: Template) -> "TemplateView":
        return cls(
            **template.model_dump(), agenda_text=format_agenda_text(template.agenda)
        )


class StateSnapshot(CamelModel):
    """Read-only copy of application state for rendering."""

    meetings: list[Meeting]
    templates: list[TemplateView]
    timer: TimerView
    kpis: KPISummary
    completed_meetings: list[CompletionRecord]
    total_time: int
    settings: UserSettings
    degraded: bool
    backend: str


class Timekeeper:
    """Coordinates all timekeeping intents over one AppState.

    Singleton pattern with class-level instance for scheduler access.
    """

    _instance: "Timekeeper | None" = None

    def __init__(
        self,
        backend: TimekeeperBackend,
        local: LocalSnapshot | None = None,
        event_bus: EventBus | None = None,
        ticker: TickSource | None = None,
    ):
        """Initialize controller with dependencies.

        Args:
            backend: Primary persistence backend
            local: Local fallback snapshot (defaults to settings path)
            event_bus: Bus notifications are emitted on
            ticker: Tick source for the timer (defaults to a 1s IntervalTicker)
        """
        self.state = AppState()
        self._backend = backend
        self._local = local or LocalSnapshot()
        self._bus = event_bus or EventBus()
        self.catalog = TemplateCatalog(self.state.templates)
        self.scheduler = MeetingScheduler(self.catalog)
        self.timer = TimerEngine(
            ticker=ticker or IntervalTicker(settings.tick_interval_seconds),
            emit=self._bus.emit,
        )
        self.analytics = AnalyticsAggregator(self.state.analytics, self.state.meetings)

    @classmethod
    def get_instance(cls) -> "Timekeeper":
        """Get the singleton instance.

        Raises:
            RuntimeError: If Timekeeper not initialized
        """
        if cls._instance is None:
            raise RuntimeError("Timekeeper not initialized")
        return cls._instance

    @classmethod
    def set_instance(cls, instance: "Timekeeper") -> None:
        """Set the singleton instance."""
        cls._instance = instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    @property
    def backend(self) -> TimekeeperBackend:
        return self._backend

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    # Loading and saving

    async def load(self) -> None:
        """Load meetings, templates and analytics.

        Falls back to the local snapshot (degraded mode) if the backend
        cannot be reached. Default templates are used when none exist.
        """
        self.state.user_settings = await self._local.load_settings()
        try:
            meetings, templates = await asyncio.gather(
                self._backend.list_meetings(),
                self._backend.list_templates(),
            )
            analytics = await self._backend.load_analytics()
            if not analytics.completed_meetings:
                analytics = await self._local.load_analytics()
        except PersistenceError as e:
            logger.warning("backend unavailable, using local snapshot", error=str(e))
            self._notify(PersistenceFailed(operation="load", message=str(e)))
            meetings = await self._local.list_meetings()
            templates = await self._local.list_templates()
            analytics = await self._local.load_analytics()
            self._backend = self._local
            self.state.degraded = True

        self.state.meetings[:] = meetings
        self.state.templates[:] = templates
        if self.catalog.ensure_defaults():
            await self._store_defaults()
        self.state.analytics.completed_meetings[:] = analytics.completed_meetings
        self.state.analytics.total_time = analytics.total_time
        logger.info(
            "state loaded",
            backend=self._backend.name,
            meetings=len(meetings),
            templates=len(self.state.templates),
            completed=len(analytics.completed_meetings),
        )

    async def save_all_data(self) -> None:
        """Mirror state to the local snapshot and push analytics.

        Failures are logged and reported as events; state is unchanged.
        """
        try:
            await self._local.save_analytics(self.state.analytics)
            await self._local.save_settings(self.state.user_settings)
            if not self.state.degraded:
                await self._local.save_meetings(self.state.meetings)
                await self._local.save_templates(self.state.templates)
                await self._backend.save_analytics(self.state.analytics)
        except PersistenceError as e:
            logger.error("save failed", error=str(e))
            self._notify(PersistenceFailed(operation="save", message=str(e)))

    async def is_first_visit(self) -> bool:
        """True the first time this is called for a local snapshot."""
        if await self._local.has_visited():
            return False
        await self._local.mark_visited()
        return True

    async def update_settings(
        self,
        theme: str | None = None,
        sound_enabled: bool | None = None,
    ) -> UserSettings:
        """Change preferences and save them locally."""
        update: dict = {}
        if theme is not None:
            update["theme"] = theme
        if sound_enabled is not None:
            update["sound_enabled"] = sound_enabled
        new_settings = self.state.user_settings.model_copy(update=update)
        await self._persist("settings", self._local.save_settings(new_settings))
        self.state.user_settings = new_settings
        return new_settings

    # Meetings

    def get_meeting(self, meeting_id: str) -> Meeting:
        """Look up a meeting.

        Raises:
            NotFoundError: If no meeting has that id
        """
        for meeting in self.state.meetings:
            if meeting.id == meeting_id:
                return meeting
        raise NotFoundError("Meeting", meeting_id)

    async def schedule_meeting(
        self,
        title: str | None,
        date_time: datetime | str | None,
        template_id: str | None = None,
        agenda_text: str | None = None,
    ) -> Meeting:
        """Validate, persist and add a new scheduled meeting.

        Raises:
            ValidationError: If title or date are invalid
            PersistenceError: If the meeting could not be stored
        """
        try:
            meeting = self.scheduler.schedule(
                title, date_time, template_id, agenda_text
            )
        except ValidationError as e:
            self._notify(ValidationFailed(kind=e.kind.value, message=str(e)))
            raise

        stored = await self._persist("schedule", self._backend.create_meeting(meeting))
        self.state.meetings.append(stored)
        self._notify(
            MeetingScheduled(
                aggregate_id=stored.id,
                title=stored.title,
                date_time=stored.date_time,
            )
        )
        return stored

    async def delete_meeting(self, meeting_id: str) -> None:
        """Remove a meeting, cancelling its timer if it is running.

        Raises:
            NotFoundError: If no meeting has that id
            PersistenceError: If the deletion could not be stored
        """
        meeting = self.get_meeting(meeting_id)
        await self._persist("delete_meeting", self._backend.delete_meeting(meeting_id))
        if self.timer.meeting is not None and self.timer.meeting.id == meeting.id:
            self.timer.cancel()
        self.state.meetings[:] = [m for m in self.state.meetings if m.id != meeting_id]
        logger.info("meeting deleted", meeting_id=meeting_id)

    async def check_scheduled_meetings(
        self, now: datetime | None = None
    ) -> list[Meeting]:
        """Move due scheduled meetings to ``alerted`` and announce them.

        Returns:
            Meetings that were alerted by this call
        """
        now = now or datetime.now(UTC)
        alerted = []
        for meeting in list(self.state.meetings):
            if meeting.status is not MeetingStatus.SCHEDULED or meeting.date_time > now:
                continue
            try:
                await self._backend.update_meeting(
                    meeting.id, {"status": MeetingStatus.ALERTED.value}
                )
            except (PersistenceError, NotFoundError) as e:
                logger.error("alert update failed", meeting_id=meeting.id, error=str(e))
                self._notify(PersistenceFailed(operation="alert", message=str(e)))
                continue
            meeting.status = MeetingStatus.ALERTED
            alerted.append(meeting)
            self._notify(
                MeetingAlert(
                    aggregate_id=meeting.id,
                    title=meeting.title,
                    date_time=meeting.date_time,
                )
            )
        if alerted:
            logger.info("meetings due", count=len(alerted))
        return alerted

    # Templates

    async def create_template(
        self,
        name: str,
        total_duration: int,
        agenda_text: str,
    ) -> Template:
        """Parse, persist and add a template.

        Raises:
            ValidationError: If a field is missing
            PersistenceError: If the template could not be stored
        """
        try:
            template = self.catalog.build_new(name, total_duration, agenda_text)
        except ValidationError as e:
            self._notify(ValidationFailed(kind=e.kind.value, message=str(e)))
            raise
        stored = await self._persist(
            "create_template", self._backend.create_template(template)
        )
        return self.catalog.add(stored)

    async def update_template(
        self,
        template_id: str,
        name: str,
        total_duration: int,
        agenda_text: str,
    ) -> Template:
        """Re-parse and persist an edited template.

        Raises:
            ValidationError: If a field is missing
            NotFoundError: If the template does not exist
            PersistenceError: If the change could not be stored
        """
        try:
            template = self.catalog.build_update(
                template_id, name, total_duration, agenda_text
            )
        except ValidationError as e:
            self._notify(ValidationFailed(kind=e.kind.value, message=str(e)))
            raise
        stored = await self._persist(
            "update_template",
            self._backend.update_template(template_id, template.to_document()),
        )
        return self.catalog.replace(stored)

    async def delete_template(self, template_id: str) -> bool:
        """Remove a template. Existing meetings keep their agenda.

        Returns:
            True if a template was removed
        """
        if self.catalog.get(template_id) is None:
            return False
        await self._persist(
            "delete_template", self._backend.delete_template(template_id)
        )
        return self.catalog.delete(template_id)

    # Timer

    async def start_meeting(self, meeting_id: str) -> TimerSession:
        """Start the countdown for a scheduled or alerted meeting.

        Raises:
            NotFoundError: If no meeting has that id
            TimerStateError: If another session is in progress
            PersistenceError: If the status change could not be stored
        """
        meeting = self.get_meeting(meeting_id)
        previous = (meeting.status, meeting.actual_start_time)
        session = self.timer.start(meeting)
        try:
            await self._persist(
                "start",
                self._backend.update_meeting(
                    meeting.id,
                    {
                        "status": meeting.status.value,
                        "actualStartTime": meeting.actual_start_time.isoformat(),
                    },
                ),
            )
        except PersistenceError:
            self.timer.cancel()
            meeting.status, meeting.actual_start_time = previous
            raise
        return session

    async def use_template(self, template_id: str) -> TimerSession:
        """Create a meeting from a template and start it right away.

        Raises:
            NotFoundError: If the template does not exist
            TimerStateError: If another session is in progress
            PersistenceError: If the meeting could not be stored
        """
        meeting = self.scheduler.use_template(template_id)
        session = self.timer.start(meeting)
        try:
            await self._persist("use_template", self._backend.create_meeting(meeting))
        except PersistenceError:
            self.timer.cancel()
            raise
        # The engine and the state share this meeting object
        self.state.meetings.append(meeting)
        return session

    def pause(self) -> None:
        """Pause the running countdown."""
        self.timer.pause()

    def resume(self) -> None:
        """Resume a paused countdown."""
        self.timer.resume()

    def stop(self) -> TimerDecision:
        """Stop the countdown early; the meeting awaits snooze or finish."""
        return self.timer.stop()

    def snooze(self, extra_seconds: int | None = None) -> TimerSession:
        """Give a completed or stopped meeting more time.

        Raises:
            TimerStateError: If there is no completed or stopped session
            ValueError: If extra_seconds is not positive
        """
        if extra_seconds is None:
            extra_seconds = settings.default_snooze_seconds
        return self.timer.snooze(extra_seconds)

    async def finish(self) -> CompletionRecord:
        """Record the current session in analytics and end the meeting.

        The meeting is removed from storage first; if that fails the
        session stays at its decision point and the call can be retried.

        Raises:
            TimerStateError: If there is no session
            PersistenceError: If the meeting could not be removed
        """
        meeting = self.timer.meeting
        if meeting is None:
            raise TimerStateError("Cannot finish while timer is idle")
        await self._persist("finish", self._backend.delete_meeting(meeting.id))

        outcome = self.timer.finish()
        record = self.analytics.record_completion(
            outcome.meeting, outcome.actual_duration
        )
        self._notify(
            MeetingCompleted(
                aggregate_id=record.meeting_id,
                title=record.title,
                planned_duration=record.planned_duration,
                actual_duration=record.actual_duration,
                efficiency=record.efficiency,
            )
        )
        await self.save_all_data()
        return record

    # Read-only views

    def kpis(self) -> KPISummary:
        """KPIs over the completion log."""
        return compute_kpis(self.state.analytics.completed_meetings)

    def timer_view(self) -> TimerView:
        """Current timer state for rendering."""
        session = self.timer.session
        meeting = self.timer.meeting
        decision = self.timer.decision
        if session is None or meeting is None:
            return TimerView(state=self.timer.state)
        return TimerView(
            state=self.timer.state,
            meeting_id=meeting.id,
            meeting_title=meeting.title,
            total_duration_seconds=session.total_duration_seconds,
            remaining_seconds=session.remaining_seconds,
            running=session.running,
            planned_duration=decision.planned_duration if decision else None,
            actual_duration=decision.actual_duration if decision else None,
        )

    def snapshot(self) -> StateSnapshot:
        """Deep copy of everything a UI needs to render."""
        return StateSnapshot(
            meetings=[m.model_copy(deep=True) for m in self.state.meetings],
            templates=[TemplateView.of(t) for t in self.state.templates],
            timer=self.timer_view(),
            kpis=self.kpis(),
            completed_meetings=[
                r.model_copy() for r in self.state.analytics.completed_meetings
            ],
            total_time=self.state.analytics.total_time,
            settings=self.state.user_settings.model_copy(),
            degraded=self.state.degraded,
            backend=self._backend.name,
        )

    async def close(self) -> None:
        """Stop the ticker and save state."""
        if self.timer.state is not TimerState.IDLE:
            logger.info("closing with an active timer", state=self.timer.state.value)
        self.timer.cancel()
        await self.save_all_data()

    async def _persist(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await call
        except PersistenceError as e:
            logger.error("persist failed", operation=operation, error=str(e))
            self._notify(PersistenceFailed(operation=operation, message=str(e)))
            raise

    async def _store_defaults(self) -> None:
        for template in self.catalog.list():
            try:
                await self._backend.create_template(template)
            except PersistenceError as e:
                logger.warning(
                    "default template not stored", template_id=template.id, error=str(e)
                )

    def _notify(self, event: Event) -> None:
        self._bus.emit(event)
