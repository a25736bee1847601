"""Countdown state machine for the active meeting.

States::

    idle -> running -> (paused <-> running) -> completed | stopped

``completed`` and ``stopped`` are decision points: the session can be
snoozed back to ``running`` or finished, which hands the outcome to
analytics and returns the engine to ``idle``. Only one session exists
at a time; ``start`` refuses to run while another is in progress.
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from timekeeper.errors import TimerStateError
from timekeeper.events.base import Event
from timekeeper.events.types import (
    TimerCompleted,
    TimerStarted,
    TimerStopped,
    TimerWarning,
)
from timekeeper.models.meeting import Meeting, MeetingStatus
from timekeeper.timer.session import (
    TimerDecision,
    TimerOutcome,
    TimerSession,
    TimerState,
)
from timekeeper.timer.ticker import TickSource

logger = structlog.get_logger()

WARNING_THRESHOLDS = (300, 120, 60, 30)
DEFAULT_SNOOZE_SECONDS = 300


class TimerEngine:
    """Single-session countdown timer.

    Ticks come from an injected tick source; without one, ``tick()`` is
    driven by the caller. Notifications go through ``emit``.
    """

    def __init__(
        self,
        ticker: TickSource | None = None,
        emit: Callable[[Event], None] | None = None,
    ):
        """Initialize engine.

        Args:
            ticker: Periodic trigger calling ``tick`` once per second
            emit: Callback receiving warning/completion events
        """
        self._ticker = ticker
        self._emit = emit
        self._state = TimerState.IDLE
        self._session: TimerSession | None = None
        self._meeting: Meeting | None = None
        self._decision: TimerDecision | None = None

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def session(self) -> TimerSession | None:
        """Copy of the current session, or None when idle."""
        if self._session is None:
            return None
        return self._session.model_copy()

    @property
    def meeting(self) -> Meeting | None:
        return self._meeting

    @property
    def decision(self) -> TimerDecision | None:
        """Durations pending finalization (completed/stopped only)."""
        return self._decision

    def start(self, meeting: Meeting, now: datetime | None = None) -> TimerSession:
        """Begin the countdown for a meeting.

        Marks the meeting active and records its actual start time.

        Raises:
            TimerStateError: If a session is already in progress
        """
        if self._state is not TimerState.IDLE:
            raise TimerStateError(
                f"Cannot start while timer is {self._state.value}"
                f" (meeting {self._meeting.id if self._meeting else '?'})"
            )

        total_seconds = meeting.total_duration * 60
        meeting.status = MeetingStatus.ACTIVE
        meeting.actual_start_time = now or datetime.now(UTC)

        self._meeting = meeting
        self._session = TimerSession(
            meeting_id=meeting.id,
            total_duration_seconds=total_seconds,
            remaining_seconds=total_seconds,
        )
        self._decision = None
        self._run()

        logger.info("timer started", meeting_id=meeting.id, total_seconds=total_seconds)
        self._notify(TimerStarted(aggregate_id=meeting.id, total_seconds=total_seconds))
        return self._session.model_copy()

    def tick(self) -> None:
        """Count down one second. Ignored unless running."""
        if self._state is not TimerState.RUNNING or self._session is None:
            return

        session = self._session
        session.remaining_seconds -= 1

        if session.remaining_seconds <= 0:
            session.remaining_seconds = 0
            self._complete()
            return

        if session.remaining_seconds in WARNING_THRESHOLDS:
            self._notify(
                TimerWarning(
                    aggregate_id=session.meeting_id,
                    threshold_seconds=session.remaining_seconds,
                )
            )

    def pause(self) -> None:
        """Halt the countdown. No-op if already paused.

        Raises:
            TimerStateError: If the timer is not running or paused
        """
        if self._state is TimerState.PAUSED:
            return
        self._require(TimerState.RUNNING, action="pause")
        self._halt(TimerState.PAUSED)
        logger.info("timer paused", remaining_seconds=self._session.remaining_seconds)

    def resume(self) -> None:
        """Continue a paused countdown. No-op if already running.

        Raises:
            TimerStateError: If the timer is not paused or running
        """
        if self._state is TimerState.RUNNING:
            return
        self._require(TimerState.PAUSED, action="resume")
        self._run()
        logger.info("timer resumed", remaining_seconds=self._session.remaining_seconds)

    def stop(self) -> TimerDecision:
        """Stop the countdown early and fix the elapsed duration.

        Returns:
            Planned and actual minutes, both rounded up

        Raises:
            TimerStateError: If the timer is not running or paused
        """
        self._require(TimerState.RUNNING, TimerState.PAUSED, action="stop")
        self._halt(TimerState.STOPPED)

        session = self._session
        self._decision = TimerDecision(
            planned_duration=session.planned_minutes,
            actual_duration=session.elapsed_minutes,
        )
        logger.info(
            "timer stopped",
            meeting_id=session.meeting_id,
            planned=self._decision.planned_duration,
            actual=self._decision.actual_duration,
        )
        self._notify(
            TimerStopped(
                aggregate_id=session.meeting_id,
                planned_duration=self._decision.planned_duration,
                actual_duration=self._decision.actual_duration,
            )
        )
        return self._decision

    def snooze(self, extra_seconds: int = DEFAULT_SNOOZE_SECONDS) -> TimerSession:
        """Extend a completed or stopped session and keep counting.

        Both the remaining and the total duration grow, so the planned
        duration used for efficiency grows too.

        Raises:
            TimerStateError: If there is no completed or stopped session
            ValueError: If extra_seconds is not positive
        """
        self._require(TimerState.COMPLETED, TimerState.STOPPED, action="snooze")
        if extra_seconds <= 0:
            raise ValueError("extra_seconds must be positive")

        session = self._session
        session.remaining_seconds += extra_seconds
        session.total_duration_seconds += extra_seconds
        self._decision = None
        self._run()

        logger.info(
            "timer snoozed",
            meeting_id=session.meeting_id,
            extra_seconds=extra_seconds,
            total_seconds=session.total_duration_seconds,
        )
        return session.model_copy()

    def finish(self) -> TimerOutcome:
        """Finalize the session and return to idle.

        A running or paused session is stopped first, the same way
        ``stop()`` would.

        Returns:
            The meeting, marked completed, with its planned duration
            updated to include any snoozes, plus the final durations

        Raises:
            TimerStateError: If there is no session
        """
        if self._state in (TimerState.RUNNING, TimerState.PAUSED):
            self.stop()
        self._require(TimerState.COMPLETED, TimerState.STOPPED, action="finish")

        decision = self._decision
        meeting = self._meeting
        meeting.status = MeetingStatus.COMPLETED
        meeting.total_duration = decision.planned_duration

        self._release()
        logger.info(
            "timer finished",
            meeting_id=meeting.id,
            planned=decision.planned_duration,
            actual=decision.actual_duration,
        )
        return TimerOutcome(
            meeting=meeting,
            planned_duration=decision.planned_duration,
            actual_duration=decision.actual_duration,
        )

    def cancel(self) -> Meeting | None:
        """Drop the session without recording anything.

        Returns:
            The meeting that was being timed, if any
        """
        meeting = self._meeting
        self._release()
        if meeting is not None:
            logger.info("timer cancelled", meeting_id=meeting.id)
        return meeting

    def _complete(self) -> None:
        self._halt(TimerState.COMPLETED)
        planned = self._session.planned_minutes
        self._decision = TimerDecision(
            planned_duration=planned, actual_duration=planned
        )
        logger.info("timer completed", meeting_id=self._session.meeting_id)
        self._notify(
            TimerCompleted(
                aggregate_id=self._session.meeting_id,
                planned_duration=planned,
            )
        )

    def _run(self) -> None:
        self._state = TimerState.RUNNING
        self._session.running = True
        if self._ticker is not None:
            self._ticker.start(self.tick)

    def _halt(self, state: TimerState) -> None:
        if self._ticker is not None:
            self._ticker.stop()
        self._state = state
        self._session.running = False

    def _release(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
        self._state = TimerState.IDLE
        self._session = None
        self._meeting = None
        self._decision = None

    def _require(self, *states: TimerState, action: str) -> None:
        if self._state not in states:
            raise TimerStateError(f"Cannot {action} while timer is {self._state.value}")

    def _notify(self, event: Event) -> None:
        if self._emit is not None:
            self._emit(event)
