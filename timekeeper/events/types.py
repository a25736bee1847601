"""Typed event definitions for notifications.

These events represent things a user should be told about:
- MeetingScheduled: A meeting was added to the schedule
- MeetingAlert: A scheduled meeting's start time has arrived
- TimerStarted: A countdown began for a meeting
- TimerWarning: The countdown crossed a warning threshold
- TimerCompleted: The countdown reached zero
- TimerStopped: The countdown was stopped manually
- MeetingCompleted: A meeting was finalized into analytics
- ValidationFailed: An intent was rejected
- PersistenceFailed: The storage backend failed
"""

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from timekeeper.events.base import Event


class MeetingScheduled(Event):
    """Emitted when a new meeting is scheduled."""

    level: ClassVar[str] = "success"
    aggregate_type: str = "Meeting"
    title: str = Field(description="Meeting title")
    date_time: datetime = Field(description="When the meeting starts")


class MeetingAlert(Event):
    """Emitted when a scheduled meeting is due to start."""

    aggregate_type: str = "Meeting"
    title: str = Field(description="Meeting title")
    date_time: datetime = Field(description="Scheduled start")


class TimerStarted(Event):
    """Emitted when the countdown starts."""

    aggregate_type: str = "Meeting"
    total_seconds: int = Field(ge=0, description="Countdown length")


class TimerWarning(Event):
    """Emitted once per threshold as the countdown runs down."""

    level: ClassVar[str] = "warning"
    aggregate_type: str = "Meeting"
    threshold_seconds: int = Field(description="Threshold that was reached")

    @property
    def label(self) -> str:
        """Human readable remaining time, e.g. '5 minutes' or '30 seconds'."""
        if self.threshold_seconds >= 60:
            minutes = self.threshold_seconds // 60
            return f"{minutes} minute{'s' if minutes != 1 else ''}"
        return f"{self.threshold_seconds} seconds"


class TimerCompleted(Event):
    """Emitted when the countdown expires naturally."""

    aggregate_type: str = "Meeting"
    planned_duration: int = Field(description="Planned minutes")


class TimerStopped(Event):
    """Emitted when the countdown is stopped before expiry."""

    aggregate_type: str = "Meeting"
    planned_duration: int = Field(description="Planned minutes")
    actual_duration: int = Field(description="Elapsed minutes, rounded up")


class MeetingCompleted(Event):
    """Emitted when a finished meeting is recorded in analytics."""

    level: ClassVar[str] = "success"
    aggregate_type: str = "Meeting"
    title: str = Field(description="Meeting title")
    planned_duration: int = Field(description="Planned minutes")
    actual_duration: int = Field(description="Elapsed minutes")
    efficiency: int = Field(description="Efficiency percent")


class ValidationFailed(Event):
    """Emitted when user input is rejected."""

    level: ClassVar[str] = "error"
    kind: str = Field(description="Validation error kind")
    message: str = Field(description="What was wrong")


class PersistenceFailed(Event):
    """Emitted when a storage call fails."""

    level: ClassVar[str] = "error"
    operation: str = Field(description="Intent that failed to persist")
    message: str = Field(description="Failure detail")
