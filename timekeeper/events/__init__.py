"""Event infrastructure for Timekeeper.

Provides:
- Event: Base class for all notification events
- EventBus: In-process pub/sub for event routing
"""

from timekeeper.events.base import Event
from timekeeper.events.bus import EventBus
from timekeeper.events.types import (
    MeetingAlert,
    MeetingCompleted,
    MeetingScheduled,
    PersistenceFailed,
    TimerCompleted,
    TimerStarted,
    TimerStopped,
    TimerWarning,
    ValidationFailed,
)

__all__ = [
    # Base
    "Event",
    # Infrastructure
    "EventBus",
    # Event types
    "MeetingScheduled",
    "MeetingAlert",
    "TimerStarted",
    "TimerWarning",
    "TimerCompleted",
    "TimerStopped",
    "MeetingCompleted",
    "ValidationFailed",
    "PersistenceFailed",
]
