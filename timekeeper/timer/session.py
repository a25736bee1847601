"""Timer session state and outcomes."""

import math
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

from timekeeper.models.meeting import Meeting


class TimerState(str, Enum):
    """Countdown state machine states."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    STOPPED = "stopped"


class TimerSession(BaseModel):
    """Transient countdown for the one active meeting."""

    meeting_id: str
    total_duration_seconds: int = Field(ge=0)
    remaining_seconds: int = Field(ge=0)
    running: bool = False

    @property
    def elapsed_seconds(self) -> int:
        """Seconds counted down so far."""
        return self.total_duration_seconds - self.remaining_seconds

    @property
    def planned_minutes(self) -> int:
        """Planned duration in whole minutes, rounded up."""
        return math.ceil(self.total_duration_seconds / 60)

    @property
    def elapsed_minutes(self) -> int:
        """Elapsed time in whole minutes, rounded up."""
        return math.ceil(self.elapsed_seconds / 60)


@dataclass(frozen=True)
class TimerDecision:
    """Durations fixed when the countdown expired or was stopped."""

    planned_duration: int
    actual_duration: int


@dataclass(frozen=True)
class TimerOutcome:
    """A finished session, ready to be recorded in analytics."""

    meeting: Meeting
    planned_duration: int
    actual_duration: int
