"""Meeting model representing a scheduled or running meeting."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import Field, field_validator

from timekeeper.models.agenda import AgendaItem
from timekeeper.models.base import BaseEntity


class MeetingStatus(str, Enum):
    """Lifecycle of a meeting until it is superseded by a completion record."""

    SCHEDULED = "scheduled"
    ALERTED = "alerted"
    ACTIVE = "active"
    COMPLETED = "completed"


class Meeting(BaseEntity):
    """A meeting with its own snapshot of the agenda.

    The agenda is copied at creation time, so later edits to the
    source template do not affect it.
    """

    title: str = Field(min_length=1, description="Meeting title")
    date_time: datetime = Field(description="When the meeting is scheduled")
    template_id: str | None = Field(default=None)
    status: MeetingStatus = Field(default=MeetingStatus.SCHEDULED)
    agenda: list[AgendaItem] = Field(default_factory=list)
    total_duration: int = Field(ge=0, description="Planned minutes")
    actual_start_time: datetime | None = Field(default=None)

    @field_validator("date_time", "actual_start_time")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Stored timestamps without an offset are UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v
