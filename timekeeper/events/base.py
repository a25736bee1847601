"""Base class for notifications emitted by the timekeeping core."""

from datetime import UTC, datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """Something a user should be told about.

    The core only emits events; how they are shown (toast, sound,
    desktop notification) is up to the presentation layer, guided by
    ``level``.

    Attributes:
        event_id: Unique identifier for this notification
        timestamp: When it happened
        aggregate_id: Id of the meeting or template concerned, if any
        aggregate_type: "Meeting" or "Template"
        metadata: Free-form extra context
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    level: ClassVar[str] = "info"

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    aggregate_id: str | None = Field(
        default=None,
        description="Meeting or template id",
    )
    aggregate_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def event_type(self) -> str:
        """Class name, used as the notification kind on the wire."""
        return self.__class__.__name__

    def to_message(self) -> dict[str, Any]:
        """Flat JSON-compatible dict for polling clients."""
        envelope = {"event_id", "timestamp", "aggregate_id", "aggregate_type"}
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "level": self.level,
            "timestamp": self.timestamp.isoformat(),
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "data": self.model_dump(mode="json", exclude=envelope),
        }
