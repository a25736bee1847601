"""Agenda items and reusable agenda templates."""

from datetime import datetime

from pydantic import AliasChoices, Field

from timekeeper.models.base import BaseEntity, CamelModel


class AgendaItem(CamelModel):
    """A single agenda entry with its allocated time."""

    title: str = Field(min_length=1, description="What is discussed")
    duration: int = Field(ge=1, description="Allocated minutes")


class Template(BaseEntity):
    """A named, reusable agenda definition.

    The sum of agenda durations is best effort and may differ from
    ``total_duration``.
    """

    name: str = Field(min_length=1, description="Template name")
    total_duration: int = Field(
        gt=0,
        validation_alias=AliasChoices("totalDuration", "total_duration", "duration"),
        serialization_alias="totalDuration",
        description="Target meeting length in minutes",
    )
    agenda: list[AgendaItem] = Field(default_factory=list)
    description: str = Field(default="", description="Agenda titles, comma-joined")
    updated_at: datetime | None = Field(default=None)
