"""Base model classes for all stored records."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def new_id(prefix: str) -> str:
    """Generate a prefixed record id such as ``meeting_3f2a...``."""
    return f"{prefix}_{uuid4().hex}"


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, as stored in the JSON collections.

    Accepts both camelCase and snake_case on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        from_attributes=True,
    )

    def to_document(self) -> dict:
        """Dump to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class BaseEntity(CamelModel):
    """Base class for stored entities.

    Provides:
    - Unique string ID
    - Creation timestamp
    """

    id: str = Field(description="Unique entity identifier")
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When entity was created",
    )
