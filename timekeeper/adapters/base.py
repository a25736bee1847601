"""Base types for persistence backends.

This module defines the TimekeeperBackend protocol implemented by every
place meetings, templates and analytics can be stored: the in-process
JSON store, the REST API over HTTP, and the local fallback snapshot.
"""

from typing import Protocol, runtime_checkable

from timekeeper.models.agenda import Template
from timekeeper.models.analytics import AnalyticsLog
from timekeeper.models.meeting import Meeting


@runtime_checkable
class TimekeeperBackend(Protocol):
    """Protocol for meeting/template/analytics persistence.

    Backends implement this protocol for structural subtyping -
    they don't need to inherit, just implement the methods.

    Every method may raise PersistenceError on connectivity or storage
    failure; update methods raise NotFoundError for unknown ids.
    """

    name: str

    async def list_meetings(self) -> list[Meeting]:
        """All stored meetings."""
        ...

    async def create_meeting(self, meeting: Meeting) -> Meeting:
        """Store a new meeting and return the stored version."""
        ...

    async def update_meeting(self, meeting_id: str, partial: dict) -> Meeting:
        """Merge fields (camelCase keys) into a stored meeting."""
        ...

    async def delete_meeting(self, meeting_id: str) -> None:
        """Remove a meeting. Unknown ids are ignored."""
        ...

    async def list_templates(self) -> list[Template]:
        """All stored templates."""
        ...

    async def create_template(self, template: Template) -> Template:
        """Store a new template and return the stored version."""
        ...

    async def update_template(self, template_id: str, partial: dict) -> Template:
        """Merge fields (camelCase keys) into a stored template."""
        ...

    async def delete_template(self, template_id: str) -> None:
        """Remove a template. Unknown ids are ignored."""
        ...

    async def load_analytics(self) -> AnalyticsLog:
        """The stored completion log."""
        ...

    async def save_analytics(self, analytics: AnalyticsLog) -> None:
        """Replace the stored completion log."""
        ...
