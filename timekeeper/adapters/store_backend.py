"""Backend that talks to the JSON store in-process."""

from timekeeper.db.json_store import JsonStore, StoreError
from timekeeper.errors import NotFoundError, PersistenceError
from timekeeper.models.agenda import Template
from timekeeper.models.analytics import AnalyticsLog
from timekeeper.models.meeting import Meeting


class StoreBackend:
    """TimekeeperBackend over a JsonStore living in the same process."""

    name = "store"

    def __init__(self, store: JsonStore):
        """Initialize backend.

        Args:
            store: Connected JsonStore
        """
        self._store = store

    async def list_meetings(self) -> list[Meeting]:
        docs = await self._call(self._store.list("meetings"))
        return [Meeting.model_validate(d) for d in docs]

    async def create_meeting(self, meeting: Meeting) -> Meeting:
        doc = await self._call(self._store.insert("meetings", meeting.to_document()))
        return Meeting.model_validate(doc)

    async def update_meeting(self, meeting_id: str, partial: dict) -> Meeting:
        doc = await self._call(self._store.update("meetings", meeting_id, partial))
        if doc is None:
            raise NotFoundError("Meeting", meeting_id)
        return Meeting.model_validate(doc)

    async def delete_meeting(self, meeting_id: str) -> None:
        await self._call(self._store.delete("meetings", meeting_id))

    async def list_templates(self) -> list[Template]:
        docs = await self._call(self._store.list("templates"))
        return [Template.model_validate(d) for d in docs]

    async def create_template(self, template: Template) -> Template:
        doc = await self._call(self._store.insert("templates", template.to_document()))
        return Template.model_validate(doc)

    async def update_template(self, template_id: str, partial: dict) -> Template:
        doc = await self._call(self._store.update("templates", template_id, partial))
        if doc is None:
            raise NotFoundError("Template", template_id)
        return Template.model_validate(doc)

    async def delete_template(self, template_id: str) -> None:
        await self._call(self._store.delete("templates", template_id))

    async def load_analytics(self) -> AnalyticsLog:
        doc = await self._call(self._store.get_analytics())
        return AnalyticsLog.model_validate(doc)

    async def save_analytics(self, analytics: AnalyticsLog) -> None:
        await self._call(self._store.set_analytics(analytics.to_document()))

    @staticmethod
    async def _call(operation):
        try:
            return await operation
        except StoreError as e:
            raise PersistenceError(str(e)) from e
