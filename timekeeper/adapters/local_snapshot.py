"""Local fallback snapshot.

A small key/value JSON file playing the part of browser local storage:
``meetings``, ``templates``, ``analytics``, ``settings`` and ``hasVisited``.
The controller mirrors its state here and switches to it as its backend
when the real one is unreachable.
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Any

import structlog

from timekeeper.config import settings
from timekeeper.errors import NotFoundError, PersistenceError
from timekeeper.models.agenda import Template
from timekeeper.models.analytics import AnalyticsLog, UserSettings
from timekeeper.models.meeting import Meeting

logger = structlog.get_logger()


class LocalSnapshot:
    """TimekeeperBackend over a local JSON key/value file."""

    name = "local"

    def __init__(self, path: str | Path | None = None):
        """Initialize snapshot.

        Args:
            path: Snapshot file location. Defaults to settings.
        """
        self.path = Path(path or settings.local_snapshot_file)
        self._lock = asyncio.Lock()

    async def get(self, key: str, default: Any = None) -> Any:
        """Read one key, returning default when absent or unreadable."""
        async with self._lock:
            data = await asyncio.to_thread(self._load)
        return data.get(key, default)

    async def put(self, key: str, value: Any) -> None:
        """Write one key."""
        async with self._lock:
            data = await asyncio.to_thread(self._load)
            data[key] = value
            await asyncio.to_thread(self._dump, data)

    # Meetings

    async def list_meetings(self) -> list[Meeting]:
        return [Meeting.model_validate(d) for d in await self.get("meetings", [])]

    async def save_meetings(self, meetings: list[Meeting]) -> None:
        """Replace the whole meeting list."""
        await self.put("meetings", [m.to_document() for m in meetings])

    async def create_meeting(self, meeting: Meeting) -> Meeting:
        docs = await self.get("meetings", [])
        docs.append(meeting.to_document())
        await self.put("meetings", docs)
        return meeting

    async def update_meeting(self, meeting_id: str, partial: dict) -> Meeting:
        doc = await self._merge("meetings", meeting_id, partial, "Meeting")
        return Meeting.model_validate(doc)

    async def delete_meeting(self, meeting_id: str) -> None:
        docs = await self.get("meetings", [])
        await self.put("meetings", [d for d in docs if d.get("id") != meeting_id])

    # Templates

    async def list_templates(self) -> list[Template]:
        return [Template.model_validate(d) for d in await self.get("templates", [])]

    async def save_templates(self, templates: list[Template]) -> None:
        """Replace the whole template list."""
        await self.put("templates", [t.to_document() for t in templates])

    async def create_template(self, template: Template) -> Template:
        docs = await self.get("templates", [])
        docs.append(template.to_document())
        await self.put("templates", docs)
        return template

    async def update_template(self, template_id: str, partial: dict) -> Template:
        doc = await self._merge("templates", template_id, partial, "Template")
        return Template.model_validate(doc)

    async def delete_template(self, template_id: str) -> None:
        docs = await self.get("templates", [])
        await self.put("templates", [d for d in docs if d.get("id") != template_id])

    # Analytics, settings, first-run flag

    async def load_analytics(self) -> AnalyticsLog:
        return AnalyticsLog.model_validate(await self.get("analytics", {}))

    async def save_analytics(self, analytics: AnalyticsLog) -> None:
        await self.put("analytics", analytics.to_document())

    async def load_settings(self) -> UserSettings:
        return UserSettings.model_validate(await self.get("settings", {}))

    async def save_settings(self, user_settings: UserSettings) -> None:
        await self.put("settings", user_settings.to_document())

    async def has_visited(self) -> bool:
        return bool(await self.get("hasVisited", False))

    async def mark_visited(self) -> None:
        await self.put("hasVisited", True)

    async def _merge(self, key: str, doc_id: str, partial: dict, entity: str) -> dict:
        docs = await self.get(key, [])
        for index, existing in enumerate(docs):
            if existing.get("id") == doc_id:
                docs[index] = {**existing, **partial}
                await self.put(key, docs)
                return docs[index]
        raise NotFoundError(entity, doc_id)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            # A corrupt snapshot is treated like an empty one
            logger.warning(
                "local snapshot unreadable", path=str(self.path), error=str(e)
            )
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e
