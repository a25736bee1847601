"""File-backed JSON document store.

Holds named collections of id-keyed documents in a single JSON file,
re-read before and written after every operation. Single writer, last
write wins.
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from timekeeper.config import settings

logger = logging.getLogger(__name__)

COLLECTIONS = ("users", "meetings", "templates")
DEFAULT_ANALYTICS: dict[str, Any] = {"completedMeetings": [], "totalTime": 0}


class StoreError(Exception):
    """Raised when the store file cannot be read or written."""


class JsonStore:
    """Wrapper around the JSON data file.

    Document-level operations mirror a plain CRUD backend:
    list, insert, merge-update and delete by ``id``.
    """

    def __init__(self, path: str | Path | None = None):
        """Initialize store.

        Args:
            path: JSON file location. Defaults to settings.
        """
        self.path = Path(path or settings.data_file)
        self._lock = asyncio.Lock()
        self._connected = False

    async def connect(self) -> None:
        """Create the data file with empty collections if needed."""
        async with self._lock:
            data = await self._read()
            await self._write(data)
        self._connected = True
        logger.info(f"JSON store ready: {self.path}")

    async def close(self) -> None:
        """Mark the store closed."""
        self._connected = False
        logger.info("JSON store closed")

    async def is_healthy(self) -> bool:
        """Check the data file is readable."""
        if not self._connected:
            return False
        try:
            async with self._lock:
                await self._read()
            return True
        except StoreError:
            return False

    async def list(self, collection: str) -> list[dict]:
        """All documents in a collection, in insertion order."""
        async with self._lock:
            data = await self._read()
        return data[collection]

    async def insert(self, collection: str, document: dict) -> dict:
        """Append a document and return it."""
        async with self._lock:
            data = await self._read()
            data[collection].append(document)
            await self._write(data)
        return document

    async def update(self, collection: str, doc_id: str, partial: dict) -> dict | None:
        """Merge fields into a document.

        Returns:
            The merged document, or None if no document has that id
        """
        async with self._lock:
            data = await self._read()
            documents = data[collection]
            for index, existing in enumerate(documents):
                if existing.get("id") == doc_id:
                    documents[index] = {**existing, **partial}
                    await self._write(data)
                    return documents[index]
        return None

    async def delete(self, collection: str, doc_id: str) -> bool:
        """Remove a document.

        Returns:
            True if a document was removed
        """
        async with self._lock:
            data = await self._read()
            before = len(data[collection])
            data[collection] = [d for d in data[collection] if d.get("id") != doc_id]
            removed = len(data[collection]) < before
            await self._write(data)
        return removed

    async def get_analytics(self) -> dict:
        """The analytics document (completion log and totals)."""
        async with self._lock:
            data = await self._read()
        return data["analytics"]

    async def set_analytics(self, analytics: dict) -> dict:
        """Replace the analytics document."""
        async with self._lock:
            data = await self._read()
            data["analytics"] = analytics
            await self._write(data)
        return analytics

    async def _read(self) -> dict:
        return await asyncio.to_thread(self._read_sync)

    async def _write(self, data: dict) -> None:
        await asyncio.to_thread(self._write_sync, data)

    def _read_sync(self) -> dict:
        data: dict = {}
        if self.path.exists():
            try:
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f) or {}
            except (OSError, json.JSONDecodeError) as e:
                raise StoreError(f"Cannot read {self.path}: {e}") from e
        for name in COLLECTIONS:
            data.setdefault(name, [])
        data.setdefault("analytics", dict(DEFAULT_ANALYTICS))
        return data

    def _write_sync(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, default=str)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e
