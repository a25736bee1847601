"""File-backed storage."""

from timekeeper.db.json_store import JsonStore, StoreError

__all__ = ["JsonStore", "StoreError"]
