"""Persistence backends for meetings, templates and analytics.

Provides:
- TimekeeperBackend: Protocol every backend implements
- StoreBackend: In-process JSON store
- HttpBackend: REST API client (httpx)
- LocalSnapshot: Local fallback file
"""

from timekeeper.adapters.base import TimekeeperBackend
from timekeeper.adapters.http_backend import HttpBackend
from timekeeper.adapters.local_snapshot import LocalSnapshot
from timekeeper.adapters.store_backend import StoreBackend

__all__ = [
    "HttpBackend",
    "LocalSnapshot",
    "StoreBackend",
    "TimekeeperBackend",
]
