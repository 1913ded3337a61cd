"""Storage backends for media groups.

Provides:
- StorageAdapter: read/write/delete contract every backend satisfies
- MemoryStorage: in-process default
- SqliteStorage: persistent backend over aiosqlite
- MediaGroupStore / store_messages: batched, order-preserving upserts
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from mediagroups.storage.base import StorageAdapter
from mediagroups.storage.memory import MemoryStorage
from mediagroups.storage.sqlite import SqliteStorage, open_sqlite_storage
from mediagroups.storage.store import MediaGroupStore, store_messages

if TYPE_CHECKING:
    from mediagroups.config import Settings

__all__ = [
    "MediaGroupStore",
    "MemoryStorage",
    "SqliteStorage",
    "StorageAdapter",
    "build_storage",
    "open_sqlite_storage",
    "store_messages",
]


async def build_storage(settings: Settings) -> StorageAdapter:
    if settings.storage_backend == "sqlite":
        if settings.database_path != ":memory:":
            Path(settings.database_path).parent.mkdir(parents=True, exist_ok=True)
        return await open_sqlite_storage(settings.database_path)
    return MemoryStorage()
