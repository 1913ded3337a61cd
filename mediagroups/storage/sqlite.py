from __future__ import annotations

import json
import logging

import aiosqlite

from mediagroups.models import Message

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS media_groups (
    media_group_id TEXT PRIMARY KEY,
    messages       TEXT NOT NULL,
    updated_at     TEXT NOT NULL DEFAULT (datetime('now'))
);
"""


async def open_sqlite_storage(db_path: str) -> SqliteStorage:
    """Open (and create if needed) the media group database at db_path."""
    conn = await aiosqlite.connect(db_path)
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute("PRAGMA synchronous=NORMAL")   # Faster, safe with WAL
    await conn.execute("PRAGMA temp_store=MEMORY")
    await conn.executescript(SCHEMA)
    await conn.commit()
    logger.info("Media group database ready at %s", db_path)
    return SqliteStorage(conn)


class SqliteStorage:
    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def read(self, key: str) -> list[Message] | None:
        cursor = await self._conn.execute(
            "SELECT messages FROM media_groups WHERE media_group_id = ?",
            (key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return [Message.model_validate(m) for m in json.loads(row[0])]

    async def write(self, key: str, value: list[Message]) -> None:
        data = json.dumps([m.model_dump(mode="json", exclude_none=True) for m in value])
        await self._conn.execute(
            "INSERT INTO media_groups (media_group_id, messages) VALUES (?, ?) "
            "ON CONFLICT(media_group_id) DO UPDATE SET "
            "messages = excluded.messages, updated_at = datetime('now')",
            (key, data),
        )
        await self._conn.commit()

    async def delete(self, key: str) -> None:
        await self._conn.execute(
            "DELETE FROM media_groups WHERE media_group_id = ?",
            (key,),
        )
        await self._conn.commit()

    async def close(self) -> None:
        await self._conn.close()
