from __future__ import annotations

import asyncio
from collections.abc import Iterable

from mediagroups.models import Message
from mediagroups.storage.base import StorageAdapter


def _same_message(a: Message, b: Message) -> bool:
    # message_id is only unique within a chat
    return a.message_id == b.message_id and a.chat.id == b.chat.id


def _group_by_key(messages: Iterable[Message]) -> dict[str, list[Message]]:
    groups: dict[str, list[Message]] = {}
    for message in messages:
        if not message.media_group_id:
            continue
        groups.setdefault(message.media_group_id, []).append(message)
    return groups


def _merge(stored: list[Message], incoming: list[Message]) -> list[Message]:
    for message in incoming:
        for index, existing in enumerate(stored):
            if _same_message(existing, message):
                stored[index] = message
                break
        else:
            stored.append(message)
    return stored


async def _settle(aws) -> list:
    # Waits for every call before re-raising the first failure
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


async def store_messages(adapter: StorageAdapter, messages: Iterable[Message]) -> None:
    """Store messages in batch, grouped by media_group_id.

    Performs one read and one write per media group instead of one per
    message. Messages without media_group_id are skipped. A message already
    stored under the same (message_id, chat.id) is replaced where it stands;
    new messages are appended in arrival order.

    All groups are read before any is written; a failed read means no writes.
    """
    groups = _group_by_key(messages)
    if not groups:
        return
    keys = list(groups)
    stored = await _settle(adapter.read(key) for key in keys)
    await _settle(
        adapter.write(key, _merge(current or [], groups[key]))
        for key, current in zip(keys, stored)
    )


class MediaGroupStore:
    """Media group accumulation on top of an injected StorageAdapter.

    Concurrent store() calls touching the same group do a read-modify-write
    each, so the last write wins. With serialize_writes=True, calls sharing
    this instance are serialized per group key; writers in other processes
    are not covered.
    """

    def __init__(self, adapter: StorageAdapter, serialize_writes: bool = False):
        self._adapter = adapter
        self._serialize_writes = serialize_writes
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @property
    def adapter(self) -> StorageAdapter:
        return self._adapter

    def _checkout_lock(self, key: str) -> asyncio.Lock:
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        return self._locks.setdefault(key, asyncio.Lock())

    def _return_lock(self, key: str) -> None:
        self._lock_users[key] -= 1
        if self._lock_users[key] == 0:
            del self._lock_users[key]
            del self._locks[key]

    async def store(self, messages: Iterable[Message]) -> None:
        messages = list(messages)
        if not self._serialize_writes:
            await store_messages(self._adapter, messages)
            return

        keys = sorted({m.media_group_id for m in messages if m.media_group_id})
        locks = [self._checkout_lock(key) for key in keys]
        # Sorted acquisition keeps multi-group batches from deadlocking.
        acquired: list[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            await store_messages(self._adapter, messages)
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in keys:
                self._return_lock(key)

    async def get(self, media_group_id: str) -> list[Message] | None:
        return await self._adapter.read(media_group_id)

    async def delete(self, media_group_id: str) -> None:
        await self._adapter.delete(media_group_id)
