import asyncio

import pytest

from mediagroups.storage import MediaGroupStore, MemoryStorage, store_messages
from tests.conftest import make_message


class CountingStorage(MemoryStorage):
    def __init__(self):
        super().__init__()
        self.reads: list[str] = []
        self.writes: list[str] = []

    async def read(self, key):
        self.reads.append(key)
        return await super().read(key)

    async def write(self, key, value):
        self.writes.append(key)
        await super().write(key, value)


class SlowStorage(MemoryStorage):
    """Yields between read and write so concurrent upserts interleave."""

    async def read(self, key):
        value = await super().read(key)
        await asyncio.sleep(0.01)
        return value


async def test_skips_messages_without_media_group_id(memory_storage):
    await store_messages(memory_storage, [make_message(1, 100, None)])
    assert await memory_storage.read("g1") is None
    assert len(memory_storage) == 0


async def test_groupless_batch_makes_no_backend_calls():
    storage = CountingStorage()
    await store_messages(storage, [make_message(1, 100, None), make_message(2, 100, None)])
    assert storage.reads == []
    assert storage.writes == []


async def test_empty_batch_is_noop():
    storage = CountingStorage()
    await store_messages(storage, [])
    assert storage.reads == []
    assert storage.writes == []


async def test_stores_new_message(memory_storage):
    await store_messages(memory_storage, [make_message(1, 100, "g1")])
    stored = await memory_storage.read("g1")
    assert len(stored) == 1
    assert stored[0].message_id == 1


async def test_appends_different_messages_to_same_group(memory_storage):
    await store_messages(memory_storage, [make_message(1, 100, "g1")])
    await store_messages(memory_storage, [make_message(2, 100, "g1")])
    stored = await memory_storage.read("g1")
    assert [m.message_id for m in stored] == [1, 2]


async def test_replaces_existing_message_in_place(memory_storage):
    await store_messages(
        memory_storage,
        [make_message(1, 100, "g1", caption="old"), make_message(2, 100, "g1")],
    )
    await store_messages(memory_storage, [make_message(1, 100, "g1", caption="edited")])
    stored = await memory_storage.read("g1")
    assert [m.message_id for m in stored] == [1, 2]
    assert stored[0].caption == "edited"


async def test_same_message_id_in_different_chats_is_distinct(memory_storage):
    await store_messages(memory_storage, [make_message(1, 100, "g1")])
    await store_messages(memory_storage, [make_message(1, 200, "g1")])
    stored = await memory_storage.read("g1")
    assert len(stored) == 2
    assert [m.chat.id for m in stored] == [100, 200]


async def test_storing_same_batch_twice_is_idempotent(memory_storage):
    batch = [make_message(1, 100, "g1"), make_message(2, 100, "g1")]
    await store_messages(memory_storage, batch)
    first = await memory_storage.read("g1")
    await store_messages(memory_storage, batch)
    assert await memory_storage.read("g1") == first


async def test_batch_splits_by_group_with_one_read_and_write_each():
    storage = CountingStorage()
    await store_messages(
        storage,
        [
            make_message(1, 100, "g1"),
            make_message(2, 100, "g1"),
            make_message(3, 100, "g2"),
            make_message(4, 100, "g1"),
        ],
    )
    assert sorted(storage.reads) == ["g1", "g2"]
    assert sorted(storage.writes) == ["g1", "g2"]
    assert [m.message_id for m in await storage.read("g1")] == [1, 2, 4]
    assert [m.message_id for m in await storage.read("g2")] == [3]


async def test_later_duplicate_in_batch_wins(memory_storage):
    await store_messages(
        memory_storage,
        [
            make_message(1, 100, "g1", caption="first"),
            make_message(2, 100, "g1"),
            make_message(1, 100, "g1", caption="second"),
        ],
    )
    stored = await memory_storage.read("g1")
    assert [m.message_id for m in stored] == [1, 2]
    assert stored[0].caption == "second"


async def test_batch_mixes_replacements_and_new_messages(memory_storage):
    await store_messages(memory_storage, [make_message(1, 100, "g1", caption="old")])
    await store_messages(
        memory_storage,
        [make_message(1, 100, "g1", caption="new"), make_message(2, 100, "g1")],
    )
    stored = await memory_storage.read("g1")
    assert len(stored) == 2
    assert stored[0].caption == "new"
    assert stored[1].message_id == 2


async def test_store_get_and_delete(store):
    assert await store.get("g1") is None
    await store.store([make_message(1, 100, "g1")])
    group = await store.get("g1")
    assert [m.message_id for m in group] == [1]

    await store.delete("g1")
    assert await store.get("g1") is None
    # Deleting again is fine
    await store.delete("g1")


async def test_concurrent_upserts_can_lose_messages_without_serialization():
    store = MediaGroupStore(SlowStorage())
    await asyncio.gather(
        store.store([make_message(1, 100, "g1")]),
        store.store([make_message(2, 100, "g1")]),
    )
    # Both read an empty group, the last write wins
    assert len(await store.get("g1")) == 1


async def test_serialized_writes_keep_concurrent_upserts():
    store = MediaGroupStore(SlowStorage(), serialize_writes=True)
    await asyncio.gather(
        store.store([make_message(1, 100, "g1"), make_message(10, 100, "g2")]),
        store.store([make_message(2, 100, "g1")]),
        store.store([make_message(11, 100, "g2"), make_message(3, 100, "g1")]),
    )
    assert sorted(m.message_id for m in await store.get("g1")) == [1, 2, 3]
    assert sorted(m.message_id for m in await store.get("g2")) == [10, 11]


async def test_backend_errors_propagate():
    class BrokenStorage(MemoryStorage):
        async def write(self, key, value):
            raise RuntimeError("disk full")

    store = MediaGroupStore(BrokenStorage())
    with pytest.raises(RuntimeError, match="disk full"):
        await store.store([make_message(1, 100, "g1")])
    assert await store.get("g1") is None


class FlakyStorage(MemoryStorage):
    """read("b") fails; read("a") is slow enough to finish after it."""

    async def read(self, key):
        if key == "b":
            raise RuntimeError("read failed")
        await asyncio.sleep(0.05)
        return await super().read(key)


@pytest.mark.parametrize("serialize_writes", [False, True])
async def test_failed_read_means_no_writes(serialize_writes):
    storage = FlakyStorage()
    store = MediaGroupStore(storage, serialize_writes=serialize_writes)
    with pytest.raises(RuntimeError, match="read failed"):
        await store.store([make_message(1, 100, "a"), make_message(2, 100, "b")])

    await asyncio.sleep(0.1)
    assert len(storage) == 0
    assert store._locks == {}


async def test_failed_write_waits_for_other_groups():
    class SlowWriteStorage(MemoryStorage):
        async def write(self, key, value):
            if key == "b":
                raise RuntimeError("write failed")
            await asyncio.sleep(0.05)
            await super().write(key, value)

    storage = SlowWriteStorage()
    store = MediaGroupStore(storage, serialize_writes=True)
    with pytest.raises(RuntimeError, match="write failed"):
        await store.store([make_message(1, 100, "a"), make_message(2, 100, "b")])

    # The write to "a" already landed when the error surfaced
    assert [m.message_id for m in await storage.read("a")] == [1]
    assert await storage.read("b") is None


async def test_serialized_store_releases_lock_map():
    store = MediaGroupStore(SlowStorage(), serialize_writes=True)
    await store.store([make_message(1, 100, "g1"), make_message(2, 100, "g2")])
    assert store._locks == {}
    assert store._lock_users == {}

    await asyncio.gather(
        store.store([make_message(3, 100, "g1")]),
        store.store([make_message(4, 100, "g1")]),
    )
    assert store._locks == {}
    assert [m.message_id for m in await store.get("g1")] == [1, 3, 4]
