from __future__ import annotations

from typing import Protocol

from mediagroups.models import Message


class StorageAdapter(Protocol):
    """Key-value backend holding one ordered message list per media group."""

    async def read(self, key: str) -> list[Message] | None: ...

    async def write(self, key: str, value: list[Message]) -> None: ...

    async def delete(self, key: str) -> None: ...
