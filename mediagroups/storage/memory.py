from mediagroups.models import Message


class MemoryStorage:
    def __init__(self) -> None:
        self._groups: dict[str, list[Message]] = {}

    async def read(self, key: str) -> list[Message] | None:
        value = self._groups.get(key)
        if value is None:
            return None
        return [m.model_copy(deep=True) for m in value]

    async def write(self, key: str, value: list[Message]) -> None:
        self._groups[key] = [m.model_copy(deep=True) for m in value]

    async def delete(self, key: str) -> None:
        self._groups.pop(key, None)

    def __len__(self) -> int:
        return len(self._groups)
