from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from mediagroups.models import Message


class ResultShape(str, Enum):
    ARRAY = "array"  # Message[]
    SINGLETON = "singleton"  # Message
    OPTIONAL_OBJECT = "optional_object"  # Message | true


# Bot API methods whose results may contain messages with media_group_id.
MEDIA_GROUP_METHODS: dict[str, ResultShape] = {
    "sendMediaGroup": ResultShape.ARRAY,
    "forwardMessage": ResultShape.SINGLETON,
    "editMessageMedia": ResultShape.OPTIONAL_OBJECT,
    "editMessageCaption": ResultShape.OPTIONAL_OBJECT,
    "editMessageReplyMarkup": ResultShape.OPTIONAL_OBJECT,
}


def _array(result: Any) -> list[Any]:
    return result if isinstance(result, list) else []


def _singleton(result: Any) -> list[Any]:
    return [result]


def _optional_object(result: Any) -> list[Any]:
    return [result] if isinstance(result, (Mapping, BaseModel)) else []


_EXTRACTORS: dict[ResultShape, Callable[[Any], list[Any]]] = {
    ResultShape.ARRAY: _array,
    ResultShape.SINGLETON: _singleton,
    ResultShape.OPTIONAL_OBJECT: _optional_object,
}


def extract_messages(method: str, result: Any) -> list[Any]:
    """Extract candidate messages from a raw API result.

    Unknown methods never carry messages and yield an empty list.
    """
    shape = MEDIA_GROUP_METHODS.get(method)
    if shape is None:
        return []
    return _EXTRACTORS[shape](result)


def parse_messages(candidates: Iterable[Any]) -> list[Message]:
    """Turn raw candidates into Message objects, dropping anything that isn't one."""
    messages: list[Message] = []
    for candidate in candidates:
        if isinstance(candidate, Message):
            messages.append(candidate)
            continue
        if isinstance(candidate, BaseModel):
            candidate = candidate.model_dump()
        if not isinstance(candidate, Mapping):
            continue
        try:
            messages.append(Message.model_validate(candidate))
        except ValidationError:
            continue
    return messages
