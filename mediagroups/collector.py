from __future__ import annotations

import logging
from typing import Any
from weakref import WeakSet

from mediagroups.extractors import MEDIA_GROUP_METHODS, extract_messages, parse_messages
from mediagroups.models import Message, Update
from mediagroups.storage.store import MediaGroupStore
from mediagroups.telegram.client import TelegramClient

logger = logging.getLogger(__name__)


def effective_message(update: Update) -> Message | None:
    """Return the message an update is about, whatever kind of update it is."""
    for message in (
        update.message,
        update.edited_message,
        update.channel_post,
        update.edited_channel_post,
        update.business_message,
        update.edited_business_message,
    ):
        if message is not None:
            return message
    if update.callback_query is not None:
        return update.callback_query.message
    return None


class MediaGroups:
    """Collects media group messages from incoming updates and API results."""

    def __init__(self, store: MediaGroupStore):
        self._store = store
        self._installed: WeakSet[TelegramClient] = WeakSet()

    async def get_media_group(self, media_group_id: str) -> list[Message] | None:
        return await self._store.get(media_group_id)

    async def delete_media_group(self, media_group_id: str) -> None:
        await self._store.delete(media_group_id)
        logger.info("Deleted media group %s", media_group_id)

    async def media_group_of(self, message: Message | None) -> list[Message] | None:
        """Media group of message, e.g. an update's reply_to_message or pinned_message."""
        if message is None or not message.media_group_id:
            return None
        return await self._store.get(message.media_group_id)

    async def collect_update(self, update: Update) -> Message | None:
        msg = effective_message(update)
        if msg is None:
            return None

        to_store = [
            m
            for m in (msg, msg.reply_to_message, msg.pinned_message)
            if m is not None and m.media_group_id
        ]
        if to_store:
            await self._store.store(to_store)
            logger.debug(
                "Stored %d message(s) from update %d", len(to_store), update.update_id
            )
        return msg

    async def handle_api_result(self, method: str, result: Any) -> None:
        if method not in MEDIA_GROUP_METHODS:
            return
        messages = parse_messages(extract_messages(method, result))
        if messages:
            await self._store.store(messages)

    def install(self, client: TelegramClient) -> None:
        """Capture media group messages from the client's API results (once per client)."""
        if client in self._installed:
            return
        self._installed.add(client)
        client.add_result_hook(self.handle_api_result)
