from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import httpx

from mediagroups.exceptions import TelegramApiError
from mediagroups.models import InputMedia

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"

ResultHook = Callable[[str, Any], Awaitable[None]]


class TelegramClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        bot_token: str,
        base_url: str = TELEGRAM_API_URL,
    ):
        self._http = http_client
        self._bot_token = bot_token
        self._base_url = base_url.rstrip("/")
        self._result_hooks: list[ResultHook] = []

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._bot_token}/{method}"

    def add_result_hook(self, hook: ResultHook) -> None:
        """Run hook(method, result) after every successful API call."""
        self._result_hooks.append(hook)

    def _check_auth_error(self, resp: httpx.Response) -> None:
        if resp.status_code == 401:
            logger.error(
                "Telegram API auth failed (401): bot token revoked or invalid. "
                "Get a new one from @BotFather"
            )
            resp.raise_for_status()

    async def call(self, method: str, payload: dict[str, Any] | None = None) -> Any:
        resp = await self._http.post(self._method_url(method), json=payload or {})
        self._check_auth_error(resp)
        try:
            data = resp.json()
        except ValueError:
            logger.error("Call failed [%s] %s: non-JSON response", method, resp.status_code)
            raise TelegramApiError(method, resp.status_code, resp.text[:200] or "non-JSON response")
        if not data.get("ok"):
            description = data.get("description", resp.text)
            logger.error("Call failed [%s] %s: %s", method, resp.status_code, description)
            raise TelegramApiError(method, data.get("error_code"), description)

        result = data.get("result")
        for hook in self._result_hooks:
            await hook(method, result)
        return result

    async def send_media_group(
        self, chat_id: int | str, media: Sequence[InputMedia], **params: Any
    ) -> list[dict]:
        payload = {
            "chat_id": chat_id,
            "media": [item.to_payload() for item in media],
            **params,
        }
        result = await self.call("sendMediaGroup", payload)
        logger.info("Outgoing  [%s]: media group of %d items", chat_id, len(media))
        return result

    async def forward_message(
        self, chat_id: int | str, from_chat_id: int | str, message_id: int
    ) -> dict:
        return await self.call(
            "forwardMessage",
            {"chat_id": chat_id, "from_chat_id": from_chat_id, "message_id": message_id},
        )

    async def edit_message_caption(
        self, chat_id: int | str, message_id: int, caption: str, **params: Any
    ) -> dict | bool:
        return await self.call(
            "editMessageCaption",
            {"chat_id": chat_id, "message_id": message_id, "caption": caption, **params},
        )
