#!/usr/bin/env python
"""Register (or remove) the bot webhook with Telegram.

Usage:
    python scripts/set_webhook.py URL [--drop-pending]
    python scripts/set_webhook.py --delete

The bot token and secret token come from the same environment / .env file
the service reads (TELEGRAM_BOT_TOKEN, WEBHOOK_SECRET_TOKEN).

Exit codes:
    0   Telegram accepted the request
    1   Telegram rejected the request
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path when running from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx

from mediagroups.config import Settings
from mediagroups.exceptions import TelegramApiError
from mediagroups.telegram.client import TelegramClient

# Updates that can carry media group messages
ALLOWED_UPDATES = [
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
    "business_message",
    "edited_business_message",
    "callback_query",
]


async def _run(url: str | None, delete: bool, drop_pending: bool) -> int:
    settings = Settings()
    async with httpx.AsyncClient(timeout=30.0) as http:
        client = TelegramClient(
            http_client=http,
            bot_token=settings.telegram_bot_token,
            base_url=settings.telegram_api_base_url,
        )
        try:
            if delete:
                await client.call("deleteWebhook", {"drop_pending_updates": drop_pending})
                print("Webhook removed")
                return 0

            payload: dict = {
                "url": url,
                "allowed_updates": ALLOWED_UPDATES,
                "drop_pending_updates": drop_pending,
            }
            if settings.webhook_secret_token:
                payload["secret_token"] = settings.webhook_secret_token
            await client.call("setWebhook", payload)
        except TelegramApiError as e:
            print(f"Telegram rejected the request: {e.description}")
            return 1

    print(f"Webhook set to {url}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("url", nargs="?", help="Public HTTPS URL of the /webhook endpoint")
    parser.add_argument("--delete", action="store_true", help="Remove the webhook instead")
    parser.add_argument("--drop-pending", action="store_true", help="Drop updates queued on Telegram's side")
    args = parser.parse_args()

    if not args.delete and not args.url:
        parser.error("url is required unless --delete is given")

    sys.exit(asyncio.run(_run(args.url, args.delete, args.drop_pending)))


if __name__ == "__main__":
    main()
