from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError

from mediagroups.dependencies import get_media_groups, get_settings
from mediagroups.models import Update
from mediagroups.webhook.security import validate_secret_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook")
async def incoming_webhook(request: Request) -> Response:
    settings = get_settings(request)

    secret = request.headers.get("X-Telegram-Bot-Api-Secret-Token", "")
    if not validate_secret_token(secret, settings.webhook_secret_token):
        logger.warning("Invalid webhook secret token")
        return PlainTextResponse(content="Forbidden", status_code=403)

    # Telegram redelivers any update answered with non-2xx
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Ignoring non-JSON update body")
        return Response(status_code=200)
    try:
        update = Update.model_validate(payload)
    except ValidationError:
        logger.warning("Ignoring malformed update: %s", str(payload)[:200])
        return Response(status_code=200)

    media_groups = get_media_groups(request)
    msg = await media_groups.collect_update(update)
    if msg is not None and msg.media_group_id:
        logger.info(
            "Incoming [%s] message %d of media group %s",
            msg.chat.id,
            msg.message_id,
            msg.media_group_id,
        )
    return Response(status_code=200)
