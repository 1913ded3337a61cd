from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from mediagroups.converter import ConvertOptions, to_input_media
from mediagroups.dependencies import get_media_groups, get_telegram_client
from mediagroups.exceptions import TelegramApiError
from mediagroups.models import Message, SendMediaGroupRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media-groups")


@router.get(
    "/{media_group_id}", response_model=list[Message], response_model_exclude_none=True
)
async def get_media_group(media_group_id: str, request: Request) -> list[Message]:
    group = await get_media_groups(request).get_media_group(media_group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Media group not found")
    return group


@router.delete("/{media_group_id}", status_code=204)
async def delete_media_group(media_group_id: str, request: Request) -> Response:
    await get_media_groups(request).delete_media_group(media_group_id)
    return Response(status_code=204)


@router.post("/{media_group_id}/send")
async def send_media_group(
    media_group_id: str, body: SendMediaGroupRequest, request: Request
) -> list[dict]:
    group = await get_media_groups(request).get_media_group(media_group_id)
    if group is None:
        raise HTTPException(status_code=404, detail="Media group not found")

    media = to_input_media(
        group, ConvertOptions.model_validate(body.model_dump(exclude={"chat_id"}))
    )
    if not media:
        raise HTTPException(status_code=422, detail="Media group has no sendable media")

    try:
        return await get_telegram_client(request).send_media_group(body.chat_id, media)
    except TelegramApiError as e:
        logger.warning("Resend of media group %s failed: %s", media_group_id, e)
        raise HTTPException(status_code=502, detail=e.description) from e
