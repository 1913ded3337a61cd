from __future__ import annotations

from collections.abc import Sequence

from mediagroups.models import (
    ConvertOptions,
    InputMedia,
    InputMediaAudio,
    InputMediaDocument,
    InputMediaPhoto,
    InputMediaVideo,
    Message,
)


def _caption_fields(message: Message, index: int, options: ConvertOptions) -> dict:
    if index == 0 and options.caption is not None:
        return {
            "caption": options.caption,
            "parse_mode": options.parse_mode,
            "caption_entities": options.caption_entities,
            "show_caption_above_media": options.show_caption_above_media,
        }
    above = message.show_caption_above_media
    if index == 0 and options.show_caption_above_media is not None:
        above = options.show_caption_above_media
    return {
        "caption": message.caption,
        "caption_entities": message.caption_entities,
        "show_caption_above_media": above,
    }


def _convert_one(message: Message, index: int, options: ConvertOptions) -> InputMedia | None:
    fields = _caption_fields(message, index, options)
    spoiler = options.has_spoiler if options.has_spoiler is not None else message.has_media_spoiler

    if message.photo:
        # Telegram lists photo sizes smallest first
        return InputMediaPhoto(media=message.photo[-1].file_id, has_spoiler=spoiler, **fields)
    if message.video:
        return InputMediaVideo(media=message.video.file_id, has_spoiler=spoiler, **fields)
    if message.animation:
        # sendMediaGroup has no animation type; checked before document,
        # which Telegram also fills in for animations.
        return InputMediaVideo(media=message.animation.file_id, has_spoiler=spoiler, **fields)

    # Documents and audio take no spoiler or caption placement
    fields.pop("show_caption_above_media")
    if message.document:
        return InputMediaDocument(media=message.document.file_id, **fields)
    if message.audio:
        return InputMediaAudio(media=message.audio.file_id, **fields)
    return None


def to_input_media(
    messages: Sequence[Message], options: ConvertOptions | None = None
) -> list[InputMedia]:
    """Convert stored media group messages into InputMedia for sendMediaGroup.

    options.caption replaces the caption of the first item only, together
    with its parse mode/entities and placement. Every other item keeps its
    own caption. Messages without a supported media payload are skipped.
    """
    options = options or ConvertOptions()
    media: list[InputMedia] = []
    for index, message in enumerate(messages):
        item = _convert_one(message, index, options)
        if item is not None:
            media.append(item)
    return media
