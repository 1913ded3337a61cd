from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


class TelegramObject(BaseModel):
    # Unknown Bot API fields are kept so stored messages survive a round trip.
    model_config = ConfigDict(extra="allow")


class Chat(TelegramObject):
    id: int
    type: str = "private"


class MessageEntity(TelegramObject):
    type: str
    offset: int
    length: int


class PhotoSize(TelegramObject):
    file_id: str
    file_unique_id: str = ""
    width: int = 0
    height: int = 0
    file_size: int | None = None


class Video(TelegramObject):
    file_id: str
    file_unique_id: str = ""


class Animation(TelegramObject):
    file_id: str
    file_unique_id: str = ""


class Document(TelegramObject):
    file_id: str
    file_unique_id: str = ""


class Audio(TelegramObject):
    file_id: str
    file_unique_id: str = ""


class Message(TelegramObject):
    message_id: int
    chat: Chat
    date: int = 0
    media_group_id: str | None = None
    caption: str | None = None
    caption_entities: list[MessageEntity] | None = None
    show_caption_above_media: bool | None = None
    has_media_spoiler: bool | None = None
    photo: list[PhotoSize] | None = None
    video: Video | None = None
    animation: Animation | None = None
    document: Document | None = None
    audio: Audio | None = None
    reply_to_message: Message | None = None
    pinned_message: Message | None = None


class CallbackQuery(TelegramObject):
    id: str
    message: Message | None = None


class Update(TelegramObject):
    update_id: int
    message: Message | None = None
    edited_message: Message | None = None
    channel_post: Message | None = None
    edited_channel_post: Message | None = None
    business_message: Message | None = None
    edited_business_message: Message | None = None
    callback_query: CallbackQuery | None = None


class InputMediaBase(BaseModel):
    type: str
    media: str
    caption: str | None = None
    parse_mode: str | None = None
    caption_entities: list[MessageEntity] | None = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class InputMediaPhoto(InputMediaBase):
    type: Literal["photo"] = "photo"
    show_caption_above_media: bool | None = None
    has_spoiler: bool | None = None


class InputMediaVideo(InputMediaBase):
    type: Literal["video"] = "video"
    show_caption_above_media: bool | None = None
    has_spoiler: bool | None = None


class InputMediaDocument(InputMediaBase):
    type: Literal["document"] = "document"


class InputMediaAudio(InputMediaBase):
    type: Literal["audio"] = "audio"


InputMedia = InputMediaPhoto | InputMediaVideo | InputMediaDocument | InputMediaAudio


class ConvertOptions(BaseModel):
    caption: str | None = None
    parse_mode: str | None = None
    caption_entities: list[MessageEntity] | None = None
    show_caption_above_media: bool | None = None
    has_spoiler: bool | None = None

    @model_validator(mode="after")
    def check_caption_formatting(self) -> ConvertOptions:
        if self.parse_mode and self.caption_entities:
            raise ValueError("parse_mode and caption_entities are mutually exclusive")
        return self


class SendMediaGroupRequest(ConvertOptions):
    chat_id: int | str


class HealthResponse(BaseModel):
    status: str
    storage: str
