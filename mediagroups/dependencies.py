from fastapi import Request

from mediagroups.collector import MediaGroups
from mediagroups.config import Settings
from mediagroups.telegram.client import TelegramClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_media_groups(request: Request) -> MediaGroups:
    return request.app.state.media_groups


def get_telegram_client(request: Request) -> TelegramClient:
    return request.app.state.telegram_client
