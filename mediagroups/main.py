import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from mediagroups.collector import MediaGroups
from mediagroups.config import Settings
from mediagroups.groups.router import router as groups_router
from mediagroups.health.router import router as health_router
from mediagroups.logging_config import configure_logging
from mediagroups.storage import MediaGroupStore, build_storage
from mediagroups.telegram.client import TelegramClient
from mediagroups.webhook.router import router as webhook_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    configure_logging(
        level=settings.log_level, json_format=settings.log_json, log_file=settings.log_file
    )

    http_client = httpx.AsyncClient(timeout=httpx.Timeout(60.0, connect=10.0))
    telegram_client = TelegramClient(
        http_client=http_client,
        bot_token=settings.telegram_bot_token,
        base_url=settings.telegram_api_base_url,
    )

    storage = await build_storage(settings)
    media_groups = MediaGroups(
        MediaGroupStore(storage, serialize_writes=settings.serialize_writes)
    )
    media_groups.install(telegram_client)
    logger.info("Media group storage: %s", settings.storage_backend)

    app.state.settings = settings
    app.state.http_client = http_client
    app.state.telegram_client = telegram_client
    app.state.storage = storage
    app.state.media_groups = media_groups

    yield

    close = getattr(storage, "close", None)
    if close is not None:
        await close()
    await http_client.aclose()


app = FastAPI(title="mediagroups", lifespan=lifespan)
app.include_router(health_router)
app.include_router(webhook_router)
app.include_router(groups_router)
