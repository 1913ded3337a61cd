from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from mediagroups.collector import MediaGroups
from mediagroups.config import Settings
from mediagroups.main import app
from mediagroups.models import Message
from mediagroups.storage import MediaGroupStore, MemoryStorage, open_sqlite_storage
from mediagroups.telegram.client import TelegramClient

TEST_SETTINGS = Settings(
    telegram_bot_token="123:test_token",
    webhook_secret_token="my_secret_token",
    storage_backend="memory",
    database_path=":memory:",
    log_file="",
)


@pytest.fixture
def settings() -> Settings:
    return TEST_SETTINGS


# --- Async fixtures for unit tests ---


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
async def sqlite_storage():
    storage = await open_sqlite_storage(":memory:")
    yield storage
    await storage.close()


@pytest.fixture
def store(memory_storage) -> MediaGroupStore:
    return MediaGroupStore(memory_storage)


@pytest.fixture
def media_groups(store) -> MediaGroups:
    return MediaGroups(store)


def make_api_response(result=True, ok: bool = True, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = ""
    resp.raise_for_status = MagicMock()
    if ok:
        resp.json.return_value = {"ok": True, "result": result}
    else:
        resp.json.return_value = {
            "ok": False,
            "error_code": status_code,
            "description": "Bad Request: wrong file identifier",
        }
    return resp


@pytest.fixture
def tg_client() -> TelegramClient:
    mock_http = AsyncMock()
    mock_http.post = AsyncMock(return_value=make_api_response())
    return TelegramClient(http_client=mock_http, bot_token="123:test_token")


# --- Sync fixture for TestClient-based integration tests ---


@pytest.fixture
def client(settings: Settings) -> TestClient:
    mock_http = AsyncMock()
    mock_http.post = AsyncMock(return_value=make_api_response(result=[]))

    storage = MemoryStorage()
    telegram_client = TelegramClient(
        http_client=mock_http, bot_token=settings.telegram_bot_token
    )
    media_groups = MediaGroups(MediaGroupStore(storage))
    media_groups.install(telegram_client)

    app.state.settings = settings
    app.state.http_client = mock_http
    app.state.telegram_client = telegram_client
    app.state.storage = storage
    app.state.media_groups = media_groups

    return TestClient(app, raise_server_exceptions=False)


def make_message_dict(
    message_id: int = 1,
    chat_id: int = 100,
    media_group_id: str | None = "g1",
    **extra,
) -> dict:
    msg: dict = {
        "message_id": message_id,
        "chat": {"id": chat_id, "type": "private"},
        "date": 1700000000,
    }
    if media_group_id:
        msg["media_group_id"] = media_group_id
    msg.update(extra)
    return msg


def make_message(
    message_id: int = 1,
    chat_id: int = 100,
    media_group_id: str | None = "g1",
    **extra,
) -> Message:
    return Message.model_validate(make_message_dict(message_id, chat_id, media_group_id, **extra))


def photo(*file_ids: str) -> list[dict]:
    return [
        {"file_id": fid, "file_unique_id": f"u_{fid}", "width": 90 * (i + 1), "height": 90 * (i + 1)}
        for i, fid in enumerate(file_ids)
    ]


def make_update(update_id: int = 1, kind: str = "message", **message) -> dict:
    return {"update_id": update_id, kind: make_message_dict(**message)}
