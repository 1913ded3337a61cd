from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Telegram Bot API
    telegram_bot_token: str
    telegram_api_base_url: str = "https://api.telegram.org"
    webhook_secret_token: str = ""  # empty disables the header check

    # Storage
    storage_backend: Literal["memory", "sqlite"] = "memory"
    database_path: str = "data/mediagroups.db"
    serialize_writes: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: str = "data/mediagroups.log"

    model_config = {"env_file": ".env"}
