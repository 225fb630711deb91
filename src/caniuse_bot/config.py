"""Environment-based configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

from caniuse_bot.constants import CACHE_TTL_SECONDS, DEFAULT_DATASET_URL

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Reads from .env file and environment variables."""

    # Chat platform integration
    outgoing_webhook_token: str = ""
    incoming_webhook_url: str = ""
    bot_username: str = ""
    bot_icon_emoji: str = ""

    # Cache backend (empty = in-process memory store)
    redis_url: str = ""
    cache_ttl_seconds: int = CACHE_TTL_SECONDS

    # Upstream dataset
    dataset_url: str = DEFAULT_DATASET_URL
    http_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    @field_validator("bot_icon_emoji")
    @classmethod
    def _wrap_emoji(cls, v: str) -> str:
        """Accept ``ghost`` or ``:ghost:``; store the colon form."""
        v = v.strip()
        if not v:
            return v
        return f":{v.strip(':')}:"

    @field_validator("cache_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache_ttl_seconds must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {v}")
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "",
        "extra": "ignore",
    }
