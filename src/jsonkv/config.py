"""Application settings via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from jsonkv.validation import DEFAULT_MAX_KEY_LENGTH


class StoreConfig(BaseModel):
    """Backing store selection.

    Attributes:
        type: Registered store type ("memory" or "sqlite")
        options: Keyword arguments for the store constructor
                 (e.g. ``{"db_path": "kv.db", "pool_size": 8}`` for sqlite)
    """

    type: str = "memory"
    options: dict[str, Any] = Field(default_factory=dict)


class Settings(BaseSettings):
    """Load from ``JSONKV_*`` environment variables and a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="JSONKV_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "jsonkv"
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    allow_nuke: bool = False
    max_key_length: int = Field(default=DEFAULT_MAX_KEY_LENGTH, ge=1)
    store: StoreConfig = Field(default_factory=StoreConfig)


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
