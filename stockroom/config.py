"""Application settings, read from ``STOCKROOM_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOCKROOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mongo_uri: str = "mongodb://localhost:27017/stockroom"

    jwt_secret: str = Field(default="change-me", min_length=1)
    jwt_algorithm: str = "HS256"
    access_token_minutes: int = Field(default=60, ge=1)

    default_page_limit: int = Field(default=10, ge=1)
    max_page_limit: int = Field(default=100, ge=1)

    trace_queries: bool = False
    slow_query_ms: float = Field(default=100.0, ge=0)

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
