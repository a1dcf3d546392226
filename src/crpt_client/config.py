"""Configuration module using Pydantic Settings."""

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crpt_client.quota.window import TimeUnit

DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CRPT_",
        case_sensitive=False,
    )

    # Registration service
    api_url: str = DEFAULT_API_URL

    # Quota
    request_limit: int = 10
    interval: float = 1
    time_unit: TimeUnit = TimeUnit.SECONDS
    scheduler_timezone: str = "UTC"

    # HTTP Client
    http_timeout_connect: float = 10.0
    http_timeout_read: float = 30.0

    # Logging
    log_level: str = "INFO"

    @field_validator("time_unit", mode="before")
    @classmethod
    def _parse_time_unit(cls, value: object) -> TimeUnit:
        return TimeUnit.parse(value)  # type: ignore[arg-type]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for applications embedding the client."""
    level = level or get_settings().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
    )
