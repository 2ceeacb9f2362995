from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Runtime configuration, read from ``HRE_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(env_prefix="HRE_", env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Hourly Rate Engineer"
    environment: str = "development"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    default_currency: str = "USD"
    cors_allow_origin: str = "*"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = str(value or "INFO").strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {value}")
        return level

    @field_validator("default_currency", mode="before")
    @classmethod
    def _normalize_currency(cls, value: str) -> str:
        return str(value or "USD").strip().upper()


def setup_logging(config: Settings) -> None:
    logger.remove()
    if config.log_file:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(config.log_file, level=config.log_level)
    logger.add(sys.stderr, level=config.log_level)


settings = Settings()
