"""Configuration loader for the profile scraper (Pydantic edition)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded safely."""


class ScraperConfig(BaseSettings):
    """Runtime configuration read once from environment variables at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        validate_default=True,
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENVIRONMENT", "APP_ENV"),
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("APP_LOG_LEVEL", "LOG_LEVEL"),
    )
    # Prefix prepended to the url-encoded profile URL, e.g. "https://my-proxy/?url="
    proxy_url: str = Field(
        default="",
        validation_alias=AliasChoices("PROXY_URL", "APP_PROXY_URL"),
    )

    @field_validator("proxy_url", mode="before")
    @classmethod
    def _strip_proxy(cls, value: str | None) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("log_level", mode="after")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value!r}")
        return level

    @property
    def has_proxy(self) -> bool:
        return bool(self.proxy_url)


def load_config(env_path: Path | None = None) -> ScraperConfig:
    """Load configuration from .env/environment with validation."""
    load_kwargs: dict[str, str] = {}
    if env_path is not None:
        load_dotenv(env_path, override=False)
        load_kwargs["_env_file"] = str(env_path)
    else:
        load_dotenv(override=False)
    try:
        config = ScraperConfig(**load_kwargs)
    except ValidationError as exc:
        raise ConfigError("Invalid configuration") from exc

    LOGGER.info(
        "ScraperConfig loaded",
        extra={
            "event": "config.loaded",
            "environment": config.environment,
            "extra_fields": {"proxy_enabled": config.has_proxy},
        },
    )
    return config
