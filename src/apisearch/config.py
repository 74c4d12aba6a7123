from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "Apisearch"
    env: str = "development"
    log_level: str = "INFO"


class ClientConfig(BaseModel):
    """Remote search service configuration values."""

    base_url: Optional[str] = None
    app_id: Optional[str] = None
    index: Optional[str] = None
    token: Optional[str] = None  # Query or admin token issued by the service
    version: str = "v1"
    timeout: float = 30.0
    verify_ssl: bool = True


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="APISEARCH_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    client: ClientConfig = ClientConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the ``apisearch`` logger hierarchy.

    Handlers are left to the embedding application.
    """
    level = logging.getLevelName(settings.app.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger("apisearch").setLevel(level)
