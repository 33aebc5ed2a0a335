"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings – values come from .env or environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Apify
    apify_api_token: str = ""
    apify_api_base_url: str = "https://api.apify.com"
    apify_console_url: str = "https://console.apify.com"

    # Actor run
    actor_id: str = "shashghosh/gtm-alpha-consultant"
    actor_timeout_secs: int = 600
    actor_memory_mbytes: int = 256
    wait_grace_secs: int = 60
    http_timeout_secs: float = 90.0
    max_concurrent_jobs: int = 0  # 0 = unbounded

    # Consultation defaults
    confirm_new_consultation_default: bool = False

    # App
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "https://shashwatgtm.github.io",
        "http://localhost:3000",
        "https://localhost:3000",
    ]

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Return cached singleton settings instance."""
    return Settings()


def setup_logging() -> None:
    """Configure root logger based on settings."""
    settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
