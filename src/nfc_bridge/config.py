"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Process settings loaded from environment variables."""

    settings_path: str = "settings.json"
    database_url: str = "sqlite+aiosqlite:///./jellyfin_movies.db"
    seed_examples: bool = True
    request_timeout_seconds: float = 10.0
    host: str = "0.0.0.0"
    port: int = 80
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
