"""Application configuration utilities."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Cat Clinic Scheduler",
    )
    app_version: str = Field(
        default="0.1.0",
    )
    log_level: str = Field(
        default="INFO",
    )

    database_url: str = Field(
        default="sqlite:///./scheduler.db",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
    )

    github_token: str = Field(
        default="",
    )
    gist_id: str = Field(
        default="",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
    )
    http_timeout_seconds: float = Field(
        default=10.0,
    )

    backup_site: str = Field(
        default="scheduler-app",
    )
    backup_auto_push: bool = Field(
        default=False,
    )
    backup_debounce_seconds: float = Field(
        default=5.0,
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
