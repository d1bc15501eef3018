"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from github_linear_sync.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_LINEAR_API_URL, DEFAULT_MAX_CONCURRENCY


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    SYNC_MAX_CONCURRENCY: int = DEFAULT_MAX_CONCURRENCY

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL

    # GitHub PAT settings
    GITHUB_PAT_TOKEN: str | None = None

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None

    # Linear API settings
    LINEAR_API_KEY: str | None = None
    LINEAR_API_URL: str = DEFAULT_LINEAR_API_URL


settings = Settings()
