"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


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
    HOME: Path = Path.home()

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: str | None = None

    # GitHub Actions run context
    GITHUB_REPOSITORY: str | None = None
    GITHUB_REF: str | None = None
    GITHUB_SHA: str | None = None
    GITHUB_OUTPUT: Path | None = None

    # Package registry settings
    NPM_TOKEN: str | None = None
