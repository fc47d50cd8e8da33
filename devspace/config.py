"""Settings for the DevSpace core, loaded with pydantic-settings.

Values come from environment variables or an optional ``.env`` file.

Usage:
    from devspace.config import get_settings

    settings = get_settings()
    store = open_store(settings)
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    All fields have defaults so the CLI works without any setup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    service_name: str = Field(
        default="devspace",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # Local store
    store_backend: Literal["file", "redis"] = Field(
        default="file",
        description="Backing medium for engineers, tasks and the connection",
    )
    data_dir: Path = Field(
        default=Path("~/.devspace"),
        description="Directory holding the JSON collections (file backend)",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (redis backend)",
        examples=["redis://localhost:6379/0"],
    )

    # GitHub
    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    github_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout for GitHub calls, in seconds",
    )
    github_token: str | None = Field(
        default=None,
        description="Access token used by the CLI when --token is not given",
    )

    # Engineer presets
    default_voice_id: str = Field(
        default="802e3bc2b27e49c2995d23ef70e6ac89",
        description="Voice id assigned to preset engineers",
    )
    preset_avatar_urls: list[str] = Field(
        default_factory=list,
        description="Optional overrides for preset avatar URLs, in preset order",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("github_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    settings = Settings()
    settings.data_dir = settings.data_dir.expanduser()
    return settings


__all__ = ["Settings", "get_settings"]
