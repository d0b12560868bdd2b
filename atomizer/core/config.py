"""Configuration management using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ATOMIZER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for rotating log files",
    )

    # Generation
    max_tasks: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Maximum number of tasks accepted from one atomization",
    )
    claude_command: str = Field(
        default="claude",
        description="Executable used to run the generation CLI",
    )
    generation_timeout: int = Field(
        default=120,
        ge=1,
        description="Generation CLI timeout in seconds",
    )

    # Callback token cache
    token_cache_size: int = Field(
        default=1024,
        ge=1,
        description="Maximum number of cached callback tokens",
    )
    token_cache_ttl: int = Field(
        default=3600,
        ge=1,
        description="Callback token lifetime in seconds",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> settings.max_tasks
        20
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
