"""Configuration settings for xgo_runner.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

import tempfile
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DOCKER_DIST = "crazymax/xgo"
DEFAULT_GO_VERSION = "latest"


def _default_cache_dir() -> Path:
    """Return the default dependency cache directory."""
    return Path(tempfile.gettempdir()) / "xgo-cache"


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the XGO_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="XGO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    cache_dir: Path = Field(
        default_factory=_default_cache_dir,
        description="Root directory for cached CGO dependency archives",
    )

    # Toolchain image
    docker_dist: str = Field(
        default=DEFAULT_DOCKER_DIST,
        description="Official image repository of the cross compilation toolchain",
    )
    go_version: str = Field(
        default=DEFAULT_GO_VERSION,
        description="Go release to use for cross compilation",
    )
    docker_binary: str = Field(
        default="docker",
        description="Container runtime executable",
    )

    # Network
    fetch_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout for dependency downloads in seconds (unbounded if not set)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("cache_dir")
    @classmethod
    def _absolute_cache_dir(cls, v: Path) -> Path:
        # Mounted into the container; docker treats relative sources as volume names
        return v.expanduser().resolve()


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = [
    "DEFAULT_DOCKER_DIST",
    "DEFAULT_GO_VERSION",
    "Settings",
    "get_settings",
    "print_settings_json",
]
