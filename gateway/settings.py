"""
Centralized gateway settings using Pydantic Settings.

Settings are loaded from environment variables (and an optional ``.env`` file)
and validated once, at first access.

Usage:
    from gateway.settings import settings

    base_url = settings.catalog_base_url
    timeout = settings.upstream_timeout

Environment Variables:
    Optional:
        - CATALOG_BASE_URL: Base URL of the video-catalog JSON API
        - CATALOG_EMAIL: Account email used to obtain download tokens
        - CATALOG_PASSWORD: Account password used to obtain download tokens
        - ANILIST_URL: AniList GraphQL endpoint
        - STATS_URL: Remote view-counter endpoint (views are only counted locally if unset)
        - ERROR_LOG_DIR: Directory for the JSON Lines error log (default: logs)
        - UPSTREAM_TIMEOUT: Upstream request timeout in seconds (default: 15)
        - LOG_LEVEL: Logging level (default: INFO)
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Gateway settings with validation and type coercion."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars not defined here
    )

    # =========================================================================
    # Upstream: video catalog
    # =========================================================================
    catalog_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the video-catalog JSON API"
    )
    catalog_email: str | None = Field(
        default=None,
        description="Account email used to obtain a download token"
    )
    catalog_password: str | None = Field(
        default=None,
        description="Account password used to obtain a download token"
    )

    # =========================================================================
    # Upstream: AniList
    # =========================================================================
    anilist_url: str = Field(
        default="https://graphql.anilist.co",
        description="AniList GraphQL endpoint"
    )

    upstream_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Per-request timeout for upstream calls, in seconds"
    )

    # =========================================================================
    # Analytics & error sinks
    # =========================================================================
    stats_url: str | None = Field(
        default=None,
        description="Remote view-counter endpoint"
    )
    error_log_dir: Path = Field(
        default=Path("logs"),
        description="Directory for the JSON Lines error log"
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("catalog_base_url", "anilist_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs so endpoint paths can be appended."""
        return v.rstrip("/")

    @field_validator("error_log_dir", mode="before")
    @classmethod
    def resolve_error_log_dir(cls, v: str | Path) -> Path:
        """Convert string to Path and resolve to absolute path."""
        path = Path(v) if isinstance(v, str) else v
        return path.resolve()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper

    # =========================================================================
    # Computed Properties
    # =========================================================================
    @property
    def catalog_credentials(self) -> dict[str, str] | None:
        """Login payload for the catalog, or None when no account is configured."""
        if self.catalog_email and self.catalog_password:
            return {"email": self.catalog_email, "password": self.catalog_password}
        return None


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


# Convenience singleton for direct imports
settings = get_settings()
