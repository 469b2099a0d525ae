"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite:///./takurabid.db",
        description="Database connection URL used by SQLAlchemy to connect to the store",
        min_length=1,
    )
    jwt_secret: str = Field(
        description="Shared secret used by the identity provider to sign access tokens",
        min_length=1,
    )
    jwt_algorithm: str = Field(default="HS256", description="Signing algorithm of identity tokens")
    jwt_audience: str | None = Field(
        default="authenticated",
        description="Expected ``aud`` claim; empty disables the audience check",
    )
    notification_page_size: int = Field(
        default=50,
        description="Default number of notifications returned by a listing",
        gt=0,
    )
    notification_max_page_size: int = Field(
        default=100,
        description="Upper bound accepted for the ``limit`` query parameter",
        gt=0,
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = Field(default="INFO")

    @field_validator("jwt_audience")
    @classmethod
    def _blank_audience_disables_check(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
