"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str
    db_pool_size: int = Field(default=3, ge=1)
    db_max_overflow: int = Field(default=0, ge=0)
    db_pool_recycle_seconds: int = 10
    db_pool_timeout_seconds: float = Field(default=30, gt=0)
    # Create the bookmarks table on startup if it does not exist
    db_create_schema: bool = True

    # HTTP server
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)
    shutdown_timeout_seconds: int = Field(default=5, ge=0)

    # Rate limiting (per endpoint, fixed window)
    rate_limit_requests: int = Field(default=5, ge=1)
    rate_limit_window_seconds: int = Field(default=1, ge=1)

    # Redis (optional shared rate limit counters)
    redis_url: str = "redis://localhost:6379"
    redis_enabled: bool = False

    # CORS - browser extensions have per-install origins, so "*" is the default
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    log_level: str = "INFO"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level name so it can be passed to logging directly."""
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: '{v}'")
        return level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
