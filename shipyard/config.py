"""Application configuration with pydantic-settings.

All values can be supplied through environment variables or a local ``.env``
file. Credentials are optional at load time so the service can start in
development; the clients warn when they are missing.

Usage:
    from shipyard.config import get_settings

    settings = get_settings()
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Shipyard settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # === Logging ===
    service_name: str = Field(
        default="shipyard",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # === Storage ===
    database_url: str = Field(
        default="sqlite+aiosqlite:///./shipyard.sqlite",
        description="SQLAlchemy async connection URL",
        examples=["postgresql+asyncpg://user:pass@db:5432/shipyard"],
    )
    uploads_dir: Path = Field(
        default=Path("uploads"),
        description="Directory receiving uploaded archives",
    )
    staging_dir: Path = Field(
        default=Path("deploy_staging"),
        description="Root for per-project staging directories",
    )

    # === GitHub ===
    github_token: str = Field(default="", description="GitHub personal access token")
    github_username: str = Field(
        default="",
        alias="GITHUB_USERNAME_FOR_REPOS",
        description="Account that owns repositories created by the pipeline",
    )
    github_api_url: str = Field(default="https://api.github.com")
    repo_prefix: str = Field(
        default="wz-",
        description="Name prefix marking repositories created by the pipeline",
    )

    # === Vercel ===
    vercel_token: str = Field(default="", description="Vercel API bearer token")
    vercel_team_id: str | None = Field(default=None, description="Optional Vercel team scope")
    vercel_api_url: str = Field(default="https://api.vercel.com")
    vercel_domain: str = Field(
        default="vercel.app",
        description="Domain used to build the fallback deployment URL",
    )

    # === HTTP ===
    admin_token: str | None = Field(
        default=None,
        description="Bearer token required by admin endpoints",
    )
    http_timeout: float = Field(default=30.0, gt=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @field_validator("repo_prefix")
    @classmethod
    def validate_repo_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("repo_prefix must not be empty")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
