"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Plugin settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MULTI_TENANT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Tenant extraction
    tenant_regex: str | None = Field(
        default=None,
        description="Pattern with one capture group extracting the team from a username",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Enable JSON structured logging",
    )
    configure_logging: bool = Field(
        default=False,
        description="Install the plugin log handler on the root logger at init",
    )

    # Metrics
    enable_metrics: bool = Field(
        default=True,
        description="Record rewrite counters through OpenTelemetry",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
