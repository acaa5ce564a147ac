"""Configuration management for instance environment composition."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="INSTANCE_ENV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_host: str = Field(
        default="0.0.0.0",  # noqa: S104
        description="Host address applications bind to inside the container",
    )
    default_staging_timeout: int = Field(
        default=900,
        ge=1,
        description="Staging timeout (seconds) when the task does not set one",
    )
    default_buildpack_cache: str = Field(
        default="/tmp/buildpack_cache",  # noqa: S108
        description="Buildpack cache path when the task does not set one",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )


# Global settings instance
settings = Settings()
