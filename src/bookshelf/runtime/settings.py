"""Environment variables consumed by the configuration template.

Values come from the process environment and, when present, a ``.env`` file.
They are only used as substitution sources for ``config.yaml``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    app_environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    log_level: str | None = Field(default=None, validation_alias="LOG_LEVEL")
    port: int | None = Field(default=None, validation_alias="PORT")

    # Infrastructure URLs
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    redis_url: str | None = Field(default=None, validation_alias="REDIS_URL")

    # Security
    session_secret: str | None = Field(default=None, validation_alias="SESSION_SECRET")

    def as_substitutions(self) -> dict[str, str]:
        """Return the set values keyed by their environment variable names."""
        values = {
            "APP_ENVIRONMENT": self.app_environment,
            "LOG_LEVEL": self.log_level,
            "PORT": str(self.port) if self.port is not None else None,
            "DATABASE_URL": self.database_url,
            "REDIS_URL": self.redis_url,
            "SESSION_SECRET": self.session_secret,
        }
        return {key: value for key, value in values.items() if value is not None}
