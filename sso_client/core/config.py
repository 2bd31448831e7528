"""Centralized configuration management with environment-aware defaults.

This module implements the configuration of the client model layer using
Pydantic Settings, providing type-safe configuration with validation and
environment variable support.

Configuration sources (in order of precedence):
1. Environment variables prefixed with ``SSO_CLIENT_``. Nested values use the
   ``__`` delimiter, e.g.
   ``SSO_CLIENT_SERIALIZATION_CONFIG__ALLOW_UNKNOWN_FIELDS=false``
2. .env file in the working directory
3. Default values in model definitions
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogConfig(BaseModel):
    """Simplified logging configuration."""

    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = (
        Field(
            default="INFO",
            description="Logging level",
        )
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class SerializationConfig(BaseModel):
    """Behaviour switches for converting models to and from the wire."""

    allow_unknown_fields: bool = Field(
        default=True,
        description="Ignore wire keys that have no field mapping instead of failing",
    )
    treat_null_as_absent: bool = Field(
        default=False,
        description=(
            "Read a JSON null on a non-nullable optional field as if the key "
            "were absent"
        ),
    )


class Settings(BaseSettings):
    """Main settings class for the client model layer."""

    model_config = SettingsConfigDict(
        env_prefix="SSO_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    serialization_config: SerializationConfig = Field(
        default_factory=SerializationConfig,
        description="Model serialization configuration",
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = self._detect_formatter()

    def _detect_formatter(self) -> Literal["console", "json"]:
        """Auto-detect log formatter based on environment."""
        # Managed runtimes collect stdout as structured logs
        if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
            return "json"

        if self.environment == "development":
            return "console"
        return "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
