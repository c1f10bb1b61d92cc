"""Centralized configuration management for hub management tooling.

This module provides a centralized configuration system that supports:
- Environment variable overrides
- Default values with validation
- Type safety using Pydantic
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.constants import MANAGEMENT_NAMESPACE
from ..domain.exceptions import ConfigurationError
from ..infrastructure.logging import LoggingConfig, LogLevel


class SerializationConfig(BaseModel):
    """Wire document settings."""

    namespace: str = Field(
        default=MANAGEMENT_NAMESPACE, min_length=1, description="XML namespace of entity elements"
    )

    encoding: str = Field(default="utf-8", description="Document encoding")

    xml_declaration: bool = Field(
        default=True, description="Emit an XML declaration at the top of documents"
    )

    pretty_print: bool = Field(default=False, description="Indent serialized documents")

    indent: int = Field(default=2, ge=0, le=8, description="Spaces per indentation level")


class LogSettings(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.WARNING, description="Root log level")

    json_format: bool = Field(default=False, description="Emit structured JSON log lines")

    file_path: Path | None = Field(default=None, description="Optional rotating log file")

    max_bytes: int = Field(default=10_485_760, ge=0, description="Log file rotation size")

    backup_count: int = Field(default=5, ge=0, description="Rotated log files to keep")

    def to_logging_config(self) -> LoggingConfig:
        return LoggingConfig(
            level=self.level,
            json_format=self.json_format,
            file_path=self.file_path,
            max_bytes=self.max_bytes,
            backup_count=self.backup_count,
        )


class HubManagementConfig(BaseSettings):
    """Main configuration.

    All configuration values can be overridden using environment variables
    with the prefix NOTIFICATION_HUBS_ (e.g., NOTIFICATION_HUBS_SERIALIZATION__PRETTY_PRINT).
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTIFICATION_HUBS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    serialization: SerializationConfig = Field(default_factory=SerializationConfig)
    logging: LogSettings = Field(default_factory=LogSettings)


@lru_cache(maxsize=1)
def get_config() -> HubManagementConfig:
    """Get the singleton configuration instance.

    Returns:
        HubManagementConfig: The configuration instance

    Raises:
        ConfigurationError: If an environment override is invalid
    """
    try:
        return HubManagementConfig()
    except PydanticValidationError as e:
        first = e.errors()[0]
        config_key = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(config_key, first["msg"]) from e


def reload_config() -> HubManagementConfig:
    """Reload configuration from environment.

    This clears the cache and creates a new configuration instance.

    Returns:
        HubManagementConfig: The new configuration instance
    """
    get_config.cache_clear()
    return get_config()
