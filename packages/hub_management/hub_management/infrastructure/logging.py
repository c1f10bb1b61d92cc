"""Logging setup for hub management tooling.

Logs go to stderr and, when ``file_path`` is set, to a size-rotated file.
Records can be rendered as JSON lines carrying every ``extra`` attribute.
"""

import json
import logging
import logging.handlers
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

_STANDARD_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", (), None))
) | {"message", "asctime"}


class LogLevel(str, Enum):
    """Valid log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Handler and format settings applied by ``setup_logging``."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Root log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Text format when json_format is off",
    )
    console_enabled: bool = Field(default=True, description="Write records to stderr")
    file_path: Path | None = Field(default=None, description="Also write records to this file")
    max_bytes: int = Field(
        default=10_485_760, ge=0, description="Rotate the log file at this size, 0 disables"
    )
    backup_count: int = Field(default=5, ge=0, description="Rotated files to keep")
    json_format: bool = Field(default=False, description="Emit one JSON object per record")

    @field_validator("file_path")
    @classmethod
    def create_log_directory(cls, v: Path | None) -> Path | None:
        """Create the parent directory of the log file."""
        if v is not None:
            v.parent.mkdir(parents=True, exist_ok=True)
        return v


class StructuredFormatter(logging.Formatter):
    """Render records as JSON, including fields passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRIBUTES
        )
        return json.dumps(payload, default=str)


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []
    if config.console_enabled:
        handlers.append(logging.StreamHandler(sys.stderr))
    if config.file_path is not None:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=config.file_path,
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )
    return handlers


def setup_logging(config: LoggingConfig | None = None) -> None:
    """
    Replace the root logger's handlers according to ``config``.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    config = config or LoggingConfig()
    formatter = StructuredFormatter() if config.json_format else logging.Formatter(config.format)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(config.level.value)
    for handler in _build_handlers(config):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        "Logging configured", extra={"config": config.model_dump(mode="json")}
    )


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, usually the calling module's ``__name__``."""
    return logging.getLogger(name)
