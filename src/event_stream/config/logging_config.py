"""Centralized logging configuration for event-stream.

Provides environment driven logging setup and a structured formatter that
surfaces delivery context passed through ``extra=``.
"""

import json
import logging
import logging.config
import os
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DeliveryLogFormatter(logging.Formatter):
    """JSON formatter that lifts delivery context fields out of log records."""

    CONTEXT_FIELDS = (
        "event_id", "event_type", "subscription_id", "transport", "owner",
        "attempt", "outcome", "error_kind", "status_code", "retryable", "delay_seconds",
    )

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {
            field: getattr(record, field)
            for field in self.CONTEXT_FIELDS
            if hasattr(record, field)
        }
        if context:
            log_data["context"] = context

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Modules that should only log errors
    ERROR_ONLY_MODULES = [
        "aiohttp",
        "asyncpg",
        "asyncio",
    ]

    FORMATS = {
        "simple": "%(asctime)s - %(levelname)s - %(message)s",
        "detailed": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    }

    @classmethod
    def build_config(cls, log_level: str = "INFO", log_format: str = "simple") -> Dict[str, Any]:
        """Build a dictConfig mapping for the given level and format."""
        log_level = LogLevel(log_level.upper()).value

        if log_format == "json":
            formatter: Dict[str, Any] = {"()": DeliveryLogFormatter}
        else:
            formatter = {
                "format": cls.FORMATS.get(log_format, cls.FORMATS["simple"]),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            }

        logging_config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": formatter},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": log_level,
                "handlers": ["console"],
            },
            "loggers": {},
        }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {"level": "ERROR"}

        return logging_config

    @classmethod
    def configure(cls, log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
        """Configure logging from arguments or LOG_LEVEL / LOG_FORMAT."""
        log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
        log_format = log_format or os.getenv("LOG_FORMAT", "simple")
        logging.config.dictConfig(cls.build_config(log_level, log_format))


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Convenience wrapper around LoggingConfig.configure."""
    LoggingConfig.configure(log_level, log_format)
