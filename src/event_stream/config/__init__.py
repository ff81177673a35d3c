"""Configuration for event-stream."""

from .settings import DispatchSettings, get_settings
from .logging_config import LoggingConfig, DeliveryLogFormatter, setup_logging

__all__ = [
    "DispatchSettings",
    "get_settings",
    "LoggingConfig",
    "DeliveryLogFormatter",
    "setup_logging",
]
