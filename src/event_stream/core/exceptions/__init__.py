"""Exception hierarchy for event-stream."""

from .base import EventStreamError, create_error_response
from .domain import (
    ConfigurationError,
    ValidationError,
    DuplicateSubscription,
    SubscriptionNotFound,
    UnknownTransport,
    DeliveryFailure,
    StoreUnavailable,
    EventBusClosed,
)

__all__ = [
    "EventStreamError",
    "create_error_response",
    "ConfigurationError",
    "ValidationError",
    "DuplicateSubscription",
    "SubscriptionNotFound",
    "UnknownTransport",
    "DeliveryFailure",
    "StoreUnavailable",
    "EventBusClosed",
]
