"""Domain-specific exceptions for event-stream.

Registration errors are raised synchronously to the caller. Delivery errors
are converted into delivery attempt records by the dispatcher and never
reach the publisher.
"""

from typing import Any, Dict, Optional

from .base import EventStreamError


# Configuration Errors
class ConfigurationError(EventStreamError):
    """Raised when there's a configuration issue."""
    pass


# Subscription Errors
class ValidationError(EventStreamError):
    """Raised when subscription input is malformed."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        enhanced_details = details or {}
        if field:
            enhanced_details["field"] = field
        super().__init__(message, error_code="VALIDATION_ERROR", details=enhanced_details)
        self.field = field


class DuplicateSubscription(EventStreamError):
    """Raised when a (transport, owner) pair is already subscribed."""

    def __init__(self, transport: str, owner: Any):
        super().__init__(
            f"Subscription for owner {owner} on transport '{transport}' already exists",
            error_code="DUPLICATE_SUBSCRIPTION",
            details={"transport": transport, "owner": str(owner)},
        )
        self.transport = transport
        self.owner = owner


class SubscriptionNotFound(EventStreamError):
    """Raised when a subscription id does not exist."""

    def __init__(self, subscription_id: Any):
        super().__init__(
            f"Subscription {subscription_id} not found",
            error_code="SUBSCRIPTION_NOT_FOUND",
            details={"subscription_id": str(subscription_id)},
        )
        self.subscription_id = subscription_id


# Delivery Errors
class UnknownTransport(ConfigurationError):
    """Raised when no delivery strategy is registered for a transport."""

    def __init__(self, transport: str):
        super().__init__(
            f"No delivery strategy registered for transport '{transport}'",
            error_code="UNKNOWN_TRANSPORT",
            details={"transport": transport},
        )
        self.transport = transport


class DeliveryFailure(EventStreamError):
    """Raised by transport adapters when a single delivery attempt fails."""

    def __init__(
        self,
        message: str,
        retryable: bool,
        error_kind: str = "delivery_error",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        enhanced_details = details or {}
        enhanced_details.update({"retryable": retryable, "error_kind": error_kind})
        if status_code is not None:
            enhanced_details["status_code"] = status_code
        super().__init__(message, error_code="DELIVERY_FAILED", details=enhanced_details)
        self.retryable = retryable
        self.error_kind = error_kind
        self.status_code = status_code


# Storage Errors
class StoreUnavailable(EventStreamError):
    """Raised when the subscription store cannot be reached."""

    def __init__(self, message: str, operation: Optional[str] = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message, error_code="STORE_UNAVAILABLE", details=details)
        self.operation = operation


class EventBusClosed(EventStreamError):
    """Raised when publishing to a bus that is not running."""
    pass
