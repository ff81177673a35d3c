"""Value objects for event-stream."""

from .identifiers import SubscriptionId, UserId, EventId, DeliveryAttemptId

__all__ = [
    "SubscriptionId",
    "UserId",
    "EventId",
    "DeliveryAttemptId",
]
