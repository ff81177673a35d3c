"""Event matching, delivery and ingress services."""

from .retry_policy import RetryPolicy, NO_RETRY
from .event_matcher import EventMatcher
from .delivery_dispatcher import DeliveryDispatcher
from .event_bus import EventBus

__all__ = [
    "RetryPolicy",
    "NO_RETRY",
    "EventMatcher",
    "DeliveryDispatcher",
    "EventBus",
]
