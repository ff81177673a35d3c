"""event-stream: subscription-based event dispatch.

Usage:
    from event_stream import build_event_stream

    stream = build_event_stream()
    await stream.bus.start()
    await stream.subscriptions.create("webhook", owner, ["group_member.added"],
                                      {"url": "https://example.com/hook"})
    await stream.bus.publish("group_member.added", {"group_id": "..."}, origin_id=group_id)
"""

from .__version__ import __version__
from .config import DispatchSettings, get_settings, LoggingConfig, setup_logging
from .core.exceptions import (
    EventStreamError,
    ValidationError,
    DuplicateSubscription,
    SubscriptionNotFound,
    UnknownTransport,
    DeliveryFailure,
    StoreUnavailable,
    EventBusClosed,
)
from .core.value_objects import SubscriptionId, UserId, EventId
from .features.subscriptions import Subscription, SubscriptionService, WebhookConfig, TransportCatalog
from .features.events import (
    DomainEvent,
    DeliveryAttempt,
    DeliveryOutcome,
    DeliveryResult,
    EventBus,
    DeliveryDispatcher,
    EventMatcher,
    RetryPolicy,
    TransportRegistry,
)
from .module import EventStream, build_event_stream

__all__ = [
    "__version__",
    "DispatchSettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
    "EventStreamError",
    "ValidationError",
    "DuplicateSubscription",
    "SubscriptionNotFound",
    "UnknownTransport",
    "DeliveryFailure",
    "StoreUnavailable",
    "EventBusClosed",
    "SubscriptionId",
    "UserId",
    "EventId",
    "Subscription",
    "SubscriptionService",
    "WebhookConfig",
    "TransportCatalog",
    "DomainEvent",
    "DeliveryAttempt",
    "DeliveryOutcome",
    "DeliveryResult",
    "EventBus",
    "DeliveryDispatcher",
    "EventMatcher",
    "RetryPolicy",
    "TransportRegistry",
    "EventStream",
    "build_event_stream",
]
