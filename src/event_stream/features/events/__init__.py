"""Events feature.

Matches domain events against subscriptions and delivers them over
pluggable transports with retry and per-delivery outcome tracking.

Core components:
- Entities: DomainEvent, DeliveryAttempt, DeliveryResult
- Transports: WebhookTransport (aiohttp), GenericTransport (in-process)
- Services: EventMatcher, DeliveryDispatcher, EventBus
"""

from .entities import (
    DomainEvent,
    DeliveryAttempt,
    DeliveryOutcome,
    DeliveryResult,
    ErrorKind,
    TransportStrategy,
    AudienceResolver,
    DeliveryAttemptRepository,
)
from .adapters import HttpWebhookAdapter, WebhookResponse
from .transports import TransportRegistry, WebhookTransport, GenericTransport
from .repositories import InMemoryDeliveryAttemptRepository
from .services import RetryPolicy, NO_RETRY, EventMatcher, DeliveryDispatcher, EventBus

__all__ = [
    "DomainEvent",
    "DeliveryAttempt",
    "DeliveryOutcome",
    "DeliveryResult",
    "ErrorKind",
    "TransportStrategy",
    "AudienceResolver",
    "DeliveryAttemptRepository",
    "HttpWebhookAdapter",
    "WebhookResponse",
    "TransportRegistry",
    "WebhookTransport",
    "GenericTransport",
    "InMemoryDeliveryAttemptRepository",
    "RetryPolicy",
    "NO_RETRY",
    "EventMatcher",
    "DeliveryDispatcher",
    "EventBus",
]
