"""Subscriptions feature.

Stores standing registrations of interest (owner, transport, event types)
and validates them against the deployment's transport catalog.
"""

from .entities import (
    Subscription,
    SubscriptionRepository,
    TransportCatalog,
    DEFAULT_CATALOG,
    WebhookConfig,
    compute_signature,
    verify_signature,
    TRANSPORT_GENERIC,
    TRANSPORT_WEBHOOK,
    TRANSPORT_PUSHER,
)
from .repositories import InMemorySubscriptionRepository, PostgresSubscriptionRepository
from .services import SubscriptionService

__all__ = [
    "Subscription",
    "SubscriptionRepository",
    "TransportCatalog",
    "DEFAULT_CATALOG",
    "WebhookConfig",
    "compute_signature",
    "verify_signature",
    "TRANSPORT_GENERIC",
    "TRANSPORT_WEBHOOK",
    "TRANSPORT_PUSHER",
    "InMemorySubscriptionRepository",
    "PostgresSubscriptionRepository",
    "SubscriptionService",
]
