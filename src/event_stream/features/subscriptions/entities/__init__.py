"""Subscription entities."""

from .webhook_config import WebhookConfig, compute_signature, verify_signature
from .transport import (
    TransportCatalog,
    DEFAULT_CATALOG,
    TRANSPORT_GENERIC,
    TRANSPORT_WEBHOOK,
    TRANSPORT_PUSHER,
)
from .subscription import Subscription
from .protocols import SubscriptionRepository

__all__ = [
    "WebhookConfig",
    "compute_signature",
    "verify_signature",
    "TransportCatalog",
    "DEFAULT_CATALOG",
    "TRANSPORT_GENERIC",
    "TRANSPORT_WEBHOOK",
    "TRANSPORT_PUSHER",
    "Subscription",
    "SubscriptionRepository",
]
