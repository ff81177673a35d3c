"""Delivery strategies per transport."""

from .transport_registry import TransportRegistry
from .webhook_transport import WebhookTransport
from .generic_transport import GenericTransport, DeliveryCallback

__all__ = [
    "TransportRegistry",
    "WebhookTransport",
    "GenericTransport",
    "DeliveryCallback",
]
