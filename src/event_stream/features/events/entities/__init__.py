"""Event delivery entities."""

from .domain_event import DomainEvent
from .delivery_attempt import DeliveryAttempt, DeliveryOutcome, DeliveryResult, ErrorKind
from .protocols import TransportStrategy, AudienceResolver, DeliveryAttemptRepository

__all__ = [
    "DomainEvent",
    "DeliveryAttempt",
    "DeliveryOutcome",
    "DeliveryResult",
    "ErrorKind",
    "TransportStrategy",
    "AudienceResolver",
    "DeliveryAttemptRepository",
]
