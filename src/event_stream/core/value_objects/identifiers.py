"""Identifier value objects for event-stream.

All identifiers wrap a UUID and accept either a UUID or its string form.
"""

from dataclasses import dataclass
from uuid import UUID

from ...utils import generate_uuid_v7


def _coerce_uuid(value, name: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise ValueError(f"{name} must be a valid UUID, got: {value}")


@dataclass(frozen=True)
class SubscriptionId:
    """Subscription identifier value object with UUIDv7 support."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "SubscriptionId"))

    @classmethod
    def generate(cls) -> 'SubscriptionId':
        """Generate a new SubscriptionId using UUIDv7 for time-ordering."""
        return cls(UUID(generate_uuid_v7()))

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"SubscriptionId(value={self.value!r})"


@dataclass(frozen=True)
class UserId:
    """User identifier value object."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "UserId"))

    @classmethod
    def generate(cls) -> 'UserId':
        """Generate a new UserId using UUIDv7 for time-ordering."""
        return cls(UUID(generate_uuid_v7()))

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"UserId(value={self.value!r})"


@dataclass(frozen=True)
class EventId:
    """Domain event identifier value object."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "EventId"))

    @classmethod
    def generate(cls) -> 'EventId':
        """Generate a new EventId using UUIDv7 for time-ordering."""
        return cls(UUID(generate_uuid_v7()))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DeliveryAttemptId:
    """Delivery attempt identifier value object."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid(self.value, "DeliveryAttemptId"))

    @classmethod
    def generate(cls) -> 'DeliveryAttemptId':
        return cls(UUID(generate_uuid_v7()))

    def __str__(self) -> str:
        return str(self.value)
