"""Protocol interfaces for event delivery."""

from abc import abstractmethod
from typing import Dict, List, Optional, Protocol, runtime_checkable

from ....core.value_objects import EventId, SubscriptionId, UserId
from ...subscriptions.entities.subscription import Subscription
from .delivery_attempt import DeliveryAttempt, DeliveryResult
from .domain_event import DomainEvent


@runtime_checkable
class TransportStrategy(Protocol):
    """Delivers one event to one subscription over a concrete transport.

    Implementations report failures through the returned DeliveryResult and
    only raise for programming errors.
    """

    requires_config: bool

    @abstractmethod
    async def deliver(self, subscription: Subscription, event: DomainEvent) -> DeliveryResult:
        """Attempt one delivery."""
        ...


@runtime_checkable
class AudienceResolver(Protocol):
    """Decides whether a subscription owner may see events from an origin."""

    @abstractmethod
    async def is_eligible(self, owner: UserId, origin_id: str) -> bool:
        """True when the owner belongs to the origin's audience."""
        ...


@runtime_checkable
class DeliveryAttemptRepository(Protocol):
    """Protocol for the delivery attempt log."""

    @abstractmethod
    async def record(self, attempt: DeliveryAttempt) -> None:
        """Append an attempt to the log."""
        ...

    @abstractmethod
    async def list(
        self,
        event_id: Optional[EventId] = None,
        subscription_id: Optional[SubscriptionId] = None,
        terminal_only: bool = False
    ) -> List[DeliveryAttempt]:
        """List attempts in recording order."""
        ...

    @abstractmethod
    async def stats(self) -> Dict[str, int]:
        """Counts of recorded attempts per outcome."""
        ...
