"""Protocol interfaces for subscription storage."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ....core.value_objects import SubscriptionId, UserId
from .subscription import Subscription


@runtime_checkable
class SubscriptionRepository(Protocol):
    """Protocol for subscription store operations.

    Implementations must make ``register`` atomic with respect to the
    (transport, owner) uniqueness invariant, keep ``list_matching`` in
    insertion order, and raise ``StoreUnavailable`` when the backend cannot
    be reached.
    """

    @abstractmethod
    async def register(self, subscription: Subscription) -> SubscriptionId:
        """Store a subscription. Raises DuplicateSubscription."""
        ...

    @abstractmethod
    async def get(self, subscription_id: SubscriptionId) -> Optional[Subscription]:
        """Get a subscription by id."""
        ...

    @abstractmethod
    async def find(self, owner: UserId, transport: str) -> Optional[Subscription]:
        """Get the subscription of an owner on a transport."""
        ...

    @abstractmethod
    async def list_matching(self, event_type: str) -> List[Subscription]:
        """Subscriptions with no event type filter or one containing event_type."""
        ...

    @abstractmethod
    async def list(self, owner: Optional[UserId] = None, transport: Optional[str] = None) -> List[Subscription]:
        """List subscriptions, optionally filtered by owner and/or transport."""
        ...

    @abstractmethod
    async def remove(self, subscription_id: SubscriptionId) -> None:
        """Delete a subscription and its config. Raises SubscriptionNotFound."""
        ...
