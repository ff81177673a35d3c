"""In-memory subscription store."""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from ....core.exceptions import DuplicateSubscription, SubscriptionNotFound
from ....core.value_objects import SubscriptionId, UserId
from ..entities.subscription import Subscription

logger = logging.getLogger(__name__)


class InMemorySubscriptionRepository:
    """Subscription store kept in process memory.

    Writes take a lock so the uniqueness check and the insert are one step.
    Reads work on snapshots of the insertion-ordered dict and never observe a
    half-applied registration.
    """

    def __init__(self):
        self._subscriptions: Dict[SubscriptionId, Subscription] = {}
        self._by_owner_transport: Dict[Tuple[UserId, str], SubscriptionId] = {}
        self._lock = asyncio.Lock()

    async def register(self, subscription: Subscription) -> SubscriptionId:
        key = (subscription.owner, subscription.transport)
        async with self._lock:
            if key in self._by_owner_transport:
                raise DuplicateSubscription(subscription.transport, subscription.owner)
            if subscription.id in self._subscriptions:
                raise DuplicateSubscription(subscription.transport, subscription.owner)
            self._subscriptions[subscription.id] = subscription
            self._by_owner_transport[key] = subscription.id

        logger.debug(f"Registered subscription {subscription.id} ({subscription.transport}) for {subscription.owner}")
        return subscription.id

    async def get(self, subscription_id: SubscriptionId) -> Optional[Subscription]:
        return self._subscriptions.get(subscription_id)

    async def find(self, owner: UserId, transport: str) -> Optional[Subscription]:
        subscription_id = self._by_owner_transport.get((owner, transport))
        return self._subscriptions.get(subscription_id) if subscription_id else None

    async def list_matching(self, event_type: str) -> List[Subscription]:
        return [
            subscription for subscription in list(self._subscriptions.values())
            if subscription.matches_event_type(event_type)
        ]

    async def list(self, owner: Optional[UserId] = None, transport: Optional[str] = None) -> List[Subscription]:
        return [
            subscription for subscription in list(self._subscriptions.values())
            if (owner is None or subscription.owner == owner)
            and (transport is None or subscription.transport == transport)
        ]

    async def remove(self, subscription_id: SubscriptionId) -> None:
        async with self._lock:
            subscription = self._subscriptions.pop(subscription_id, None)
            if subscription is None:
                raise SubscriptionNotFound(subscription_id)
            # The webhook config lives on the entity and goes with it
            self._by_owner_transport.pop((subscription.owner, subscription.transport), None)

        logger.debug(f"Removed subscription {subscription_id}")

    def __len__(self) -> int:
        return len(self._subscriptions)
