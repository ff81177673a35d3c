"""Subscription registration service.

Entry point for collaborators that create, list and delete subscriptions.
Input is validated against the deployment's transport catalog before it
reaches the store, so invalid registrations are rejected synchronously.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union
from uuid import UUID

from ....core.exceptions import SubscriptionNotFound, ValidationError
from ....core.value_objects import SubscriptionId, UserId
from ..entities.protocols import SubscriptionRepository
from ..entities.subscription import Subscription
from ..entities.transport import DEFAULT_CATALOG, TransportCatalog
from ..entities.webhook_config import WebhookConfig

logger = logging.getLogger(__name__)


class SubscriptionService:
    """Service for subscription registration, listing and deletion."""

    def __init__(self, repository: SubscriptionRepository, catalog: Optional[TransportCatalog] = None):
        self._repository = repository
        self._catalog = catalog or DEFAULT_CATALOG

    @property
    def catalog(self) -> TransportCatalog:
        return self._catalog

    async def create(
        self,
        transport: str,
        owner: Union[UserId, UUID, str],
        event_types: Optional[Sequence[str]] = None,
        transport_config: Union[WebhookConfig, Dict[str, Any], None] = None
    ) -> Subscription:
        """Register a new subscription.

        Raises:
            ValidationError: If the transport or its config is invalid
            DuplicateSubscription: If the owner already subscribes on that transport
        """
        subscription = Subscription.create(
            transport=transport,
            owner=_as_user_id(owner),
            event_types=event_types,
            transport_config=transport_config,
            catalog=self._catalog,
        )

        await self._repository.register(subscription)

        logger.info(
            f"Created {subscription.transport} subscription {subscription.id} for owner {subscription.owner}",
            extra={
                "subscription_id": str(subscription.id),
                "transport": subscription.transport,
                "owner": str(subscription.owner),
            },
        )
        return subscription

    async def get(self, subscription_id: Union[SubscriptionId, UUID, str]) -> Subscription:
        """Get a subscription by id. Raises SubscriptionNotFound."""
        subscription_id = _as_subscription_id(subscription_id)
        subscription = await self._repository.get(subscription_id)
        if subscription is None:
            raise SubscriptionNotFound(subscription_id)
        return subscription

    async def find(self, owner: Union[UserId, UUID, str], transport: str) -> Optional[Subscription]:
        return await self._repository.find(_as_user_id(owner), transport.strip().lower())

    async def list(
        self,
        owner: Union[UserId, UUID, str, None] = None,
        transport: Optional[str] = None
    ) -> List[Subscription]:
        """List subscriptions, optionally filtered by owner and transport."""
        owner_id = _as_user_id(owner) if owner is not None else None
        if transport is not None:
            transport = transport.strip().lower()
        return await self._repository.list(owner=owner_id, transport=transport)

    async def delete(self, subscription_id: Union[SubscriptionId, UUID, str]) -> None:
        """Delete a subscription together with its transport config."""
        subscription_id = _as_subscription_id(subscription_id)
        await self._repository.remove(subscription_id)
        logger.info(f"Deleted subscription {subscription_id}", extra={"subscription_id": str(subscription_id)})


def _as_user_id(value) -> UserId:
    if isinstance(value, UserId):
        return value
    if value is None:
        raise ValidationError("Subscription owner is required", field="owner")
    try:
        return UserId(value)
    except ValueError as e:
        raise ValidationError(str(e), field="owner")


def _as_subscription_id(value) -> SubscriptionId:
    if isinstance(value, SubscriptionId):
        return value
    try:
        return SubscriptionId(value)
    except ValueError as e:
        raise ValidationError(str(e), field="id")
