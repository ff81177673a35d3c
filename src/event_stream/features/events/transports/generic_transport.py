"""Generic transport: deliver events to in-process callbacks."""

import inspect
import logging
from typing import Any, Callable, Dict, Optional

from ....core.value_objects import UserId
from ...subscriptions.entities.subscription import Subscription
from ..entities.delivery_attempt import DeliveryResult, ErrorKind
from ..entities.domain_event import DomainEvent

logger = logging.getLogger(__name__)

# callback(event, subscription); may be a plain function or a coroutine function
DeliveryCallback = Callable[[DomainEvent, Subscription], Any]


class GenericTransport:
    """Invokes a callback registered for the subscription owner.

    Callbacks run inline in the dispatching task. They live in the same
    process, so an exception is treated as a permanent failure and never
    retried.
    """

    requires_config = False

    def __init__(self, default_callback: Optional[DeliveryCallback] = None):
        self._callbacks: Dict[UserId, DeliveryCallback] = {}
        self._default_callback = default_callback

    def register_callback(self, owner: UserId, callback: DeliveryCallback) -> None:
        """Route deliveries for an owner's subscriptions to a callback."""
        self._callbacks[owner] = callback

    def unregister_callback(self, owner: UserId) -> None:
        self._callbacks.pop(owner, None)

    async def deliver(self, subscription: Subscription, event: DomainEvent) -> DeliveryResult:
        callback = self._callbacks.get(subscription.owner, self._default_callback)
        if callback is None:
            return DeliveryResult.failure(
                retryable=False,
                detail=f"No callback registered for owner {subscription.owner}",
                error_kind=ErrorKind.NO_CALLBACK,
            )

        try:
            result = callback(event, subscription)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"Callback for subscription {subscription.id} raised {type(e).__name__}: {e}")
            return DeliveryResult.failure(
                retryable=False,
                detail=f"{type(e).__name__}: {e}",
                error_kind=ErrorKind.CALLBACK_ERROR,
            )

        return DeliveryResult.ok()
