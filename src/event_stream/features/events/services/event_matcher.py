"""Event matcher: resolve which subscriptions an event goes to."""

import logging
from typing import List, Optional

from ....core.exceptions import StoreUnavailable
from ...subscriptions.entities.protocols import SubscriptionRepository
from ...subscriptions.entities.subscription import Subscription
from ..entities.domain_event import DomainEvent
from ..entities.protocols import AudienceResolver

logger = logging.getLogger(__name__)


class EventMatcher:
    """Selects subscriptions for an event.

    A subscription matches when its event type filter is empty or contains
    the event type. With an audience resolver configured, events that carry
    an origin id are further limited to owners eligible for that origin.
    Results keep the store's listing order and matching has no side effects.
    """

    def __init__(self, repository: SubscriptionRepository, audience_resolver: Optional[AudienceResolver] = None):
        self._repository = repository
        self._audience_resolver = audience_resolver

    async def match(self, event: DomainEvent) -> List[Subscription]:
        """Subscriptions the event should be delivered to.

        Raises:
            StoreUnavailable: If the subscription store or audience lookup fails
        """
        try:
            candidates = await self._repository.list_matching(event.event_type)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Subscription lookup failed for event {event.id}: {e}")
            raise StoreUnavailable(f"Subscription lookup failed: {e}", operation="list_matching") from e

        if self._audience_resolver is None or event.origin_id is None:
            return candidates

        matched = []
        for subscription in candidates:
            try:
                eligible = await self._audience_resolver.is_eligible(subscription.owner, event.origin_id)
            except StoreUnavailable:
                raise
            except Exception as e:
                logger.error(f"Audience lookup failed for origin {event.origin_id}: {e}")
                raise StoreUnavailable(f"Audience lookup failed: {e}", operation="is_eligible") from e
            if eligible:
                matched.append(subscription)

        logger.debug(
            f"Event {event.id} ({event.event_type}) matched {len(matched)}/{len(candidates)} "
            f"subscriptions in audience of {event.origin_id}"
        )
        return matched
