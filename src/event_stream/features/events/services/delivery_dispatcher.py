"""Delivery dispatcher for matched subscriptions.

Fans an event out to every matched subscription. Each delivery runs in its
own coroutine with its own retry loop, so one subscriber's failure or slow
retries never hold up another. Only a failing subscription lookup fails the
dispatch as a whole.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from ....core.exceptions import DeliveryFailure, UnknownTransport
from ...subscriptions.entities.subscription import Subscription
from ..entities.delivery_attempt import DeliveryAttempt, DeliveryOutcome, DeliveryResult, ErrorKind
from ..entities.domain_event import DomainEvent
from ..entities.protocols import DeliveryAttemptRepository, TransportStrategy
from ..repositories.memory_attempt_repository import InMemoryDeliveryAttemptRepository
from ..transports.transport_registry import TransportRegistry
from .event_matcher import EventMatcher
from .retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class DeliveryDispatcher:
    """Delivers an event to all matching subscriptions.

    Concurrency across subscriptions is bounded by a semaphore that is held
    only while a transport call is in flight, not during backoff sleeps.
    """

    def __init__(
        self,
        matcher: EventMatcher,
        registry: TransportRegistry,
        attempt_repository: Optional[DeliveryAttemptRepository] = None,
        retry_policy: Optional[RetryPolicy] = None,
        max_concurrent_deliveries: int = 10,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """Initialize dispatcher.

        Args:
            matcher: Resolves subscriptions for an event
            registry: Transport name to strategy lookup
            attempt_repository: Attempt log (in-memory when omitted)
            retry_policy: Backoff policy for retryable failures
            max_concurrent_deliveries: Maximum concurrent transport calls
            sleep: Awaitable used for backoff waits
        """
        if max_concurrent_deliveries < 1:
            raise ValueError("max_concurrent_deliveries must be at least 1")

        self._matcher = matcher
        self._registry = registry
        self._attempts = attempt_repository or InMemoryDeliveryAttemptRepository()
        self._retry_policy = retry_policy or RetryPolicy()
        self._semaphore = asyncio.Semaphore(max_concurrent_deliveries)
        self._sleep = sleep

        logger.info(
            f"Delivery dispatcher initialized with max_attempts={self._retry_policy.max_attempts}, "
            f"max_concurrent={max_concurrent_deliveries}"
        )

    @property
    def attempt_repository(self) -> DeliveryAttemptRepository:
        return self._attempts

    async def dispatch(self, event: DomainEvent) -> List[DeliveryAttempt]:
        """Deliver an event and return one terminal attempt per matched subscription.

        Raises:
            StoreUnavailable: If matching subscriptions could not be looked up
        """
        subscriptions = await self._matcher.match(event)

        if not subscriptions:
            logger.debug(f"No subscriptions matched event {event.id} ({event.event_type})")
            return []

        logger.info(f"Dispatching event {event.id} ({event.event_type}) to {len(subscriptions)} subscriptions")

        attempts = await asyncio.gather(
            *(self._deliver_to_subscription(subscription, event) for subscription in subscriptions)
        )

        succeeded = sum(1 for attempt in attempts if attempt.succeeded)
        logger.info(f"Event {event.id} delivered: {succeeded}/{len(attempts)} succeeded")
        return list(attempts)

    async def _deliver_to_subscription(self, subscription: Subscription, event: DomainEvent) -> DeliveryAttempt:
        attempt_number = 0
        try:
            try:
                strategy = self._registry.resolve(subscription.transport)
            except UnknownTransport as e:
                logger.error(f"Cannot deliver to subscription {subscription.id}: {e.message}")
                result = DeliveryResult.failure(
                    retryable=False, detail=e.message, error_kind=ErrorKind.UNKNOWN_TRANSPORT
                )
                return await self._finish(subscription, event, 1, result)

            while True:
                attempt_number += 1
                async with self._semaphore:
                    result = await self._call_strategy(strategy, subscription, event)

                if result.success or not result.retryable or not self._retry_policy.should_retry(attempt_number):
                    return await self._finish(subscription, event, attempt_number, result)

                await self._record(DeliveryAttempt.from_result(
                    subscription.id, event.id, event.event_type, subscription.transport,
                    attempt_number, result, is_terminal=False,
                ))

                delay = self._retry_policy.delay_for(attempt_number)
                logger.warning(
                    f"Delivery of event {event.id} to subscription {subscription.id} failed "
                    f"(attempt {attempt_number}): {result.detail}; retrying in {delay:.2f}s",
                    extra={
                        "event_id": str(event.id),
                        "subscription_id": str(subscription.id),
                        "attempt": attempt_number,
                        "delay_seconds": delay,
                    },
                )
                await self._sleep(delay)

        except asyncio.CancelledError:
            abandoned = DeliveryAttempt(
                subscription_id=subscription.id,
                event_id=event.id,
                event_type=event.event_type,
                transport=subscription.transport,
                attempt_number=max(attempt_number, 1),
                outcome=DeliveryOutcome.ABANDONED,
                error_kind=ErrorKind.CANCELLED,
                detail="Dispatch cancelled before the delivery settled",
            )
            await self._record(abandoned)
            logger.warning(f"Delivery of event {event.id} to subscription {subscription.id} abandoned")
            raise

    async def _call_strategy(
        self,
        strategy: TransportStrategy,
        subscription: Subscription,
        event: DomainEvent
    ) -> DeliveryResult:
        try:
            return await strategy.deliver(subscription, event)
        except DeliveryFailure as e:
            return DeliveryResult.failure(
                retryable=e.retryable, detail=e.message, error_kind=e.error_kind, status_code=e.status_code
            )
        except Exception as e:
            logger.exception(f"Transport '{subscription.transport}' raised while delivering event {event.id}")
            return DeliveryResult.failure(
                retryable=False, detail=f"{type(e).__name__}: {e}", error_kind=ErrorKind.UNEXPECTED
            )

    async def _finish(
        self,
        subscription: Subscription,
        event: DomainEvent,
        attempt_number: int,
        result: DeliveryResult
    ) -> DeliveryAttempt:
        attempt = DeliveryAttempt.from_result(
            subscription.id, event.id, event.event_type, subscription.transport,
            attempt_number, result, is_terminal=True,
        )
        await self._record(attempt)

        context = {
            "event_id": str(event.id),
            "event_type": event.event_type,
            "subscription_id": str(subscription.id),
            "transport": subscription.transport,
            "attempt": attempt_number,
            "outcome": attempt.outcome.value,
            "error_kind": attempt.error_kind,
            "status_code": attempt.status_code,
        }
        if attempt.succeeded:
            logger.debug(f"Delivered event {event.id} to subscription {subscription.id}", extra=context)
        else:
            logger.error(
                f"Delivery of event {event.id} to subscription {subscription.id} failed after "
                f"{attempt_number} attempt(s): {result.detail}",
                extra=context,
            )
        return attempt

    async def _record(self, attempt: DeliveryAttempt) -> None:
        try:
            await self._attempts.record(attempt)
        except Exception as e:
            # Attempt log failures never fail a delivery
            logger.error(f"Failed to record delivery attempt {attempt.id}: {e}")
