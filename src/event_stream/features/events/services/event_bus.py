"""Event bus: ingress for domain events raised by collaborators.

Collaborators publish after their own state change has committed. Publishing
only enqueues; background workers run the match and dispatch pipeline, so
delivery problems are invisible to the publisher.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple

from ....core.exceptions import EventBusClosed, StoreUnavailable
from ..entities.delivery_attempt import DeliveryAttempt
from ..entities.domain_event import DomainEvent
from .delivery_dispatcher import DeliveryDispatcher

logger = logging.getLogger(__name__)


class EventBus:
    """Queue-backed ingress feeding the delivery dispatcher.

    When the subscription store is unavailable an event is put back on the
    queue up to ``max_requeues`` times before it is dropped with an error log.
    """

    def __init__(
        self,
        dispatcher: DeliveryDispatcher,
        max_queue_size: int = 1000,
        workers: int = 1,
        max_requeues: int = 3,
        requeue_delay_seconds: float = 1.0,
        shutdown_timeout_seconds: float = 30.0
    ):
        """Initialize event bus.

        Args:
            dispatcher: Dispatcher that delivers each event
            max_queue_size: Queue bound (0 means unbounded); publish waits when full
            workers: Number of concurrent dispatch workers
            max_requeues: Re-enqueue limit for events hit by StoreUnavailable
            requeue_delay_seconds: Base wait before re-enqueueing, multiplied by the requeue count
            shutdown_timeout_seconds: Default drain timeout for stop()
        """
        if workers < 1:
            raise ValueError("Event bus needs at least one worker")

        self._dispatcher = dispatcher
        self._max_queue_size = max_queue_size
        self._worker_count = workers
        self._max_requeues = max_requeues
        self._requeue_delay = requeue_delay_seconds
        self._shutdown_timeout = shutdown_timeout_seconds

        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []
        self._accepting = False
        self._stats: Dict[str, int] = {"published": 0, "dispatched": 0, "requeued": 0, "dropped": 0}

    @property
    def running(self) -> bool:
        return self._accepting

    @property
    def stats(self) -> Dict[str, int]:
        return dict(self._stats)

    async def start(self) -> None:
        """Start the dispatch workers."""
        if self._accepting:
            return

        self._queue = asyncio.Queue(maxsize=self._max_queue_size)
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"event-bus-worker-{index}")
            for index in range(self._worker_count)
        ]
        self._accepting = True
        logger.info(f"Event bus started with {self._worker_count} worker(s)")

    async def publish(
        self,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
        origin_id: Optional[Any] = None
    ) -> DomainEvent:
        """Build a domain event and enqueue it for dispatch.

        Raises:
            EventBusClosed: If the bus is not running
        """
        event = DomainEvent(event_type=event_type, payload=payload or {}, origin_id=origin_id)
        return await self.publish_event(event)

    async def publish_event(self, event: DomainEvent) -> DomainEvent:
        """Enqueue an already built domain event."""
        if not self._accepting:
            raise EventBusClosed(f"Event bus is not running; cannot publish {event.event_type}")

        await self._queue.put((event, 0))
        self._stats["published"] += 1
        logger.debug(f"Published event {event.id} ({event.event_type})")
        return event

    async def dispatch_now(
        self,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
        origin_id: Optional[Any] = None
    ) -> List[DeliveryAttempt]:
        """Dispatch inline, bypassing the queue, and return the terminal attempts.

        Raises:
            StoreUnavailable: If matching subscriptions could not be looked up
        """
        event = DomainEvent(event_type=event_type, payload=payload or {}, origin_id=origin_id)
        return await self._dispatcher.dispatch(event)

    async def join(self) -> None:
        """Wait until every queued event has been processed."""
        if self._queue is not None and self._workers:
            await self._queue.join()

    async def stop(self, drain: bool = True, timeout: Optional[float] = None) -> None:
        """Stop accepting events and shut the workers down.

        With ``drain`` the queue gets up to ``timeout`` seconds to empty.
        Workers still busy after that are cancelled; their in-flight
        deliveries are recorded as abandoned by the dispatcher.
        """
        if not self._workers:
            self._accepting = False
            return

        self._accepting = False
        timeout = self._shutdown_timeout if timeout is None else timeout

        if drain:
            try:
                await asyncio.wait_for(self._queue.join(), timeout=timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Event bus did not drain within {timeout}s; abandoning in-flight deliveries")

        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

        pending = self._queue.qsize()
        if pending:
            self._stats["dropped"] += pending
            logger.warning(f"Event bus stopped with {pending} undispatched event(s)")

        logger.info("Event bus stopped")

    async def _worker(self, index: int) -> None:
        while True:
            event, requeues = await self._queue.get()
            try:
                await self._handle(event, requeues)
            finally:
                self._queue.task_done()

    async def _handle(self, event: DomainEvent, requeues: int) -> None:
        try:
            await self._dispatcher.dispatch(event)
            self._stats["dispatched"] += 1
        except StoreUnavailable as e:
            await self._requeue(event, requeues, e)
        except Exception:
            self._stats["dropped"] += 1
            logger.exception(f"Dispatch of event {event.id} ({event.event_type}) failed; dropping it")

    async def _requeue(self, event: DomainEvent, requeues: int, error: StoreUnavailable) -> None:
        if requeues >= self._max_requeues:
            self._stats["dropped"] += 1
            logger.error(
                f"Dropping event {event.id} ({event.event_type}) after {requeues} requeue(s): {error.message}",
                extra={"event_id": str(event.id), "event_type": event.event_type},
            )
            return

        delay = self._requeue_delay * (requeues + 1)
        logger.warning(
            f"Subscription store unavailable for event {event.id}; requeueing in {delay:.2f}s",
            extra={"event_id": str(event.id), "event_type": event.event_type, "delay_seconds": delay},
        )
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            self._stats["dropped"] += 1
            logger.error(
                f"Event bus stopped while event {event.id} ({event.event_type}) waited to be requeued; dropping it",
                extra={"event_id": str(event.id), "event_type": event.event_type},
            )
            raise

        item: Tuple[DomainEvent, int] = (event, requeues + 1)
        try:
            self._queue.put_nowait(item)
            self._stats["requeued"] += 1
        except asyncio.QueueFull:
            self._stats["dropped"] += 1
            logger.error(f"Event queue full; dropping event {event.id} ({event.event_type})")
