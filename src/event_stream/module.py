"""
Event stream assembly.

Wires the subscription store, transport registry, matcher, dispatcher and
event bus together from DispatchSettings.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from .config.settings import DispatchSettings, get_settings
from .database import DatabaseManager
from .features.events.adapters.http_webhook_adapter import HttpWebhookAdapter
from .features.events.entities.protocols import AudienceResolver, DeliveryAttemptRepository
from .features.events.repositories.memory_attempt_repository import InMemoryDeliveryAttemptRepository
from .features.events.services.delivery_dispatcher import DeliveryDispatcher
from .features.events.services.event_bus import EventBus
from .features.events.services.event_matcher import EventMatcher
from .features.events.transports.generic_transport import GenericTransport
from .features.events.transports.transport_registry import TransportRegistry
from .features.events.transports.webhook_transport import WebhookTransport
from .features.subscriptions.entities.protocols import SubscriptionRepository
from .features.subscriptions.entities.transport import TransportCatalog
from .features.subscriptions.repositories.memory_subscription_repository import InMemorySubscriptionRepository
from .features.subscriptions.repositories.subscription_repository import PostgresSubscriptionRepository
from .features.subscriptions.services.subscription_service import SubscriptionService

logger = logging.getLogger(__name__)


@dataclass
class EventStream:
    """Assembled event stream components."""

    settings: DispatchSettings
    subscriptions: SubscriptionService
    repository: SubscriptionRepository
    registry: TransportRegistry
    generic_transport: GenericTransport
    matcher: EventMatcher
    dispatcher: DeliveryDispatcher
    bus: EventBus
    attempts: DeliveryAttemptRepository
    database: Optional[DatabaseManager] = None

    async def close(self) -> None:
        """Stop the bus and release HTTP and database resources."""
        await self.bus.stop()
        await self.registry.close()
        if self.database is not None:
            await self.database.close_pool()


def build_transport_registry(
    settings: DispatchSettings,
    generic_transport: GenericTransport,
    webhook_adapter: Optional[HttpWebhookAdapter] = None
) -> TransportRegistry:
    """Register a strategy for every configured transport.

    Transports needing config get the webhook strategy; the others deliver
    in process. Deployments with a dedicated strategy (e.g. pusher) replace
    the registration after assembly.
    """
    registry = TransportRegistry()
    webhook_transport = WebhookTransport(
        adapter=webhook_adapter or HttpWebhookAdapter(
            default_timeout_seconds=settings.webhook_timeout_seconds,
            verify_ssl=settings.verify_ssl,
        ),
        default_timeout_seconds=settings.webhook_timeout_seconds,
        signature_header=settings.signature_header,
        user_agent=settings.user_agent,
    )

    for name in settings.transports:
        if name in settings.webhook_transports:
            registry.register(name, webhook_transport)
        else:
            registry.register(name, generic_transport)
    return registry


def build_event_stream(
    settings: Optional[DispatchSettings] = None,
    repository: Optional[SubscriptionRepository] = None,
    attempt_repository: Optional[DeliveryAttemptRepository] = None,
    audience_resolver: Optional[AudienceResolver] = None,
    webhook_adapter: Optional[HttpWebhookAdapter] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
) -> EventStream:
    """Assemble an event stream.

    Args:
        settings: Dispatch settings (environment based when omitted)
        repository: Subscription store; Postgres when a database URL is
            configured, in-memory otherwise
        attempt_repository: Delivery attempt log
        audience_resolver: Optional origin based audience scoping
        webhook_adapter: HTTP adapter for webhook deliveries
        sleep: Backoff sleep used by the dispatcher
    """
    settings = settings or get_settings()

    database = None
    if repository is None:
        if settings.database_url:
            database = DatabaseManager(settings.database_url)
            repository = PostgresSubscriptionRepository(database, schema=settings.database_schema)
        else:
            repository = InMemorySubscriptionRepository()

    catalog = TransportCatalog.of(settings.transports, settings.webhook_transports)
    generic_transport = GenericTransport()
    registry = build_transport_registry(settings, generic_transport, webhook_adapter)
    attempts = attempt_repository or InMemoryDeliveryAttemptRepository()

    matcher = EventMatcher(repository, audience_resolver=audience_resolver)
    dispatcher = DeliveryDispatcher(
        matcher,
        registry,
        attempt_repository=attempts,
        retry_policy=settings.retry_policy(),
        max_concurrent_deliveries=settings.max_concurrent_deliveries,
        sleep=sleep,
    )
    bus = EventBus(
        dispatcher,
        max_queue_size=settings.queue_max_size,
        workers=settings.bus_workers,
        max_requeues=settings.ingress_max_requeues,
        shutdown_timeout_seconds=settings.shutdown_timeout_seconds,
    )

    logger.info(f"Event stream assembled with transports {sorted(settings.transports)}")

    return EventStream(
        settings=settings,
        subscriptions=SubscriptionService(repository, catalog=catalog),
        repository=repository,
        registry=registry,
        generic_transport=generic_transport,
        matcher=matcher,
        dispatcher=dispatcher,
        bus=bus,
        attempts=attempts,
        database=database,
    )
