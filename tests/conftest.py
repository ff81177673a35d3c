"""Pytest configuration and fixtures for event-stream tests."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from event_stream.core.value_objects import UserId
from event_stream.features.events.entities.delivery_attempt import DeliveryResult
from event_stream.features.events.entities.domain_event import DomainEvent
from event_stream.features.subscriptions.entities.subscription import Subscription
from event_stream.features.subscriptions.entities.webhook_config import WebhookConfig
from event_stream.features.subscriptions.repositories.memory_subscription_repository import (
    InMemorySubscriptionRepository,
)


class StubTransport:
    """Transport strategy returning scripted results in order.

    The last result repeats once the script runs out.
    """

    def __init__(self, *results, requires_config: bool = False):
        self.requires_config = requires_config
        self._results = list(results) or [DeliveryResult.ok()]
        self.calls = []

    async def deliver(self, subscription, event):
        self.calls.append((subscription, event))
        if len(self._results) > 1:
            result = self._results.pop(0)
        else:
            result = self._results[0]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def sample_user_id():
    """Sample user ID for testing."""
    return UserId(uuid4())


@pytest.fixture
def other_user_id():
    """A second user ID for testing."""
    return UserId(uuid4())


@pytest.fixture
def sample_webhook_config():
    """Sample webhook config with a signing secret."""
    return WebhookConfig(
        url="https://hooks.example.com/events",
        secret="s3cr3t",
        timeout_seconds=5,
        headers={"X-Tenant": "acme"},
    )


@pytest.fixture
def sample_event():
    """Sample group_member.added event."""
    return DomainEvent(
        event_type="group_member.added",
        payload={"group_id": "g-1", "user_id": "u-1"},
        origin_id="g-1",
    )


@pytest.fixture
def webhook_subscription(sample_user_id, sample_webhook_config):
    """Webhook subscription for group_member.added."""
    return Subscription(
        transport="webhook",
        owner=sample_user_id,
        event_types=["group_member.added"],
        transport_config=sample_webhook_config,
    )


@pytest.fixture
def generic_subscription(sample_user_id):
    """Generic subscription for every event type."""
    return Subscription(transport="generic", owner=sample_user_id)


@pytest.fixture
def memory_repository():
    """Empty in-memory subscription store."""
    return InMemorySubscriptionRepository()


@pytest.fixture
def mock_database():
    """Mock DatabaseManager with a transaction context yielding a mock connection."""
    connection = AsyncMock()
    connection.fetchval = AsyncMock()
    connection.execute = AsyncMock()

    database = MagicMock()
    database.fetch = AsyncMock(return_value=[])
    database.fetchrow = AsyncMock(return_value=None)
    database.execute = AsyncMock()

    @asynccontextmanager
    async def transaction():
        yield connection

    database.transaction = transaction
    database.connection = connection
    return database


@pytest.fixture
def stub_transport():
    """Factory for scripted transport strategies."""
    return StubTransport
