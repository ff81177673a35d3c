"""Tests for the groups collaborator and its audience resolver."""

from unittest.mock import AsyncMock

import pytest

from event_stream.features.events.entities.delivery_attempt import DeliveryResult
from event_stream.features.events.repositories.memory_attempt_repository import (
    InMemoryDeliveryAttemptRepository,
)
from event_stream.features.events.services.delivery_dispatcher import DeliveryDispatcher
from event_stream.features.events.services.event_bus import EventBus
from event_stream.features.events.services.event_matcher import EventMatcher
from event_stream.features.events.transports import TransportRegistry
from event_stream.features.groups import (
    GROUP_MEMBER_ADDED,
    GROUP_MEMBER_REMOVED,
    GroupAudienceResolver,
    GroupMemberHandler,
    InMemoryGroupMembershipRepository,
)
from event_stream.features.subscriptions.entities.subscription import Subscription


@pytest.fixture
def memberships():
    return InMemoryGroupMembershipRepository()


@pytest.fixture
def mock_bus():
    bus = AsyncMock()
    return bus


class TestInMemoryGroupMembershipRepository:

    @pytest.mark.asyncio
    async def test_add_is_idempotent(self, memberships, sample_user_id):
        first = await memberships.add_member("g-1", sample_user_id)
        second = await memberships.add_member("g-1", sample_user_id)

        assert first == second
        assert await memberships.is_member("g-1", sample_user_id)
        assert len(await memberships.list_members("g-1")) == 1

    @pytest.mark.asyncio
    async def test_remove(self, memberships, sample_user_id):
        await memberships.add_member("g-1", sample_user_id)

        assert await memberships.remove_member("g-1", sample_user_id) is not None
        assert await memberships.remove_member("g-1", sample_user_id) is None
        assert not await memberships.is_member("g-1", sample_user_id)


class TestGroupMemberHandler:

    @pytest.mark.asyncio
    async def test_add_member_publishes(self, memberships, mock_bus, sample_user_id):
        handler = GroupMemberHandler(memberships, mock_bus)

        member = await handler.add_member("g-1", sample_user_id)

        assert await memberships.is_member("g-1", sample_user_id)
        mock_bus.publish.assert_awaited_once_with(GROUP_MEMBER_ADDED, member.to_payload(), origin_id="g-1")
        assert member.to_payload()["user_id"] == str(sample_user_id)

    @pytest.mark.asyncio
    async def test_no_acting_user(self, memberships, mock_bus):
        handler = GroupMemberHandler(memberships, mock_bus)

        assert await handler.add_member("g-1", None) is None
        assert await handler.remove_member("g-1", None) is None
        mock_bus.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_membership_committed_before_publish(self, memberships, sample_user_id):
        seen = []
        bus = AsyncMock()

        async def publish(event_type, payload, origin_id=None):
            seen.append(await memberships.is_member(origin_id, sample_user_id))

        bus.publish.side_effect = publish
        handler = GroupMemberHandler(memberships, bus)

        await handler.add_member("g-1", sample_user_id)

        assert seen == [True]

    @pytest.mark.asyncio
    async def test_remove_member(self, memberships, mock_bus, sample_user_id):
        handler = GroupMemberHandler(memberships, mock_bus)
        await handler.add_member("g-1", sample_user_id)
        mock_bus.reset_mock()

        await handler.remove_member("g-1", sample_user_id)
        await handler.remove_member("g-1", sample_user_id)

        mock_bus.publish.assert_awaited_once()
        assert mock_bus.publish.call_args.args[0] == GROUP_MEMBER_REMOVED


class TestGroupEventsEndToEnd:

    @pytest.mark.asyncio
    async def test_only_group_members_receive_group_events(
        self, memberships, memory_repository, stub_transport, sample_user_id, other_user_id
    ):
        await memory_repository.register(Subscription(transport="generic", owner=sample_user_id))
        await memory_repository.register(Subscription(transport="generic", owner=other_user_id))
        transport = stub_transport(DeliveryResult.ok())
        attempts = InMemoryDeliveryAttemptRepository()
        dispatcher = DeliveryDispatcher(
            EventMatcher(memory_repository, audience_resolver=GroupAudienceResolver(memberships)),
            TransportRegistry({"generic": transport}),
            attempt_repository=attempts,
        )
        bus = EventBus(dispatcher)
        await bus.start()
        handler = GroupMemberHandler(memberships, bus)

        await handler.add_member("g-1", sample_user_id)
        await bus.join()
        await bus.stop()

        assert [sub.owner for sub, _ in transport.calls] == [sample_user_id]
        [event] = [event for _, event in transport.calls]
        assert event.event_type == GROUP_MEMBER_ADDED
        assert event.origin_id == "g-1"
