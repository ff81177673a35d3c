"""Group membership handler.

Adds or removes the acting user in a group and, once the membership change
is committed, raises the corresponding domain event on the event bus.
"""

import logging
from typing import Optional

from ....core.value_objects import UserId
from ...events.services.event_bus import EventBus
from ..entities.group_member import GroupMember, GROUP_MEMBER_ADDED, GROUP_MEMBER_REMOVED
from ..entities.protocols import GroupMembershipRepository

logger = logging.getLogger(__name__)


class GroupMemberHandler:
    """Applies membership changes and publishes them."""

    def __init__(self, membership_repository: GroupMembershipRepository, event_bus: EventBus):
        self._memberships = membership_repository
        self._event_bus = event_bus

    async def add_member(self, group_id: str, user: Optional[UserId]) -> Optional[GroupMember]:
        """Add the acting user to a group.

        Without an acting user nothing happens and None is returned.
        """
        if user is None:
            logger.debug(f"No acting user; skipping membership change for group {group_id}")
            return None

        member = await self._memberships.add_member(group_id, user)

        await self._event_bus.publish(GROUP_MEMBER_ADDED, member.to_payload(), origin_id=member.group_id)
        logger.info(f"User {user} joined group {member.group_id}")
        return member

    async def remove_member(self, group_id: str, user: Optional[UserId]) -> Optional[GroupMember]:
        """Remove a user from a group. Publishes only when a membership existed."""
        if user is None:
            return None

        member = await self._memberships.remove_member(group_id, user)
        if member is None:
            return None

        await self._event_bus.publish(GROUP_MEMBER_REMOVED, member.to_payload(), origin_id=member.group_id)
        logger.info(f"User {user} left group {member.group_id}")
        return member
