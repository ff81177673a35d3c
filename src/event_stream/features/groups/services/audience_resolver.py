"""Audience scoping of group events to group members."""

from ....core.value_objects import UserId
from ..entities.protocols import GroupMembershipRepository


class GroupAudienceResolver:
    """Only members of the originating group receive its events."""

    def __init__(self, membership_repository: GroupMembershipRepository):
        self._memberships = membership_repository

    async def is_eligible(self, owner: UserId, origin_id: str) -> bool:
        return await self._memberships.is_member(origin_id, owner)
