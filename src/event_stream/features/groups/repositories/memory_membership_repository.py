"""In-memory group membership store."""

import asyncio
from typing import Dict, List, Optional, Tuple

from ....core.value_objects import UserId
from ..entities.group_member import GroupMember


class InMemoryGroupMembershipRepository:
    """Group memberships kept in process memory."""

    def __init__(self):
        self._members: Dict[Tuple[str, UserId], GroupMember] = {}
        self._lock = asyncio.Lock()

    async def add_member(self, group_id: str, user_id: UserId) -> GroupMember:
        key = (str(group_id), user_id)
        async with self._lock:
            member = self._members.get(key)
            if member is None:
                member = GroupMember(group_id=str(group_id), user_id=user_id)
                self._members[key] = member
            return member

    async def remove_member(self, group_id: str, user_id: UserId) -> Optional[GroupMember]:
        async with self._lock:
            return self._members.pop((str(group_id), user_id), None)

    async def is_member(self, group_id: str, user_id: UserId) -> bool:
        return (str(group_id), user_id) in self._members

    async def list_members(self, group_id: str) -> List[GroupMember]:
        return [member for (gid, _), member in list(self._members.items()) if gid == str(group_id)]
