"""Protocol interfaces for group membership storage."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ....core.value_objects import UserId
from .group_member import GroupMember


@runtime_checkable
class GroupMembershipRepository(Protocol):
    """Membership store. Writes are committed when the call returns."""

    @abstractmethod
    async def add_member(self, group_id: str, user_id: UserId) -> GroupMember:
        """Add a user to a group, returning the existing membership if present."""
        ...

    @abstractmethod
    async def remove_member(self, group_id: str, user_id: UserId) -> Optional[GroupMember]:
        """Remove a membership; None when the user was not a member."""
        ...

    @abstractmethod
    async def is_member(self, group_id: str, user_id: UserId) -> bool:
        ...

    @abstractmethod
    async def list_members(self, group_id: str) -> List[GroupMember]:
        ...
