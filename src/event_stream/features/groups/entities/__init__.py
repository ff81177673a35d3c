"""Group membership entities."""

from .group_member import GroupMember, GROUP_MEMBER_ADDED, GROUP_MEMBER_REMOVED
from .protocols import GroupMembershipRepository

__all__ = [
    "GroupMember",
    "GROUP_MEMBER_ADDED",
    "GROUP_MEMBER_REMOVED",
    "GroupMembershipRepository",
]
