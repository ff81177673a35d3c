"""Groups feature: the membership collaborator that raises domain events."""

from .entities import GroupMember, GroupMembershipRepository, GROUP_MEMBER_ADDED, GROUP_MEMBER_REMOVED
from .repositories import InMemoryGroupMembershipRepository
from .handlers import GroupMemberHandler
from .services import GroupAudienceResolver

__all__ = [
    "GroupMember",
    "GroupMembershipRepository",
    "GROUP_MEMBER_ADDED",
    "GROUP_MEMBER_REMOVED",
    "InMemoryGroupMembershipRepository",
    "GroupMemberHandler",
    "GroupAudienceResolver",
]
