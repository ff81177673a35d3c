"""Group membership handlers."""

from .group_member_handler import GroupMemberHandler

__all__ = ["GroupMemberHandler"]
