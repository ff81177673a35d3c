"""Group membership stores."""

from .memory_membership_repository import InMemoryGroupMembershipRepository

__all__ = ["InMemoryGroupMembershipRepository"]
