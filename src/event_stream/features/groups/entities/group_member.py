"""Group membership record."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from ....core.value_objects import UserId
from ....utils import generate_uuid_v7, utc_now


GROUP_MEMBER_ADDED = "group_member.added"
GROUP_MEMBER_REMOVED = "group_member.removed"


@dataclass(frozen=True)
class GroupMember:
    """A user's membership in a group."""

    group_id: str
    user_id: UserId
    id: str = field(default_factory=generate_uuid_v7)
    joined_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if self.group_id is None or not str(self.group_id).strip():
            raise ValueError("Group id cannot be empty")
        object.__setattr__(self, "group_id", str(self.group_id))

    def to_payload(self) -> Dict[str, Any]:
        """Event payload describing this membership."""
        return {
            "member_id": self.id,
            "group_id": self.group_id,
            "user_id": str(self.user_id),
            "joined_at": self.joined_at.isoformat(),
        }
