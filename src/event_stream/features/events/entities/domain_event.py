"""Domain event entity.

Domain events are raised by collaborators after a state change has been
committed. They are transient: the dispatch pipeline consumes each one once
and does not persist it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ....core.value_objects import EventId
from ....utils import utc_now, ensure_utc


@dataclass(frozen=True)
class DomainEvent:
    """A fact raised by a collaborator, e.g. ``group_member.added``."""

    event_type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    origin_id: Optional[str] = None  # Triggering entity (e.g. group id), used for audience scoping
    id: EventId = field(default_factory=EventId.generate)
    occurred_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not isinstance(self.event_type, str) or not self.event_type.strip():
            raise ValueError("Event type cannot be empty")
        object.__setattr__(self, "event_type", self.event_type.strip())

        if self.payload is None:
            object.__setattr__(self, "payload", {})
        elif not isinstance(self.payload, dict):
            raise ValueError("Event payload must be a dictionary")

        # Origin ids arrive as UUIDs or strings depending on the collaborator
        if self.origin_id is not None:
            object.__setattr__(self, "origin_id", str(self.origin_id))

        object.__setattr__(self, "occurred_at", ensure_utc(self.occurred_at))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "event_type": self.event_type,
            "payload": self.payload,
            "origin_id": self.origin_id,
            "occurred_at": self.occurred_at.isoformat(),
        }
