"""Subscription entity.

A subscription is a standing registration by one owner for a set of event
types, bound to exactly one transport. Transport and owner never change after
creation; a subscription exclusively owns its webhook configuration.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from ....core.exceptions import ValidationError
from ....core.value_objects import SubscriptionId, UserId
from ....utils import utc_now, ensure_utc
from .transport import DEFAULT_CATALOG, TransportCatalog
from .webhook_config import WebhookConfig


@dataclass(frozen=True)
class Subscription:
    """Subscription domain entity."""

    transport: str
    owner: UserId
    event_types: Optional[List[str]] = None
    transport_config: Optional[WebhookConfig] = None
    id: SubscriptionId = field(default_factory=SubscriptionId.generate)
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not isinstance(self.transport, str) or not self.transport.strip():
            raise ValidationError("Transport cannot be blank", field="transport")
        object.__setattr__(self, "transport", self.transport.strip().lower())

        if self.owner is None:
            raise ValidationError("Subscription owner is required", field="owner")
        if not isinstance(self.owner, UserId):
            try:
                object.__setattr__(self, "owner", UserId(self.owner))
            except ValueError as e:
                raise ValidationError(str(e), field="owner")

        object.__setattr__(self, "event_types", _normalize_event_types(self.event_types))

        if self.transport_config is not None and not isinstance(self.transport_config, WebhookConfig):
            raise ValidationError("Transport config must be a webhook config", field="transport_config")

        object.__setattr__(self, "created_at", ensure_utc(self.created_at))

    @classmethod
    def create(
        cls,
        transport: str,
        owner: Union[UserId, Any],
        event_types: Optional[Sequence[str]] = None,
        transport_config: Union[WebhookConfig, Dict[str, Any], None] = None,
        catalog: Optional[TransportCatalog] = None
    ) -> "Subscription":
        """Create a new subscription after validating it against a transport catalog.

        Raises:
            ValidationError: If the transport or its config is not acceptable
        """
        catalog = catalog or DEFAULT_CATALOG
        config = catalog.validate(transport, transport_config)
        return cls(
            transport=transport,
            owner=owner,
            event_types=list(event_types) if isinstance(event_types, (list, tuple)) else event_types,
            transport_config=config,
        )

    @property
    def matches_all_events(self) -> bool:
        return not self.event_types

    def matches_event_type(self, event_type: str) -> bool:
        """True when the subscription's filter admits the event type."""
        return self.matches_all_events or event_type in self.event_types

    def to_dict(self, include_secret: bool = False) -> Dict[str, Any]:
        """Convert subscription to dictionary representation."""
        return {
            "id": str(self.id),
            "transport": self.transport,
            "event_types": list(self.event_types) if self.event_types else None,
            "owner": str(self.owner),
            "transport_config": (
                self.transport_config.to_dict(include_secret=include_secret)
                if self.transport_config else None
            ),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subscription":
        """Rebuild a stored subscription. Catalog validation is not re-run."""
        config = data.get("transport_config")
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=SubscriptionId(data["id"]),
            transport=data["transport"],
            owner=UserId(data["owner"]),
            event_types=data.get("event_types"),
            transport_config=WebhookConfig.from_dict(config) if config else None,
            created_at=created_at or utc_now(),
        )


def _normalize_event_types(event_types) -> Optional[List[str]]:
    """Strip, drop duplicates and keep order. Empty means all event types."""
    if event_types is None:
        return None
    if isinstance(event_types, str) or not isinstance(event_types, (list, tuple)):
        raise ValidationError("Event types must be a list of strings", field="event_types")

    normalized: List[str] = []
    for event_type in event_types:
        if not isinstance(event_type, str) or not event_type.strip():
            raise ValidationError("Event types must be non-empty strings", field="event_types")
        event_type = event_type.strip()
        if event_type not in normalized:
            normalized.append(event_type)
    return normalized
