"""Deployment specific transport catalog and transport-keyed validation.

Which transports exist, and which of them need a webhook configuration,
varies between deployments (generic/webhook in one, pusher/webhook in
another), so the set is data rather than a hardcoded enum.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Union

from ....core.exceptions import ValidationError
from .webhook_config import WebhookConfig


TRANSPORT_GENERIC = "generic"
TRANSPORT_WEBHOOK = "webhook"
TRANSPORT_PUSHER = "pusher"


@dataclass(frozen=True)
class TransportCatalog:
    """The set of transports a deployment accepts subscriptions for."""

    names: FrozenSet[str] = field(default_factory=lambda: frozenset({TRANSPORT_GENERIC, TRANSPORT_WEBHOOK}))
    config_required: FrozenSet[str] = field(default_factory=lambda: frozenset({TRANSPORT_WEBHOOK}))

    def __post_init__(self):
        object.__setattr__(self, "names", frozenset(name.lower() for name in self.names))
        object.__setattr__(self, "config_required", frozenset(name.lower() for name in self.config_required))
        if not self.names:
            raise ValueError("Transport catalog cannot be empty")
        if not self.config_required <= self.names:
            raise ValueError("Config-requiring transports must be part of the catalog")

    @classmethod
    def of(cls, names: Iterable[str], config_required: Iterable[str] = (TRANSPORT_WEBHOOK,)) -> "TransportCatalog":
        names = frozenset(names)
        return cls(names=names, config_required=frozenset(config_required) & names)

    def requires_config(self, transport: str) -> bool:
        return transport in self.config_required

    def validate(
        self,
        transport: Any,
        transport_config: Union[WebhookConfig, Dict[str, Any], None]
    ) -> Optional[WebhookConfig]:
        """Validate a transport name together with its configuration.

        Returns the config coerced to ``WebhookConfig`` (or None).

        Raises:
            ValidationError: unknown transport, missing config for a transport
                that needs one, or config supplied for one that does not.
        """
        if not isinstance(transport, str) or not transport.strip():
            raise ValidationError("Transport cannot be blank", field="transport")

        transport = transport.strip().lower()
        if transport not in self.names:
            raise ValidationError(
                f"Invalid transport '{transport}'. Must be one of: {', '.join(sorted(self.names))}",
                field="transport",
            )

        if self.requires_config(transport):
            if transport_config is None:
                raise ValidationError(
                    f"Transport '{transport}' requires a transport config", field="transport_config"
                )
            if isinstance(transport_config, dict):
                return WebhookConfig.from_dict(transport_config)
            if not isinstance(transport_config, WebhookConfig):
                raise ValidationError("Transport config must be a webhook config", field="transport_config")
            return transport_config

        if transport_config is not None:
            raise ValidationError(
                f"Transport '{transport}' does not accept a transport config", field="transport_config"
            )
        return None


DEFAULT_CATALOG = TransportCatalog()
