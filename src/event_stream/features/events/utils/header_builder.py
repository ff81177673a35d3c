"""
Webhook request construction.

Builds the JSON body and HTTP headers for webhook deliveries in one place so
the signature is always computed over the exact bytes that are sent.
"""

import json
from typing import Any, Dict, Optional, Tuple

from ...subscriptions.entities.subscription import Subscription
from ..entities.domain_event import DomainEvent


DEFAULT_SIGNATURE_HEADER = "X-Event-Stream-Signature"
DEFAULT_USER_AGENT = "EventStream-Webhooks/1.0"

# Headers a subscription's custom headers may not override
_PROTECTED_HEADERS = {"content-type", "user-agent", "content-length", "host"}
_PROTECTED_PREFIX = "x-event-stream-"


def build_webhook_body(subscription: Subscription, event: DomainEvent) -> Dict[str, Any]:
    """Wire payload for a webhook delivery."""
    return {
        "eventType": event.event_type,
        "payload": event.payload,
        "subscriptionId": str(subscription.id),
        "eventId": str(event.id),
        "occurredAt": event.occurred_at.isoformat(),
    }


def serialize_body(body: Dict[str, Any]) -> bytes:
    """Serialize deterministically so signatures can be reproduced."""
    return json.dumps(body, separators=(",", ":"), sort_keys=True, default=str).encode("utf-8")


def build_webhook_headers(
    subscription: Subscription,
    event: DomainEvent,
    signature: Optional[str] = None,
    signature_header: str = DEFAULT_SIGNATURE_HEADER,
    user_agent: str = DEFAULT_USER_AGENT
) -> Dict[str, str]:
    """HTTP headers for a webhook delivery."""
    headers = {
        "Content-Type": "application/json",
        "User-Agent": user_agent,
        "X-Event-Stream-Event": event.event_type,
        "X-Event-Stream-Event-Id": str(event.id),
        "X-Event-Stream-Delivery": str(subscription.id),
    }

    config = subscription.transport_config
    if config is not None:
        for key, value in config.headers.items():
            # Protected headers are prefixed to avoid conflicts
            lowered = key.lower()
            if (
                lowered in _PROTECTED_HEADERS
                or lowered.startswith(_PROTECTED_PREFIX)
                or lowered == signature_header.lower()
            ):
                headers[f"X-Endpoint-{key}"] = value
            else:
                headers[key] = value

    if signature:
        headers[signature_header] = signature

    return headers


def build_webhook_request(
    subscription: Subscription,
    event: DomainEvent,
    signature_header: str = DEFAULT_SIGNATURE_HEADER,
    user_agent: str = DEFAULT_USER_AGENT
) -> Tuple[bytes, Dict[str, str]]:
    """Body bytes and headers, signed with the subscription secret when one is set."""
    body = serialize_body(build_webhook_body(subscription, event))
    config = subscription.transport_config
    signature = config.sign(body) if config is not None else None
    headers = build_webhook_headers(
        subscription,
        event,
        signature=signature,
        signature_header=signature_header,
        user_agent=user_agent,
    )
    return body, headers
