"""Webhook transport configuration owned by a subscription."""

import hashlib
import hmac
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ....core.exceptions import ValidationError


_URL_PATTERN = re.compile(
    r'^https?://'  # http:// or https://
    r'(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,63}\.?|'  # domain...
    r'[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?|'  # single label host (localhost, service names)
    r'\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})'  # ...or ip
    r'(?::\d+)?'  # optional port
    r'(?:/?|[/?]\S+)$', re.IGNORECASE)


@dataclass(frozen=True)
class WebhookConfig:
    """Where and how a webhook subscription is delivered.

    The secret, when set, is used to sign every request body so the receiver
    can verify authenticity. ``timeout_seconds`` of None means the
    dispatcher's configured default.
    """

    url: str
    secret: Optional[str] = None
    timeout_seconds: Optional[int] = None
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.url, str) or not self.url.strip():
            raise ValidationError("Webhook URL cannot be empty", field="transport_config.url")

        url = self.url.strip()
        if not _URL_PATTERN.match(url):
            raise ValidationError(f"Invalid webhook URL format: {url}", field="transport_config.url")
        object.__setattr__(self, "url", url)

        if self.secret is not None and (not isinstance(self.secret, str) or not self.secret.strip()):
            raise ValidationError("Webhook secret must be a non-empty string", field="transport_config.secret")

        if self.timeout_seconds is not None:
            if isinstance(self.timeout_seconds, bool) or not isinstance(self.timeout_seconds, int):
                raise ValidationError("Webhook timeout must be an integer", field="transport_config.timeout_seconds")
            if not (1 <= self.timeout_seconds <= 300):
                raise ValidationError(
                    f"Invalid timeout: {self.timeout_seconds}. Must be between 1 and 300 seconds",
                    field="transport_config.timeout_seconds",
                )

        if not isinstance(self.headers, dict):
            raise ValidationError("Webhook headers must be a dictionary", field="transport_config.headers")
        for key, value in self.headers.items():
            if not isinstance(key, str) or not key.strip():
                raise ValidationError("Header names must be non-empty strings", field="transport_config.headers")
            if not isinstance(value, str):
                raise ValidationError(f"Header {key} must have a string value", field="transport_config.headers")

    def sign(self, body: bytes) -> Optional[str]:
        """HMAC-SHA256 signature of the request body, or None without a secret."""
        if not self.secret:
            return None
        return compute_signature(self.secret, body)

    def to_dict(self, include_secret: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "url": self.url,
            "timeout_seconds": self.timeout_seconds,
            "headers": dict(self.headers),
        }
        if include_secret:
            data["secret"] = self.secret
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WebhookConfig":
        if not isinstance(data, dict):
            raise ValidationError("Webhook config must be an object", field="transport_config")
        unknown = set(data) - {"url", "secret", "timeout_seconds", "headers"}
        if unknown:
            raise ValidationError(
                f"Unknown webhook config fields: {sorted(unknown)}", field="transport_config"
            )
        return cls(
            url=data.get("url", ""),
            secret=data.get("secret"),
            timeout_seconds=data.get("timeout_seconds"),
            headers=data.get("headers") or {},
        )


def compute_signature(secret: str, body: bytes) -> str:
    """Compute the ``sha256=<hex>`` signature sent with webhook deliveries."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(secret: str, body: bytes, received_signature: str) -> bool:
    """Check a received signature header against the raw request body.

    Intended for webhook receivers. Uses a constant-time comparison.
    """
    if not received_signature:
        return False
    return hmac.compare_digest(compute_signature(secret, body), received_signature)
