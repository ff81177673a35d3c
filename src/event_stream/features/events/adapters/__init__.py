"""External delivery adapters."""

from .http_webhook_adapter import HttpWebhookAdapter, WebhookResponse

__all__ = ["HttpWebhookAdapter", "WebhookResponse"]
