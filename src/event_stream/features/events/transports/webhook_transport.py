"""Webhook transport: deliver events as signed HTTP POST requests."""

import logging
from typing import Optional

from ....core.exceptions import DeliveryFailure
from ...subscriptions.entities.subscription import Subscription
from ..adapters.http_webhook_adapter import HttpWebhookAdapter
from ..entities.delivery_attempt import DeliveryResult, ErrorKind
from ..entities.domain_event import DomainEvent
from ..utils.header_builder import DEFAULT_SIGNATURE_HEADER, DEFAULT_USER_AGENT, build_webhook_request

logger = logging.getLogger(__name__)


class WebhookTransport:
    """Delivers to the URL in the subscription's webhook config.

    2xx is success. 5xx, timeouts and connection errors are retryable.
    Every other status (4xx, and 3xx since redirects are not followed) is a
    permanent rejection.
    """

    requires_config = True

    def __init__(
        self,
        adapter: Optional[HttpWebhookAdapter] = None,
        default_timeout_seconds: int = 10,
        signature_header: str = DEFAULT_SIGNATURE_HEADER,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        self._adapter = adapter or HttpWebhookAdapter(default_timeout_seconds=default_timeout_seconds)
        self._default_timeout = default_timeout_seconds
        self._signature_header = signature_header
        self._user_agent = user_agent

    async def deliver(self, subscription: Subscription, event: DomainEvent) -> DeliveryResult:
        config = subscription.transport_config
        if config is None:
            return DeliveryResult.failure(
                retryable=False,
                detail=f"Subscription {subscription.id} has no webhook config",
                error_kind=ErrorKind.MISSING_CONFIG,
            )

        body, headers = build_webhook_request(
            subscription,
            event,
            signature_header=self._signature_header,
            user_agent=self._user_agent,
        )

        try:
            response = await self._adapter.post(
                config.url,
                body,
                headers,
                timeout_seconds=config.timeout_seconds or self._default_timeout,
            )
        except DeliveryFailure as e:
            return DeliveryResult.failure(retryable=e.retryable, detail=e.message, error_kind=e.error_kind)

        return self.classify_status(response.status, response.body)

    @staticmethod
    def classify_status(status: int, body: str = "") -> DeliveryResult:
        """Map an HTTP status code to a delivery result."""
        if 200 <= status < 300:
            return DeliveryResult.ok(status_code=status)

        detail = f"HTTP {status}"
        if body:
            detail = f"{detail}: {body[:500]}"

        return DeliveryResult.failure(
            retryable=status >= 500,
            detail=detail,
            error_kind=ErrorKind.HTTP_STATUS,
            status_code=status,
        )

    async def close(self) -> None:
        await self._adapter.close()
