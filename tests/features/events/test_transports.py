"""Tests for webhook and generic transports and the transport registry."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from event_stream.core.exceptions import DeliveryFailure, UnknownTransport
from event_stream.features.events.adapters.http_webhook_adapter import WebhookResponse
from event_stream.features.events.entities.delivery_attempt import ErrorKind
from event_stream.features.events.entities.protocols import TransportStrategy
from event_stream.features.events.transports import GenericTransport, TransportRegistry, WebhookTransport
from event_stream.features.subscriptions.entities.subscription import Subscription
from event_stream.features.subscriptions.entities.webhook_config import verify_signature


@pytest.fixture
def mock_adapter():
    adapter = MagicMock()
    adapter.post = AsyncMock(return_value=WebhookResponse(status=200, body="ok", response_time_ms=4))
    adapter.close = AsyncMock()
    return adapter


class TestWebhookTransport:

    @pytest.mark.parametrize("status,success,retryable", [
        (200, True, False),
        (204, True, False),
        (301, False, False),
        (400, False, False),
        (404, False, False),
        (410, False, False),
        (429, False, False),
        (500, False, True),
        (503, False, True),
    ])
    def test_classify_status(self, status, success, retryable):
        result = WebhookTransport.classify_status(status)

        assert result.success is success
        assert result.retryable is retryable
        assert result.status_code == status
        if not success:
            assert result.error_kind == ErrorKind.HTTP_STATUS

    def test_classify_includes_body(self):
        result = WebhookTransport.classify_status(422, "missing field")

        assert result.detail == "HTTP 422: missing field"

    def test_is_transport_strategy(self, mock_adapter):
        transport = WebhookTransport(adapter=mock_adapter)

        assert isinstance(transport, TransportStrategy)
        assert transport.requires_config is True

    @pytest.mark.asyncio
    async def test_deliver_posts_signed_body(self, mock_adapter, webhook_subscription, sample_event):
        transport = WebhookTransport(adapter=mock_adapter, default_timeout_seconds=10)

        result = await transport.deliver(webhook_subscription, sample_event)

        assert result.success
        url, body, headers = mock_adapter.post.call_args.args
        assert url == "https://hooks.example.com/events"
        assert json.loads(body)["subscriptionId"] == str(webhook_subscription.id)
        assert verify_signature("s3cr3t", body, headers["X-Event-Stream-Signature"])
        assert mock_adapter.post.call_args.kwargs["timeout_seconds"] == 5

    @pytest.mark.asyncio
    async def test_deliver_uses_default_timeout(self, mock_adapter, sample_user_id, sample_event):
        subscription = Subscription.create("webhook", sample_user_id, None, {"url": "https://example.com"})
        transport = WebhookTransport(adapter=mock_adapter, default_timeout_seconds=12)

        await transport.deliver(subscription, sample_event)

        assert mock_adapter.post.call_args.kwargs["timeout_seconds"] == 12

    @pytest.mark.asyncio
    async def test_server_error_is_retryable(self, mock_adapter, webhook_subscription, sample_event):
        mock_adapter.post.return_value = WebhookResponse(status=503, body="busy", response_time_ms=1)
        transport = WebhookTransport(adapter=mock_adapter)

        result = await transport.deliver(webhook_subscription, sample_event)

        assert not result.success
        assert result.retryable
        assert result.status_code == 503

    @pytest.mark.asyncio
    async def test_adapter_failure(self, mock_adapter, webhook_subscription, sample_event):
        mock_adapter.post.side_effect = DeliveryFailure("timed out", retryable=True, error_kind=ErrorKind.TIMEOUT)
        transport = WebhookTransport(adapter=mock_adapter)

        result = await transport.deliver(webhook_subscription, sample_event)

        assert result.retryable
        assert result.error_kind == ErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_missing_config(self, mock_adapter, sample_user_id, sample_event):
        subscription = Subscription(transport="webhook", owner=sample_user_id)
        transport = WebhookTransport(adapter=mock_adapter)

        result = await transport.deliver(subscription, sample_event)

        assert not result.success
        assert not result.retryable
        assert result.error_kind == ErrorKind.MISSING_CONFIG
        mock_adapter.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_close(self, mock_adapter):
        await WebhookTransport(adapter=mock_adapter).close()

        mock_adapter.close.assert_awaited_once()


class TestGenericTransport:

    @pytest.mark.asyncio
    async def test_sync_callback(self, generic_subscription, sample_event):
        received = []
        transport = GenericTransport()
        transport.register_callback(generic_subscription.owner, lambda event, sub: received.append((event, sub)))

        result = await transport.deliver(generic_subscription, sample_event)

        assert result.success
        assert received == [(sample_event, generic_subscription)]

    @pytest.mark.asyncio
    async def test_async_callback(self, generic_subscription, sample_event):
        callback = AsyncMock()
        transport = GenericTransport()
        transport.register_callback(generic_subscription.owner, callback)

        result = await transport.deliver(generic_subscription, sample_event)

        assert result.success
        callback.assert_awaited_once_with(sample_event, generic_subscription)

    @pytest.mark.asyncio
    async def test_default_callback(self, generic_subscription, sample_event):
        callback = MagicMock()
        transport = GenericTransport(default_callback=callback)

        await transport.deliver(generic_subscription, sample_event)

        callback.assert_called_once_with(sample_event, generic_subscription)

    @pytest.mark.asyncio
    async def test_callback_error_is_permanent(self, generic_subscription, sample_event):
        transport = GenericTransport()
        transport.register_callback(generic_subscription.owner, MagicMock(side_effect=RuntimeError("boom")))

        result = await transport.deliver(generic_subscription, sample_event)

        assert not result.success
        assert not result.retryable
        assert result.error_kind == ErrorKind.CALLBACK_ERROR
        assert "boom" in result.detail

    @pytest.mark.asyncio
    async def test_no_callback(self, generic_subscription, sample_event):
        transport = GenericTransport()
        transport.register_callback(generic_subscription.owner, MagicMock())
        transport.unregister_callback(generic_subscription.owner)

        result = await transport.deliver(generic_subscription, sample_event)

        assert result.error_kind == ErrorKind.NO_CALLBACK


class TestTransportRegistry:

    def test_resolve(self):
        generic = GenericTransport()
        registry = TransportRegistry({"Generic": generic})

        assert registry.resolve("generic") is generic
        assert "generic" in registry
        assert list(registry) == ["generic"]

    def test_unknown(self):
        with pytest.raises(UnknownTransport):
            TransportRegistry().resolve("pusher")

    @pytest.mark.asyncio
    async def test_close_releases_strategies(self, mock_adapter):
        registry = TransportRegistry({"webhook": WebhookTransport(adapter=mock_adapter), "generic": GenericTransport()})

        await registry.close()

        mock_adapter.close.assert_awaited_once()
