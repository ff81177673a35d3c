"""Tests for HttpWebhookAdapter against a mocked aiohttp session and a local receiver."""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from event_stream.core.exceptions import DeliveryFailure
from event_stream.features.events.adapters.http_webhook_adapter import HttpWebhookAdapter, MAX_RESPONSE_BODY
from event_stream.features.events.entities.delivery_attempt import ErrorKind
from event_stream.features.events.transports.webhook_transport import WebhookTransport
from event_stream.features.subscriptions.entities.subscription import Subscription
from event_stream.features.subscriptions.entities.webhook_config import WebhookConfig


def _session_returning(status=200, text="ok"):
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)

    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    session.post.return_value.__aenter__.return_value = response
    return session


class TestHttpWebhookAdapter:

    @pytest.mark.asyncio
    async def test_post(self):
        adapter = HttpWebhookAdapter(default_timeout_seconds=10)
        adapter._session = _session_returning(202, "accepted")

        response = await adapter.post("https://example.com/hook", b"{}", {"A": "b"}, timeout_seconds=3)

        assert response.status == 202
        assert response.body == "accepted"
        assert response.response_time_ms >= 0
        kwargs = adapter._session.post.call_args.kwargs
        assert kwargs["data"] == b"{}"
        assert kwargs["headers"] == {"A": "b"}
        assert kwargs["allow_redirects"] is False
        assert kwargs["timeout"].total == 3
        assert "ssl" not in kwargs

    @pytest.mark.asyncio
    async def test_default_timeout_and_ssl_flag(self):
        adapter = HttpWebhookAdapter(default_timeout_seconds=7, verify_ssl=False)
        adapter._session = _session_returning()

        await adapter.post("https://example.com/hook", b"{}", {})

        kwargs = adapter._session.post.call_args.kwargs
        assert kwargs["timeout"].total == 7
        assert kwargs["ssl"] is False

    @pytest.mark.asyncio
    async def test_truncates_large_bodies(self):
        adapter = HttpWebhookAdapter()
        adapter._session = _session_returning(500, "x" * (MAX_RESPONSE_BODY + 50))

        response = await adapter.post("https://example.com/hook", b"{}", {})

        assert response.body.endswith("... (truncated)")
        assert len(response.body) == MAX_RESPONSE_BODY + len("... (truncated)")

    @pytest.mark.asyncio
    async def test_timeout_is_retryable(self):
        adapter = HttpWebhookAdapter()
        adapter._session = _session_returning()
        adapter._session.post.side_effect = asyncio.TimeoutError()

        with pytest.raises(DeliveryFailure) as exc_info:
            await adapter.post("https://example.com/hook", b"{}", {}, timeout_seconds=2)

        assert exc_info.value.retryable is True
        assert exc_info.value.error_kind == ErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_connection_error_is_retryable(self):
        adapter = HttpWebhookAdapter()
        adapter._session = _session_returning()
        adapter._session.post.side_effect = aiohttp.ClientConnectionError("refused")

        with pytest.raises(DeliveryFailure) as exc_info:
            await adapter.post("https://example.com/hook", b"{}", {})

        assert exc_info.value.retryable is True
        assert exc_info.value.error_kind == ErrorKind.CONNECTION

    @pytest.mark.asyncio
    async def test_close(self):
        adapter = HttpWebhookAdapter()
        session = _session_returning()
        adapter._session = session

        await adapter.close()

        session.close.assert_awaited_once()
        assert adapter._session is None

    @pytest.mark.asyncio
    async def test_context_manager_creates_real_session(self):
        async with HttpWebhookAdapter() as adapter:
            assert adapter._session is not None
            assert not adapter._session.closed

        assert adapter._session is None


async def _undecodable_body(request):
    status = 200 if request.path == "/ok" else 503
    return web.Response(status=status, body=b"\xff\xfe\xfa", content_type="text/plain", charset="utf-8")


@asynccontextmanager
async def _receiver():
    app = web.Application()
    app.router.add_post("/ok", _undecodable_body)
    app.router.add_post("/down", _undecodable_body)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


class TestUndecodableResponseBodies:

    @pytest.mark.asyncio
    async def test_post_replaces_invalid_bytes(self):
        async with _receiver() as receiver, HttpWebhookAdapter() as adapter:
            response = await adapter.post(str(receiver.make_url("/down")), b"{}", {})

        assert response.status == 503
        assert response.body == "\ufffd" * 3

    @pytest.mark.asyncio
    async def test_transport_classifies_status_despite_invalid_body(self, sample_user_id, sample_event):
        transport = WebhookTransport(adapter=HttpWebhookAdapter())

        async with _receiver() as receiver:

            def subscription_for(path):
                return Subscription(
                    transport="webhook",
                    owner=sample_user_id,
                    transport_config=WebhookConfig(url=str(receiver.make_url(path))),
                )

            try:
                delivered = await transport.deliver(subscription_for("/ok"), sample_event)
                rejected = await transport.deliver(subscription_for("/down"), sample_event)
            finally:
                await transport.close()

        assert delivered.success
        assert delivered.status_code == 200
        assert not rejected.success
        assert rejected.retryable
        assert rejected.status_code == 503
