"""HTTP webhook adapter using aiohttp.

Performs the raw HTTP POST for webhook deliveries with a pooled session and
per-request timeouts. Transport-level problems (timeouts, connection errors)
are raised as retryable DeliveryFailure; interpreting status codes is left to
the webhook transport.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from ....core.exceptions import DeliveryFailure
from ..entities.delivery_attempt import ErrorKind

logger = logging.getLogger(__name__)

MAX_RESPONSE_BODY = 10000


@dataclass(frozen=True)
class WebhookResponse:
    """Status and (truncated) body of a webhook response."""

    status: int
    body: str
    response_time_ms: int


class HttpWebhookAdapter:
    """HTTP adapter for webhook delivery using aiohttp with connection pooling."""

    def __init__(
        self,
        default_timeout_seconds: int = 10,
        connection_pool_size: int = 100,
        connection_pool_size_per_host: int = 30,
        verify_ssl: bool = True
    ):
        """Initialize HTTP adapter.

        Args:
            default_timeout_seconds: Timeout used when a request gives none
            connection_pool_size: Total connection pool size
            connection_pool_size_per_host: Max connections per host
            verify_ssl: Verify TLS certificates of webhook receivers
        """
        self._default_timeout = default_timeout_seconds
        self._connection_pool_size = connection_pool_size
        self._connection_pool_size_per_host = connection_pool_size_per_host
        self._verify_ssl = verify_ssl
        self._session: Optional[ClientSession] = None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> ClientSession:
        """Ensure aiohttp session exists."""
        if self._session is None or self._session.closed:
            connector = TCPConnector(
                limit=self._connection_pool_size,
                limit_per_host=self._connection_pool_size_per_host,
            )
            self._session = ClientSession(
                connector=connector,
                timeout=ClientTimeout(total=self._default_timeout),
            )
            logger.debug(
                f"Created HTTP session with connection pool: "
                f"total_limit={self._connection_pool_size}, "
                f"per_host_limit={self._connection_pool_size_per_host}"
            )
        return self._session

    async def close(self) -> None:
        """Close aiohttp session if exists."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def post(
        self,
        url: str,
        body: bytes,
        headers: Dict[str, str],
        timeout_seconds: Optional[int] = None
    ) -> WebhookResponse:
        """POST a webhook body and return the response status and body.

        Raises:
            DeliveryFailure: retryable, on timeout or connection error
        """
        session = await self._ensure_session()
        timeout_seconds = timeout_seconds or self._default_timeout
        start_time = datetime.now(timezone.utc)

        request_kwargs = {}
        if not self._verify_ssl:
            request_kwargs["ssl"] = False

        try:
            async with session.post(
                url,
                data=body,
                headers=headers,
                timeout=ClientTimeout(total=timeout_seconds),
                allow_redirects=False,
                **request_kwargs
            ) as response:
                response_body = await response.text(errors="replace")
                if len(response_body) > MAX_RESPONSE_BODY:
                    response_body = response_body[:MAX_RESPONSE_BODY] + "... (truncated)"

                response_time_ms = _elapsed_ms(start_time)
                logger.debug(f"Webhook POST {url} answered {response.status} in {response_time_ms}ms")
                return WebhookResponse(
                    status=response.status,
                    body=response_body,
                    response_time_ms=response_time_ms,
                )

        except asyncio.TimeoutError as e:
            logger.warning(f"Webhook delivery timeout to {url} after {timeout_seconds}s")
            raise DeliveryFailure(
                f"Request timed out after {timeout_seconds}s",
                retryable=True,
                error_kind=ErrorKind.TIMEOUT,
            ) from e

        except ClientError as e:
            logger.warning(f"HTTP client error for webhook delivery to {url}: {e}")
            raise DeliveryFailure(
                f"HTTP client error: {e}",
                retryable=True,
                error_kind=ErrorKind.CONNECTION,
                details={"error_type": type(e).__name__},
            ) from e


def _elapsed_ms(start_time: datetime) -> int:
    return int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
