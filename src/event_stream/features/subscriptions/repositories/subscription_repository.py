"""Postgres subscription store backed by asyncpg.

Uniqueness of (transport, owner) is enforced by the ``uq_transport_owner``
constraint, so concurrent registrations race inside Postgres rather than in
application code. The webhook config row lives in a child table and is
written and deleted in the same transaction as its subscription.
"""

import asyncio
import json
import logging
import re
from typing import Any, List, Mapping, Optional

import asyncpg

from ....core.exceptions import DuplicateSubscription, StoreUnavailable, SubscriptionNotFound
from ....core.value_objects import SubscriptionId, UserId
from ....database import DatabaseManager
from ..entities.subscription import Subscription
from ..entities.webhook_config import WebhookConfig
from ..utils.queries import (
    SUBSCRIPTION_SCHEMA_DDL,
    SUBSCRIPTION_INSERT,
    WEBHOOK_DATA_INSERT,
    SUBSCRIPTION_GET_BY_ID,
    SUBSCRIPTION_GET_BY_OWNER_TRANSPORT,
    SUBSCRIPTION_LIST_MATCHING,
    SUBSCRIPTION_LIST,
    WEBHOOK_DATA_DELETE,
    SUBSCRIPTION_DELETE,
)

logger = logging.getLogger(__name__)

_SCHEMA_NAME = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

# Errors that mean the store itself is unreachable or broken
_BACKEND_ERRORS = (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError)


class PostgresSubscriptionRepository:
    """Subscription store using a Postgres schema via DatabaseManager."""

    def __init__(self, database: DatabaseManager, schema: str = "event_stream"):
        """Initialize with a database manager.

        Args:
            database: asyncpg pool manager
            schema: Database schema holding the subscription tables
        """
        if not _SCHEMA_NAME.match(schema):
            raise ValueError(f"Invalid schema name: {schema}")
        self._db = database
        self._schema = schema

    def _query(self, template: str) -> str:
        return template.format(schema=self._schema)

    async def create_schema(self) -> None:
        """Create the subscription tables if they do not exist."""
        try:
            await self._db.execute(self._query(SUBSCRIPTION_SCHEMA_DDL))
        except _BACKEND_ERRORS as e:
            raise StoreUnavailable(f"Could not create subscription schema: {e}", operation="create_schema") from e

    async def register(self, subscription: Subscription) -> SubscriptionId:
        try:
            async with self._db.transaction() as connection:
                inserted_id = await connection.fetchval(
                    self._query(SUBSCRIPTION_INSERT),
                    subscription.id.value,
                    subscription.transport,
                    subscription.event_types,
                    subscription.owner.value,
                    subscription.created_at,
                )
                if inserted_id is None:
                    raise DuplicateSubscription(subscription.transport, subscription.owner)

                config = subscription.transport_config
                if config is not None:
                    await connection.execute(
                        self._query(WEBHOOK_DATA_INSERT),
                        subscription.id.value,
                        config.url,
                        config.secret,
                        config.timeout_seconds,
                        json.dumps(config.headers),
                    )
        except asyncpg.exceptions.UniqueViolationError as e:
            raise DuplicateSubscription(subscription.transport, subscription.owner) from e
        except _BACKEND_ERRORS as e:
            logger.error(f"Failed to register subscription {subscription.id}: {e}")
            raise StoreUnavailable(f"Subscription store unavailable: {e}", operation="register") from e

        logger.debug(f"Registered subscription {subscription.id} in schema {self._schema}")
        return subscription.id

    async def get(self, subscription_id: SubscriptionId) -> Optional[Subscription]:
        row = await self._fetchrow("get", SUBSCRIPTION_GET_BY_ID, subscription_id.value)
        return self._row_to_subscription(row) if row else None

    async def find(self, owner: UserId, transport: str) -> Optional[Subscription]:
        row = await self._fetchrow("find", SUBSCRIPTION_GET_BY_OWNER_TRANSPORT, owner.value, transport)
        return self._row_to_subscription(row) if row else None

    async def list_matching(self, event_type: str) -> List[Subscription]:
        rows = await self._fetch("list_matching", SUBSCRIPTION_LIST_MATCHING, event_type)
        return [self._row_to_subscription(row) for row in rows]

    async def list(self, owner: Optional[UserId] = None, transport: Optional[str] = None) -> List[Subscription]:
        rows = await self._fetch(
            "list", SUBSCRIPTION_LIST, owner.value if owner else None, transport
        )
        return [self._row_to_subscription(row) for row in rows]

    async def remove(self, subscription_id: SubscriptionId) -> None:
        try:
            async with self._db.transaction() as connection:
                await connection.execute(self._query(WEBHOOK_DATA_DELETE), subscription_id.value)
                deleted = await connection.fetchval(self._query(SUBSCRIPTION_DELETE), subscription_id.value)
                if deleted is None:
                    raise SubscriptionNotFound(subscription_id)
        except _BACKEND_ERRORS as e:
            logger.error(f"Failed to remove subscription {subscription_id}: {e}")
            raise StoreUnavailable(f"Subscription store unavailable: {e}", operation="remove") from e

        logger.debug(f"Removed subscription {subscription_id} from schema {self._schema}")

    async def _fetch(self, operation: str, template: str, *args) -> List[Mapping[str, Any]]:
        try:
            return await self._db.fetch(self._query(template), *args)
        except _BACKEND_ERRORS as e:
            logger.error(f"Subscription store {operation} failed: {e}")
            raise StoreUnavailable(f"Subscription store unavailable: {e}", operation=operation) from e

    async def _fetchrow(self, operation: str, template: str, *args) -> Optional[Mapping[str, Any]]:
        try:
            return await self._db.fetchrow(self._query(template), *args)
        except _BACKEND_ERRORS as e:
            logger.error(f"Subscription store {operation} failed: {e}")
            raise StoreUnavailable(f"Subscription store unavailable: {e}", operation=operation) from e

    def _row_to_subscription(self, row: Mapping[str, Any]) -> Subscription:
        config = None
        if row["url"] is not None:
            headers = row["headers"]
            if isinstance(headers, str):
                headers = json.loads(headers)
            config = WebhookConfig(
                url=row["url"],
                secret=row["secret"],
                timeout_seconds=row["timeout_seconds"],
                headers=headers or {},
            )

        return Subscription(
            id=SubscriptionId(row["id"]),
            transport=row["transport"],
            owner=UserId(row["owner_id"]),
            event_types=list(row["event_types"]) if row["event_types"] is not None else None,
            transport_config=config,
            created_at=row["created_at"],
        )
