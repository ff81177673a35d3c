"""
asyncpg pool management for the Postgres subscription store.
"""
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import asyncpg
from asyncpg import Pool, Record

from ..core.exceptions import ConfigurationError, StoreUnavailable

logger = logging.getLogger(__name__)

DEFAULT_POOL_CONFIG: Dict[str, Any] = {
    "min_size": 1,
    "max_size": 10,
    "max_inactive_connection_lifetime": 300,
    "command_timeout": 30,
}


class DatabaseManager:
    """Lazily created asyncpg pool shared by the Postgres stores."""

    def __init__(self, database_url: Optional[str] = None, application_name: str = "event-stream", **pool_config):
        """Initialize DatabaseManager.

        Args:
            database_url: Postgres DSN (defaults to EVENT_STREAM_DATABASE_URL)
            application_name: Reported to Postgres in pg_stat_activity
            **pool_config: Overrides for DEFAULT_POOL_CONFIG
        """
        dsn = database_url or os.getenv("EVENT_STREAM_DATABASE_URL", "")
        if not dsn:
            raise ConfigurationError("A database URL is required for the Postgres store")

        # SQLAlchemy style URLs are accepted as well
        self.dsn = dsn.replace("postgresql+asyncpg://", "postgresql://")
        self.application_name = application_name
        self.pool_config = {**DEFAULT_POOL_CONFIG, **pool_config}
        self.pool: Optional[Pool] = None
        self._pool_lock = asyncio.Lock()

    async def create_pool(self) -> Pool:
        """Create the pool on first use. Concurrent first callers share one pool."""
        if self.pool is not None:
            return self.pool

        async with self._pool_lock:
            if self.pool is not None:
                return self.pool

            logger.info(f"Opening subscription store pool (max_size={self.pool_config['max_size']})")
            try:
                self.pool = await asyncpg.create_pool(
                    self.dsn,
                    server_settings={"application_name": self.application_name},
                    **self.pool_config
                )
            except (OSError, asyncpg.PostgresError) as e:
                logger.error(f"Could not open subscription store pool: {e}")
                raise StoreUnavailable(f"Could not connect to the subscription store: {e}", operation="connect") from e
            return self.pool

    async def close_pool(self) -> None:
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Subscription store pool closed")

    @asynccontextmanager
    async def acquire(self):
        """Borrow a pooled connection."""
        pool = await self.create_pool()
        async with pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Borrow a connection inside a transaction; commits on clean exit."""
        async with self.acquire() as connection:
            async with connection.transaction():
                yield connection

    async def execute(self, query: str, *args, timeout: Optional[float] = None) -> str:
        async with self.acquire() as connection:
            return await connection.execute(query, *args, timeout=timeout)

    async def fetch(self, query: str, *args, timeout: Optional[float] = None) -> List[Record]:
        async with self.acquire() as connection:
            return await connection.fetch(query, *args, timeout=timeout)

    async def fetchrow(self, query: str, *args, timeout: Optional[float] = None) -> Optional[Record]:
        async with self.acquire() as connection:
            return await connection.fetchrow(query, *args, timeout=timeout)

    async def health_check(self) -> bool:
        """True when the store answers a trivial query."""
        try:
            async with self.acquire() as connection:
                return await connection.fetchval("SELECT 1") == 1
        except (StoreUnavailable, OSError, asyncpg.PostgresError) as e:
            logger.error(f"Subscription store health check failed: {e}")
            return False
