# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# EPOCH: 1 - DYNAMIC SCHEMAS
# STATUS: Core - Async PostgreSQL connection management
# PURPOSE: Provide connection pooling for psycopg3 async
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Connection Pool

Manages async PostgreSQL connections using psycopg3 and psycopg_pool.
One pool per application, shared by every repository.

Every database call is bounded twice:
- pool checkout waits at most DB_POOL_TIMEOUT_SECONDS
- each statement runs with statement_timeout = DB_STATEMENT_TIMEOUT_MS

Every pooled connection returns rows as dicts; read columns by name.

Usage:
    from repositories.database import get_pool

    pool = await get_pool()
    async with pool.connection() as conn:
        result = await conn.execute("SELECT 1")
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.config.defaults import DatabaseDefaults, get_defaults

logger = logging.getLogger(__name__)

# Global pool instance
_pool: Optional[AsyncConnectionPool] = None


def get_connection_string() -> str:
    """
    Get database connection string from environment.

    Priority:
    1. DATABASE_URL environment variable
    2. Individual POSTGRES_* components
    """
    if url := os.environ.get("DATABASE_URL"):
        return url

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


def mask_conninfo(conninfo: str) -> str:
    """Strip credentials from a connection string for logging."""
    if "@" in conninfo:
        return conninfo.split("@")[-1]
    if "password=" in conninfo:
        head, _, tail = conninfo.partition("password=")
        rest = tail.split(" ", 1)
        return head + "password=***" + (" " + rest[1] if len(rest) > 1 else "")
    return conninfo


def build_pool(
    connection_string: Optional[str] = None,
    settings: Optional[DatabaseDefaults] = None,
) -> AsyncConnectionPool:
    """
    Create an unopened pool configured from DatabaseDefaults.

    Callers own opening and closing it.
    """
    settings = settings or get_defaults().database
    conninfo = connection_string or get_connection_string()

    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=settings.pool_timeout_seconds,
        kwargs={
            "options": f"-c statement_timeout={settings.statement_timeout_ms}",
            "row_factory": dict_row,
        },
        open=False,  # We'll open it explicitly
    )


async def init_pool(
    connection_string: Optional[str] = None,
    settings: Optional[DatabaseDefaults] = None,
) -> AsyncConnectionPool:
    """
    Initialize the global connection pool.

    Args:
        connection_string: Override connection string (defaults to env)
        settings: Override pool settings (defaults to env)
    """
    global _pool

    if _pool is not None:
        logger.warning("Pool already initialized, returning existing pool")
        return _pool

    settings = settings or get_defaults().database
    conninfo = connection_string or get_connection_string()
    logger.info(f"Initializing connection pool: {mask_conninfo(conninfo)}")

    _pool = build_pool(conninfo, settings)
    await _pool.open()
    logger.info(
        f"Connection pool opened (min={settings.pool_min_size}, max={settings.pool_max_size}, "
        f"timeout={settings.pool_timeout_seconds}s, "
        f"statement_timeout={settings.statement_timeout_ms}ms)"
    )

    return _pool


async def get_pool() -> AsyncConnectionPool:
    """Get the global connection pool, initializing if needed."""
    global _pool

    if _pool is None:
        await init_pool()

    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Connection pool closed")


@asynccontextmanager
async def get_connection():
    """
    Get a connection from the pool.

    Usage:
        async with get_connection() as conn:
            await conn.execute(...)
    """
    pool = await get_pool()
    async with pool.connection() as conn:
        yield conn


class DatabasePool:
    """
    Context manager for a private pool lifecycle (scripts, tests).

    Usage:
        async with DatabasePool(dsn) as pool:
            async with pool.connection() as conn:
                ...
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        settings: Optional[DatabaseDefaults] = None,
    ):
        self.connection_string = connection_string
        self.settings = settings
        self._pool: Optional[AsyncConnectionPool] = None

    async def __aenter__(self) -> AsyncConnectionPool:
        self._pool = build_pool(self.connection_string, self.settings)
        await self._pool.open()
        return self._pool

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
