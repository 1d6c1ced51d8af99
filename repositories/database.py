# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core - Async PostgreSQL connection management for probes
# PURPOSE: Scoped, single-connection pool for the database health probe
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Connection Pool

Provides a short-lived psycopg3 async pool sized for one connection. The
database probe opens one per invocation and the pool is always closed on
exit, including when the connection attempt or the query fails. Two
overlapping health checks therefore never share a connection.

Usage:
    from repositories.database import short_lived_pool

    async with short_lived_pool(conninfo, timeout=5.0) as pool:
        async with pool.connection() as conn:
            cur = await conn.execute("SELECT 1")
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


def mask_conninfo(conninfo: str) -> str:
    """Strip credentials from a connection string for logs and details."""
    if "@" in conninfo:
        # URL format
        scheme, _, rest = conninfo.partition("://")
        return f"{scheme}://{rest.split('@')[-1]}" if rest else conninfo.split("@")[-1]
    if "password=" in conninfo:
        # Key-value format
        return " ".join(
            "password=***" if part.startswith("password=") else part
            for part in conninfo.split()
        )
    return conninfo


def ssl_enabled(conninfo: Optional[str]) -> bool:
    """Check if a connection string requests TLS."""
    if not conninfo:
        return False
    lowered = conninfo.lower()
    return any(
        marker in lowered
        for marker in ("sslmode=require", "sslmode=verify-ca", "sslmode=verify-full", "ssl=true")
    )


@asynccontextmanager
async def short_lived_pool(
    conninfo: str,
    timeout: float = 5.0,
) -> AsyncIterator[AsyncConnectionPool]:
    """
    Open a one-connection pool and guarantee it is closed.

    Args:
        conninfo: PostgreSQL connection string
        timeout: Seconds to wait for a connection (also used as connect_timeout)

    Yields:
        Opened AsyncConnectionPool
    """
    pool = AsyncConnectionPool(
        conninfo=conninfo,
        min_size=1,
        max_size=1,
        timeout=timeout,
        kwargs={"connect_timeout": max(int(timeout), 1)},
        open=False,  # We'll open it explicitly
    )
    logger.debug(f"Opening probe pool: {mask_conninfo(conninfo)}")

    try:
        await pool.open(wait=True, timeout=timeout)
        yield pool
    finally:
        await pool.close()
        logger.debug("Probe pool closed")


def pool_occupancy(pool: AsyncConnectionPool) -> Dict[str, int]:
    """Connection pool counts reported as probe detail."""
    stats = pool.get_stats()
    return {
        "pool_size": stats.get("pool_size", 0),
        "pool_available": stats.get("pool_available", 0),
        "requests_waiting": stats.get("requests_waiting", 0),
        "pool_max": pool.max_size,
    }


__all__ = [
    "short_lived_pool",
    "pool_occupancy",
    "mask_conninfo",
    "ssl_enabled",
]
