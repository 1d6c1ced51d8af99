# ============================================================================
# DATABASE HEALTH PROBE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - PostgreSQL connectivity probe
# PURPOSE: Round-trip query through a scoped single-connection pool
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Health Probe

Critical probe. Opens a one-connection pool, runs a trivial query and
measures the round trip:
- UNHEALTHY: not configured, connection refused, query failed
- WARNING: round trip slower than the warning threshold (1000 ms)
- HEALTHY: otherwise
"""

import logging
import time
from dataclasses import replace
from typing import Optional

from core.contracts import ProbeStatus
from health.core import HealthProbe, ProbeResult
from repositories.database import mask_conninfo, pool_occupancy, short_lived_pool

logger = logging.getLogger(__name__)

HEALTH_QUERY = "SELECT 1 AS health_check, NOW() AS server_time"


class DatabaseProbe(HealthProbe):
    """
    PostgreSQL connectivity probe.

    The pool is opened per invocation and always closed, even when the
    connection attempt or the query fails.
    """

    name = "database"
    critical = True
    timeout_seconds = 5.0

    def __init__(
        self,
        database_url: Optional[str],
        warning_ms: float = 1000.0,
        connect_timeout: float = 5.0,
    ):
        self.database_url = database_url
        self.warning_ms = warning_ms
        self.connect_timeout = connect_timeout

    async def check(self) -> ProbeResult:
        if not self.database_url:
            return ProbeResult.unhealthy(
                self.name,
                message="Database not configured",
                connected=False,
                hint="Set DATABASE_URL",
            )

        target = mask_conninfo(self.database_url)
        start_time = time.monotonic()

        try:
            async with short_lived_pool(self.database_url, timeout=self.connect_timeout) as pool:
                async with pool.connection() as conn:
                    cursor = await conn.execute(HEALTH_QUERY)
                    row = await cursor.fetchone()
                occupancy = pool_occupancy(pool)

        except Exception as e:
            return ProbeResult(
                name=self.name,
                status=ProbeStatus.UNHEALTHY,
                message=f"Database connection failed: {e}",
                detail={"connected": False, "target": target},
                response_time_ms=(time.monotonic() - start_time) * 1000,
            )

        response_time_ms = (time.monotonic() - start_time) * 1000

        if not row:
            return ProbeResult(
                name=self.name,
                status=ProbeStatus.UNHEALTHY,
                message="Database query returned no rows",
                detail={"connected": True, "target": target},
                response_time_ms=response_time_ms,
            )

        server_time = row[1]
        detail = {
            "connected": True,
            "target": target,
            "server_time": server_time.isoformat() if hasattr(server_time, "isoformat") else str(server_time),
            "connection_pool": occupancy,
        }

        if response_time_ms > self.warning_ms:
            result = ProbeResult.warning(
                self.name,
                message=f"Database response time {response_time_ms:.0f}ms exceeds {self.warning_ms:.0f}ms",
                **detail,
            )
        else:
            result = ProbeResult.healthy(self.name, message="Database connected", **detail)

        return replace(result, response_time_ms=response_time_ms)


__all__ = [
    "DatabaseProbe",
    "HEALTH_QUERY",
]
