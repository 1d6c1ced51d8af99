# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core - Database access layer
# PURPOSE: Scoped PostgreSQL access for the database probe
# CREATED: 19 OCT 2026
# ============================================================================
"""
Repositories Module

Database access used by the health probes.
Uses psycopg3 async with a short-lived, single-connection pool.
"""

from .database import short_lived_pool, pool_occupancy, mask_conninfo, ssl_enabled

__all__ = [
    "short_lived_pool",
    "pool_occupancy",
    "mask_conninfo",
    "ssl_enabled",
]
