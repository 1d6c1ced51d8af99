# ============================================================================
# HEALTH MODULE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Probe aggregation
# PURPOSE: Probes, registry, aggregator and HTTP endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Module

Point-in-time health aggregation:
- /livez: Process alive (instant, no probes)
- /readyz: Critical probes only
- /health: Every registered probe

Architecture:
- HealthProbe: Base class for probes, run through one fault boundary
- ProbeRegistry: Immutable, ordered probe declaration
- HealthAggregator: Concurrent execution into a HealthSnapshot
- create_health_router: FastAPI router over injected services

Usage:
    from health import HealthAggregator, build_default_registry, create_health_router

    registry = build_default_registry(defaults)
    aggregator = HealthAggregator(registry, environment="production")
    app.include_router(create_health_router(aggregator))
"""

from health.core import (
    ProbeResult,
    HealthProbe,
    HealthSnapshot,
    run_guarded,
)
from health.registry import (
    ProbeDescriptor,
    ProbeRegistry,
    build_default_registry,
)
from health.aggregator import HealthAggregator
from health.router import create_health_router, snapshot_http_status

__all__ = [
    # Core types
    "ProbeResult",
    "HealthProbe",
    "HealthSnapshot",
    "run_guarded",
    # Registry
    "ProbeDescriptor",
    "ProbeRegistry",
    "build_default_registry",
    # Aggregator
    "HealthAggregator",
    # Router
    "create_health_router",
    "snapshot_http_status",
]
