# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - FastAPI endpoints
# PURPOSE: Liveness, health, readiness and integration retest endpoints
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Router

Router factory over injected services (no module-level state):

Endpoints:
    GET  /livez    - Liveness probe. Bare "OK", never touches the probes.
    GET  /readyz   - Critical probes only. 200 ready / 503 not_ready.
    GET  /health   - Full snapshot. 200 healthy or degraded / 503 unhealthy.
    GET  /health/{probe_name}                 - Single probe, 404 if unknown
    POST /health/integrations/{name}/retest   - Retest with retries
    GET  /readiness                           - Deployment verdict, 200 / 503

Response Codes:
    200 - Healthy or degraded (degraded only means an optional
          integration or a threshold warning)
    503 - Unhealthy (a critical probe failed) or not deployable
    500 - Fault in the aggregation machinery itself
"""

import logging
from typing import Optional

from fastapi import APIRouter
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from core.contracts import ProbeStatus, SnapshotStatus
from health.aggregator import HealthAggregator
from health.core import HealthSnapshot
from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)


def snapshot_http_status(snapshot: HealthSnapshot) -> int:
    """Map snapshot status to HTTP status code."""
    return 503 if snapshot.status is SnapshotStatus.UNHEALTHY else 200


def _aggregation_failed(e: Exception) -> JSONResponse:
    logger.exception(f"Health aggregation failed: {e}")
    return JSONResponse(
        status_code=500,
        content={"error": "Health aggregation failed", "detail": str(e)},
    )


def create_health_router(
    aggregator: HealthAggregator,
    integrations=None,
    readiness=None,
) -> APIRouter:
    """
    Build the health router.

    Args:
        aggregator: HealthAggregator over the probe registry
        integrations: Optional services.IntegrationService (enables retest)
        readiness: Optional readiness.ReadinessService (enables /readiness)

    Returns:
        APIRouter to include in the app
    """
    router = APIRouter(tags=["Health"])

    # ========================================================================
    # LIVENESS PROBE
    # ========================================================================

    @router.get("/livez", response_class=PlainTextResponse)
    async def liveness_probe():
        """
        Load balancer liveness probe.

        Returns 200 "OK" if the process can serve a request at all.
        """
        return PlainTextResponse("OK")

    # ========================================================================
    # READINESS PROBE
    # ========================================================================

    @router.get("/readyz")
    async def readiness_probe():
        """Critical probes only; any critical failure means not ready."""
        try:
            snapshot = await aggregator.collect_critical()
        except Exception as e:
            return _aggregation_failed(e)

        if snapshot.status is SnapshotStatus.UNHEALTHY:
            return JSONResponse(
                status_code=503,
                content=jsonable_encoder({
                    "status": "not_ready",
                    "critical_failures": list(snapshot.critical_failures),
                    "checks": {
                        r.name: r.to_dict()
                        for r in snapshot.results
                        if r.status is ProbeStatus.UNHEALTHY
                    },
                    "total_duration_ms": round(snapshot.duration_ms, 2),
                }),
            )

        return {
            "status": "ready",
            "checks_passed": len(snapshot.results),
            "total_duration_ms": round(snapshot.duration_ms, 2),
        }

    # ========================================================================
    # FULL HEALTH CHECK
    # ========================================================================

    @router.get("/health")
    async def full_health_check():
        """
        Run every registered probe and return the snapshot.

        Returns:
            200: Healthy or degraded
            503: A critical probe is unhealthy
        """
        try:
            snapshot = await aggregator.collect()
        except Exception as e:
            return _aggregation_failed(e)

        body = snapshot.to_dict()
        body["build_date"] = BUILD_DATE
        body["service_version"] = __version__

        return JSONResponse(
            status_code=snapshot_http_status(snapshot),
            content=jsonable_encoder(body),
        )

    # ========================================================================
    # INTEGRATION RETEST
    # ========================================================================

    if integrations is not None:

        @router.post("/health/integrations/{name}/retest")
        async def retest_integration(name: str):
            """Retest one optional integration, retrying transient failures."""
            try:
                outcome = await integrations.retest(name)
            except KeyError:
                return JSONResponse(
                    status_code=404,
                    content={"error": f"Integration not found: {name}"},
                )
            except ValueError as e:
                return JSONResponse(status_code=400, content={"error": str(e)})

            return outcome.to_dict()

    # ========================================================================
    # SINGLE PROBE
    # ========================================================================

    @router.get("/health/{probe_name}")
    async def single_health_check(probe_name: str):
        """Run a single probe by name."""
        descriptor = aggregator.registry.get(probe_name)
        if descriptor is None:
            return JSONResponse(
                status_code=404,
                content={"error": f"Health probe not found: {probe_name}"},
            )

        try:
            result = await aggregator.collect_one(probe_name)
        except Exception as e:
            return _aggregation_failed(e)

        body = result.to_dict()
        body["critical"] = descriptor.critical
        http_code = 503 if result.status is ProbeStatus.UNHEALTHY else 200
        return JSONResponse(status_code=http_code, content=jsonable_encoder(body))

    # ========================================================================
    # DEPLOYMENT READINESS
    # ========================================================================

    if readiness is not None:

        @router.get("/readiness")
        async def deployment_readiness():
            """Score deployment readiness. 503 when not deployable."""
            try:
                verdict = await readiness.evaluate()
            except Exception as e:
                return _aggregation_failed(e)

            http_code = 200 if verdict.deployment_ready else 503
            return JSONResponse(
                status_code=http_code,
                content=jsonable_encoder(verdict.to_dict()),
            )

    return router


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "create_health_router",
    "snapshot_http_status",
]
