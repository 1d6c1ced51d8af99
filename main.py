# ============================================================================
# READINESS GATE - MAIN APPLICATION
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core - FastAPI application entry point
# PURPOSE: Compose probes, aggregator and readiness services behind HTTP
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Gate Main Application

FastAPI application that:
1. Builds the probe registry once from configuration
2. Serves liveness, health and readiness endpoints
3. Offers an interactive retest for optional integrations

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from __version__ import __version__, BUILD_DATE, EPOCH
from core.config import Defaults
from core.retry import RetryPolicy
from health import HealthAggregator, build_default_registry, create_health_router
from readiness import ReadinessService
from services import IntegrationService

# Configure logging using our structured logging system
from core.logging import ComponentType, configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.API)


def create_app(defaults: Optional[Defaults] = None) -> FastAPI:
    """
    Build the application.

    Args:
        defaults: Configuration (defaults to Defaults.from_env())

    Returns:
        FastAPI app with health routes mounted
    """
    defaults = defaults or Defaults.from_env()
    service = defaults.service
    started_at = time.monotonic()

    registry = build_default_registry(defaults)
    aggregator = HealthAggregator(
        registry,
        environment=service.environment,
        version=service.version,
        started_at=started_at,
        overall_timeout=defaults.timeouts.overall_timeout,
    )
    integrations = IntegrationService(registry, RetryPolicy.from_defaults(defaults.retry))
    readiness = ReadinessService(
        aggregator,
        settings=defaults.readiness,
        project_root=Path(os.environ.get("READINESS_PROJECT_ROOT", ".")),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Services are stateless between requests; startup only reports
        what was composed.
        """
        logger.info(
            f"Starting Readiness Gate v{__version__} (Epoch {EPOCH}, Build {BUILD_DATE}) "
            f"in {service.environment}"
        )
        logger.info(
            f"Health probes registered: {len(registry.critical)} critical, "
            f"{len(registry.optional)} optional"
        )

        yield

        logger.info("Readiness Gate stopped")

    app = FastAPI(
        title="Readiness Gate",
        description="Service health aggregation and deployment readiness scoring",
        version=__version__,
        lifespan=lifespan,
    )

    if defaults.readiness.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(defaults.readiness.cors_origins),
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    # Health routes (no prefix - /livez, /readyz, /health, /readiness)
    app.include_router(
        create_health_router(aggregator, integrations=integrations, readiness=readiness)
    )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": "Readiness Gate",
            "version": __version__,
            "epoch": EPOCH,
            "build_date": BUILD_DATE,
            "environment": service.environment,
            "status": "running",
            "docs": "/docs",
        }

    return app


app = create_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
