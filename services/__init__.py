# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Services - Caller-layer operations
# PURPOSE: User-facing actions layered over the probes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Caller-layer operations that may retry, unlike the periodic probes.

Usage:
    from services import IntegrationService

    service = IntegrationService(registry, RetryPolicy())
    outcome = await service.retest("github")
"""

from .integration_service import (
    IntegrationService,
    IntegrationUnavailableError,
    RetestOutcome,
)

__all__ = [
    "IntegrationService",
    "IntegrationUnavailableError",
    "RetestOutcome",
]
