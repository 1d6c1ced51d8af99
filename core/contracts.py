# ============================================================================
# CLAUDE CONTEXT - STATUS CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Foundation - Core status enums
# PURPOSE: Define the status taxonomy shared by probes, snapshots and readiness
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ProbeStatus, SnapshotStatus, CheckStatus, Verdict
# DEPENDENCIES: enum
# ============================================================================
"""
Status contracts for the health and readiness engine.

Three vocabularies cross boundaries:
- Probes report ProbeStatus (healthy / warning / unhealthy)
- Snapshots roll probes up into SnapshotStatus (healthy / degraded / unhealthy)
- Readiness categories report CheckStatus (pass / warning / fail)

The readiness classifier turns a composite score into a Verdict.
"""

from enum import Enum


# ============================================================================
# PROBE STATUS
# ============================================================================

class ProbeStatus(str, Enum):
    """
    Outcome of a single probe invocation.

    Every probe returns exactly one of these, even when it faults.
    """
    HEALTHY = "healthy"          # Resource responding within thresholds
    WARNING = "warning"          # Usable but outside comfort thresholds
    UNHEALTHY = "unhealthy"      # Resource unavailable or over critical threshold

    @property
    def is_healthy(self) -> bool:
        return self is ProbeStatus.HEALTHY


# ============================================================================
# SNAPSHOT STATUS
# ============================================================================

class SnapshotStatus(str, Enum):
    """
    Overall status of one aggregation run.

    Derived from probe results, never set directly:
        any critical probe UNHEALTHY     -> UNHEALTHY
        any probe WARNING or UNHEALTHY   -> DEGRADED
        otherwise                        -> HEALTHY
    """
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


# ============================================================================
# READINESS CATEGORY STATUS
# ============================================================================

class CheckStatus(str, Enum):
    """Outcome of one readiness category."""
    PASS = "pass"
    WARNING = "warning"
    FAIL = "fail"

    @classmethod
    def from_probe_status(cls, status: ProbeStatus) -> "CheckStatus":
        return {
            ProbeStatus.HEALTHY: cls.PASS,
            ProbeStatus.WARNING: cls.WARNING,
            ProbeStatus.UNHEALTHY: cls.FAIL,
        }[status]

    @classmethod
    def from_snapshot_status(cls, status: SnapshotStatus) -> "CheckStatus":
        return {
            SnapshotStatus.HEALTHY: cls.PASS,
            SnapshotStatus.DEGRADED: cls.WARNING,
            SnapshotStatus.UNHEALTHY: cls.FAIL,
        }[status]


# ============================================================================
# READINESS VERDICT
# ============================================================================

class Verdict(str, Enum):
    """
    Deployment decision derived from the composite score.

        score >= 85        -> READY
        70 <= score < 85   -> READY_WITH_WARNINGS
        score < 70         -> NOT_READY
    """
    READY = "ready"
    READY_WITH_WARNINGS = "ready-with-warnings"
    NOT_READY = "not-ready"

    @property
    def is_deployable(self) -> bool:
        """Check if this verdict allows a deployment to proceed."""
        return self is not Verdict.NOT_READY


__all__ = [
    "ProbeStatus",
    "SnapshotStatus",
    "CheckStatus",
    "Verdict",
]
