# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Probe interface, fault boundary and result types
# PURPOSE: Probe contract, ProbeResult and HealthSnapshot
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the probe interface and the immutable result types.

Probe contract:
    run(timeout) -> ProbeResult     never raises

Every probe goes through run_guarded(), the single fault boundary. It
applies the timeout, converts faults into the probe's fallback status
(UNHEALTHY for critical probes, WARNING for optional ones) and stamps
name, latency and message.

Snapshot status (strict priority):
1. UNHEALTHY  - any critical probe is UNHEALTHY
2. DEGRADED   - any probe is WARNING or UNHEALTHY
3. HEALTHY    - otherwise
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional, Tuple

from core.contracts import ProbeStatus, SnapshotStatus

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# PROBE RESULT
# ============================================================================

@dataclass(frozen=True)
class ProbeResult:
    """Result from a single probe invocation."""
    name: str
    status: ProbeStatus
    message: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)
    response_time_ms: float = 0.0
    timestamp: datetime = field(default_factory=_utc_now)

    @classmethod
    def healthy(cls, name: str, message: str = None, **detail) -> "ProbeResult":
        """Create healthy result."""
        return cls(name=name, status=ProbeStatus.HEALTHY, message=message, detail=detail)

    @classmethod
    def warning(cls, name: str, message: str, **detail) -> "ProbeResult":
        """Create warning result."""
        return cls(name=name, status=ProbeStatus.WARNING, message=message, detail=detail)

    @classmethod
    def unhealthy(cls, name: str, message: str, **detail) -> "ProbeResult":
        """Create unhealthy result."""
        return cls(name=name, status=ProbeStatus.UNHEALTHY, message=message, detail=detail)

    @classmethod
    def fallback(
        cls,
        name: str,
        critical: bool,
        message: str,
        **detail,
    ) -> "ProbeResult":
        """
        Result used when a probe faulted or timed out.

        Critical probes fall back to UNHEALTHY, optional probes to WARNING.
        """
        status = ProbeStatus.UNHEALTHY if critical else ProbeStatus.WARNING
        return cls(name=name, status=status, message=message, detail=detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "name": self.name,
            "status": self.status.value,
            "response_time_ms": round(self.response_time_ms, 2),
            "timestamp": self.timestamp.isoformat(),
        }
        if self.message:
            result["message"] = self.message
        if self.detail:
            result["detail"] = self.detail
        return result


# ============================================================================
# PROBE BASE CLASS
# ============================================================================

class HealthProbe(ABC):
    """
    Base class for probes.

    Subclass and implement check(). Callers always go through run(),
    which never raises.

    Attributes:
        name: Stable identifier for the probe
        critical: Default criticality (the registry descriptor may override)
        timeout_seconds: Max execution time before timeout

    Example:
        class QueueProbe(HealthProbe):
            name = "queue"
            critical = False

            async def check(self) -> ProbeResult:
                depth = await queue.depth()
                return ProbeResult.healthy(self.name, depth=depth)
    """

    name: str = "unnamed"
    critical: bool = True
    timeout_seconds: float = 5.0

    @abstractmethod
    async def check(self) -> ProbeResult:
        """
        Inspect the resource.

        Returns:
            ProbeResult with status and optional detail
        """

    async def run(
        self,
        timeout: Optional[float] = None,
        critical: Optional[bool] = None,
    ) -> ProbeResult:
        """Run the probe through the fault boundary."""
        return await run_guarded(self, timeout=timeout, critical=critical)


# ============================================================================
# FAULT BOUNDARY
# ============================================================================

async def run_guarded(
    probe: HealthProbe,
    timeout: Optional[float] = None,
    critical: Optional[bool] = None,
) -> ProbeResult:
    """
    Execute a probe with timeout and fault conversion.

    Args:
        probe: Probe to run
        timeout: Seconds before the probe is abandoned (defaults to probe's own)
        critical: Criticality for the fallback status (defaults to probe's own)

    Returns:
        ProbeResult; never raises for probe faults
    """
    timeout = probe.timeout_seconds if timeout is None else timeout
    critical = probe.critical if critical is None else critical
    start_time = time.monotonic()

    try:
        result = await asyncio.wait_for(probe.check(), timeout=timeout)

    except asyncio.TimeoutError:
        logger.warning(f"Probe {probe.name} timed out after {timeout}s")
        result = ProbeResult.fallback(
            probe.name,
            critical,
            f"Timeout after {timeout}s",
            exception_type="TimeoutError",
        )

    except Exception as e:
        logger.error(f"Probe {probe.name} failed: {e}")
        result = ProbeResult.fallback(
            probe.name,
            critical,
            f"Probe error: {e}",
            exception_type=type(e).__name__,
        )

    duration_ms = (time.monotonic() - start_time) * 1000

    if not isinstance(result, ProbeResult):
        logger.error(f"Probe {probe.name} returned {type(result).__name__}, not ProbeResult")
        result = ProbeResult.fallback(
            probe.name, critical, "Probe returned an invalid result"
        )

    if not isinstance(result.status, ProbeStatus):
        try:
            result = replace(result, status=ProbeStatus(result.status))
        except ValueError:
            logger.error(f"Probe {probe.name} returned unknown status {result.status!r}")
            result = ProbeResult.fallback(
                probe.name, critical, f"Probe returned unknown status {result.status!r}"
            )

    updates: Dict[str, Any] = {}
    if result.name != probe.name:
        updates["name"] = probe.name
    if not result.response_time_ms:
        updates["response_time_ms"] = duration_ms
    if result.status is not ProbeStatus.HEALTHY and not result.message:
        updates["message"] = f"{probe.name} reported {result.status.value}"
    if updates:
        result = replace(result, **updates)

    logger.debug(
        f"Probe {probe.name}: {result.status.value} ({result.response_time_ms:.1f}ms)"
    )
    return result


# ============================================================================
# SNAPSHOT
# ============================================================================

@dataclass(frozen=True)
class HealthSnapshot:
    """
    Immutable result of one aggregation run.

    results is an ordered sequence in registration order; status and
    critical_failures are derived, never stored.
    """
    results: Tuple[ProbeResult, ...]
    critical_probes: FrozenSet[str]
    uptime_seconds: float
    version: str
    environment: str
    duration_ms: float = 0.0
    captured_at: datetime = field(default_factory=_utc_now)

    @property
    def critical_failures(self) -> Tuple[str, ...]:
        """Critical probes reporting UNHEALTHY, in registration order."""
        return tuple(
            r.name for r in self.results
            if r.name in self.critical_probes and r.status is ProbeStatus.UNHEALTHY
        )

    @property
    def status(self) -> SnapshotStatus:
        if self.critical_failures:
            return SnapshotStatus.UNHEALTHY
        if any(r.status is not ProbeStatus.HEALTHY for r in self.results):
            return SnapshotStatus.DEGRADED
        return SnapshotStatus.HEALTHY

    @property
    def warnings(self) -> int:
        """Number of non-healthy probes."""
        return sum(1 for r in self.results if r.status is not ProbeStatus.HEALTHY)

    def get(self, name: str) -> Optional[ProbeResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None

    def as_mapping(self) -> "OrderedDict[str, ProbeResult]":
        return OrderedDict((r.name, r) for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": self.status.value,
            "timestamp": self.captured_at.isoformat(),
            "uptime_seconds": round(self.uptime_seconds, 3),
            "version": self.version,
            "environment": self.environment,
            "critical_failures": list(self.critical_failures),
            "warnings": self.warnings,
            "checks": {r.name: r.to_dict() for r in self.results},
            "total_duration_ms": round(self.duration_ms, 2),
        }


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeResult",
    "HealthProbe",
    "HealthSnapshot",
    "run_guarded",
]
