# ============================================================================
# HEALTH AGGREGATOR
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Concurrent probe execution
# PURPOSE: Run every registered probe concurrently and fold into a snapshot
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Aggregator

Executes probes with:
- Scatter/gather: every probe is its own asyncio task
- Per-probe timeouts (applied by the fault boundary)
- An overall ceiling so a probe that escapes its own timeout cannot
  block the run
- Results ordered by registration, independent of completion order

The aggregator never raises: with every probe failing it still returns
an UNHEALTHY snapshot listing every critical probe.
"""

import asyncio
import logging
import time
import uuid
from typing import Dict, Iterable, List, Optional

from core.logging import ComponentType, log_checkpoint, log_context
from health.core import HealthSnapshot, ProbeResult, run_guarded
from health.registry import ProbeDescriptor, ProbeRegistry

logger = logging.getLogger(__name__)


class HealthAggregator:
    """
    Runs registered probes and assembles HealthSnapshot instances.

    Holds no per-invocation state, so overlapping collect() calls are
    fully independent.
    """

    def __init__(
        self,
        registry: ProbeRegistry,
        environment: str = "development",
        version: str = "unknown",
        started_at: Optional[float] = None,
        overall_timeout: float = 15.0,
    ):
        """
        Initialize aggregator.

        Args:
            registry: Probe registry
            environment: Deployment environment name (pass-through)
            version: Application version (pass-through)
            started_at: time.monotonic() at process start, for uptime
            overall_timeout: Max total execution time of one run
        """
        self.registry = registry
        self.environment = environment
        self.version = version
        self.started_at = time.monotonic() if started_at is None else started_at
        self.overall_timeout = overall_timeout

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at

    async def collect(self, names: Optional[Iterable[str]] = None) -> HealthSnapshot:
        """
        Run probes and build a snapshot.

        Args:
            names: Restrict the run to these probe names (registration order kept)

        Returns:
            HealthSnapshot
        """
        if names is None:
            descriptors = list(self.registry)
        else:
            wanted = set(names)
            descriptors = [d for d in self.registry if d.name in wanted]

        invocation_id = uuid.uuid4().hex[:12]
        start_time = time.monotonic()

        with log_context(invocation_id=invocation_id, component=ComponentType.AGGREGATOR):
            results = await self._gather(descriptors)

            snapshot = HealthSnapshot(
                results=tuple(results[d.name] for d in descriptors),
                critical_probes=frozenset(d.name for d in descriptors if d.critical),
                uptime_seconds=self.uptime_seconds,
                version=self.version,
                environment=self.environment,
                duration_ms=(time.monotonic() - start_time) * 1000,
            )

            log_checkpoint(
                "health_snapshot_collected",
                {
                    "status": snapshot.status.value,
                    "critical_failures": list(snapshot.critical_failures),
                    "probes": len(snapshot.results),
                    "duration_ms": round(snapshot.duration_ms, 2),
                },
            )

        return snapshot

    async def collect_critical(self) -> HealthSnapshot:
        """Run only the critical probes (readiness probe subset)."""
        return await self.collect(d.name for d in self.registry.critical)

    async def collect_one(self, name: str) -> Optional[ProbeResult]:
        """Run a single probe by name."""
        descriptor = self.registry.get(name)
        if descriptor is None:
            return None

        results = await self._gather([descriptor])
        return results[name]

    async def _gather(self, descriptors: List[ProbeDescriptor]) -> Dict[str, ProbeResult]:
        """Scatter probes as tasks and gather one result per descriptor."""
        if not descriptors:
            return {}

        async def run(descriptor: ProbeDescriptor) -> ProbeResult:
            with log_context(probe=descriptor.name):
                return await run_guarded(
                    descriptor.probe,
                    timeout=descriptor.timeout_seconds,
                    critical=descriptor.critical,
                )

        tasks = {
            asyncio.create_task(run(descriptor)): descriptor
            for descriptor in descriptors
        }

        try:
            done, pending = await asyncio.wait(
                tasks.keys(),
                timeout=self.overall_timeout,
                return_when=asyncio.ALL_COMPLETED,
            )
        finally:
            # Stragglers must release their resources before we return,
            # including when our own caller is cancelled
            unfinished = [task for task in tasks if not task.done()]
            for task in unfinished:
                task.cancel()
            if unfinished:
                await asyncio.gather(*unfinished, return_exceptions=True)

        results: Dict[str, ProbeResult] = {}

        for task in done:
            descriptor = tasks[task]
            try:
                results[descriptor.name] = task.result()
            except (Exception, asyncio.CancelledError) as e:
                # Escaped the probe's own fault boundary
                logger.error(f"Aggregation fault in probe {descriptor.name}: {e!r}")
                results[descriptor.name] = ProbeResult.fallback(
                    descriptor.name,
                    descriptor.critical,
                    f"Probe crashed: {e}",
                    exception_type=type(e).__name__,
                )

        for task in pending:
            descriptor = tasks[task]
            logger.warning(
                f"Probe {descriptor.name} still running after overall timeout "
                f"({self.overall_timeout}s), cancelled"
            )
            results[descriptor.name] = ProbeResult.fallback(
                descriptor.name,
                descriptor.critical,
                f"Timeout after {self.overall_timeout}s (overall)",
                exception_type="TimeoutError",
            )

        return results


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthAggregator",
]
