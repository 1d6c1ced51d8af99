# ============================================================================
# HEALTH AGGREGATOR TESTS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Tests - Concurrent probe execution
# PURPOSE: Verify ordering, fault conversion and timeouts of collect()
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Aggregator Tests

Covers:
1. Results in registration order regardless of completion order
2. Probes run concurrently
3. A throwing probe never escapes the aggregator
4. Per-probe and overall timeouts
5. Every probe failing still yields a well-formed snapshot
6. Critical subset and single-probe runs
7. Unfinished tasks released on overall timeout and caller cancellation

Run with:
    pytest tests/test_aggregator.py -v
"""

import asyncio
import time
import pytest
from unittest.mock import patch

from core.contracts import ProbeStatus, SnapshotStatus
from health.aggregator import HealthAggregator
from health.core import HealthProbe, ProbeResult
from health.registry import ProbeDescriptor, ProbeRegistry


# ============================================================================
# FIXTURES
# ============================================================================

class _Probe(HealthProbe):

    def __init__(self, name, status=ProbeStatus.HEALTHY, delay=0.0, error=None):
        self.name = name
        self._status = status
        self._delay = delay
        self._error = error

    async def check(self):
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error:
            raise self._error
        return ProbeResult(name=self.name, status=self._status, message=f"{self.name} {self._status.value}")


class _HoldsResource(HealthProbe):
    """Holds a resource until cancelled; records the release."""

    def __init__(self, name):
        self.name = name
        self.released = False

    async def check(self):
        try:
            await asyncio.sleep(5.0)
            return ProbeResult.healthy(self.name)
        finally:
            self.released = True


def _registry(*specs):
    """specs: (probe, critical, timeout)"""
    return ProbeRegistry(
        ProbeDescriptor(probe, critical=critical, timeout_seconds=timeout)
        for probe, critical, timeout in specs
    )


def _aggregator(registry, overall_timeout=5.0):
    return HealthAggregator(registry, environment="test", version="1.2.0", overall_timeout=overall_timeout)


# ============================================================================
# COLLECT
# ============================================================================

class TestCollect:

    def test_registration_order_not_completion_order(self):
        registry = _registry(
            (_Probe("slow", delay=0.05), True, 1.0),
            (_Probe("fast"), True, 1.0),
            (_Probe("medium", delay=0.02), False, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect())
        assert [r.name for r in snapshot.results] == ["slow", "fast", "medium"]

    def test_probes_run_concurrently(self):
        registry = _registry(*[(_Probe(f"p{i}", delay=0.1), True, 1.0) for i in range(5)])

        start = time.monotonic()
        asyncio.run(_aggregator(registry).collect())
        assert time.monotonic() - start < 0.4

    def test_degraded_scenario(self):
        registry = _registry(
            (_Probe("database"), True, 1.0),
            (_Probe("filesystem"), True, 1.0),
            (_Probe("memory", ProbeStatus.WARNING), True, 1.0),
            (_Probe("cpu"), True, 1.0),
            (_Probe("github", ProbeStatus.WARNING), False, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect())

        assert snapshot.status is SnapshotStatus.DEGRADED
        assert snapshot.critical_failures == ()

    def test_database_down_scenario(self):
        registry = _registry(
            (_Probe("database", error=ConnectionRefusedError("connection refused")), True, 1.0),
            (_Probe("filesystem"), True, 1.0),
            (_Probe("github"), False, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect())

        assert snapshot.status is SnapshotStatus.UNHEALTHY
        assert snapshot.critical_failures == ("database",)
        assert snapshot.to_dict()["checks"]["database"]["status"] == "unhealthy"

    def test_throwing_optional_probe_is_warning(self):
        registry = _registry(
            (_Probe("database"), True, 1.0),
            (_Probe("github", error=RuntimeError("boom")), False, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect())

        assert snapshot.get("github").status is ProbeStatus.WARNING
        assert snapshot.status is SnapshotStatus.DEGRADED

    def test_per_probe_timeout(self):
        registry = _registry(
            (_Probe("database", delay=1.0), True, 0.02),
            (_Probe("cpu"), True, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect())

        assert snapshot.get("database").status is ProbeStatus.UNHEALTHY
        assert snapshot.get("cpu").status is ProbeStatus.HEALTHY

    def test_overall_timeout_cancels_stragglers(self):
        registry = _registry(
            (_Probe("database", delay=5.0), True, 10.0),
            (_Probe("github", delay=5.0), False, 10.0),
            (_Probe("cpu"), True, 10.0),
        )
        start = time.monotonic()
        snapshot = asyncio.run(_aggregator(registry, overall_timeout=0.05).collect())

        assert time.monotonic() - start < 2.0
        assert snapshot.get("database").status is ProbeStatus.UNHEALTHY
        assert "overall" in snapshot.get("database").message
        assert snapshot.get("github").status is ProbeStatus.WARNING
        assert snapshot.get("cpu").status is ProbeStatus.HEALTHY

    def test_overall_timeout_releases_before_returning(self):
        held = _HoldsResource("database")
        registry = _registry((held, True, 10.0), (_Probe("cpu"), True, 10.0))

        snapshot = asyncio.run(_aggregator(registry, overall_timeout=0.05).collect())

        assert held.released
        assert snapshot.get("database").status is ProbeStatus.UNHEALTHY

    def test_cancelled_caller_leaves_no_running_tasks(self):
        held = [_HoldsResource("database"), _HoldsResource("filesystem")]
        registry = _registry(*[(check, True, 10.0) for check in held])
        aggregator = _aggregator(registry)

        async def cancelled_request():
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(aggregator.collect(), 0.05)
            return [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]

        leftover = asyncio.run(cancelled_request())

        assert leftover == []
        assert all(check.released for check in held)

    def test_all_failing_still_returns_snapshot(self):
        names = ["database", "filesystem", "memory", "cpu"]
        registry = _registry(
            *[(_Probe(n, error=OSError("down")), True, 1.0) for n in names],
            (_Probe("github", error=OSError("down")), False, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect())

        assert snapshot.status is SnapshotStatus.UNHEALTHY
        assert list(snapshot.critical_failures) == names
        assert snapshot.to_dict()["status"] == "unhealthy"

    def test_aggregation_fault_converted(self):
        registry = _registry((_Probe("database"), True, 1.0), (_Probe("github"), False, 1.0))

        with patch("health.aggregator.run_guarded", side_effect=RuntimeError("escaped")):
            snapshot = asyncio.run(_aggregator(registry).collect())

        assert snapshot.get("database").status is ProbeStatus.UNHEALTHY
        assert snapshot.get("github").status is ProbeStatus.WARNING
        assert "escaped" in snapshot.get("database").message

    def test_metadata_passthrough(self):
        registry = _registry((_Probe("cpu"), True, 1.0))
        aggregator = HealthAggregator(registry, environment="staging", version="9.9.9")
        snapshot = asyncio.run(aggregator.collect())

        assert snapshot.environment == "staging"
        assert snapshot.version == "9.9.9"
        assert snapshot.uptime_seconds >= 0

    def test_empty_registry(self):
        snapshot = asyncio.run(_aggregator(ProbeRegistry([])).collect())
        assert snapshot.status is SnapshotStatus.HEALTHY
        assert snapshot.results == ()


# ============================================================================
# SUBSETS
# ============================================================================

class TestSubsets:

    def test_collect_critical(self):
        registry = _registry(
            (_Probe("database"), True, 1.0),
            (_Probe("github", ProbeStatus.WARNING), False, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect_critical())

        assert [r.name for r in snapshot.results] == ["database"]
        assert snapshot.status is SnapshotStatus.HEALTHY

    def test_collect_named_subset_keeps_order(self):
        registry = _registry(
            (_Probe("a"), True, 1.0),
            (_Probe("b"), True, 1.0),
            (_Probe("c"), True, 1.0),
        )
        snapshot = asyncio.run(_aggregator(registry).collect(["c", "a"]))
        assert [r.name for r in snapshot.results] == ["a", "c"]

    def test_collect_one(self):
        registry = _registry((_Probe("cpu", ProbeStatus.WARNING), True, 1.0))
        result = asyncio.run(_aggregator(registry).collect_one("cpu"))
        assert result.status is ProbeStatus.WARNING

    def test_collect_one_unknown(self):
        registry = _registry((_Probe("cpu"), True, 1.0))
        assert asyncio.run(_aggregator(registry).collect_one("nope")) is None
