# ============================================================================
# INTEGRATION SERVICE TESTS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Tests - Interactive retest
# PURPOSE: Verify retest retries, exhaustion messages and rejections
# CREATED: 19 OCT 2026
# ============================================================================
"""
Integration Service Tests

Run with:
    pytest tests/test_integration_service.py -v
"""

import asyncio
import pytest
from unittest.mock import AsyncMock

from core.retry import RetryPolicy
from health.core import HealthProbe, ProbeResult
from health.registry import ProbeDescriptor, ProbeRegistry
from services.integration_service import IntegrationService, RetestOutcome


class _FlakyIntegration(HealthProbe):
    """Fails a fixed number of times, then answers healthy."""

    critical = False
    credential_env = "GITHUB_TOKEN"

    def __init__(self, name="github", failures=0, configured=True):
        self.name = name
        self.failures = failures
        self.configured = configured
        self.calls = 0

    async def check(self):
        self.calls += 1
        if not self.configured:
            return ProbeResult.warning(self.name, "GitHub API not configured", configured=False)
        if self.calls <= self.failures:
            return ProbeResult.warning(self.name, "GitHub API returned HTTP 502", configured=True)
        return ProbeResult.healthy(self.name, message="GitHub API reachable", configured=True)


class _Critical(HealthProbe):
    name = "database"

    async def check(self):
        return ProbeResult.healthy(self.name)


def _service(probe):
    registry = ProbeRegistry([
        ProbeDescriptor(_Critical(), critical=True, timeout_seconds=1.0),
        ProbeDescriptor(probe, critical=False, timeout_seconds=1.0),
    ])
    sleep = AsyncMock()
    return IntegrationService(registry, RetryPolicy(jitter_ratio=0), sleep=sleep), sleep


class TestRetest:

    def test_healthy_first_try(self):
        probe = _FlakyIntegration()
        service, sleep = _service(probe)

        outcome = asyncio.run(service.retest("github"))

        assert outcome.success
        assert outcome.attempts == 1
        assert not outcome.requires_action
        sleep.assert_not_awaited()

    def test_recovers_after_transient_failures(self):
        probe = _FlakyIntegration(failures=2)
        service, sleep = _service(probe)

        outcome = asyncio.run(service.retest("github"))

        assert outcome.success
        assert outcome.attempts == 3
        assert sleep.await_count == 2

    def test_exhaustion_is_actionable(self):
        probe = _FlakyIntegration(failures=10)
        service, _ = _service(probe)

        outcome = asyncio.run(service.retest("github"))

        assert not outcome.success
        assert outcome.attempts == 3
        assert outcome.requires_action
        assert "Verify GITHUB_TOKEN" in outcome.message
        assert "HTTP 502" in outcome.message
        assert outcome.result.detail["configured"] is True

    def test_not_configured_is_not_retried(self):
        probe = _FlakyIntegration(configured=False)
        service, sleep = _service(probe)

        outcome = asyncio.run(service.retest("github"))

        assert not outcome.success
        assert outcome.attempts == 1
        assert probe.calls == 1
        assert "Set GITHUB_TOKEN" in outcome.message
        sleep.assert_not_awaited()

    def test_unknown_name(self):
        service, _ = _service(_FlakyIntegration())
        with pytest.raises(KeyError):
            asyncio.run(service.retest("nope"))

    def test_critical_probe_rejected(self):
        service, _ = _service(_FlakyIntegration())
        with pytest.raises(ValueError, match="critical"):
            asyncio.run(service.retest("database"))

    def test_outcome_to_dict(self):
        outcome = RetestOutcome(name="slack", success=True, attempts=1, message="ok")
        assert outcome.to_dict() == {
            "name": "slack",
            "success": True,
            "attempts": 1,
            "message": "ok",
            "requires_action": False,
        }
