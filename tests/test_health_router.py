# ============================================================================
# HEALTH ROUTER TESTS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Tests - HTTP boundary
# PURPOSE: Verify endpoint status codes and bodies with FastAPI TestClient
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Router Tests

Builds a test app per case with in-memory probes; no real dependencies.

Run with:
    pytest tests/test_health_router.py -v
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID

from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.contracts import CheckStatus, ProbeStatus, Verdict
from core.retry import RetryPolicy
from health.aggregator import HealthAggregator
from health.core import HealthProbe, ProbeResult
from health.registry import ProbeDescriptor, ProbeRegistry
from health.router import create_health_router
from readiness.classifier import ReadinessVerdict
from readiness.scorer import CategoryScore
from services.integration_service import IntegrationService


# ============================================================================
# FIXTURES
# ============================================================================

class _Probe(HealthProbe):

    def __init__(self, name, status=ProbeStatus.HEALTHY, configured=True):
        self.name = name
        self._status = status
        self._configured = configured

    async def check(self):
        return ProbeResult(
            name=self.name,
            status=self._status,
            message=f"{self.name} {self._status.value}",
            detail={"configured": self._configured},
        )


def _aggregator(database=ProbeStatus.HEALTHY, github=ProbeStatus.HEALTHY):
    registry = ProbeRegistry([
        ProbeDescriptor(_Probe("database", database), critical=True, timeout_seconds=1.0),
        ProbeDescriptor(_Probe("cpu"), critical=True, timeout_seconds=1.0),
        ProbeDescriptor(_Probe("github", github), critical=False, timeout_seconds=1.0),
    ])
    return HealthAggregator(registry, environment="test", version="1.2.0")


def _client(aggregator, integrations=None, readiness=None):
    app = FastAPI()
    app.include_router(create_health_router(aggregator, integrations=integrations, readiness=readiness))
    return TestClient(app)


def _verdict(verdict):
    return ReadinessVerdict(
        category_scores=(CategoryScore("health", CheckStatus.PASS, 100, 10),),
        composite_score=100 if verdict.is_deployable else 0,
        verdict=verdict,
        recommendations=(),
    )


# ============================================================================
# LIVENESS
# ============================================================================

class TestLiveness:

    def test_plain_ok(self):
        aggregator = MagicMock()
        resp = _client(aggregator).get("/livez")

        assert resp.status_code == 200
        assert resp.text == "OK"
        aggregator.collect.assert_not_called()


# ============================================================================
# HEALTH
# ============================================================================

class TestHealth:

    def test_healthy(self):
        resp = _client(_aggregator()).get("/health")

        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert list(data["checks"]) == ["database", "cpu", "github"]

    def test_degraded_is_200(self):
        resp = _client(_aggregator(github=ProbeStatus.WARNING)).get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "degraded"

    def test_critical_failure_is_503(self):
        resp = _client(_aggregator(database=ProbeStatus.UNHEALTHY)).get("/health")

        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "unhealthy"
        assert data["critical_failures"] == ["database"]

    def test_aggregation_fault_is_500(self):
        aggregator = MagicMock()
        aggregator.collect = AsyncMock(side_effect=RuntimeError("event loop closed"))

        resp = _client(aggregator).get("/health")

        assert resp.status_code == 500
        assert resp.json()["error"] == "Health aggregation failed"


# ============================================================================
# READYZ
# ============================================================================

class TestReadyz:

    def test_ready_ignores_optional(self):
        resp = _client(_aggregator(github=ProbeStatus.UNHEALTHY)).get("/readyz")

        assert resp.status_code == 200
        assert resp.json()["status"] == "ready"
        assert resp.json()["checks_passed"] == 2

    def test_not_ready(self):
        resp = _client(_aggregator(database=ProbeStatus.UNHEALTHY)).get("/readyz")

        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "not_ready"
        assert list(data["checks"]) == ["database"]


# ============================================================================
# SINGLE PROBE
# ============================================================================

class TestSingleProbe:

    def test_known_probe(self):
        resp = _client(_aggregator()).get("/health/cpu")

        assert resp.status_code == 200
        assert resp.json()["name"] == "cpu"
        assert resp.json()["critical"] is True

    def test_unhealthy_probe_is_503(self):
        resp = _client(_aggregator(database=ProbeStatus.UNHEALTHY)).get("/health/database")
        assert resp.status_code == 503

    def test_unknown_probe_is_404(self):
        resp = _client(_aggregator()).get("/health/nope")

        assert resp.status_code == 404
        assert "nope" in resp.json()["error"]


# ============================================================================
# INTEGRATION RETEST
# ============================================================================

class TestRetest:

    def _client(self, github=ProbeStatus.HEALTHY):
        aggregator = _aggregator(github=github)
        integrations = IntegrationService(
            aggregator.registry, RetryPolicy(jitter_ratio=0), sleep=AsyncMock()
        )
        return _client(aggregator, integrations=integrations)

    def test_success(self):
        resp = self._client().post("/health/integrations/github/retest")

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert resp.json()["attempts"] == 1

    def test_failure_after_retries(self):
        resp = self._client(github=ProbeStatus.WARNING).post("/health/integrations/github/retest")

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is False
        assert data["attempts"] == 3
        assert data["requires_action"] is True

    def test_unknown_is_404(self):
        resp = self._client().post("/health/integrations/nope/retest")
        assert resp.status_code == 404

    def test_critical_is_400(self):
        resp = self._client().post("/health/integrations/database/retest")
        assert resp.status_code == 400

    def test_not_mounted_without_service(self):
        resp = _client(_aggregator()).post("/health/integrations/github/retest")
        assert resp.status_code in (404, 405)


# ============================================================================
# READINESS
# ============================================================================

class TestReadiness:

    @pytest.mark.parametrize("verdict,code", [
        (Verdict.READY, 200),
        (Verdict.READY_WITH_WARNINGS, 200),
        (Verdict.NOT_READY, 503),
    ])
    def test_status_codes(self, verdict, code):
        readiness = MagicMock()
        readiness.evaluate = AsyncMock(return_value=_verdict(verdict))

        resp = _client(_aggregator(), readiness=readiness).get("/readiness")

        assert resp.status_code == code
        assert resp.json()["verdict"] == verdict.value


# ============================================================================
# DETAIL ENCODING
# ============================================================================

class _RichDetail(HealthProbe):
    name = "database"

    def __init__(self, status=ProbeStatus.HEALTHY):
        self._status = status

    async def check(self):
        return ProbeResult(
            name=self.name,
            status=self._status,
            message="database rich detail",
            detail={
                "server_time": datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
                "replication_lag": Decimal("0.25"),
                "cluster_id": UUID("12345678-1234-5678-1234-567812345678"),
            },
        )


class TestDetailEncoding:

    def _client(self, status=ProbeStatus.HEALTHY):
        registry = ProbeRegistry([
            ProbeDescriptor(_RichDetail(status), critical=True, timeout_seconds=1.0),
        ])
        return _client(HealthAggregator(registry, environment="test", version="1.2.0"))

    def test_health_serializes_rich_detail(self):
        resp = self._client().get("/health")

        assert resp.status_code == 200
        detail = resp.json()["checks"]["database"]["detail"]
        assert detail["server_time"].startswith("2026-10-19T12:00:00")
        assert detail["replication_lag"] == 0.25
        assert detail["cluster_id"] == "12345678-1234-5678-1234-567812345678"

    def test_single_probe_serializes_rich_detail(self):
        resp = self._client().get("/health/database")

        assert resp.status_code == 200
        assert resp.json()["detail"]["cluster_id"] == "12345678-1234-5678-1234-567812345678"

    def test_readyz_failure_serializes_rich_detail(self):
        resp = self._client(ProbeStatus.UNHEALTHY).get("/readyz")

        assert resp.status_code == 503
        assert "server_time" in resp.json()["checks"]["database"]["detail"]
