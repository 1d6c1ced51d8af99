# ============================================================================
# READINESS SCORER TESTS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Tests - Weighted composite score
# PURPOSE: Verify category scoring, composite rounding and monotonicity
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Scorer Tests

Run with:
    pytest tests/test_scorer.py -v
"""

import itertools
import pytest
from pathlib import Path

from core.config import DEFAULT_CATEGORY_WEIGHTS, ReadinessSettings
from core.contracts import CheckStatus
from health.core import HealthSnapshot
from readiness.classifier import classify
from readiness.scorer import CATEGORY_SCORES, CategoryScore, ReadinessScorer
from readiness.validators import DEFAULT_VALIDATORS, CategoryCheck, ReadinessContext

PASS, WARN, FAIL = CheckStatus.PASS, CheckStatus.WARNING, CheckStatus.FAIL


# ============================================================================
# FIXTURES
# ============================================================================

def _context():
    snapshot = HealthSnapshot(
        results=(), critical_probes=frozenset(), uptime_seconds=0.0,
        version="1.2.0", environment="production",
    )
    return ReadinessContext(snapshot, ReadinessSettings(), Path("."), {})


def _fixed(status):
    return lambda context: CategoryCheck(status, status.value)


def _scorer(statuses, weights=None):
    validators = [(name, _fixed(status)) for name, status in statuses.items()]
    return ReadinessScorer(validators, weights=weights or DEFAULT_CATEGORY_WEIGHTS)


def _composite(statuses, weights=None):
    scorer = _scorer(statuses, weights)
    return scorer.composite(scorer.evaluate(_context()))


# ============================================================================
# CATEGORY SCORES
# ============================================================================

class TestCategoryScores:

    def test_score_table(self):
        assert CATEGORY_SCORES == {PASS: 100, WARN: 70, FAIL: 0}

    def test_evaluate_in_declaration_order(self):
        scores = _scorer({"security": PASS, "environment": WARN}).evaluate(_context())

        assert [s.category for s in scores] == ["security", "environment"]
        assert scores[1].score == 70
        assert scores[1].weight == 20

    def test_raising_validator_scores_fail(self):
        def broken(context):
            raise RuntimeError("dist/ unreadable")

        scorer = ReadinessScorer([("application", broken), ("health", _fixed(PASS))])
        scores = scorer.evaluate(_context())

        assert len(scores) == 2
        assert scores[0].status is FAIL
        assert scores[0].score == 0
        assert "dist/ unreadable" in scores[0].message
        assert scores[0].details["exception_type"] == "RuntimeError"

    def test_non_check_return_scores_fail(self):
        scorer = ReadinessScorer([("application", lambda context: "ok")])
        assert scorer.evaluate(_context())[0].status is FAIL

    def test_unknown_category_weighs_zero(self):
        scores = _scorer({"custom": FAIL}).evaluate(_context())
        assert scores[0].weight == 0

    def test_duplicate_category_rejected(self):
        with pytest.raises(ValueError):
            ReadinessScorer([("health", _fixed(PASS)), ("health", _fixed(PASS))])

    def test_default_categories(self):
        assert ReadinessScorer().categories == tuple(name for name, _ in DEFAULT_VALIDATORS)
        assert ReadinessScorer().categories[-1] == "external_services"


# ============================================================================
# COMPOSITE
# ============================================================================

class TestComposite:

    def test_reference_scenario(self):
        statuses = {
            "environment": PASS,
            "database": PASS,
            "security": WARN,
            "application": PASS,
            "health": PASS,
            "performance": WARN,
            "packaging": PASS,
            "security_headers": PASS,
            "rate_limit": PASS,
        }
        score = _composite(statuses)

        # 9250 / 100 = 92.5, rounded half-up
        assert score == 93
        assert classify(score).value == "ready"

    def test_all_pass_is_100(self):
        statuses = {name: PASS for name in DEFAULT_CATEGORY_WEIGHTS}
        assert _composite(statuses) == 100

    def test_all_fail_is_0(self):
        statuses = {name: FAIL for name in DEFAULT_CATEGORY_WEIGHTS}
        assert _composite(statuses) == 0

    def test_zero_weight_category_does_not_move_score(self):
        base = {name: PASS for name in DEFAULT_CATEGORY_WEIGHTS}
        degraded = dict(base, external_services=WARN)
        assert _composite(base) == _composite(degraded) == 100

    def test_zero_total_weight(self):
        assert _composite({"external_services": FAIL}) == 0
        assert ReadinessScorer.composite([]) == 0

    def test_rounds_half_up(self):
        # (1*70 + 1*0) / 2 = 35.0; (1*100 + 3*70) / 4 = 77.5 -> 78
        assert _composite({"a": WARN, "b": FAIL}, {"a": 1, "b": 1}) == 35
        assert _composite({"a": PASS, "b": WARN}, {"a": 1, "b": 3}) == 78

    def test_composite_from_scores(self):
        scores = [
            CategoryScore("a", PASS, 100, 3),
            CategoryScore("b", FAIL, 0, 1),
        ]
        assert ReadinessScorer.composite(scores) == 75

    def test_monotonic_in_each_category(self):
        categories = ["environment", "database", "security", "packaging"]
        order = [FAIL, WARN, PASS]

        for combo in itertools.product(order, repeat=len(categories)):
            statuses = dict(zip(categories, combo))
            baseline = _composite(statuses)

            for name, status in statuses.items():
                for better in order[order.index(status) + 1:]:
                    assert _composite(dict(statuses, **{name: better})) >= baseline
