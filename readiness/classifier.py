# ============================================================================
# READINESS CLASSIFIER
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Readiness - Verdict and recommendations
# PURPOSE: Map a composite score to a deployment verdict
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Classifier

    score >= 85        -> ready
    70 <= score < 85   -> ready-with-warnings
    score < 70         -> not-ready

Recommendations come from a static per-category table, emitted in
category declaration order for every category that did not pass.

ReadinessService composes one full evaluation:
    snapshot -> context -> category scores -> composite -> verdict
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core.config import ReadinessSettings
from core.contracts import CheckStatus, Verdict
from core.logging import ComponentType, log_checkpoint, log_context
from health.aggregator import HealthAggregator
from health.core import HealthSnapshot
from readiness.scorer import CategoryScore, ReadinessScorer
from readiness.validators import ReadinessContext

logger = logging.getLogger(__name__)


RECOMMENDATIONS: Dict[str, str] = {
    "environment": "Configure all required environment variables before deployment",
    "database": "Resolve database connectivity issues and ensure SSL encryption",
    "security": "Use a SECRET_KEY of at least 32 characters and restrict CORS origins",
    "application": "Build the application so the project manifest and dist/ artifacts are present",
    "health": "Resolve failing health probes before deployment",
    "performance": "Optimize application performance to meet production benchmarks",
    "packaging": "Improve Docker security configuration with non-root user and health checks",
    "security_headers": "Enable security headers and HSTS",
    "rate_limit": "Configure API rate limiting (RATE_LIMIT_PER_MINUTE)",
    "external_services": "Configure external service API keys for full functionality",
}

NEXT_STEPS_READY = (
    "Proceed with container build and deployment",
    "Monitor health endpoints after deployment",
    "Validate production environment functionality",
)

NEXT_STEPS_BLOCKED = (
    "Address validation failures before deployment",
    "Implement recommended fixes",
    "Re-run validation after fixes",
)


def classify(
    score: float,
    ready_threshold: float = 85.0,
    warning_threshold: float = 70.0,
) -> Verdict:
    """Map a composite score to a verdict; lower bounds are inclusive."""
    if score >= ready_threshold:
        return Verdict.READY
    if score >= warning_threshold:
        return Verdict.READY_WITH_WARNINGS
    return Verdict.NOT_READY


def recommendations(scores: Sequence[CategoryScore]) -> Tuple[str, ...]:
    """One remediation per non-passing category, in declaration order."""
    return tuple(
        RECOMMENDATIONS.get(s.category, f"Resolve {s.category} issues")
        for s in scores
        if s.status is not CheckStatus.PASS
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReadinessVerdict:
    """Immutable result of one readiness evaluation."""
    category_scores: Tuple[CategoryScore, ...]
    composite_score: int
    verdict: Verdict
    recommendations: Tuple[str, ...]
    snapshot: Optional[HealthSnapshot] = None
    evaluated_at: datetime = field(default_factory=_utc_now)

    @property
    def deployment_ready(self) -> bool:
        return self.verdict.is_deployable

    @property
    def summary(self) -> Dict[str, int]:
        statuses = [s.status for s in self.category_scores]
        return {
            "total": len(statuses),
            "passed": statuses.count(CheckStatus.PASS),
            "warnings": statuses.count(CheckStatus.WARNING),
            "failed": statuses.count(CheckStatus.FAIL),
        }

    @property
    def next_steps(self) -> List[str]:
        return list(NEXT_STEPS_READY if self.deployment_ready else NEXT_STEPS_BLOCKED)

    def get(self, category: str) -> Optional[CategoryScore]:
        for score in self.category_scores:
            if score.category == category:
                return score
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response and audit artifact."""
        result = {
            "verdict": self.verdict.value,
            "deployment_ready": self.deployment_ready,
            "composite_score": self.composite_score,
            "category_scores": {s.category: s.to_dict() for s in self.category_scores},
            "summary": self.summary,
            "recommendations": list(self.recommendations),
            "next_steps": self.next_steps,
            "evaluated_at": self.evaluated_at.isoformat(),
        }
        if self.snapshot is not None:
            result["health"] = self.snapshot.to_dict()
        return result


class ReadinessService:
    """
    Runs one readiness evaluation per call.

    Holds only configuration; every evaluate() collects a fresh snapshot.
    """

    def __init__(
        self,
        aggregator: HealthAggregator,
        scorer: Optional[ReadinessScorer] = None,
        settings: Optional[ReadinessSettings] = None,
        project_root: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.aggregator = aggregator
        self.settings = settings or ReadinessSettings()
        self.scorer = scorer or ReadinessScorer(weights=self.settings.weights)
        self.project_root = project_root
        self.environ = environ

    def judge(self, snapshot: HealthSnapshot) -> ReadinessVerdict:
        """Score an already collected snapshot."""
        context = ReadinessContext.build(
            snapshot,
            self.settings,
            project_root=self.project_root,
            environ=self.environ,
        )
        scores = self.scorer.evaluate(context)
        composite = self.scorer.composite(scores)

        return ReadinessVerdict(
            category_scores=scores,
            composite_score=composite,
            verdict=classify(
                composite,
                ready_threshold=self.settings.ready_threshold,
                warning_threshold=self.settings.warning_threshold,
            ),
            recommendations=recommendations(scores),
            snapshot=snapshot,
        )

    async def evaluate(self) -> ReadinessVerdict:
        """Collect a snapshot and judge it."""
        with log_context(invocation_id=uuid.uuid4().hex[:12], component=ComponentType.READINESS):
            snapshot = await self.aggregator.collect()
            verdict = self.judge(snapshot)

            log_checkpoint(
                "readiness_verdict",
                {
                    "verdict": verdict.verdict.value,
                    "composite_score": verdict.composite_score,
                    "summary": verdict.summary,
                },
            )

        return verdict


__all__ = [
    "RECOMMENDATIONS",
    "classify",
    "recommendations",
    "ReadinessVerdict",
    "ReadinessService",
]
