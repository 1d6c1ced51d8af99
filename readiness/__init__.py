# ============================================================================
# READINESS MODULE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Readiness - Deployment gate
# PURPOSE: Weighted readiness scoring over a health snapshot
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Module

Turns one health snapshot plus configuration checks into a deployment
verdict:
- validators: one function per category -> pass / warning / fail
- scorer: category scores and the weighted composite
- classifier: verdict bands, recommendations, ReadinessService
- report: HTTP status, exit code, text report, audit artifact
- cli: validate-readiness entry point
"""

from readiness.validators import (
    CategoryCheck,
    ReadinessContext,
    DEFAULT_VALIDATORS,
)
from readiness.scorer import CATEGORY_SCORES, CategoryScore, ReadinessScorer
from readiness.classifier import (
    RECOMMENDATIONS,
    classify,
    recommendations,
    ReadinessVerdict,
    ReadinessService,
)
from readiness.report import exit_code, verdict_http_status, render_text, write_artifact

__all__ = [
    # Validators
    "CategoryCheck",
    "ReadinessContext",
    "DEFAULT_VALIDATORS",
    # Scorer
    "CATEGORY_SCORES",
    "CategoryScore",
    "ReadinessScorer",
    # Classifier
    "RECOMMENDATIONS",
    "classify",
    "recommendations",
    "ReadinessVerdict",
    "ReadinessService",
    # Report
    "exit_code",
    "verdict_http_status",
    "render_text",
    "write_artifact",
]
