# ============================================================================
# READINESS REPORTER
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Readiness - Output boundaries
# PURPOSE: HTTP status, text report, exit code and audit artifact
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Reporter

Maps verdicts onto the process and HTTP boundaries:
- exit_code(): 0 when deployable, 1 otherwise
- verdict_http_status(): 200 when deployable, 503 otherwise
- render_text(): human-readable report for the CLI
- write_artifact(): optional JSON audit record
"""

import json
import logging
from pathlib import Path
from typing import Union

from core.contracts import CheckStatus, Verdict
from readiness.classifier import ReadinessVerdict

logger = logging.getLogger(__name__)

_STATUS_MARKERS = {
    CheckStatus.PASS: "PASS",
    CheckStatus.WARNING: "WARN",
    CheckStatus.FAIL: "FAIL",
}


def exit_code(verdict: ReadinessVerdict) -> int:
    return 0 if verdict.deployment_ready else 1


def verdict_http_status(verdict: ReadinessVerdict) -> int:
    return 200 if verdict.deployment_ready else 503


def render_text(verdict: ReadinessVerdict) -> str:
    """Render a verdict as a plain-text report."""
    lines = ["DEPLOYMENT READINESS REPORT", "=" * 60]

    if verdict.snapshot is not None:
        snapshot = verdict.snapshot
        lines.append(
            f"Environment: {snapshot.environment}    Version: {snapshot.version}    "
            f"Health: {snapshot.status.value}"
        )
        if snapshot.critical_failures:
            lines.append(f"Critical failures: {', '.join(snapshot.critical_failures)}")
        lines.append("")

    lines.append(f"{'CATEGORY':<20}{'STATUS':<8}{'SCORE':>6}{'WEIGHT':>8}  MESSAGE")
    lines.append("-" * 60)
    for score in verdict.category_scores:
        lines.append(
            f"{score.category:<20}{_STATUS_MARKERS[score.status]:<8}"
            f"{score.score:>6}{score.weight:>8}  {score.message}"
        )

    summary = verdict.summary
    lines += [
        "-" * 60,
        f"Composite score: {verdict.composite_score}/100",
        f"Verdict: {verdict.verdict.value}",
        f"Passed: {summary['passed']}  Warnings: {summary['warnings']}  Failed: {summary['failed']}",
    ]

    if verdict.recommendations:
        lines += ["", "Recommendations:"]
        lines += [f"  - {text}" for text in verdict.recommendations]

    lines += ["", "Next steps:"]
    lines += [f"  - {step}" for step in verdict.next_steps]

    if verdict.verdict is Verdict.NOT_READY:
        lines += ["", "Deployment blocked."]

    return "\n".join(lines)


def write_artifact(verdict: ReadinessVerdict, directory: Union[str, Path]) -> Path:
    """
    Write the verdict as deployment-validation-<timestamp>.json.

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    stamp = verdict.evaluated_at.strftime("%Y%m%dT%H%M%S%fZ")
    path = directory / f"deployment-validation-{stamp}.json"
    path.write_text(json.dumps(verdict.to_dict(), indent=2, default=str), encoding="utf-8")

    logger.info(f"Readiness artifact written: {path}")
    return path


__all__ = [
    "exit_code",
    "verdict_http_status",
    "render_text",
    "write_artifact",
]
