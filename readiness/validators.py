# ============================================================================
# READINESS VALIDATORS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Readiness - Per-category checks
# PURPOSE: Turn a health snapshot plus configuration into category statuses
# CREATED: 19 OCT 2026
# ============================================================================
"""
Readiness Validators

Each readiness category is a plain function:

    validator(context: ReadinessContext) -> CategoryCheck

Validators never run probes themselves; probe-backed categories read the
single snapshot carried by the context, so one readiness evaluation
costs exactly one aggregation run.

Categories (declaration order):
    environment, database, security, application, health, performance,
    packaging, security_headers, rate_limit, external_services
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from core.config import ReadinessSettings
from core.contracts import CheckStatus, ProbeStatus
from health.core import HealthSnapshot
from repositories.database import ssl_enabled

logger = logging.getLogger(__name__)


# ============================================================================
# CONTEXT AND RESULT
# ============================================================================

@dataclass(frozen=True)
class CategoryCheck:
    """Outcome of one category validator."""
    status: CheckStatus
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def passed(cls, message: str, **details) -> "CategoryCheck":
        return cls(CheckStatus.PASS, message, details)

    @classmethod
    def warning(cls, message: str, **details) -> "CategoryCheck":
        return cls(CheckStatus.WARNING, message, details)

    @classmethod
    def failed(cls, message: str, **details) -> "CategoryCheck":
        return cls(CheckStatus.FAIL, message, details)


@dataclass(frozen=True)
class ReadinessContext:
    """Inputs shared by every validator in one evaluation."""
    snapshot: HealthSnapshot
    settings: ReadinessSettings
    project_root: Path
    environ: Mapping[str, str]

    @classmethod
    def build(
        cls,
        snapshot: HealthSnapshot,
        settings: ReadinessSettings,
        project_root: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ReadinessContext":
        return cls(
            snapshot=snapshot,
            settings=settings,
            project_root=Path(project_root or ".").resolve(),
            environ=dict(os.environ if environ is None else environ),
        )


Validator = Callable[[ReadinessContext], CategoryCheck]


# ============================================================================
# CONFIGURATION CATEGORIES
# ============================================================================

def validate_environment(context: ReadinessContext) -> CategoryCheck:
    settings = context.settings
    missing = [name for name in settings.required_env_vars if not context.environ.get(name)]
    environment = context.environ.get("APP_ENV") or context.snapshot.environment

    if missing:
        return CategoryCheck.failed(
            f"Missing required environment variables: {', '.join(missing)}",
            missing=missing,
            environment=environment,
        )

    if environment != settings.production_environment:
        return CategoryCheck.warning(
            f"Environment is '{environment}', not '{settings.production_environment}'",
            environment=environment,
        )

    return CategoryCheck.passed("All required environment variables set", environment=environment)


def validate_security(context: ReadinessContext) -> CategoryCheck:
    settings = context.settings
    secret = context.environ.get(settings.secret_env_var)

    if not secret:
        return CategoryCheck.failed(
            f"{settings.secret_env_var} is not set",
            secret_configured=False,
        )

    issues = []
    if len(secret) < settings.min_secret_length:
        issues.append(
            f"{settings.secret_env_var} shorter than {settings.min_secret_length} characters"
        )
    if "*" in settings.cors_origins:
        issues.append("CORS allows any origin")

    details = {
        "secret_configured": True,
        "secret_length_ok": len(secret) >= settings.min_secret_length,
        "cors_origins": list(settings.cors_origins),
    }

    if issues:
        return CategoryCheck.warning("; ".join(issues), issues=issues, **details)
    return CategoryCheck.passed("Secret and CORS configuration acceptable", **details)


def validate_application(context: ReadinessContext) -> CategoryCheck:
    settings = context.settings
    manifest = context.project_root / settings.project_manifest
    artifact_dir = context.project_root / settings.build_artifact_dir

    artifacts = sorted(p.name for p in artifact_dir.iterdir()) if artifact_dir.is_dir() else []
    details = {
        "manifest": str(manifest),
        "manifest_present": manifest.is_file(),
        "artifact_dir": str(artifact_dir),
        "artifacts": artifacts,
    }

    missing = []
    if not manifest.is_file():
        missing.append(settings.project_manifest)
    if not artifacts:
        missing.append(f"{settings.build_artifact_dir}/ (no build artifacts)")

    if missing:
        return CategoryCheck.failed(f"Missing: {', '.join(missing)}", **details)
    return CategoryCheck.passed(f"{len(artifacts)} build artifact(s) present", **details)


_FROM_LINE = re.compile(r"^\s*FROM\s+(\S+)", re.IGNORECASE | re.MULTILINE)
_USER_LINE = re.compile(r"^\s*USER\s+(\S+)", re.IGNORECASE | re.MULTILINE)
_HEALTHCHECK_LINE = re.compile(r"^\s*HEALTHCHECK\s", re.IGNORECASE | re.MULTILINE)
_PINNED_PYTHON = re.compile(r"^python:\d+\.\d+", re.IGNORECASE)


def dockerfile_hardening(content: str) -> Dict[str, Any]:
    """
    Score a Dockerfile out of 100 (25 per control).

    Controls: non-root USER, HEALTHCHECK, multi-stage build, python base
    image pinned to a minor version.
    """
    bases = _FROM_LINE.findall(content)
    users = _USER_LINE.findall(content)
    controls = {
        "non_root_user": bool(users) and users[-1].split(":")[0] not in ("root", "0"),
        "health_check": bool(_HEALTHCHECK_LINE.search(content)),
        "multi_stage": len(bases) >= 2,
        "pinned_python_base": any(_PINNED_PYTHON.match(base) for base in bases),
    }
    controls["score"] = 25 * sum(1 for value in controls.values() if value)
    return controls


def validate_packaging(context: ReadinessContext) -> CategoryCheck:
    settings = context.settings
    dockerfile = context.project_root / settings.dockerfile

    if not dockerfile.is_file():
        return CategoryCheck.failed(f"{settings.dockerfile} not found", path=str(dockerfile))

    controls = dockerfile_hardening(dockerfile.read_text(encoding="utf-8"))

    if controls["score"] < settings.docker_score_threshold:
        return CategoryCheck.warning(
            f"Container hardening score {controls['score']} below {settings.docker_score_threshold}",
            **controls,
        )
    return CategoryCheck.passed(f"Container hardening score {controls['score']}", **controls)


def validate_security_headers(context: ReadinessContext) -> CategoryCheck:
    settings = context.settings
    enabled = {
        "security_headers": settings.security_headers_enabled,
        "hsts": settings.hsts_enabled,
    }
    on = sum(1 for value in enabled.values() if value)

    if on == len(enabled):
        return CategoryCheck.passed("Security headers and HSTS enabled", **enabled)
    if on:
        off = [name for name, value in enabled.items() if not value]
        return CategoryCheck.warning(f"Not enabled: {', '.join(off)}", **enabled)
    return CategoryCheck.failed("Security headers disabled", **enabled)


def validate_rate_limit(context: ReadinessContext) -> CategoryCheck:
    raw = context.settings.rate_limit_per_minute

    if raw is None or not raw.strip():
        return CategoryCheck.warning("Rate limiting not configured", configured=False)

    try:
        limit = int(raw)
    except ValueError:
        return CategoryCheck.failed(f"Invalid RATE_LIMIT_PER_MINUTE: {raw!r}", configured=True)

    if limit < 0:
        return CategoryCheck.failed(f"Invalid RATE_LIMIT_PER_MINUTE: {limit}", configured=True)
    if limit == 0:
        return CategoryCheck.warning("Rate limiting disabled", configured=True, per_minute=0)
    return CategoryCheck.passed(f"{limit} requests per minute", configured=True, per_minute=limit)


# ============================================================================
# PROBE-BACKED CATEGORIES
# ============================================================================

def validate_database(context: ReadinessContext) -> CategoryCheck:
    result = context.snapshot.get("database")
    database_url = context.environ.get("DATABASE_URL")
    details = {"ssl_enabled": ssl_enabled(database_url) if database_url else False}

    if result is None:
        return CategoryCheck.failed("Database probe did not run", **details)

    details["response_time_ms"] = round(result.response_time_ms, 2)
    status = CheckStatus.from_probe_status(result.status)
    message = result.message or "Database connected"
    return CategoryCheck(status, message, details)


def validate_health(context: ReadinessContext) -> CategoryCheck:
    snapshot = context.snapshot
    return CategoryCheck(
        CheckStatus.from_snapshot_status(snapshot.status),
        f"Health snapshot {snapshot.status.value}",
        {
            "critical_failures": list(snapshot.critical_failures),
            "warnings": snapshot.warnings,
        },
    )


def validate_performance(context: ReadinessContext) -> CategoryCheck:
    snapshot = context.snapshot
    threshold_ms = context.settings.database_response_threshold_ms
    resources = [r for r in (snapshot.get("memory"), snapshot.get("cpu")) if r is not None]
    details: Dict[str, Any] = {r.name: r.status.value for r in resources}

    failing = [r.name for r in resources if r.status is ProbeStatus.UNHEALTHY]
    if failing:
        return CategoryCheck.failed(f"Resource pressure critical: {', '.join(failing)}", **details)

    issues = [f"{r.name} {r.status.value}" for r in resources if r.status is ProbeStatus.WARNING]

    database = snapshot.get("database")
    if database is not None and database.status is not ProbeStatus.UNHEALTHY:
        details["database_response_ms"] = round(database.response_time_ms, 2)
        if database.response_time_ms > threshold_ms:
            issues.append(
                f"database response {database.response_time_ms:.0f}ms exceeds {threshold_ms:.0f}ms"
            )

    if issues:
        return CategoryCheck.warning("; ".join(issues), **details)
    return CategoryCheck.passed("Resource usage and latency within thresholds", **details)


def validate_external_services(context: ReadinessContext) -> CategoryCheck:
    snapshot = context.snapshot
    optional = [r for r in snapshot.results if r.name not in snapshot.critical_probes]
    details = {r.name: r.status.value for r in optional}
    degraded = [r.name for r in optional if r.status is not ProbeStatus.HEALTHY]

    if degraded:
        return CategoryCheck.warning(f"Integrations degraded: {', '.join(degraded)}", **details)
    return CategoryCheck.passed(f"{len(optional)} integration(s) healthy", **details)


# ============================================================================
# DECLARATION
# ============================================================================

DEFAULT_VALIDATORS: Tuple[Tuple[str, Validator], ...] = (
    ("environment", validate_environment),
    ("database", validate_database),
    ("security", validate_security),
    ("application", validate_application),
    ("health", validate_health),
    ("performance", validate_performance),
    ("packaging", validate_packaging),
    ("security_headers", validate_security_headers),
    ("rate_limit", validate_rate_limit),
    ("external_services", validate_external_services),
)


__all__ = [
    "CategoryCheck",
    "ReadinessContext",
    "Validator",
    "DEFAULT_VALIDATORS",
    "dockerfile_hardening",
    "validate_environment",
    "validate_database",
    "validate_security",
    "validate_application",
    "validate_health",
    "validate_performance",
    "validate_packaging",
    "validate_security_headers",
    "validate_rate_limit",
    "validate_external_services",
]
