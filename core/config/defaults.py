# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core - Default configuration values
# PURPOSE: Centralized thresholds, timeouts, weights and service settings
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides tunable defaults for probes, the aggregator and the readiness
scorer. Every threshold here is a default, not a load-bearing constant;
each can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_csv(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return default
    return tuple(item.strip() for item in value.split(",") if item.strip())


# ============================================================================
# PROBE THRESHOLDS
# ============================================================================

@dataclass(frozen=True)
class ProbeThresholds:
    """
    Warning / critical bands for the built-in probes.

    Percentages are compared with strict "greater than".
    """
    # Database round-trip (ms)
    database_warning_ms: float = 1000.0

    # Process heap and system memory (%)
    heap_warning_percent: float = 80.0
    heap_critical_percent: float = 95.0
    system_memory_warning_percent: float = 85.0
    system_memory_critical_percent: float = 95.0

    # 1-minute load average as a share of cores (%)
    cpu_warning_percent: float = 70.0
    cpu_critical_percent: float = 90.0

    # GitHub remaining API calls
    github_rate_limit_low: int = 100

    @classmethod
    def from_env(cls) -> "ProbeThresholds":
        """Create from environment variables."""
        return cls(
            database_warning_ms=float(os.getenv("HEALTH_DB_WARNING_MS", 1000)),
            heap_warning_percent=float(os.getenv("HEALTH_HEAP_WARNING_PERCENT", 80)),
            heap_critical_percent=float(os.getenv("HEALTH_HEAP_CRITICAL_PERCENT", 95)),
            system_memory_warning_percent=float(os.getenv("HEALTH_SYSTEM_MEMORY_WARNING_PERCENT", 85)),
            system_memory_critical_percent=float(os.getenv("HEALTH_SYSTEM_MEMORY_CRITICAL_PERCENT", 95)),
            cpu_warning_percent=float(os.getenv("HEALTH_CPU_WARNING_PERCENT", 70)),
            cpu_critical_percent=float(os.getenv("HEALTH_CPU_CRITICAL_PERCENT", 90)),
            github_rate_limit_low=int(os.getenv("HEALTH_GITHUB_RATE_LIMIT_LOW", 100)),
        )


# ============================================================================
# TIMEOUTS
# ============================================================================

@dataclass(frozen=True)
class TimeoutDefaults:
    """
    Per-probe and aggregate timeouts (seconds).

    Network-bound probes get network_timeout; filesystem, memory and CPU
    probes are bounded by OS call latency and get local_timeout.
    """
    network_timeout: float = 5.0
    local_timeout: float = 2.0
    database_connect_timeout: float = 5.0

    # Hard ceiling for one aggregation run
    overall_timeout: float = 15.0

    @classmethod
    def from_env(cls) -> "TimeoutDefaults":
        """Create from environment variables."""
        return cls(
            network_timeout=float(os.getenv("HEALTH_NETWORK_TIMEOUT_SECONDS", 5.0)),
            local_timeout=float(os.getenv("HEALTH_LOCAL_TIMEOUT_SECONDS", 2.0)),
            database_connect_timeout=float(os.getenv("HEALTH_DB_CONNECT_TIMEOUT_SECONDS", 5.0)),
            overall_timeout=float(os.getenv("HEALTH_OVERALL_TIMEOUT_SECONDS", 15.0)),
        )


# ============================================================================
# SERVICE SETTINGS
# ============================================================================

@dataclass(frozen=True)
class ServiceSettings:
    """
    Process metadata and collaborator locations consumed by the probes.

    Credentials are referenced by environment variable name; the probes
    read the value at check time so rotating a key needs no restart.
    """
    environment: str = "development"
    version: str = "unknown"
    database_url: Optional[str] = None
    scratch_dir: str = "./tmp/health-scratch"

    # Budget used as the denominator of the process heap percentage.
    # None means "total system memory".
    process_memory_limit_mb: Optional[float] = None

    github_token_env: str = "GITHUB_TOKEN"
    payments_key_env: str = "STRIPE_SECRET_KEY"
    email_key_env: str = "SENDGRID_API_KEY"
    slack_token_env: str = "SLACK_BOT_TOKEN"

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        """Create from environment variables."""
        from __version__ import __version__

        limit = os.getenv("HEALTH_PROCESS_MEMORY_LIMIT_MB")
        return cls(
            environment=os.getenv("APP_ENV", "development"),
            version=os.getenv("APP_VERSION", __version__),
            database_url=os.getenv("DATABASE_URL") or None,
            scratch_dir=os.getenv("HEALTH_SCRATCH_DIR", "./tmp/health-scratch"),
            process_memory_limit_mb=float(limit) if limit else None,
        )


# ============================================================================
# READINESS SETTINGS
# ============================================================================

DEFAULT_CATEGORY_WEIGHTS: Dict[str, int] = {
    "environment": 20,
    "database": 20,
    "security": 15,
    "application": 15,
    "health": 10,
    "performance": 10,
    "packaging": 5,
    "security_headers": 3,
    "rate_limit": 2,
    "external_services": 0,
}


@dataclass(frozen=True)
class ReadinessSettings:
    """
    Defaults for the deployment readiness validator.

    Weights need not sum to 100; the composite score is normalised by
    their sum.
    """
    weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_WEIGHTS))

    # Verdict bands (inclusive lower bounds)
    ready_threshold: float = 85.0
    warning_threshold: float = 70.0

    # Environment category
    required_env_vars: Tuple[str, ...] = ("APP_ENV", "DATABASE_URL", "SECRET_KEY")
    production_environment: str = "production"

    # Security category
    secret_env_var: str = "SECRET_KEY"
    min_secret_length: int = 32
    cors_origins: Tuple[str, ...] = ()

    # Application / packaging categories (relative to project root)
    project_manifest: str = "pyproject.toml"
    build_artifact_dir: str = "dist"
    dockerfile: str = "Dockerfile"
    docker_score_threshold: int = 75

    # Performance category
    database_response_threshold_ms: float = 500.0

    # Security headers / rate limiting
    security_headers_enabled: bool = False
    hsts_enabled: bool = False
    rate_limit_per_minute: Optional[str] = None

    def weight_for(self, category: str) -> int:
        return self.weights.get(category, 0)

    @classmethod
    def from_env(cls) -> "ReadinessSettings":
        """Create from environment variables."""
        weights = dict(DEFAULT_CATEGORY_WEIGHTS)
        for category in weights:
            override = os.getenv(f"READINESS_WEIGHT_{category.upper()}")
            if override:
                weights[category] = int(override)

        return cls(
            weights=weights,
            ready_threshold=float(os.getenv("READINESS_READY_THRESHOLD", 85)),
            warning_threshold=float(os.getenv("READINESS_WARNING_THRESHOLD", 70)),
            required_env_vars=_env_csv(
                "READINESS_REQUIRED_ENV_VARS", ("APP_ENV", "DATABASE_URL", "SECRET_KEY")
            ),
            cors_origins=_env_csv("CORS_ALLOW_ORIGINS", ()),
            build_artifact_dir=os.getenv("READINESS_BUILD_DIR", "dist"),
            database_response_threshold_ms=float(os.getenv("READINESS_DB_RESPONSE_MS", 500)),
            security_headers_enabled=_env_bool("SECURITY_HEADERS_ENABLED"),
            hsts_enabled=_env_bool("HSTS_ENABLED"),
            rate_limit_per_minute=os.getenv("RATE_LIMIT_PER_MINUTE"),
        )


# ============================================================================
# RETRY
# ============================================================================

@dataclass(frozen=True)
class RetryDefaults:
    """Defaults for caller-layer retries of external integrations."""
    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 5.0
    jitter_ratio: float = 0.1

    @classmethod
    def from_env(cls) -> "RetryDefaults":
        """Create from environment variables."""
        return cls(
            max_attempts=int(os.getenv("INTEGRATION_RETRY_ATTEMPTS", 3)),
            base_delay_seconds=float(os.getenv("INTEGRATION_RETRY_BASE_DELAY", 1.0)),
            max_delay_seconds=float(os.getenv("INTEGRATION_RETRY_MAX_DELAY", 5.0)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    thresholds: ProbeThresholds = field(default_factory=ProbeThresholds)
    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)
    service: ServiceSettings = field(default_factory=ServiceSettings)
    readiness: ReadinessSettings = field(default_factory=ReadinessSettings)
    retry: RetryDefaults = field(default_factory=RetryDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            thresholds=ProbeThresholds.from_env(),
            timeouts=TimeoutDefaults.from_env(),
            service=ServiceSettings.from_env(),
            readiness=ReadinessSettings.from_env(),
            retry=RetryDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_CATEGORY_WEIGHTS",
    "ProbeThresholds",
    "TimeoutDefaults",
    "ServiceSettings",
    "ReadinessSettings",
    "RetryDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
