# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the health and
readiness engine.
"""

from core.config.defaults import (
    DEFAULT_CATEGORY_WEIGHTS,
    ProbeThresholds,
    TimeoutDefaults,
    ServiceSettings,
    ReadinessSettings,
    RetryDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

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
