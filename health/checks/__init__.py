# ============================================================================
# HEALTH PROBES
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Concrete probe implementations
# PURPOSE: Standard probe set declared by build_default_registry()
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Probes

Critical probes (failure makes the service UNHEALTHY):
- database: PostgreSQL round trip
- filesystem: scratch directory write access
- memory: process and system memory pressure
- cpu: load average per core

Optional probes (failure only DEGRADES the service):
- github: GitHub API and rate limit
- payments: Stripe API
- email: SendGrid API
- slack: Slack API
"""

from health.checks.database import DatabaseProbe
from health.checks.filesystem import FilesystemProbe
from health.checks.system import MemoryProbe, CpuProbe
from health.checks.external import (
    ExternalServiceProbe,
    GitHubProbe,
    PaymentsProbe,
    EmailProbe,
    SlackProbe,
)

__all__ = [
    # Critical
    "DatabaseProbe",
    "FilesystemProbe",
    "MemoryProbe",
    "CpuProbe",
    # Optional
    "ExternalServiceProbe",
    "GitHubProbe",
    "PaymentsProbe",
    "EmailProbe",
    "SlackProbe",
]
