# ============================================================================
# CLAUDE CONTEXT - CORE MODULE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core module initialization
# PURPOSE: Export status contracts and the retry policy
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import ProbeStatus, SnapshotStatus, CheckStatus, Verdict
from core.retry import RetryPolicy, RetryExhaustedError

__all__ = [
    # Enums
    "ProbeStatus",
    "SnapshotStatus",
    "CheckStatus",
    "Verdict",
    # Retry
    "RetryPolicy",
    "RetryExhaustedError",
]
