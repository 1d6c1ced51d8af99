# ============================================================================
# FILESYSTEM HEALTH PROBE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Scratch directory write access
# PURPOSE: Create, write and remove a marker file in the scratch directory
# CREATED: 19 OCT 2026
# ============================================================================
"""
Filesystem Health Probe

Critical probe. The service stages working copies in a scratch
directory, so it must be creatable and writable:
- Creates the directory if missing
- Writes and removes a uniquely named marker file
- Reports disk usage of the volume holding it
"""

import asyncio
import logging
import os
import uuid
from typing import Any, Dict

import psutil

from health.core import HealthProbe, ProbeResult

logger = logging.getLogger(__name__)


def _exercise_scratch_dir(scratch_dir: str) -> Dict[str, Any]:
    """Blocking part of the probe; runs in a worker thread."""
    created = not os.path.isdir(scratch_dir)
    os.makedirs(scratch_dir, exist_ok=True)

    marker = os.path.join(scratch_dir, f"health-check-{uuid.uuid4().hex}.tmp")
    try:
        with open(marker, "w") as f:
            f.write("ok")
    finally:
        if os.path.exists(marker):
            os.remove(marker)

    usage = psutil.disk_usage(scratch_dir)
    return {
        "created": created,
        "path": os.path.abspath(scratch_dir),
        "write_access": True,
        "disk": {
            "total_gb": round(usage.total / 1024 ** 3, 2),
            "free_gb": round(usage.free / 1024 ** 3, 2),
            "percent_used": usage.percent,
        },
    }


class FilesystemProbe(HealthProbe):
    """Scratch directory write probe."""

    name = "filesystem"
    critical = True
    timeout_seconds = 2.0

    def __init__(self, scratch_dir: str = "./tmp/health-scratch"):
        self.scratch_dir = scratch_dir

    async def check(self) -> ProbeResult:
        try:
            detail = await asyncio.to_thread(_exercise_scratch_dir, self.scratch_dir)
        except OSError as e:
            logger.warning(f"Scratch directory {self.scratch_dir} not writable: {e}")
            return ProbeResult.unhealthy(
                self.name,
                message=f"Filesystem check failed: {e}",
                path=os.path.abspath(self.scratch_dir),
                write_access=False,
            )

        return ProbeResult.healthy(self.name, message="Scratch directory writable", **detail)


__all__ = [
    "FilesystemProbe",
]
