# ============================================================================
# SYSTEM RESOURCE HEALTH PROBES
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Memory and CPU pressure
# PURPOSE: psutil-based process memory, system memory and load probes
# CREATED: 19 OCT 2026
# ============================================================================
"""
System Resource Health Probes

Critical probes backed by psutil:
- MemoryProbe: process RSS against its limit plus system memory usage
- CpuProbe: 1-minute load average normalised by core count

Thresholds come from core.config.ProbeThresholds.
"""

import logging
from typing import Optional

import psutil

from core.config import ProbeThresholds
from health.core import HealthProbe, ProbeResult

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


class MemoryProbe(HealthProbe):
    """
    Memory pressure probe.

    The process share is RSS divided by the configured process limit
    (HEALTH_PROCESS_MEMORY_LIMIT_MB), or by total system memory when no
    limit is set.

    - UNHEALTHY: process share > 95% or system usage > 95%
    - WARNING: process share > 80% or system usage > 85%
    """

    name = "memory"
    critical = True
    timeout_seconds = 2.0

    def __init__(
        self,
        thresholds: Optional[ProbeThresholds] = None,
        process_limit_mb: Optional[float] = None,
    ):
        self.thresholds = thresholds or ProbeThresholds()
        self.process_limit_mb = process_limit_mb

    async def check(self) -> ProbeResult:
        t = self.thresholds
        rss = psutil.Process().memory_info().rss
        system = psutil.virtual_memory()

        limit_bytes = self.process_limit_mb * _MB if self.process_limit_mb else system.total
        process_percent = round(rss / limit_bytes * 100, 1) if limit_bytes else 0.0
        system_percent = round(system.percent, 1)

        detail = {
            "process_rss_mb": round(rss / _MB, 1),
            "process_limit_mb": round(limit_bytes / _MB, 1),
            "process_percent": process_percent,
            "system_percent": system_percent,
            "system_available_mb": round(system.available / _MB, 1),
        }

        if process_percent > t.heap_critical_percent or system_percent > t.system_memory_critical_percent:
            return ProbeResult.unhealthy(
                self.name,
                message=f"Critical memory usage (process {process_percent}%, system {system_percent}%)",
                **detail,
            )

        if process_percent > t.heap_warning_percent or system_percent > t.system_memory_warning_percent:
            return ProbeResult.warning(
                self.name,
                message=f"High memory usage (process {process_percent}%, system {system_percent}%)",
                **detail,
            )

        return ProbeResult.healthy(self.name, **detail)


class CpuProbe(HealthProbe):
    """
    CPU load probe.

    Load is the 1-minute load average as a percentage of logical cores.
    - UNHEALTHY: load > 90%
    - WARNING: load > 70%
    """

    name = "cpu"
    critical = True
    timeout_seconds = 2.0

    def __init__(self, thresholds: Optional[ProbeThresholds] = None):
        self.thresholds = thresholds or ProbeThresholds()

    async def check(self) -> ProbeResult:
        t = self.thresholds
        load_1m, load_5m, load_15m = psutil.getloadavg()
        cores = psutil.cpu_count() or 1
        load_percent = round(load_1m / cores * 100, 1)

        detail = {
            "load_average": [round(load_1m, 2), round(load_5m, 2), round(load_15m, 2)],
            "cores": cores,
            "load_percent": load_percent,
        }

        if load_percent > t.cpu_critical_percent:
            return ProbeResult.unhealthy(
                self.name, message=f"Critical CPU load: {load_percent}%", **detail
            )

        if load_percent > t.cpu_warning_percent:
            return ProbeResult.warning(
                self.name, message=f"High CPU load: {load_percent}%", **detail
            )

        return ProbeResult.healthy(self.name, **detail)


__all__ = [
    "MemoryProbe",
    "CpuProbe",
]
