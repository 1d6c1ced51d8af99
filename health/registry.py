# ============================================================================
# PROBE REGISTRY
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Probe declaration
# PURPOSE: Immutable, ordered set of probes split into critical and optional
# CREATED: 19 OCT 2026
# ============================================================================
"""
Probe Registry

Holds the fixed, ordered list of probe descriptors. It is built once by
the composition root (main.py or the CLI) and passed to the aggregator;
there is no module-level registry.

Usage:
    registry = ProbeRegistry([
        ProbeDescriptor(DatabaseProbe(...), critical=True, timeout_seconds=5.0),
        ProbeDescriptor(GitHubProbe(...), critical=False, timeout_seconds=5.0),
    ])

    for descriptor in registry:
        ...
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from health.core import HealthProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeDescriptor:
    """A registered probe with its criticality and timeout."""
    probe: HealthProbe
    critical: bool
    timeout_seconds: float

    @property
    def name(self) -> str:
        return self.probe.name

    @classmethod
    def for_probe(
        cls,
        probe: HealthProbe,
        critical: Optional[bool] = None,
        timeout_seconds: Optional[float] = None,
    ) -> "ProbeDescriptor":
        """Describe a probe, defaulting to its class attributes."""
        return cls(
            probe=probe,
            critical=probe.critical if critical is None else critical,
            timeout_seconds=probe.timeout_seconds if timeout_seconds is None else timeout_seconds,
        )


class ProbeRegistry:
    """
    Immutable registry of probes.

    Iteration order is registration order.

    Raises:
        ValueError: If two descriptors share a name
    """

    def __init__(self, descriptors: Iterable[ProbeDescriptor]):
        descriptors = tuple(descriptors)

        seen = set()
        for descriptor in descriptors:
            if descriptor.name in seen:
                raise ValueError(f"Duplicate probe name: {descriptor.name}")
            seen.add(descriptor.name)

        self._descriptors: Tuple[ProbeDescriptor, ...] = descriptors
        logger.debug(
            f"Probe registry built: {len(self.critical)} critical, "
            f"{len(self.optional)} optional"
        )

    @property
    def descriptors(self) -> Tuple[ProbeDescriptor, ...]:
        return self._descriptors

    @property
    def critical(self) -> Tuple[ProbeDescriptor, ...]:
        """Probes whose UNHEALTHY result fails the system."""
        return tuple(d for d in self._descriptors if d.critical)

    @property
    def optional(self) -> Tuple[ProbeDescriptor, ...]:
        """Probes that can degrade but never fail the system."""
        return tuple(d for d in self._descriptors if not d.critical)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self._descriptors)

    @property
    def critical_names(self) -> frozenset:
        return frozenset(d.name for d in self._descriptors if d.critical)

    def get(self, name: str) -> Optional[ProbeDescriptor]:
        """Get descriptor by probe name."""
        for descriptor in self._descriptors:
            if descriptor.name == name:
                return descriptor
        return None

    def __iter__(self) -> Iterator[ProbeDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None


# ============================================================================
# DEFAULT REGISTRY
# ============================================================================

def build_default_registry(defaults) -> ProbeRegistry:
    """
    Declare the standard probe set.

    critical = database, filesystem, memory, cpu
    optional = github, payments, email, slack

    Args:
        defaults: core.config.Defaults

    Returns:
        ProbeRegistry
    """
    from health.checks import (
        DatabaseProbe,
        FilesystemProbe,
        MemoryProbe,
        CpuProbe,
        GitHubProbe,
        PaymentsProbe,
        EmailProbe,
        SlackProbe,
    )

    service = defaults.service
    thresholds = defaults.thresholds
    timeouts = defaults.timeouts

    critical = [
        DatabaseProbe(
            database_url=service.database_url,
            warning_ms=thresholds.database_warning_ms,
            connect_timeout=timeouts.database_connect_timeout,
        ),
        FilesystemProbe(scratch_dir=service.scratch_dir),
        MemoryProbe(thresholds=thresholds, process_limit_mb=service.process_memory_limit_mb),
        CpuProbe(thresholds=thresholds),
    ]
    optional = [
        GitHubProbe(
            credential_env=service.github_token_env,
            timeout=timeouts.network_timeout,
            rate_limit_low=thresholds.github_rate_limit_low,
        ),
        PaymentsProbe(credential_env=service.payments_key_env, timeout=timeouts.network_timeout),
        EmailProbe(credential_env=service.email_key_env, timeout=timeouts.network_timeout),
        SlackProbe(credential_env=service.slack_token_env, timeout=timeouts.network_timeout),
    ]

    descriptors = [
        ProbeDescriptor(
            probe,
            critical=True,
            timeout_seconds=(
                timeouts.network_timeout if probe.name == "database" else timeouts.local_timeout
            ),
        )
        for probe in critical
    ]
    descriptors += [
        ProbeDescriptor(probe, critical=False, timeout_seconds=timeouts.network_timeout)
        for probe in optional
    ]
    return ProbeRegistry(descriptors)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeDescriptor",
    "ProbeRegistry",
    "build_default_registry",
]
