# ============================================================================
# INTEGRATION SERVICE
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Services - Interactive integration re-test
# PURPOSE: Re-run one optional probe with bounded retry for a user action
# CREATED: 19 OCT 2026
# ============================================================================
"""
Integration Service

Backs the "retest integration" action. Unlike the periodic health
probe, a user is waiting on the answer, so a reachable-but-failing
integration is retried with the shared RetryPolicy before the outcome
is reported:
- Not configured: returned at once (retrying cannot fix configuration)
- Healthy on any attempt: success
- Still failing after max attempts: actionable failure message
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from core.contracts import ProbeStatus
from core.logging import ComponentType, log_context
from core.retry import RetryExhaustedError, RetryPolicy
from health.core import ProbeResult, run_guarded
from health.registry import ProbeRegistry

logger = logging.getLogger(__name__)


class IntegrationUnavailableError(Exception):
    """Integration answered with a non-healthy result during a retest."""

    def __init__(self, result: ProbeResult):
        self.result = result
        super().__init__(result.message or f"{result.name} reported {result.status.value}")


@dataclass(frozen=True)
class RetestOutcome:
    """Outcome of one interactive retest."""
    name: str
    success: bool
    attempts: int
    message: str
    requires_action: bool = False
    result: Optional[ProbeResult] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "success": self.success,
            "attempts": self.attempts,
            "message": self.message,
            "requires_action": self.requires_action,
        }
        if self.result is not None:
            data["result"] = self.result.to_dict()
        return data


class IntegrationService:
    """Retests optional integrations on demand."""

    def __init__(
        self,
        registry: ProbeRegistry,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize integration service.

        Args:
            registry: Probe registry holding the optional probes
            retry_policy: Retry policy (defaults to 3 attempts, linear backoff)
            sleep: Awaitable used between attempts
        """
        self.registry = registry
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    async def retest(self, name: str) -> RetestOutcome:
        """
        Re-run one optional probe with retries.

        Raises:
            KeyError: Unknown probe name
            ValueError: Probe is critical (not an integration)
        """
        descriptor = self.registry.get(name)
        if descriptor is None:
            raise KeyError(name)
        if descriptor.critical:
            raise ValueError(f"{name} is a critical probe, not an integration")

        probe = descriptor.probe
        credential_env = getattr(probe, "credential_env", None)
        attempts = 0

        async def attempt() -> ProbeResult:
            nonlocal attempts
            attempts += 1
            result = await run_guarded(probe, timeout=descriptor.timeout_seconds, critical=False)
            if result.detail.get("configured") is False:
                return result
            if result.status is not ProbeStatus.HEALTHY:
                raise IntegrationUnavailableError(result)
            return result

        with log_context(probe=name, component=ComponentType.INTEGRATION, operation="retest"):
            try:
                result = await self.retry_policy.execute(
                    attempt,
                    retry_on=(IntegrationUnavailableError,),
                    sleep=self._sleep,
                    operation_name=f"Retest {name}",
                )
            except RetryExhaustedError as e:
                last = None
                if isinstance(e.last_error, IntegrationUnavailableError):
                    last = e.last_error.result

                hint = "Check the provider's status"
                if credential_env:
                    hint = f"Verify {credential_env} and the provider's status"

                return RetestOutcome(
                    name=name,
                    success=False,
                    attempts=attempts,
                    message=f"{name} still failing after {attempts} attempts: {e.last_error}. {hint}.",
                    requires_action=True,
                    result=last,
                )

        if result.detail.get("configured") is False:
            logger.info(f"Retest {name}: not configured")
            return RetestOutcome(
                name=name,
                success=False,
                attempts=attempts,
                message=f"{name} is not configured. Set {credential_env} to enable it.",
                requires_action=True,
                result=result,
            )

        logger.info(f"Retest {name}: healthy after {attempts} attempt(s)")
        return RetestOutcome(
            name=name,
            success=True,
            attempts=attempts,
            message=result.message or f"{name} reachable",
            result=result,
        )


__all__ = [
    "IntegrationService",
    "IntegrationUnavailableError",
    "RetestOutcome",
]
