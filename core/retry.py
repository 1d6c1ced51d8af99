# ============================================================================
# RETRY POLICY
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Core - Bounded retry with backoff
# PURPOSE: Single retry discipline for caller-layer integration calls
# CREATED: 19 OCT 2026
# ============================================================================
"""
Retry Policy

Bounded linear backoff for caller-layer calls to flaky external
dependencies (e.g. an interactive "retest integration" action).

    delay(attempt) = min(base_delay * attempt, max_delay) + jitter

The periodic health probes never retry: they report and rely on the
next scheduled invocation.

Usage:
    policy = RetryPolicy(max_attempts=3, base_delay_seconds=1.0)
    result = await policy.execute(lambda: client.get(url), retry_on=(httpx.HTTPError,))
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class RetryExhaustedError(Exception):
    """Raised when every attempt of a retried operation failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts: {last_error}")


class RetryPolicy(BaseModel):
    """Retry configuration for caller-layer integration calls."""
    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1, le=3)
    base_delay_seconds: float = Field(default=1.0, ge=0)
    max_delay_seconds: float = Field(default=5.0, ge=0)
    jitter_ratio: float = Field(default=0.1, ge=0, le=1)

    @classmethod
    def from_defaults(cls, defaults) -> "RetryPolicy":
        """Build from core.config RetryDefaults."""
        return cls(
            max_attempts=min(max(defaults.max_attempts, 1), 3),
            base_delay_seconds=defaults.base_delay_seconds,
            max_delay_seconds=defaults.max_delay_seconds,
            jitter_ratio=defaults.jitter_ratio,
        )

    def delay_for(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        """Delay to wait after the given (1-based) failed attempt."""
        delay = min(self.base_delay_seconds * attempt, self.max_delay_seconds)
        if self.jitter_ratio and delay:
            delay += (rng or random).uniform(0, delay * self.jitter_ratio)
        return delay

    async def execute(
        self,
        operation: Callable[[], Awaitable[Any]],
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        operation_name: str = "operation",
    ) -> Any:
        """
        Run an async operation with bounded retries.

        Exceptions not listed in retry_on propagate immediately.

        Raises:
            RetryExhaustedError: After max_attempts retryable failures
        """
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await operation()
            except retry_on as e:
                last_error = e
                if attempt == self.max_attempts:
                    break

                delay = self.delay_for(attempt)
                logger.warning(
                    f"{operation_name} attempt {attempt}/{self.max_attempts} failed: {e}; "
                    f"retrying in {delay:.2f}s"
                )
                await sleep(delay)

        logger.error(f"{operation_name} failed after {self.max_attempts} attempts: {last_error}")
        raise RetryExhaustedError(self.max_attempts, last_error)


__all__ = [
    "RetryPolicy",
    "RetryExhaustedError",
]
