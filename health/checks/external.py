# ============================================================================
# EXTERNAL SERVICE HEALTH PROBES
# ============================================================================
# EPOCH: 1 - HEALTH & READINESS
# STATUS: Health - Third-party integrations
# PURPOSE: Authenticated round trips to GitHub, Stripe, SendGrid and Slack
# CREATED: 19 OCT 2026
# ============================================================================
"""
External Service Health Probes

Optional probes. An integration outage degrades the service but never
fails it, so every failure mode maps to WARNING:
- Credential not configured (detail configured=False)
- Transport error or timeout
- Non-2xx response or a provider-level error in the body

Each probe reads its credential from an environment variable named in
ServiceSettings, so the value is looked up at check time and never held
on the probe.
"""

import logging
import os
from typing import Any, Dict, Optional

import httpx

from health.core import HealthProbe, ProbeResult

logger = logging.getLogger(__name__)


class ExternalServiceProbe(HealthProbe):
    """
    Base class for credentialed HTTP probes.

    Subclasses set name, url and service, and may override
    build_request_kwargs() and interpret().
    """

    critical = False
    timeout_seconds = 5.0

    service: str = "External service"
    url: str = ""
    method: str = "GET"

    def __init__(
        self,
        credential_env: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credential_env = credential_env
        self.timeout = timeout
        self.transport = transport

    @property
    def credential(self) -> Optional[str]:
        return os.environ.get(self.credential_env) or None

    @property
    def is_configured(self) -> bool:
        return self.credential is not None

    def build_request_kwargs(self, credential: str) -> Dict[str, Any]:
        return {"headers": {"Authorization": f"Bearer {credential}"}}

    def interpret(self, response: httpx.Response) -> ProbeResult:
        """Map a 2xx response to a result."""
        return ProbeResult.healthy(self.name, message=f"{self.service} reachable", configured=True)

    async def check(self) -> ProbeResult:
        credential = self.credential
        if credential is None:
            return ProbeResult.warning(
                self.name,
                message=f"{self.service} not configured",
                configured=False,
                hint=f"Set {self.credential_env}",
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(
                    self.method, self.url, **self.build_request_kwargs(credential)
                )
        except httpx.TimeoutException:
            return ProbeResult.warning(
                self.name,
                message=f"{self.service} timed out after {self.timeout}s",
                configured=True,
            )
        except httpx.HTTPError as e:
            return ProbeResult.warning(
                self.name,
                message=f"{self.service} unreachable: {e}",
                configured=True,
            )

        if not response.is_success:
            return ProbeResult.warning(
                self.name,
                message=f"{self.service} returned HTTP {response.status_code}",
                configured=True,
                status_code=response.status_code,
            )

        return self.interpret(response)


# ============================================================================
# PROVIDERS
# ============================================================================

class GitHubProbe(ExternalServiceProbe):
    """GitHub API probe. Warns when the core rate limit runs low."""

    name = "github"
    service = "GitHub API"
    url = "https://api.github.com/rate_limit"

    def __init__(
        self,
        credential_env: str = "GITHUB_TOKEN",
        timeout: float = 5.0,
        rate_limit_low: int = 100,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(credential_env, timeout=timeout, transport=transport)
        self.rate_limit_low = rate_limit_low

    def build_request_kwargs(self, credential: str) -> Dict[str, Any]:
        return {
            "headers": {
                "Authorization": f"Bearer {credential}",
                "Accept": "application/vnd.github+json",
            }
        }

    def interpret(self, response: httpx.Response) -> ProbeResult:
        core = response.json().get("resources", {}).get("core", {})
        remaining = core.get("remaining")
        detail = {
            "configured": True,
            "rate_limit": {
                "limit": core.get("limit"),
                "remaining": remaining,
                "reset": core.get("reset"),
            },
        }

        if remaining is not None and remaining < self.rate_limit_low:
            return ProbeResult.warning(
                self.name,
                message=f"GitHub rate limit low: {remaining} requests remaining",
                **detail,
            )
        return ProbeResult.healthy(self.name, message="GitHub API reachable", **detail)


class PaymentsProbe(ExternalServiceProbe):
    """Stripe probe; reads the account balance."""

    name = "payments"
    service = "Stripe API"
    url = "https://api.stripe.com/v1/balance"

    def interpret(self, response: httpx.Response) -> ProbeResult:
        body = response.json()
        return ProbeResult.healthy(
            self.name,
            message="Stripe API reachable",
            configured=True,
            livemode=body.get("livemode"),
        )


class EmailProbe(ExternalServiceProbe):
    """SendGrid probe; lists the key's scopes."""

    name = "email"
    service = "SendGrid API"
    url = "https://api.sendgrid.com/v3/scopes"

    def interpret(self, response: httpx.Response) -> ProbeResult:
        scopes = response.json().get("scopes", [])
        return ProbeResult.healthy(
            self.name,
            message="SendGrid API reachable",
            configured=True,
            scopes=len(scopes),
        )


class SlackProbe(ExternalServiceProbe):
    """
    Slack probe.

    auth.test answers 200 even for a revoked token; the verdict is in
    the "ok" field of the body.
    """

    name = "slack"
    service = "Slack API"
    url = "https://slack.com/api/auth.test"

    def interpret(self, response: httpx.Response) -> ProbeResult:
        body = response.json()
        if not body.get("ok"):
            return ProbeResult.warning(
                self.name,
                message=f"Slack auth failed: {body.get('error', 'unknown error')}",
                configured=True,
            )
        return ProbeResult.healthy(
            self.name,
            message="Slack API reachable",
            configured=True,
            team=body.get("team"),
        )


__all__ = [
    "ExternalServiceProbe",
    "GitHubProbe",
    "PaymentsProbe",
    "EmailProbe",
    "SlackProbe",
]
