"""Client configuration and per-call request context.

Architecture:
    Configuration is an immutable value handed to the client constructor.
    Per-call overrides travel in a RequestContext and are merged over the
    configuration at call time, so no call can change another call's policy.

Design Decisions:
    - Frozen dataclasses: policies cannot drift while a traversal is running
    - Validation in __post_init__: bad policies fail at construction, not mid-retry
    - Milliseconds on the surface: matches the API client's historical options

See Also:
    - RetryingFetcher: Consumes RetryPolicy per page request
    - CancellationToken: Caller-owned cancellation carried by RequestContext
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cancellation import CancellationToken

API_BASE_URL = "https://api.webstatus.dev/v1/features"

DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_HEADERS: Mapping[str, str] = MappingProxyType({"Accept": "application/json"})

# Environment overrides read by ClientConfig.from_env()
ENV_BASE_URL = "WEBSTATUS_BASE_URL"
ENV_TIMEOUT_MS = "WEBSTATUS_TIMEOUT_MS"
ENV_MAX_ATTEMPTS = "WEBSTATUS_MAX_ATTEMPTS"


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential backoff between attempts.

    Attributes:
        base_ms: Delay before the first retry
        factor: Multiplier applied per attempt
        max_ms: Upper bound for any single delay
        jitter: Subtract up to 20% of the delay at random
    """

    base_ms: float = 300
    factor: float = 2.0
    max_ms: float = 5_000
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.base_ms < 0:
            raise ValueError("base_ms must be >= 0")
        if self.factor < 0:
            raise ValueError("factor must be >= 0")
        if self.max_ms < 0:
            raise ValueError("max_ms must be >= 0")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget for one page request.

    Attributes:
        max_attempts: Retries after the first attempt (0 = single attempt)
        per_attempt_timeout_ms: Budget for a single HTTP round trip
        backoff: Delay schedule between attempts
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    per_attempt_timeout_ms: int = DEFAULT_TIMEOUT_MS
    backoff: BackoffPolicy = field(default_factory=BackoffPolicy)

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.per_attempt_timeout_ms <= 0:
            raise ValueError("per_attempt_timeout_ms must be > 0")

    @property
    def total_attempts(self) -> int:
        return self.max_attempts + 1


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client-wide configuration."""

    base_url: str = API_BASE_URL
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    headers: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_HEADERS))

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        # Read-only snapshot of the caller's headers
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a configuration from WEBSTATUS_* environment variables.

        Unset variables fall back to the defaults.
        """
        env = os.environ if environ is None else environ
        retry = RetryPolicy(
            max_attempts=int(env.get(ENV_MAX_ATTEMPTS, DEFAULT_MAX_ATTEMPTS)),
            per_attempt_timeout_ms=int(env.get(ENV_TIMEOUT_MS, DEFAULT_TIMEOUT_MS)),
        )
        return cls(base_url=env.get(ENV_BASE_URL, API_BASE_URL), retry=retry)


@dataclass(frozen=True)
class RequestContext:
    """Per-call overrides for one page request or one traversal.

    Attributes:
        cancellation: Token that aborts the call when cancelled
        headers: Extra headers merged over the configured ones
        timeout_ms: Overrides the per-attempt timeout
        max_attempts: Overrides the retry count
    """

    cancellation: CancellationToken | None = None
    headers: Mapping[str, str] | None = None
    timeout_ms: int | None = None
    max_attempts: int | None = None

    def resolve_retry(self, policy: RetryPolicy) -> RetryPolicy:
        """Merge this context's overrides over ``policy``."""
        overrides: dict[str, int] = {}
        if self.timeout_ms is not None:
            overrides["per_attempt_timeout_ms"] = self.timeout_ms
        if self.max_attempts is not None:
            overrides["max_attempts"] = self.max_attempts
        if not overrides:
            return policy
        return replace(policy, **overrides)

    def resolve_headers(self, headers: Mapping[str, str]) -> dict[str, str]:
        merged = dict(headers)
        if self.headers:
            merged.update(self.headers)
        return merged

    @property
    def cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.cancelled
