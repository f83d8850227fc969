"""Retry, rate limit and response cache settings for outbound HTTP."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

import httpx
from httpx_retries import Retry

if TYPE_CHECKING:
    from collections.abc import Mapping

# Statuses worth asking again later; every other 4xx means the request itself is wrong.
TRANSIENT_STATUSES: Final[frozenset[int]] = frozenset({408, 425, 429, 500, 502, 503, 504})
ONE_DAY_SECONDS: Final[float] = 24 * 60 * 60


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """How often the transport retries a request before the caller sees the failure."""

    total: int = 4
    backoff_factor: float = 0.5
    max_backoff_wait: float = 60.0
    backoff_jitter: float = 1.0
    respect_retry_after_header: bool = True
    status_forcelist: frozenset[int] = TRANSIENT_STATUSES
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )

    def is_transient(self, status_code: int) -> bool:
        return status_code in self.status_forcelist or status_code >= 500

    def build(self) -> Retry:
        # Only idempotent reads are retried.
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            backoff_jitter=self.backoff_jitter,
            respect_retry_after_header=self.respect_retry_after_header,
            allowed_methods=("GET", "HEAD"),
            status_forcelist=tuple(sorted(self.status_forcelist)),
            retry_on_exceptions=self.retry_on_exceptions,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float

    @classmethod
    def per_second(cls, requests: float) -> RateLimit:
        """One request every ``1 / requests`` seconds."""

        return cls(max_calls=1, per_seconds=1.0 / requests)


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """SQLite response cache; ``path`` defaults to the file in the data directory."""

    path: str | None = None
    ttl_seconds: float | None = ONE_DAY_SECONDS
    refresh_ttl_on_access: bool = False


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    base_url: str | None = None
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    default_headers: Mapping[str, str] | None = None
