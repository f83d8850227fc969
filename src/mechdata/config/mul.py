"""Master Unit List client configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Final

from .env import env_flag, env_float, env_int_list
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

MUL_BASE_URL: Final[str] = "https://masterunitlist.azurewebsites.net"
# BattleMech, IndustrialMech, Combat Vehicle
DEFAULT_MUL_UNIT_TYPES: Final[tuple[int, ...]] = (18, 19, 17)
DEFAULT_DELAY_SECONDS: Final[float] = 1.0
DEFAULT_USER_AGENT: Final[str] = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass(frozen=True, slots=True)
class MulConfig:
    base_url: str = MUL_BASE_URL
    unit_types: tuple[int, ...] = DEFAULT_MUL_UNIT_TYPES
    delay_seconds: float = DEFAULT_DELAY_SECONDS
    timeout_seconds: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    http_cache: bool = False
    max_requests_per_second: float | None = 2.0
    retry: RetryPolicy = field(
        default_factory=lambda: RetryPolicy(total=3, backoff_factor=2.0, max_backoff_wait=60.0)
    )

    def resilience(self) -> ResilienceConfig:
        """Build the HTTP resilience settings used by the Master Unit List client."""

        return ResilienceConfig(
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds,
            retry=self.retry,
            ratelimit=(
                RateLimit.per_second(self.max_requests_per_second)
                if self.max_requests_per_second
                else None
            ),
            cache=CacheConfig() if self.http_cache else None,
            default_headers={
                "User-Agent": self.user_agent,
                "Accept": "application/json, text/html;q=0.9",
            },
        )


def get_mul_config() -> MulConfig:
    return MulConfig(
        base_url=os.getenv("MECHDATA_MUL_BASE_URL") or MUL_BASE_URL,
        unit_types=env_int_list("MECHDATA_MUL_TYPES", DEFAULT_MUL_UNIT_TYPES),
        delay_seconds=env_float("MECHDATA_MUL_DELAY_SECONDS", DEFAULT_DELAY_SECONDS),
        http_cache=env_flag("MECHDATA_MUL_HTTP_CACHE"),
    )
