from __future__ import annotations

import pytest
from httpx_retries import Retry

from mechdata.config.http_resilience import RateLimit, RetryPolicy


@pytest.mark.parametrize(
    ("status", "transient"),
    [(429, True), (408, True), (503, True), (520, True), (404, False), (400, False), (410, False)],
)
def test_retry_policy_classifies_statuses(status: int, transient: bool) -> None:
    assert RetryPolicy().is_transient(status) is transient


def test_retry_policy_builds_a_transport_retry() -> None:
    assert isinstance(RetryPolicy(total=2, backoff_factor=0).build(), Retry)


def test_rate_limit_per_second() -> None:
    limit = RateLimit.per_second(4)

    assert limit.max_calls == 1
    assert limit.per_seconds == pytest.approx(0.25)
