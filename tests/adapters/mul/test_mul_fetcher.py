from __future__ import annotations

import json
from collections import Counter
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx
import pytest

from mechdata.adapters.http_resilience import ResilientClient
from mechdata.adapters.mul import (
    TONNAGE_PARTITIONS,
    FailureKind,
    FetchManifest,
    MulFetcher,
    RawResponseStore,
    jittered_delay,
)
from mechdata.config.http_resilience import RetryPolicy
from mechdata.config.mul import MulConfig

if TYPE_CHECKING:
    from pathlib import Path

    from mechdata.config.http_resilience import ResilienceConfig

DETAIL_HTML = "<html><body><h2>Unit</h2></body></html>"


def _config(*, delay: float = 0.0) -> MulConfig:
    return MulConfig(
        base_url="https://mul.test",
        unit_types=(18,),
        delay_seconds=delay,
        max_requests_per_second=None,
        retry=RetryPolicy(total=2, backoff_factor=0, backoff_jitter=0),
    )


def _quicklist_body(min_tons: int) -> str:
    return json.dumps({"Units": [{"Id": min_tons + 1, "Name": f"Unit {min_tons}"}]})


class FakeMul:
    """In-memory MUL answering QuickList and detail requests, with scripted failures."""

    def __init__(self) -> None:
        self.calls: Counter[str] = Counter()
        self.statuses: dict[str, int] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/Unit/QuickList":
            params = request.url.params
            key = f"{params['Types']}-{params['MinTons']}-{params['MaxTons']}"
            body = _quicklist_body(int(params["MinTons"]))
        else:
            key = f"detail-{path.rsplit('/', 1)[-1]}"
            body = DETAIL_HTML
        self.calls[key] += 1
        status = self.statuses.get(key)
        if status is not None:
            return httpx.Response(status, text="nope")
        return httpx.Response(200, text=body)

    def client_factory(self, config: ResilienceConfig) -> ResilientClient:
        return ResilientClient(config, transport=httpx.MockTransport(self.handler))

    def quicklist_calls(self) -> int:
        return sum(count for key, count in self.calls.items() if not key.startswith("detail-"))

    def detail_calls(self) -> int:
        return sum(count for key, count in self.calls.items() if key.startswith("detail-"))


async def _no_sleep(seconds: float) -> None:
    _ = seconds


@pytest.fixture
def store(tmp_path: Path) -> RawResponseStore:
    return RawResponseStore(tmp_path / "mul")


@pytest.fixture
def mul() -> FakeMul:
    return FakeMul()


def _fetcher(store: RawResponseStore, mul: FakeMul, *, delay: float = 0.0) -> MulFetcher:
    return MulFetcher(
        store=store,
        config=_config(delay=delay),
        client_factory=mul.client_factory,
        sleep=_no_sleep,
    )


def test_interrupted_fetch_resumes_without_refetching(
    store: RawResponseStore, mul: FakeMul
) -> None:
    for min_tons, max_tons in TONNAGE_PARTITIONS[:3]:
        store.write_quicklist(18, min_tons, max_tons, _quicklist_body(min_tons))

    manifest = _fetcher(store, mul)()

    assert mul.quicklist_calls() == 7
    assert manifest.partitions_skipped == 3
    assert manifest.partitions_fetched == 7
    assert manifest.total_mul_ids == 10
    assert manifest.quicklist_counts == {"18": 10}
    assert manifest.detail_pages_fetched == 10
    assert store.load_manifest() == manifest

    second = _fetcher(store, mul)()

    assert mul.quicklist_calls() == 7
    assert mul.detail_calls() == 10
    assert second.partitions_skipped == 10
    assert second.detail_pages_skipped == 10


def test_transient_and_permanent_failures_are_recorded(
    store: RawResponseStore, mul: FakeMul
) -> None:
    mul.statuses = {"18-26-35": 503, "detail-1": 404}

    manifest = _fetcher(store, mul)()

    failures = store.load_failures()
    assert {key: failure.kind for key, failure in failures.items()} == {
        "18-26-35": FailureKind.TRANSIENT,
        "detail-1": FailureKind.PERMANENT,
    }
    assert failures["18-26-35"].status_code == 503
    assert mul.calls["18-26-35"] == 3
    assert mul.calls["detail-1"] == 1
    assert manifest.failures == 2
    assert manifest.partitions_fetched == 9
    assert not store.has_quicklist(18, 26, 35)

    mul.statuses = {}
    retried = _fetcher(store, mul)()

    assert mul.calls["18-26-35"] == 4
    assert mul.calls["detail-1"] == 1
    assert retried.partitions_fetched == 1
    assert set(store.load_failures()) == {"detail-1"}

    forced = _fetcher(store, mul)(retry_failed=True)

    assert mul.calls["detail-1"] == 2
    assert forced.detail_pages_fetched == 1
    assert store.load_failures() == {}
    assert store.read_detail(1) == DETAIL_HTML


def test_manifest_keeps_counts_of_types_fetched_earlier(
    store: RawResponseStore, mul: FakeMul
) -> None:
    store.save_manifest(
        FetchManifest(
            fetched_at=datetime(3025, 1, 1, tzinfo=UTC),
            base_url="https://mul.test",
            types=[18, 19],
            quicklist_counts={"18": 3, "19": 5},
        )
    )

    manifest = _fetcher(store, mul)(skip_details=True)

    assert manifest.types == [18, 19]
    assert manifest.quicklist_counts == {"18": 10, "19": 5}
    assert store.load_manifest() == manifest


def test_skip_details_only_fetches_quicklists(store: RawResponseStore, mul: FakeMul) -> None:
    manifest = _fetcher(store, mul)(skip_details=True)

    assert mul.detail_calls() == 0
    assert manifest.total_mul_ids == 10
    assert manifest.detail_pages_fetched == 0
    assert _fetcher(store, mul).stored_mul_ids() == [1, 26, 36, 46, 56, 66, 76, 86, 101, 201]


def test_pauses_between_requests_use_jittered_delay(
    store: RawResponseStore, mul: FakeMul
) -> None:
    pauses: list[float] = []

    async def record_sleep(seconds: float) -> None:
        pauses.append(seconds)

    fetcher = MulFetcher(
        store=store,
        config=_config(delay=2.0),
        client_factory=mul.client_factory,
        sleep=record_sleep,
        uniform=lambda low, high: low,
    )
    fetcher(skip_details=True)

    assert pauses == [pytest.approx(1.4)] * len(TONNAGE_PARTITIONS)


def test_jittered_delay_bounds() -> None:
    assert jittered_delay(0) == 0.0
    assert jittered_delay(1.0, uniform=lambda low, high: low) == pytest.approx(0.7)
    assert jittered_delay(1.0, uniform=lambda low, high: high) == pytest.approx(1.3)
    assert jittered_delay(1.0, uniform=lambda low, high: -5.0) == 0.0
