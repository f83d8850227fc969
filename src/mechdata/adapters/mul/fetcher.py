"""Resumable download of Master Unit List QuickLists and detail pages."""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from mechdata.config.mul import MulConfig, get_mul_config
from mechdata.domain.model.base import utcnow

from .client import TONNAGE_PARTITIONS, MulAPIError, MulClient, default_client_factory
from .schema import FailureKind, FetchFailure, FetchManifest, parse_quicklist
from .store import detail_key, partition_key

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from mechdata.adapters.http_resilience import ResilientClient
    from mechdata.config.http_resilience import ResilienceConfig

    from .store import RawResponseStore

log = getLogger(__name__)

JITTER_FRACTION = 0.3


@dataclass(slots=True)
class _FetchState:
    failures: dict[str, FetchFailure]
    manifest: FetchManifest
    retry_failed: bool
    failures_dirty: bool = False

    def should_skip(self, key: str) -> bool:
        failure = self.failures.get(key)
        return (
            failure is not None
            and failure.kind is FailureKind.PERMANENT
            and not self.retry_failed
        )

    def record_failure(self, key: str, error: MulAPIError) -> None:
        self.failures[key] = FetchFailure(
            key=key,
            url=error.url,
            kind=error.kind,
            status_code=error.status_code,
            message=str(error),
            failed_at=utcnow(),
        )
        self.failures_dirty = True

    def clear_failure(self, key: str) -> None:
        if self.failures.pop(key, None) is not None:
            self.failures_dirty = True


@dataclass(slots=True)
class MulFetcher:
    """Download every configured QuickList partition and detail page into ``store``.

    Stored bodies are never requested again. Failed requests are written to
    ``failures.json``; permanent ones are skipped on later runs unless
    ``retry_failed`` is set, transient ones are simply tried again.
    """

    store: RawResponseStore
    config: MulConfig = field(default_factory=get_mul_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)
    uniform: Callable[[float, float], float] = field(default=random.uniform)

    def __call__(
        self,
        *,
        retry_failed: bool = False,
        skip_details: bool = False,
    ) -> FetchManifest:
        return asyncio.run(self.fetch(retry_failed=retry_failed, skip_details=skip_details))

    async def fetch(self, *, retry_failed: bool = False, skip_details: bool = False) -> FetchManifest:
        state = _FetchState(
            failures=self.store.load_failures(),
            manifest=self._start_manifest(),
            retry_failed=retry_failed,
        )
        async with self.client_factory(self.config.resilience()) as http:
            client = MulClient(http)
            try:
                for unit_type in self.config.unit_types:
                    await self._fetch_quicklists(client, unit_type, state)
                mul_ids = self.stored_mul_ids()
                state.manifest.total_mul_ids = len(mul_ids)
                if skip_details:
                    log.info("Skipping detail pages for %s MUL ids", len(mul_ids))
                else:
                    await self._fetch_details(client, mul_ids, state)
            finally:
                if state.failures_dirty:
                    self.store.save_failures(state.failures)

        state.manifest.failures = len(state.failures)
        self.store.save_manifest(state.manifest)
        log.info(
            "MUL fetch complete: %s partitions fetched, %s skipped; "
            "%s detail pages fetched, %s skipped; %s failures on record",
            state.manifest.partitions_fetched,
            state.manifest.partitions_skipped,
            state.manifest.detail_pages_fetched,
            state.manifest.detail_pages_skipped,
            state.manifest.failures,
        )
        return state.manifest

    def _start_manifest(self) -> FetchManifest:
        """Start this run's manifest from the previous one.

        QuickList counts of types outside this run carry over so the manifest keeps
        describing the whole store.
        """

        manifest = FetchManifest(
            fetched_at=utcnow(),
            base_url=self.config.base_url,
            types=list(self.config.unit_types),
        )
        previous = self.store.load_manifest()
        if previous is None:
            return manifest
        if previous.base_url != manifest.base_url:
            log.warning(
                "Store %s was filled from %s; now fetching from %s",
                self.store.root,
                previous.base_url,
                manifest.base_url,
            )
        manifest.types = sorted({*previous.types, *manifest.types})
        manifest.quicklist_counts = {
            key: count
            for key, count in previous.quicklist_counts.items()
            if int(key) not in self.config.unit_types
        }
        log.info("Resuming into %s, last fetched %s", self.store.root, previous.fetched_at)
        return manifest

    async def _fetch_quicklists(
        self, client: MulClient, unit_type: int, state: _FetchState
    ) -> None:
        type_count = 0
        for min_tons, max_tons in TONNAGE_PARTITIONS:
            key = partition_key(unit_type, min_tons, max_tons)
            if self.store.has_quicklist(unit_type, min_tons, max_tons):
                state.manifest.partitions_skipped += 1
                type_count += self._count_stored(unit_type, min_tons, max_tons)
                continue
            if state.should_skip(key):
                log.info("Skipping partition %s after a permanent failure", key)
                state.manifest.partitions_skipped += 1
                continue

            try:
                body = await client.fetch_quicklist(unit_type, min_tons, max_tons)
            except MulAPIError as exc:
                log.warning("QuickList %s failed: %s", key, exc)
                state.record_failure(key, exc)
                self.store.save_failures(state.failures)
                state.failures_dirty = False
                continue

            self.store.write_quicklist(unit_type, min_tons, max_tons, body)
            state.clear_failure(key)
            state.manifest.partitions_fetched += 1
            count = self._count_stored(unit_type, min_tons, max_tons)
            type_count += count
            log.info(
                "Fetched QuickList type=%s tons=%s-%s (%s units)",
                unit_type,
                min_tons,
                max_tons,
                count,
            )
            await self._pause()
        state.manifest.quicklist_counts[str(unit_type)] = type_count

    async def _fetch_details(
        self, client: MulClient, mul_ids: list[int], state: _FetchState
    ) -> None:
        total = len(mul_ids)
        for index, mul_id in enumerate(mul_ids, start=1):
            key = detail_key(mul_id)
            if self.store.has_detail(mul_id) or state.should_skip(key):
                state.manifest.detail_pages_skipped += 1
                continue
            try:
                body = await client.fetch_detail(mul_id)
            except MulAPIError as exc:
                log.warning("Detail page %s failed: %s", mul_id, exc)
                state.record_failure(key, exc)
                continue

            self.store.write_detail(mul_id, body)
            state.clear_failure(key)
            state.manifest.detail_pages_fetched += 1
            done = state.manifest.detail_pages_fetched + state.manifest.detail_pages_skipped
            if done % 100 == 0 or index == total:
                log.info(
                    "Detail pages: %s fetched, %s skipped, %s remaining",
                    state.manifest.detail_pages_fetched,
                    state.manifest.detail_pages_skipped,
                    total - index,
                )
            if state.failures_dirty and done % 100 == 0:
                self.store.save_failures(state.failures)
                state.failures_dirty = False
            await self._pause()

    def stored_mul_ids(self) -> list[int]:
        """Every MUL id listed in the stored partitions, sorted and de-duplicated."""

        ids: set[int] = set()
        for path in self.store.quicklist_files():
            try:
                ids.update(unit.id for unit in parse_quicklist(self.store.read_quicklist(path)))
            except (ValueError, ValidationError) as exc:
                log.error("Cannot read stored QuickList %s: %s", path, exc)
        return sorted(ids)

    def _count_stored(self, unit_type: int, min_tons: int, max_tons: int) -> int:
        path = self.store.quicklist_path(unit_type, min_tons, max_tons)
        try:
            return len(parse_quicklist(self.store.read_quicklist(path)))
        except (ValueError, ValidationError) as exc:
            # json.JSONDecodeError is a ValueError
            log.error("Stored QuickList %s is not valid: %s", path, exc)
            return 0

    async def _pause(self) -> None:
        seconds = jittered_delay(self.config.delay_seconds, uniform=self.uniform)
        if seconds > 0:
            await self.sleep(seconds)


def jittered_delay(
    delay: float, *, uniform: Callable[[float, float], float] = random.uniform
) -> float:
    """Return ``delay`` spread by +/-30%, or 0 when no delay is configured."""

    if delay <= 0:
        return 0.0
    spread = delay * JITTER_FRACTION
    return max(0.0, uniform(delay - spread, delay + spread))
