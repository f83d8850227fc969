"""Reconcile external catalog records with stored units."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from .availability import upsert_availability
from .matcher import CatalogMatcher, MatchTier, UnmatchedRecord
from .merge import merge_catalog_record

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from datetime import datetime
    from uuid import UUID

    from mechdata.domain.model import ExternalCatalogRecord
    from mechdata.domain.ports.unit_of_work import ReconcileUnitOfWork

    from .availability import AvailabilityResult
    from .merge import MergeResult

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RecordFailure:
    external_id: int
    name: str
    error: str


@dataclass(slots=True)
class ReconcileReport:
    records: int = 0
    matched_by_tier: Counter[MatchTier] = field(default_factory=Counter)
    fields_written: Counter[str] = field(default_factory=Counter)
    fields_kept: Counter[str] = field(default_factory=Counter)
    mul_ids_released: int = 0
    availability_inserted: int = 0
    availability_existing: int = 0
    availability_cleared: int = 0
    units_without_details: int = 0
    new_factions: list[str] = field(default_factory=list)
    unmapped_eras: set[str] = field(default_factory=set)
    unmatched: list[UnmatchedRecord] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return sum(self.matched_by_tier.values())

    def absorb_merge(self, merge: MergeResult) -> None:
        self.fields_written.update(merge.written)
        self.fields_kept.update(merge.kept)
        self.mul_ids_released += merge.released_mul_ids

    def absorb_availability(self, result: AvailabilityResult) -> None:
        self.availability_inserted += result.inserted
        self.availability_existing += result.existing
        self.availability_cleared += result.cleared
        self.new_factions.extend(result.new_factions)
        self.unmapped_eras.update(result.unmapped_eras)


def reconcile_catalog(
    records: Iterable[ExternalCatalogRecord],
    *,
    uow_factory: Callable[[], ReconcileUnitOfWork],
    overrides: Mapping[int, str] | None = None,
    force: bool = False,
    skip_availability: bool = False,
    now: datetime | None = None,
) -> ReconcileReport:
    """Match every record, merge its fields and availability, one transaction per record.

    The unit index is loaded once up front. A unit claimed by an earlier record in
    the same run is not claimed again; the later record is reported as unmatched.
    """

    report = ReconcileReport()
    with uow_factory() as uow:
        matcher = CatalogMatcher.for_units(uow.repositories.units.list_all(), overrides=overrides)
    log.info("Matching against %s units", len(matcher.index.by_slug))

    claimed: dict[UUID, int] = {}
    for record in records:
        report.records += 1
        outcome = matcher.match(record)
        if isinstance(outcome, UnmatchedRecord):
            report.unmatched.append(outcome)
            continue
        previous = claimed.get(outcome.unit_id)
        if previous is not None:
            log.warning(
                "MUL id %s (%s) matches %s, already claimed by MUL id %s",
                record.external_id,
                record.name,
                outcome.slug,
                previous,
            )
            report.unmatched.append(
                UnmatchedRecord(
                    external_id=record.external_id,
                    name=record.name,
                    computed_slug=outcome.slug,
                    tonnage=record.tonnage,
                    reason=f"unit already matched to MUL id {previous}",
                )
            )
            continue

        try:
            merge, availability = _reconcile_one(
                record,
                outcome.unit_id,
                uow_factory=uow_factory,
                force=force,
                skip_availability=skip_availability,
                now=now,
            )
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to reconcile MUL id %s (%s): %s", record.external_id, record.name, exc)
            report.failures.append(RecordFailure(record.external_id, record.name, str(exc)))
            continue

        claimed[outcome.unit_id] = record.external_id
        report.matched_by_tier[outcome.tier] += 1
        report.absorb_merge(merge)
        if availability is not None:
            report.absorb_availability(availability)
        elif not skip_availability:
            report.units_without_details += 1

    log.info(
        "Reconciled %s records: %s matched (%s), %s unmatched, %s failed; "
        "%s availability rows inserted, %s new factions",
        report.records,
        report.matched,
        ", ".join(f"{tier}={count}" for tier, count in sorted(report.matched_by_tier.items())),
        len(report.unmatched),
        len(report.failures),
        report.availability_inserted,
        len(report.new_factions),
    )
    return report


def _reconcile_one(
    record: ExternalCatalogRecord,
    unit_id: UUID,
    *,
    uow_factory: Callable[[], ReconcileUnitOfWork],
    force: bool,
    skip_availability: bool,
    now: datetime | None,
) -> tuple[MergeResult, AvailabilityResult | None]:
    with uow_factory() as uow:
        repositories = uow.repositories
        unit = repositories.units.get(unit_id)
        if unit is None:
            raise LookupError(f"Unit {unit_id} disappeared during reconciliation")
        merge = merge_catalog_record(unit, record, units=repositories.units, force=force, now=now)
        availability = None
        if not skip_availability and record.availability is not None:
            availability = upsert_availability(
                unit.id, record.availability, repositories=repositories, force=force
            )
        uow.commit()
    return merge, availability
