"""Write run reports (JSON) and the unmatched-record CSV."""

from __future__ import annotations

import csv
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, Field

from mechdata.domain.model.base import utcnow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from mechdata.domain.catalog import CatalogSeedReport, EquipmentStatsReport
    from mechdata.domain.ingest_pipeline import IngestRunReport
    from mechdata.domain.reconciliation import ReconcileReport, UnmatchedRecord

log = getLogger(__name__)

UNMATCHED_CSV_NAME = "unmatched_mul_units.csv"
UNMATCHED_CSV_FIELDS = ("external_id", "name", "computed_slug", "tonnage", "reason")


class OutcomeCounts(BaseModel):
    created: int = 0
    updated: int = 0
    unchanged: int = 0


class GapEntry(BaseModel):
    unit_slug: str
    category: str
    label: str


class FailureEntry(BaseModel):
    source: str
    unit: str | None = None
    error: str


class IngestSummary(BaseModel):
    kind: str = "ingest"
    finished_at: datetime = Field(default_factory=utcnow)
    dataset_version: str | None = None
    documents: int
    units_ingested: int
    skipped_entries: int
    parse_failures: list[str]
    failures: list[FailureEntry]
    resolution_gaps: list[GapEntry]
    counters: dict[str, OutcomeCounts]
    ammo_linked: int
    observed_locations_refreshed: int

    @classmethod
    def from_report(cls, report: IngestRunReport) -> Self:
        return cls(
            dataset_version=report.dataset_version,
            documents=report.documents,
            units_ingested=report.units_ingested,
            skipped_entries=report.skipped_entries,
            parse_failures=list(report.parse_failures),
            failures=[
                FailureEntry(source=failure.source, unit=failure.unit_slug, error=failure.error)
                for failure in report.unit_failures
            ],
            resolution_gaps=[
                GapEntry(unit_slug=gap.unit_slug, category=str(gap.category), label=gap.label)
                for gap in report.resolution_gaps
            ],
            counters={
                kind: OutcomeCounts(
                    created=counter.created,
                    updated=counter.updated,
                    unchanged=counter.unchanged,
                )
                for kind, counter in report.counters.items()
            },
            ammo_linked=report.ammo_linked,
            observed_locations_refreshed=report.observed_locations_refreshed,
        )


class UnmatchedEntry(BaseModel):
    external_id: int
    name: str
    computed_slug: str
    tonnage: float | None = None
    reason: str


class ReconcileSummary(BaseModel):
    kind: str = "mul-import"
    finished_at: datetime = Field(default_factory=utcnow)
    records: int
    matched: int
    matched_by_tier: dict[str, int]
    fields_written: dict[str, int]
    fields_kept: dict[str, int]
    mul_ids_released: int
    availability_inserted: int
    availability_existing: int
    availability_cleared: int
    units_without_details: int
    new_factions: list[str]
    unmapped_eras: list[str]
    unmatched: list[UnmatchedEntry]
    failures: list[FailureEntry]

    @classmethod
    def from_report(cls, report: ReconcileReport) -> Self:
        return cls(
            records=report.records,
            matched=report.matched,
            matched_by_tier={str(tier): count for tier, count in report.matched_by_tier.items()},
            fields_written=dict(report.fields_written),
            fields_kept=dict(report.fields_kept),
            mul_ids_released=report.mul_ids_released,
            availability_inserted=report.availability_inserted,
            availability_existing=report.availability_existing,
            availability_cleared=report.availability_cleared,
            units_without_details=report.units_without_details,
            new_factions=list(report.new_factions),
            unmapped_eras=sorted(report.unmapped_eras),
            unmatched=[_unmatched_entry(record) for record in report.unmatched],
            failures=[
                FailureEntry(source=str(failure.external_id), unit=failure.name, error=failure.error)
                for failure in report.failures
            ],
        )


class SeedSummary(BaseModel):
    kind: str = "seed"
    finished_at: datetime = Field(default_factory=utcnow)
    catalog_version: str
    types_created: int
    types_updated: int
    aliases_created: int
    eras_created: int
    factions_created: int
    per_category: dict[str, int]
    equipment_stats: dict[str, int] | None = None

    @classmethod
    def from_reports(
        cls,
        report: CatalogSeedReport,
        *,
        catalog_version: str,
        stats: EquipmentStatsReport | None = None,
    ) -> Self:
        return cls(
            catalog_version=catalog_version,
            types_created=report.types_created,
            types_updated=report.types_updated,
            aliases_created=report.aliases_created,
            eras_created=report.eras_created,
            factions_created=report.factions_created,
            per_category={str(category): count for category, count in report.per_category.items()},
            equipment_stats=(
                {
                    "updated": stats.updated,
                    "unchanged": stats.unchanged,
                    "not_found": stats.not_found,
                    "alias_hits": stats.alias_hits,
                }
                if stats is not None
                else None
            ),
        )


def _unmatched_entry(record: UnmatchedRecord) -> UnmatchedEntry:
    return UnmatchedEntry(
        external_id=record.external_id,
        name=record.name,
        computed_slug=record.computed_slug,
        tonnage=record.tonnage,
        reason=record.reason,
    )


def write_run_report(directory: Path, summary: BaseModel, *, name: str) -> Path:
    """Write ``summary`` as ``<name>-<UTC timestamp>.json`` into ``directory``."""

    directory.mkdir(parents=True, exist_ok=True)
    stamp = utcnow().strftime("%Y%m%dT%H%M%S%fZ")
    path = directory / f"{name}-{stamp}.json"
    path.write_text(summary.model_dump_json(indent=2), encoding="utf-8")
    log.info("Run report written to %s", path)
    return path


def write_unmatched_csv(path: Path, records: Iterable[UnmatchedRecord]) -> int:
    """Write one CSV row per unmatched record; return the row count."""

    path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=UNMATCHED_CSV_FIELDS)
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "external_id": record.external_id,
                    "name": record.name,
                    "computed_slug": record.computed_slug,
                    "tonnage": "" if record.tonnage is None else record.tonnage,
                    "reason": record.reason,
                }
            )
            count += 1
    log.info("Wrote %s unmatched records to %s", count, path)
    return count
