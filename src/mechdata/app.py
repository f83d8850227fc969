"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from mechdata.adapters.megamek import UnitArchive
from mechdata.adapters.mul import MulCatalogReader, MulFetcher, RawResponseStore, load_overrides
from mechdata.adapters.reports import (
    UNMATCHED_CSV_NAME,
    IngestSummary,
    ReconcileSummary,
    SeedSummary,
    write_run_report,
    write_unmatched_csv,
)
from mechdata.adapters.sqlalchemy import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyIngestUnitOfWork,
    SqlAlchemyReconcileUnitOfWork,
    is_started,
    startup,
)
from mechdata.config import get_ingest_config, get_mul_config, get_storage_config
from mechdata.domain.catalog import (
    CATALOG_VERSION,
    AliasResolver,
    EquipmentStats,
    apply_equipment_stats,
    seed_reference_catalog,
)
from mechdata.domain.ingest_pipeline import IngestRunReport, finalize_ingest_run, ingest_units
from mechdata.domain.model.base import utcnow
from mechdata.domain.ports.unit_of_work import (
    CatalogUnitOfWork,
    IngestUnitOfWork,
    ReconcileUnitOfWork,
)
from mechdata.domain.reconciliation import reconcile_catalog

if TYPE_CHECKING:
    from pathlib import Path

    from mechdata.adapters.mul import FetchManifest
    from mechdata.config import MulConfig, StorageConfig
    from mechdata.domain.catalog import CatalogSeedReport, EquipmentStatsReport
    from mechdata.domain.reconciliation import ReconcileReport

CatalogUnitOfWorkFactory = Callable[[], CatalogUnitOfWork]
IngestUnitOfWorkFactory = Callable[[], IngestUnitOfWork]
ReconcileUnitOfWorkFactory = Callable[[], ReconcileUnitOfWork]

log = getLogger(__name__)

_EQUIPMENT_STATS = TypeAdapter(list[EquipmentStats])


def _ensure_started() -> None:
    if not is_started():
        startup()


def load_equipment_stats(path: Path) -> list[EquipmentStats]:
    """Read a JSON array of ``{"slug": ..., "tonnage": ..., ...}`` stat entries."""

    return _EQUIPMENT_STATS.validate_json(path.read_bytes())


def seed_catalog(
    *,
    equipment_stats_path: Path | None = None,
    force: bool = False,
    catalog_uow_factory: CatalogUnitOfWorkFactory | None = None,
    storage: StorageConfig | None = None,
) -> tuple[CatalogSeedReport, EquipmentStatsReport | None]:
    """Seed the reference catalog and optionally apply an equipment stats file."""

    _ensure_started()
    uow_factory = catalog_uow_factory or SqlAlchemyCatalogUnitOfWork
    stats = load_equipment_stats(equipment_stats_path) if equipment_stats_path else None

    with uow_factory() as uow:
        report = seed_reference_catalog(uow)
        uow.commit()

    stats_report = None
    if stats is not None:
        with uow_factory() as uow:
            stats_report = apply_equipment_stats(uow.repositories.equipment, stats, force=force)
            uow.commit()
        log.info(
            "Equipment stats: updated=%s unchanged=%s not_found=%s alias_hits=%s",
            stats_report.updated,
            stats_report.unchanged,
            stats_report.not_found,
            stats_report.alias_hits,
        )

    write_run_report(
        (storage or get_storage_config()).reports_dir(),
        SeedSummary.from_reports(report, catalog_version=CATALOG_VERSION, stats=stats_report),
        name="seed",
    )
    return report, stats_report


def ingest_archive(
    zip_path: Path,
    *,
    version: str | None = None,
    max_errors: int | None = None,
    ingest_uow_factory: IngestUnitOfWorkFactory | None = None,
    catalog_uow_factory: CatalogUnitOfWorkFactory | None = None,
    storage: StorageConfig | None = None,
) -> IngestRunReport:
    """Ingest every unit file of a MegaMek archive.

    The reference catalog is seeded first so the alias resolver is never empty.
    """

    _ensure_started()
    ingest_factory = ingest_uow_factory or SqlAlchemyIngestUnitOfWork
    catalog_factory = catalog_uow_factory or SqlAlchemyCatalogUnitOfWork

    config = get_ingest_config()
    dataset_version = version or config.dataset_version or utcnow().strftime("%Y.%m.%d")
    config = replace(config, dataset_version=dataset_version)
    if max_errors is not None:
        config = replace(config, max_errors=max_errors)

    with catalog_factory() as uow:
        seed_reference_catalog(uow)
        uow.commit()
        resolver = AliasResolver.from_repository(uow.repositories.component_types)

    archive = UnitArchive(zip_path)
    log.info("Starting ingestion of %s as dataset %s", zip_path, dataset_version)
    report = IngestRunReport(dataset_version=dataset_version)
    try:
        ingest_units(
            archive.documents(),
            uow_factory=ingest_factory,
            resolver=resolver,
            config=config,
            report=report,
        )
        finalize_ingest_run(uow=ingest_factory(), report=report, version=dataset_version)
    finally:
        report.skipped_entries = archive.skipped
        write_run_report(
            (storage or get_storage_config()).reports_dir(),
            IngestSummary.from_report(report),
            name="ingest",
        )
    return report


def fetch_mul_catalog(
    *,
    config: MulConfig | None = None,
    store: RawResponseStore | None = None,
    retry_failed: bool = False,
    skip_details: bool = False,
) -> FetchManifest:
    """Download the Master Unit List into the raw store."""

    mul_config = config or get_mul_config()
    raw_store = store or RawResponseStore(get_storage_config().mul_raw_dir())
    log.info(
        "Fetching MUL types %s from %s into %s",
        ", ".join(str(unit_type) for unit_type in mul_config.unit_types),
        mul_config.base_url,
        raw_store.root,
    )
    fetcher = MulFetcher(store=raw_store, config=mul_config)
    return fetcher(retry_failed=retry_failed, skip_details=skip_details)


def import_mul_catalog(
    *,
    store: RawResponseStore | None = None,
    overrides_path: Path | None = None,
    force: bool = False,
    skip_availability: bool = False,
    reconcile_uow_factory: ReconcileUnitOfWorkFactory | None = None,
    storage: StorageConfig | None = None,
) -> ReconcileReport:
    """Match stored MUL records to units and merge their values and availability."""

    _ensure_started()
    storage_config = storage or get_storage_config()
    raw_store = store or RawResponseStore(storage_config.mul_raw_dir())
    overrides = load_overrides(overrides_path) if overrides_path else {}
    if overrides:
        log.info("Loaded %s MUL overrides from %s", len(overrides), overrides_path)

    reader = MulCatalogReader(raw_store, include_availability=not skip_availability)
    report = reconcile_catalog(
        reader.records(),
        uow_factory=reconcile_uow_factory or SqlAlchemyReconcileUnitOfWork,
        overrides=overrides,
        force=force,
        skip_availability=skip_availability,
    )
    write_unmatched_csv(raw_store.root / UNMATCHED_CSV_NAME, report.unmatched)
    write_run_report(
        storage_config.reports_dir(),
        ReconcileSummary.from_report(report),
        name="mul-import",
    )
    return report
