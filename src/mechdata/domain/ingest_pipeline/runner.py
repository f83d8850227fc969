"""Entry points for ingesting parsed units and finishing an ingestion run."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from mechdata.config.ingest import IngestConfig
from mechdata.domain.catalog import CATALOG_VERSION
from mechdata.domain.model import DatasetMetadata, EquipmentCategory
from mechdata.domain.parsing import ammo_parent_candidates, parse_document
from mechdata.domain.slugs import equipment_slug

from .context import IngestContext, IngestRunReport, UnitFailure
from .identity_cache import EquipmentIdentityCache
from .orchestrator import IngestionPipeline
from .phases import default_phases

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from uuid import UUID

    from mechdata.domain.catalog import AliasResolver
    from mechdata.domain.model import Equipment
    from mechdata.domain.parsing import ParsedUnit, SourceDocument
    from mechdata.domain.ports.persistence import EquipmentRepository
    from mechdata.domain.ports.unit_of_work import IngestUnitOfWork

log = getLogger(__name__)


class IngestAbortedError(RuntimeError):
    """Raised once the number of failed units reaches ``max_errors``."""

    def __init__(self, message: str, report: IngestRunReport) -> None:
        super().__init__(message)
        self.report = report


def default_pipeline() -> IngestionPipeline:
    return IngestionPipeline(phases=default_phases())


def ingest_unit(
    parsed: ParsedUnit,
    *,
    uow: IngestUnitOfWork,
    resolver: AliasResolver,
    equipment_cache: EquipmentIdentityCache,
    pipeline: IngestionPipeline | None = None,
) -> IngestContext:
    """Run every phase for ``parsed`` inside ``uow`` and commit.

    The caller publishes ``context.pending_equipment`` to the cache only after this
    returns; on an exception nothing has been committed or published.
    """

    context = IngestContext(uow=uow, resolver=resolver, equipment_cache=equipment_cache)
    (pipeline or default_pipeline()).run(parsed, context=context)
    uow.commit()
    return context


def ingest_units(
    documents: Iterable[SourceDocument],
    *,
    uow_factory: Callable[[], IngestUnitOfWork],
    resolver: AliasResolver,
    config: IngestConfig | None = None,
    report: IngestRunReport | None = None,
    pipeline: IngestionPipeline | None = None,
) -> IngestRunReport:
    """Parse and ingest every document, one transaction per unit.

    A unit that fails is rolled back alone and recorded; the run continues until
    ``config.max_errors`` failures (0 means unlimited).
    """

    settings = config or IngestConfig()
    report = report or IngestRunReport(dataset_version=settings.dataset_version)
    active_pipeline = pipeline or default_pipeline()
    equipment_cache = EquipmentIdentityCache()
    with uow_factory() as uow:
        equipment_cache.warm(uow.repositories.equipment.slug_index())
    log.info("Equipment identity cache warmed with %s entries", len(equipment_cache))

    for document in documents:
        report.documents += 1
        try:
            parsed = parse_document(document)
        except Exception as exc:  # noqa: BLE001
            log.warning("Could not parse %s: %s", document.name, exc)
            parsed = None
        if parsed is None:
            log.warning("Could not parse %s", document.name)
            report.parse_failures.append(document.name)
            continue

        try:
            with uow_factory() as uow:
                context = ingest_unit(
                    parsed,
                    uow=uow,
                    resolver=resolver,
                    equipment_cache=equipment_cache,
                    pipeline=active_pipeline,
                )
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to ingest %s (%s): %s", document.name, parsed.slug, exc)
            report.unit_failures.append(UnitFailure(document.name, parsed.slug, str(exc)))
            if settings.max_errors and report.error_count >= settings.max_errors:
                raise IngestAbortedError(
                    f"Reached max_errors limit ({settings.max_errors}); aborting", report
                ) from exc
            continue

        equipment_cache.promote(context.pending_equipment)
        report.absorb(context)
        if settings.progress_every and report.documents % settings.progress_every == 0:
            log.info(
                "Progress: %s documents, %s units ingested, %s parse failures, %s errors",
                report.documents,
                report.units_ingested,
                len(report.parse_failures),
                report.error_count,
            )

    log.info(
        "Ingested %s units from %s documents (%s parse failures, %s errors, %s gaps)",
        report.units_ingested,
        report.documents,
        len(report.parse_failures),
        report.error_count,
        len(report.resolution_gaps),
    )
    return report


def link_ammunition(repository: EquipmentRepository) -> int:
    """Point each ammunition row at the weapon it feeds; return how many links changed."""

    equipment = repository.list_all()
    by_slug: dict[str, UUID] = {}
    by_compact: dict[str, UUID] = {}
    for item in equipment:
        if item.category is EquipmentCategory.AMMUNITION:
            continue
        by_slug[item.slug] = item.id
        by_compact.setdefault(item.slug.replace("-", ""), item.id)

    linked = 0
    for item in equipment:
        if item.category is not EquipmentCategory.AMMUNITION:
            continue
        parent_id = _find_parent(item, by_slug, by_compact)
        if parent_id is not None and item.ammo_for_id != parent_id:
            item.ammo_for_id = parent_id
            linked += 1
    return linked


def _find_parent(
    ammo: Equipment, by_slug: dict[str, UUID], by_compact: dict[str, UUID]
) -> UUID | None:
    for candidate in ammo_parent_candidates(ammo.name):
        slug = equipment_slug(candidate)
        if slug in by_slug:
            return by_slug[slug]
        compact = slug.replace("-", "")
        for key in (compact, f"is{compact}", f"cl{compact}"):
            if key in by_compact:
                return by_compact[key]
    return None


def refresh_observed_locations(repository: EquipmentRepository) -> int:
    observed = repository.observed_locations()
    refreshed = 0
    for item in repository.list_all():
        locations = sorted(observed.get(item.id, set()))
        if item.observed_locations != locations:
            item.observed_locations = locations
            refreshed += 1
    return refreshed


def finalize_ingest_run(
    *,
    uow: IngestUnitOfWork,
    report: IngestRunReport,
    version: str,
    catalog_version: str = CATALOG_VERSION,
) -> IngestRunReport:
    """Run the post-ingestion passes in one transaction and record the dataset version."""

    with uow:
        equipment = uow.repositories.equipment
        report.ammo_linked = link_ammunition(equipment)
        report.observed_locations_refreshed = refresh_observed_locations(equipment)
        uow.repositories.datasets.add(
            DatasetMetadata(
                version=version,
                catalog_version=catalog_version,
                description=(
                    f"{report.units_ingested} units from {report.documents} documents"
                ),
            )
        )
        uow.commit()
    log.info(
        "Finalized dataset %s: %s ammunition links, %s equipment location sets refreshed",
        version,
        report.ammo_linked,
        report.observed_locations_refreshed,
    )
    return report
