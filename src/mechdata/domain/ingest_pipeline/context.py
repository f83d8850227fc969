"""Shared context structures for the ingest pipeline (per-unit context + run report)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

    from mechdata.domain.catalog import AliasResolver
    from mechdata.domain.model import ComponentCategory, Unit, UnitChassis
    from mechdata.domain.ports.unit_of_work import IngestUnitOfWork

    from .identity_cache import EquipmentIdentityCache


class UpsertOutcome(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


ENTITY_KINDS: tuple[str, ...] = (
    "chassis",
    "units",
    "locations",
    "loadout",
    "equipment",
    "quirks",
    "mech_data",
)


@dataclass(slots=True)
class EntityCounter:
    created: int = 0
    updated: int = 0
    unchanged: int = 0

    def record(self, outcome: UpsertOutcome, count: int = 1) -> None:
        match outcome:
            case UpsertOutcome.CREATED:
                self.created += count
            case UpsertOutcome.UPDATED:
                self.updated += count
            case UpsertOutcome.UNCHANGED:
                self.unchanged += count

    def absorb(self, other: EntityCounter) -> None:
        self.created += other.created
        self.updated += other.updated
        self.unchanged += other.unchanged

    @property
    def total(self) -> int:
        return self.created + self.updated + self.unchanged


def _empty_counters() -> dict[str, EntityCounter]:
    return {kind: EntityCounter() for kind in ENTITY_KINDS}


@dataclass(frozen=True, slots=True)
class ResolutionGap:
    """A component label that no alias maps to; fixed by curating the alias tables."""

    unit_slug: str
    category: ComponentCategory
    label: str


@dataclass(frozen=True, slots=True)
class UnitFailure:
    source: str
    unit_slug: str | None
    error: str


@dataclass(slots=True)
class IngestContext:
    """Mutable state shared across the phases of one unit's ingestion.

    Nothing here is visible to the rest of the run until the unit commits.
    """

    uow: IngestUnitOfWork
    resolver: AliasResolver
    equipment_cache: EquipmentIdentityCache
    chassis: UnitChassis | None = None
    unit: Unit | None = None
    pending_equipment: dict[str, UUID] = field(default_factory=dict)
    counters: dict[str, EntityCounter] = field(default_factory=_empty_counters)
    gaps: list[ResolutionGap] = field(default_factory=list)

    def record(self, kind: str, outcome: UpsertOutcome, count: int = 1) -> None:
        self.counters[kind].record(outcome, count)

    def require_unit(self) -> Unit:
        if self.unit is None:
            raise RuntimeError("Unit phase has not run for this context")
        return self.unit

    def require_chassis(self) -> UnitChassis:
        if self.chassis is None:
            raise RuntimeError("Chassis phase has not run for this context")
        return self.chassis


@dataclass(slots=True)
class IngestRunReport:
    """Summary of one archive ingestion run."""

    dataset_version: str | None = None
    documents: int = 0
    units_ingested: int = 0
    skipped_entries: int = 0
    parse_failures: list[str] = field(default_factory=list)
    unit_failures: list[UnitFailure] = field(default_factory=list)
    resolution_gaps: list[ResolutionGap] = field(default_factory=list)
    counters: dict[str, EntityCounter] = field(default_factory=_empty_counters)
    ammo_linked: int = 0
    observed_locations_refreshed: int = 0

    def absorb(self, context: IngestContext) -> None:
        """Fold a committed unit's outcomes into the run totals."""

        self.units_ingested += 1
        for kind, counter in context.counters.items():
            self.counters[kind].absorb(counter)
        self.resolution_gaps.extend(context.gaps)

    @property
    def error_count(self) -> int:
        return len(self.unit_failures)
