"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from mechdata.domain.ports.persistence import (
        AvailabilityRepository,
        ChassisRepository,
        ComponentTypeRepository,
        DatasetMetadataRepository,
        EquipmentRepository,
        EraRepository,
        FactionRepository,
        LoadoutRepository,
        MechDataRepository,
        QuirkRepository,
        UnitLocationRepository,
        UnitRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class IngestRepositories(RepositoryCollection):
    """Repositories touched while ingesting one parsed unit."""

    chassis: ChassisRepository
    units: UnitRepository
    locations: UnitLocationRepository
    loadout: LoadoutRepository
    equipment: EquipmentRepository
    quirks: QuirkRepository
    mech_data: MechDataRepository
    datasets: DatasetMetadataRepository


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories holding reference data (component types, eras, factions, equipment stats)."""

    component_types: ComponentTypeRepository
    eras: EraRepository
    factions: FactionRepository
    equipment: EquipmentRepository


@dataclass(slots=True)
class ReconcileRepositories(RepositoryCollection):
    """Repositories used when merging external catalog records onto units."""

    units: UnitRepository
    eras: EraRepository
    factions: FactionRepository
    availability: AvailabilityRepository


type IngestUnitOfWork = UnitOfWork[IngestRepositories]
type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
type ReconcileUnitOfWork = UnitOfWork[ReconcileRepositories]
