"""Repository contracts used by the domain services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from mechdata.domain.model import (
        ComponentCategory,
        ComponentType,
        DatasetMetadata,
        Equipment,
        Era,
        Faction,
        LoadoutEntry,
        MechData,
        Quirk,
        Unit,
        UnitAvailability,
        UnitChassis,
        UnitLocation,
    )


@runtime_checkable
class ChassisRepository(Protocol):
    def add(self, entity: UnitChassis) -> None: ...

    def get_by_slug(self, slug: str) -> UnitChassis | None: ...


@runtime_checkable
class UnitRepository(Protocol):
    def add(self, entity: Unit) -> None: ...

    def get(self, unit_id: UUID) -> Unit | None: ...

    def get_by_slug(self, slug: str) -> Unit | None: ...

    def get_by_mul_id(self, mul_id: int) -> Unit | None: ...

    def list_all(self) -> list[Unit]: ...

    def release_mul_id(self, mul_id: int, *, keep: UUID) -> int:
        """Clear ``mul_id`` on every unit other than ``keep``; return how many were cleared."""
        ...


@runtime_checkable
class UnitLocationRepository(Protocol):
    def list_for_unit(self, unit_id: UUID) -> list[UnitLocation]: ...

    def replace(self, unit_id: UUID, rows: Iterable[UnitLocation]) -> None: ...


@runtime_checkable
class LoadoutRepository(Protocol):
    def list_for_unit(self, unit_id: UUID) -> list[LoadoutEntry]: ...

    def replace(self, unit_id: UUID, rows: Iterable[LoadoutEntry]) -> None: ...


@runtime_checkable
class QuirkRepository(Protocol):
    def get_by_slug(self, slug: str) -> Quirk | None: ...

    def add(self, entity: Quirk) -> None: ...

    def quirk_ids_for_unit(self, unit_id: UUID) -> set[UUID]: ...

    def attach(self, unit_id: UUID, quirk_ids: Iterable[UUID]) -> None: ...

    def detach(self, unit_id: UUID, quirk_ids: Iterable[UUID]) -> None: ...


@runtime_checkable
class MechDataRepository(Protocol):
    def get(self, unit_id: UUID) -> MechData | None: ...

    def add(self, entity: MechData) -> None: ...


@runtime_checkable
class EquipmentRepository(Protocol):
    def add(self, entity: Equipment) -> None: ...

    def get_by_slug(self, slug: str) -> Equipment | None: ...

    def list_all(self) -> list[Equipment]: ...

    def slug_index(self) -> dict[str, UUID]:
        """Return ``{slug: id}`` for every stored equipment row."""
        ...

    def observed_locations(self) -> dict[UUID, set[str]]:
        """Return the distinct loadout locations each equipment row is mounted in."""
        ...


@runtime_checkable
class ComponentTypeRepository(Protocol):
    def add(self, entity: ComponentType) -> None: ...

    def get_by_slug(self, category: ComponentCategory, slug: str) -> ComponentType | None: ...

    def aliases(self, category: ComponentCategory) -> dict[str, UUID]:
        """Return ``{normalized alias: component type id}`` for one category."""
        ...

    def add_alias(
        self,
        category: ComponentCategory,
        *,
        alias: str,
        label: str,
        type_id: UUID,
    ) -> None: ...


@runtime_checkable
class EraRepository(Protocol):
    def add(self, entity: Era) -> None: ...

    def get_by_slug(self, slug: str) -> Era | None: ...


@runtime_checkable
class FactionRepository(Protocol):
    def add(self, entity: Faction) -> None: ...

    def get_by_slug(self, slug: str) -> Faction | None: ...

    def get_by_name(self, name: str) -> Faction | None: ...


@runtime_checkable
class AvailabilityRepository(Protocol):
    def keys_for_unit(self, unit_id: UUID) -> set[tuple[UUID, UUID]]:
        """Return the ``(faction_id, era_id)`` pairs stored for ``unit_id``."""
        ...

    def add(self, entity: UnitAvailability) -> None: ...

    def clear_unit(self, unit_id: UUID) -> int: ...


@runtime_checkable
class DatasetMetadataRepository(Protocol):
    def add(self, entity: DatasetMetadata) -> None: ...

    def latest(self) -> DatasetMetadata | None: ...

