"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, func, insert, select

from mechdata.adapters.sqlalchemy.mappings import (
    chassis_table,
    component_alias_tables,
    component_type_tables,
    dataset_metadata_table,
    equipment_table,
    era_table,
    faction_table,
    loadout_table,
    quirk_table,
    unit_availability_table,
    unit_location_table,
    unit_quirk_table,
    unit_table,
)
from mechdata.domain.model import (
    COMPONENT_TYPE_CLASSES,
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

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from sqlalchemy import Table
    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from mechdata.domain.model import ComponentCategory, ComponentType


class SqlAlchemyChassisRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: UnitChassis) -> None:
        self.session.add(entity)

    def get_by_slug(self, slug: str) -> UnitChassis | None:
        stmt = select(UnitChassis).where(chassis_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyUnitRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Unit) -> None:
        self.session.add(entity)

    def get(self, unit_id: UUID) -> Unit | None:
        return self.session.get(Unit, unit_id)

    def get_by_slug(self, slug: str) -> Unit | None:
        stmt = select(Unit).where(unit_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_mul_id(self, mul_id: int) -> Unit | None:
        stmt = select(Unit).where(unit_table.c.mul_id == mul_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Unit]:
        stmt = select(Unit).order_by(unit_table.c.slug)
        return list(self.session.execute(stmt).scalars())

    def release_mul_id(self, mul_id: int, *, keep: UUID) -> int:
        stmt = (
            select(Unit)
            .where(unit_table.c.mul_id == mul_id)
            .where(unit_table.c.id != keep)
        )
        holders = list(self.session.execute(stmt).scalars())
        for unit in holders:
            unit.mul_id = None
        if holders:
            # The unique index must be clear before another row claims the id.
            self.session.flush()
        return len(holders)


class _ReplaceableRowsRepository[TRow: (UnitLocation, LoadoutEntry)]:
    """Rows owned by one unit and replaced as a whole set."""

    def __init__(self, session: Session, row_cls: type[TRow], table: Table) -> None:
        self.session = session
        self._row_cls = row_cls
        self._table = table

    def list_for_unit(self, unit_id: UUID) -> list[TRow]:
        stmt = (
            select(self._row_cls)
            .where(self._table.c.unit_id == unit_id)
            .order_by(self._table.c.position)
        )
        return list(self.session.execute(stmt).scalars())

    def replace(self, unit_id: UUID, rows: Iterable[TRow]) -> None:
        existing = self.list_for_unit(unit_id)
        for row in existing:
            self.session.delete(row)
        # Deletes must reach the database before rows with the same key are added.
        self.session.flush()
        self.session.add_all(list(rows))


class SqlAlchemyUnitLocationRepository(_ReplaceableRowsRepository[UnitLocation]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, UnitLocation, unit_location_table)


class SqlAlchemyLoadoutRepository(_ReplaceableRowsRepository[LoadoutEntry]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, LoadoutEntry, loadout_table)


class SqlAlchemyQuirkRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_slug(self, slug: str) -> Quirk | None:
        stmt = select(Quirk).where(quirk_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def add(self, entity: Quirk) -> None:
        self.session.add(entity)

    def quirk_ids_for_unit(self, unit_id: UUID) -> set[UUID]:
        stmt = select(unit_quirk_table.c.quirk_id).where(unit_quirk_table.c.unit_id == unit_id)
        return set(self.session.execute(stmt).scalars())

    def attach(self, unit_id: UUID, quirk_ids: Iterable[UUID]) -> None:
        rows = [{"unit_id": unit_id, "quirk_id": quirk_id} for quirk_id in quirk_ids]
        if not rows:
            return
        # Pending units and quirks must exist before the association rows reference them.
        self.session.flush()
        self.session.execute(insert(unit_quirk_table), rows)

    def detach(self, unit_id: UUID, quirk_ids: Iterable[UUID]) -> None:
        ids = list(quirk_ids)
        if not ids:
            return
        stmt = (
            delete(unit_quirk_table)
            .where(unit_quirk_table.c.unit_id == unit_id)
            .where(unit_quirk_table.c.quirk_id.in_(ids))
        )
        self.session.execute(stmt)


class SqlAlchemyMechDataRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, unit_id: UUID) -> MechData | None:
        return self.session.get(MechData, unit_id)

    def add(self, entity: MechData) -> None:
        self.session.add(entity)


class SqlAlchemyEquipmentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Equipment) -> None:
        self.session.add(entity)

    def get_by_slug(self, slug: str) -> Equipment | None:
        stmt = select(Equipment).where(equipment_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Equipment]:
        stmt = select(Equipment).order_by(equipment_table.c.slug)
        return list(self.session.execute(stmt).scalars())

    def slug_index(self) -> dict[str, UUID]:
        stmt = select(equipment_table.c.slug, equipment_table.c.id)
        return {slug: equipment_id for slug, equipment_id in self.session.execute(stmt)}

    def observed_locations(self) -> dict[UUID, set[str]]:
        stmt = (
            select(loadout_table.c.equipment_id, loadout_table.c.location)
            .where(loadout_table.c.location.is_not(None))
            .distinct()
        )
        observed: dict[UUID, set[str]] = {}
        for equipment_id, location in self.session.execute(stmt):
            observed.setdefault(equipment_id, set()).add(location.value)
        return observed


class SqlAlchemyComponentTypeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ComponentType) -> None:
        self.session.add(entity)

    def get_by_slug(self, category: ComponentCategory, slug: str) -> ComponentType | None:
        table = component_type_tables[category]
        stmt = select(COMPONENT_TYPE_CLASSES[category]).where(table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def aliases(self, category: ComponentCategory) -> dict[str, UUID]:
        table = component_alias_tables[category]
        stmt = select(table.c.alias, table.c.type_id)
        return {alias: type_id for alias, type_id in self.session.execute(stmt)}

    def add_alias(
        self,
        category: ComponentCategory,
        *,
        alias: str,
        label: str,
        type_id: UUID,
    ) -> None:
        self.session.flush()
        stmt = insert(component_alias_tables[category]).values(
            alias=alias, label=label, type_id=type_id
        )
        self.session.execute(stmt)


class SqlAlchemyEraRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Era) -> None:
        self.session.add(entity)

    def get_by_slug(self, slug: str) -> Era | None:
        stmt = select(Era).where(era_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyFactionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Faction) -> None:
        self.session.add(entity)

    def get_by_slug(self, slug: str) -> Faction | None:
        stmt = select(Faction).where(faction_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_name(self, name: str) -> Faction | None:
        stmt = (
            select(Faction)
            .where(func.lower(faction_table.c.name) == name.strip().lower())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyAvailabilityRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def keys_for_unit(self, unit_id: UUID) -> set[tuple[UUID, UUID]]:
        stmt = select(
            unit_availability_table.c.faction_id, unit_availability_table.c.era_id
        ).where(unit_availability_table.c.unit_id == unit_id)
        return {(faction_id, era_id) for faction_id, era_id in self.session.execute(stmt)}

    def add(self, entity: UnitAvailability) -> None:
        self.session.add(entity)

    def clear_unit(self, unit_id: UUID) -> int:
        self.session.flush()
        stmt = delete(unit_availability_table).where(unit_availability_table.c.unit_id == unit_id)
        result = cast("CursorResult[object]", self.session.execute(stmt))
        return result.rowcount


class SqlAlchemyDatasetMetadataRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: DatasetMetadata) -> None:
        self.session.add(entity)

    def latest(self) -> DatasetMetadata | None:
        stmt = (
            select(DatasetMetadata)
            .order_by(dataset_metadata_table.c.created_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()


if TYPE_CHECKING:
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

    _session_stub = cast("Session", object())
    _chassis_repo: ChassisRepository = SqlAlchemyChassisRepository(_session_stub)
    _unit_repo: UnitRepository = SqlAlchemyUnitRepository(_session_stub)
    _location_repo: UnitLocationRepository = SqlAlchemyUnitLocationRepository(_session_stub)
    _loadout_repo: LoadoutRepository = SqlAlchemyLoadoutRepository(_session_stub)
    _quirk_repo: QuirkRepository = SqlAlchemyQuirkRepository(_session_stub)
    _mech_repo: MechDataRepository = SqlAlchemyMechDataRepository(_session_stub)
    _equipment_repo: EquipmentRepository = SqlAlchemyEquipmentRepository(_session_stub)
    _component_repo: ComponentTypeRepository = SqlAlchemyComponentTypeRepository(_session_stub)
    _era_repo: EraRepository = SqlAlchemyEraRepository(_session_stub)
    _faction_repo: FactionRepository = SqlAlchemyFactionRepository(_session_stub)
    _availability_repo: AvailabilityRepository = SqlAlchemyAvailabilityRepository(_session_stub)
    _dataset_repo: DatasetMetadataRepository = SqlAlchemyDatasetMetadataRepository(_session_stub)
