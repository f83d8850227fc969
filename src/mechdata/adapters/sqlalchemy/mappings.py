"""SQLAlchemy mapping metadata for the mechdata domain model."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from mechdata.domain.model import (
    COMPONENT_TYPE_CLASSES,
    ComponentCategory,
    DataSource,
    DatasetMetadata,
    Equipment,
    EquipmentCategory,
    Era,
    Faction,
    FactionType,
    LoadoutEntry,
    Location,
    MechData,
    Quirk,
    RulesLevel,
    TechBase,
    Unit,
    UnitAvailability,
    UnitChassis,
    UnitLocation,
    UnitType,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.types import TypeEngine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class FieldSourcesType(TypeDecorator[dict[str, DataSource]]):
    """``{field name: DataSource}`` stored as a JSON object."""

    impl = String
    cache_ok = True

    def process_bind_param(
        self, value: dict[str, DataSource] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = {name: source.value for name, source in sorted(value.items())}
        return json.dumps(payload)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, DataSource]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            return {}
        items = cast(dict[str, Any], loaded)
        return {
            name: DataSource(source) for name, source in items.items() if isinstance(source, str)
        }


class ComponentCategorySetType(TypeDecorator[set[ComponentCategory]]):
    impl = String
    cache_ok = True

    def process_bind_param(
        self, value: set[ComponentCategory] | None, dialect: Dialect
    ) -> str | None:
        _ = dialect
        if value is None:
            return None
        payload = sorted(category.value for category in value)
        return json.dumps(payload)

    def process_result_value(self, value: str | None, dialect: Dialect) -> set[ComponentCategory]:
        _ = dialect
        if value is None:
            return set()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return set()
        items = cast(list[Any], loaded)
        return {ComponentCategory(item) for item in items if isinstance(item, str)}


class StringListType(TypeDecorator[list[str]]):
    impl = String
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        return [item for item in items if isinstance(item, str)]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Reference tables ------------------------------------------------------------

dataset_metadata_table = Table(
    "dataset_metadata",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("version", String, nullable=False),
    Column("catalog_version", String, nullable=False),
    Column("description", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

era_table = Table(
    "eras",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("start_year", Integer, nullable=False),
    Column("end_year", Integer, nullable=True),
    Column("description", Text, nullable=True),
)

faction_table = Table(
    "factions",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("short_name", String, nullable=True),
    Column("faction_type", Enum(FactionType, native_enum=False), nullable=False),
    Column("is_clan", Boolean, nullable=False, default=False),
)

_PROPERTY_COLUMN_TYPES: Final[dict[str, type[TypeEngine[Any]]]] = {
    "weight_multiplier": Float,
    "ct_crits": Integer,
    "st_crits": Integer,
    "points_per_ton": Float,
    "crits": Integer,
    "weight_fraction": Float,
    "dissipation": Integer,
    "weight": Float,
}


def _component_type_table(category: ComponentCategory) -> Table:
    property_columns = [
        Column(name, _PROPERTY_COLUMN_TYPES[name](), nullable=False)
        for name in COMPONENT_TYPE_CLASSES[category].PROPERTY_FIELDS
    ]
    return Table(
        f"{category.value}_types",
        mapper_registry.metadata,
        Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
        Column("slug", String, nullable=False, unique=True),
        Column("name", String, nullable=False),
        Column("tech_base", Enum(TechBase, native_enum=False), nullable=False),
        Column("rules_level", Enum(RulesLevel, native_enum=False), nullable=False),
        Column("intro_year", Integer, nullable=True),
        *property_columns,
    )


def _component_alias_table(category: ComponentCategory) -> Table:
    return Table(
        f"{category.value}_type_aliases",
        mapper_registry.metadata,
        Column("alias", String, primary_key=True),
        Column("label", String, nullable=False),
        Column(
            f"{category.value}_type_id",
            UUIDColumnType,
            ForeignKey(f"{category.value}_types.id", ondelete="CASCADE"),
            key="type_id",
            nullable=False,
        ),
    )


component_type_tables: Final[dict[ComponentCategory, Table]] = {
    category: _component_type_table(category) for category in ComponentCategory
}
component_alias_tables: Final[dict[ComponentCategory, Table]] = {
    category: _component_alias_table(category) for category in ComponentCategory
}

# Unit tables -----------------------------------------------------------------

chassis_table = Table(
    "unit_chassis",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("unit_type", Enum(UnitType, native_enum=False), nullable=False),
    Column("tech_base", Enum(TechBase, native_enum=False), nullable=False),
    Column("tonnage", Float, nullable=False),
    Column("intro_year", Integer, nullable=True),
    Column("description", Text, nullable=True),
    Column("updated_at", UTCDateTime(), nullable=False),
)

unit_table = Table(
    "units",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column(
        "chassis_id",
        UUIDColumnType,
        ForeignKey("unit_chassis.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("variant", String, nullable=False),
    Column("full_name", String, nullable=False),
    Column("tech_base", Enum(TechBase, native_enum=False), nullable=False),
    Column("rules_level", Enum(RulesLevel, native_enum=False), nullable=False),
    Column("tonnage", Float, nullable=False),
    Column("intro_year", Integer, nullable=True),
    Column("source_book", String, nullable=True),
    Column("description", Text, nullable=True),
    Column("mul_id", Integer, nullable=True, unique=True),
    Column("bv", Integer, nullable=True),
    Column("cost", Integer, nullable=True),
    Column("role", String, nullable=True),
    Column("clan_name", String, nullable=True),
    Column("field_sources", FieldSourcesType(), nullable=False),
    Column("last_mul_import_at", UTCDateTime(), nullable=True),
    Column("updated_at", UTCDateTime(), nullable=False),
    Index("ix_units_chassis_id", "chassis_id"),
    Index("ix_units_full_name", "full_name"),
)

unit_location_table = Table(
    "unit_locations",
    mapper_registry.metadata,
    Column(
        "unit_id",
        UUIDColumnType,
        ForeignKey("units.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("location", Enum(Location, native_enum=False), primary_key=True),
    Column("position", Integer, nullable=False),
    Column("armor_points", Integer, nullable=True),
    Column("rear_armor", Integer, nullable=True),
    Column("structure_points", Integer, nullable=True),
)

equipment_table = Table(
    "equipment",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
    Column("category", Enum(EquipmentCategory, native_enum=False), nullable=False),
    Column("tech_base", Enum(TechBase, native_enum=False), nullable=False),
    Column("rules_level", Enum(RulesLevel, native_enum=False), nullable=True),
    Column("tonnage", Float, nullable=True),
    Column("crits", Integer, nullable=True),
    Column("damage", String, nullable=True),
    Column("heat", Integer, nullable=True),
    Column("range_min", Integer, nullable=True),
    Column("range_short", Integer, nullable=True),
    Column("range_medium", Integer, nullable=True),
    Column("range_long", Integer, nullable=True),
    Column("bv", Integer, nullable=True),
    Column(
        "ammo_for_id",
        UUIDColumnType,
        ForeignKey("equipment.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("observed_locations", StringListType(), nullable=False),
    Column("stats_source", Enum(DataSource, native_enum=False), nullable=True),
    Column("stats_updated_at", UTCDateTime(), nullable=True),
)

loadout_table = Table(
    "unit_loadout",
    mapper_registry.metadata,
    Column(
        "unit_id",
        UUIDColumnType,
        ForeignKey("units.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, primary_key=True),
    Column(
        "equipment_id",
        UUIDColumnType,
        ForeignKey("equipment.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("location", Enum(Location, native_enum=False), nullable=True),
    Column("quantity", Integer, nullable=False, default=1),
    Column("is_rear_facing", Boolean, nullable=False, default=False),
    Index("ix_unit_loadout_equipment_id", "equipment_id"),
)

quirk_table = Table(
    "quirks",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("slug", String, nullable=False, unique=True),
    Column("name", String, nullable=False),
)

unit_quirk_table = Table(
    "unit_quirks",
    mapper_registry.metadata,
    Column(
        "unit_id",
        UUIDColumnType,
        ForeignKey("units.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "quirk_id",
        UUIDColumnType,
        ForeignKey("quirks.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


def _mech_data_component_columns() -> list[Column[Any]]:
    columns: list[Column[Any]] = []
    for category in ComponentCategory:
        columns.append(Column(f"{category.value}_label", String, nullable=True))
        columns.append(
            Column(
                f"{category.value}_type_id",
                UUIDColumnType,
                ForeignKey(f"{category.value}_types.id", ondelete="SET NULL"),
                nullable=True,
            )
        )
    return columns


mech_data_table = Table(
    "unit_mech_data",
    mapper_registry.metadata,
    Column(
        "unit_id",
        UUIDColumnType,
        ForeignKey("units.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("config", String, nullable=True),
    Column("is_omnimech", Boolean, nullable=False, default=False),
    Column("engine_rating", Integer, nullable=True),
    Column("walk_mp", Integer, nullable=True),
    Column("jump_mp", Integer, nullable=True),
    Column("heat_sink_count", Integer, nullable=True),
    *_mech_data_component_columns(),
    Column("unresolved_components", ComponentCategorySetType(), nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

unit_availability_table = Table(
    "unit_availability",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "unit_id",
        UUIDColumnType,
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "faction_id",
        UUIDColumnType,
        ForeignKey("factions.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "era_id",
        UUIDColumnType,
        ForeignKey("eras.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("source", Enum(DataSource, native_enum=False), nullable=False),
    UniqueConstraint("unit_id", "faction_id", "era_id", name="uq_unit_availability_triple"),
)


@cache
def start_mappers() -> orm.registry:
    """Map domain dataclasses imperatively. Safe to call more than once."""

    mapper_registry.map_imperatively(DatasetMetadata, dataset_metadata_table)
    mapper_registry.map_imperatively(Era, era_table)
    mapper_registry.map_imperatively(Faction, faction_table)
    for category, table in component_type_tables.items():
        mapper_registry.map_imperatively(COMPONENT_TYPE_CLASSES[category], table)

    mapper_registry.map_imperatively(UnitChassis, chassis_table)
    mapper_registry.map_imperatively(Unit, unit_table)
    mapper_registry.map_imperatively(UnitLocation, unit_location_table)
    mapper_registry.map_imperatively(Equipment, equipment_table)
    mapper_registry.map_imperatively(LoadoutEntry, loadout_table)
    mapper_registry.map_imperatively(Quirk, quirk_table)
    mapper_registry.map_imperatively(MechData, mech_data_table)
    mapper_registry.map_imperatively(UnitAvailability, unit_availability_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
