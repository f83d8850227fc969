"""Chassis, unit variants and the rows that hang off a unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from .base import Entity, utcnow
from .enums import ComponentCategory, DataSource, Location, RulesLevel, TechBase, UnitType

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(eq=False, kw_only=True)
class UnitChassis(Entity):
    """Family of variants sharing base name, unit type and tonnage."""

    slug: str
    name: str
    unit_type: UnitType
    tech_base: TechBase
    tonnage: float
    intro_year: int | None = None
    description: str | None = None
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(eq=False, kw_only=True)
class Unit(Entity):
    """One specific variant of a chassis.

    ``field_sources`` records which data source last wrote each externally mergeable
    field; see ``mechdata.domain.reconciliation.merge``.
    """

    slug: str
    chassis_id: UUID
    variant: str
    full_name: str
    tech_base: TechBase
    rules_level: RulesLevel
    tonnage: float
    intro_year: int | None = None
    source_book: str | None = None
    description: str | None = None
    mul_id: int | None = None
    bv: int | None = None
    cost: int | None = None
    role: str | None = None
    clan_name: str | None = None
    field_sources: dict[str, DataSource] = field(default_factory=dict)
    last_mul_import_at: datetime | None = None
    updated_at: datetime = field(default_factory=utcnow)


@dataclass(eq=False, kw_only=True)
class UnitLocation:
    unit_id: UUID
    location: Location
    position: int
    armor_points: int | None = None
    rear_armor: int | None = None
    structure_points: int | None = None

    def values(self) -> tuple[object, ...]:
        return (
            self.location,
            self.position,
            self.armor_points,
            self.rear_armor,
            self.structure_points,
        )


@dataclass(eq=False, kw_only=True)
class LoadoutEntry:
    unit_id: UUID
    position: int
    equipment_id: UUID
    location: Location | None = None
    quantity: int = 1
    is_rear_facing: bool = False

    def values(self) -> tuple[object, ...]:
        return (
            self.position,
            self.equipment_id,
            self.location,
            self.quantity,
            self.is_rear_facing,
        )


@dataclass(eq=False, kw_only=True)
class Quirk(Entity):
    slug: str
    name: str


@dataclass(eq=False, kw_only=True)
class MechData:
    """Construction attributes of one mech.

    Every category keeps the label exactly as the source file spelled it next to the
    resolved reference id; categories that could not be resolved are listed in
    ``unresolved_components``.
    """

    unit_id: UUID
    config: str | None = None
    is_omnimech: bool = False
    engine_rating: int | None = None
    walk_mp: int | None = None
    jump_mp: int | None = None
    heat_sink_count: int | None = None

    engine_label: str | None = None
    armor_label: str | None = None
    structure_label: str | None = None
    heat_sink_label: str | None = None
    gyro_label: str | None = None
    cockpit_label: str | None = None
    myomer_label: str | None = None

    engine_type_id: UUID | None = None
    armor_type_id: UUID | None = None
    structure_type_id: UUID | None = None
    heat_sink_type_id: UUID | None = None
    gyro_type_id: UUID | None = None
    cockpit_type_id: UUID | None = None
    myomer_type_id: UUID | None = None

    unresolved_components: set[ComponentCategory] = field(default_factory=set)
    updated_at: datetime = field(default_factory=utcnow)

    def label_for(self, category: ComponentCategory) -> str | None:
        return getattr(self, f"{category.value}_label")

    def type_id_for(self, category: ComponentCategory) -> UUID | None:
        return getattr(self, f"{category.value}_type_id")

    def components(self) -> Iterator[tuple[ComponentCategory, str | None, UUID | None]]:
        for category in ComponentCategory:
            yield category, self.label_for(category), self.type_id_for(category)
