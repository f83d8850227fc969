"""Reference data: canonical component types, eras, factions and dataset versions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from .base import Entity, utcnow
from .enums import ComponentCategory, FactionType, RulesLevel, TechBase


@dataclass(eq=False, kw_only=True)
class ComponentType(Entity):
    """Canonical construction option within one component category."""

    CATEGORY: ClassVar[ComponentCategory]
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ()

    slug: str
    name: str
    tech_base: TechBase = TechBase.INNER_SPHERE
    rules_level: RulesLevel = RulesLevel.STANDARD
    intro_year: int | None = None

    @property
    def category(self) -> ComponentCategory:
        return self.CATEGORY

    def properties(self) -> dict[str, float | int | None]:
        return {name: getattr(self, name) for name in self.PROPERTY_FIELDS}


@dataclass(eq=False, kw_only=True)
class EngineType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.ENGINE
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("weight_multiplier", "ct_crits", "st_crits")

    weight_multiplier: float = 1.0
    ct_crits: int = 6
    st_crits: int = 0


@dataclass(eq=False, kw_only=True)
class ArmorType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.ARMOR
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("points_per_ton", "crits")

    points_per_ton: float = 16.0
    crits: int = 0


@dataclass(eq=False, kw_only=True)
class StructureType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.STRUCTURE
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("weight_fraction", "crits")

    weight_fraction: float = 0.10
    crits: int = 0


@dataclass(eq=False, kw_only=True)
class HeatSinkType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.HEAT_SINK
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("dissipation", "crits", "weight")

    dissipation: int = 1
    crits: int = 1
    weight: float = 1.0


@dataclass(eq=False, kw_only=True)
class GyroType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.GYRO
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("weight_multiplier", "crits")

    weight_multiplier: float = 1.0
    crits: int = 4


@dataclass(eq=False, kw_only=True)
class CockpitType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.COCKPIT
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("weight", "crits")

    weight: float = 3.0
    crits: int = 1


@dataclass(eq=False, kw_only=True)
class MyomerType(ComponentType):
    CATEGORY: ClassVar[ComponentCategory] = ComponentCategory.MYOMER
    PROPERTY_FIELDS: ClassVar[tuple[str, ...]] = ("crits",)

    crits: int = 0


COMPONENT_TYPE_CLASSES: dict[ComponentCategory, type[ComponentType]] = {
    cls.CATEGORY: cls
    for cls in (
        EngineType,
        ArmorType,
        StructureType,
        HeatSinkType,
        GyroType,
        CockpitType,
        MyomerType,
    )
}


@dataclass(eq=False, kw_only=True)
class Era(Entity):
    slug: str
    name: str
    start_year: int
    end_year: int | None = None
    description: str | None = None


@dataclass(eq=False, kw_only=True)
class Faction(Entity):
    slug: str
    name: str
    faction_type: FactionType
    short_name: str | None = None
    is_clan: bool = False


@dataclass(eq=False, kw_only=True)
class DatasetMetadata(Entity):
    """One row per ingestion run recording which archive and catalog versions were loaded."""

    version: str
    catalog_version: str
    description: str | None = None
    created_at: datetime = field(default_factory=utcnow)
