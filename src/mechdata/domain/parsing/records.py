"""Parser output shared by the MTF and BLK readers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from mechdata.domain.model import (
    ComponentCategory,
    Location,
    RulesLevel,
    TechBase,
    UnitType,
)
from mechdata.domain.slugs import chassis_slug, unit_full_name, unit_slug


class SourceFormat(StrEnum):
    MTF = "mtf"
    BLK = "blk"


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """One unit file taken from the archive, already decoded."""

    name: str
    format: SourceFormat
    text: str
    default_unit_type: UnitType = UnitType.OTHER


@dataclass(slots=True, kw_only=True)
class ParsedLocation:
    location: Location
    armor: int | None = None
    rear_armor: int | None = None
    structure: int | None = None


@dataclass(slots=True, kw_only=True)
class ParsedLoadoutEntry:
    label: str
    location: Location | None = None
    quantity: int = 1
    is_rear_facing: bool = False


@dataclass(slots=True, kw_only=True)
class ParsedMechData:
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

    def component_labels(self) -> dict[ComponentCategory, str | None]:
        return {
            category: getattr(self, f"{category.value}_label") for category in ComponentCategory
        }


@dataclass(slots=True, kw_only=True)
class ParsedUnit:
    chassis: str
    model: str
    unit_type: UnitType
    tonnage: float
    tech_base: TechBase = TechBase.INNER_SPHERE
    rules_level: RulesLevel = RulesLevel.STANDARD
    mul_id: int | None = None
    intro_year: int | None = None
    source_book: str | None = None
    description: str | None = None
    locations: list[ParsedLocation] = field(default_factory=list)
    loadout: list[ParsedLoadoutEntry] = field(default_factory=list)
    quirks: list[str] = field(default_factory=list)
    mech_data: ParsedMechData | None = None

    @property
    def full_name(self) -> str:
        return unit_full_name(self.chassis, self.model)

    @property
    def slug(self) -> str:
        return unit_slug(self.chassis, self.model)

    @property
    def chassis_slug(self) -> str:
        return chassis_slug(self.chassis, self.unit_type)


def merge_loadout(entries: list[ParsedLoadoutEntry]) -> list[ParsedLoadoutEntry]:
    """Merge entries sharing label, location and facing, keeping first-seen order."""

    merged: dict[tuple[str, Location | None, bool], ParsedLoadoutEntry] = {}
    for entry in entries:
        key = (entry.label, entry.location, entry.is_rear_facing)
        existing = merged.get(key)
        if existing is None:
            merged[key] = ParsedLoadoutEntry(
                label=entry.label,
                location=entry.location,
                quantity=entry.quantity,
                is_rear_facing=entry.is_rear_facing,
            )
        else:
            existing.quantity += entry.quantity
    return list(merged.values())
