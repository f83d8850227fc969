"""Equipment catalog entries shared by every unit that mounts them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar
from uuid import UUID

from .base import Entity
from .enums import DataSource, EquipmentCategory, RulesLevel, TechBase


@dataclass(eq=False, kw_only=True)
class Equipment(Entity):
    """One distinct piece of gear, identified by the slug of its label.

    ``ammo_for_id`` points from an ammunition entry to the weapon it feeds.
    """

    STAT_FIELDS: ClassVar[tuple[str, ...]] = (
        "tonnage",
        "crits",
        "damage",
        "heat",
        "range_min",
        "range_short",
        "range_medium",
        "range_long",
        "bv",
    )

    slug: str
    name: str
    category: EquipmentCategory
    tech_base: TechBase
    rules_level: RulesLevel | None = None
    tonnage: float | None = None
    crits: int | None = None
    damage: str | None = None
    heat: int | None = None
    range_min: int | None = None
    range_short: int | None = None
    range_medium: int | None = None
    range_long: int | None = None
    bv: int | None = None
    ammo_for_id: UUID | None = None
    observed_locations: list[str] = field(default_factory=list)
    stats_source: DataSource | None = None
    stats_updated_at: datetime | None = None
