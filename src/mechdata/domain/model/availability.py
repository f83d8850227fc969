"""Faction/era availability of units and the external catalog records that carry it."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from .base import Entity
from .enums import DataSource


@dataclass(eq=False, kw_only=True)
class UnitAvailability(Entity):
    unit_id: UUID
    faction_id: UUID
    era_id: UUID
    source: DataSource = DataSource.MUL


@dataclass(frozen=True, slots=True)
class AvailabilityNote:
    """Availability as spelled by the external catalog (display names, not slugs)."""

    faction: str
    era: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalCatalogRecord:
    """One unit as reported by the Master Unit List."""

    external_id: int
    name: str
    tonnage: float | None = None
    bv: int | None = None
    cost: int | None = None
    role: str | None = None
    clan_name: str | None = None
    intro_year: int | None = None
    rules: str | None = None
    technology: str | None = None
    # None when no detail page was available for the unit
    availability: tuple[AvailabilityNote, ...] | None = None
