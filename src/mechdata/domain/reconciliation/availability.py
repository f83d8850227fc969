"""Upsert faction/era availability rows for one unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from mechdata.domain.model import DataSource, Faction, UnitAvailability
from mechdata.domain.slugs import to_slug

from .mappings import ERA_SLUGS, FACTION_SLUGS, infer_faction_type, is_clan_faction

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from mechdata.domain.model import AvailabilityNote
    from mechdata.domain.ports.unit_of_work import ReconcileRepositories

log = getLogger(__name__)


@dataclass(slots=True)
class AvailabilityResult:
    inserted: int = 0
    existing: int = 0
    cleared: int = 0
    unmapped_eras: set[str] = field(default_factory=set)
    unresolved_factions: set[str] = field(default_factory=set)
    new_factions: list[str] = field(default_factory=list)


def _era_id(
    name: str,
    repositories: ReconcileRepositories,
    era_slugs: Mapping[str, str],
    result: AvailabilityResult,
) -> UUID | None:
    slug = era_slugs.get(name)
    if slug is None:
        if name not in result.unmapped_eras:
            log.warning("Unmapped era %r; skipping its availability rows", name)
        result.unmapped_eras.add(name)
        return None
    era = repositories.eras.get_by_slug(slug)
    if era is None:
        log.warning("Era %s (%r) is not in the catalog; skipping", slug, name)
        result.unmapped_eras.add(name)
        return None
    return era.id


def _faction_id(
    name: str,
    repositories: ReconcileRepositories,
    faction_slugs: Mapping[str, str],
    result: AvailabilityResult,
) -> UUID | None:
    factions = repositories.factions
    faction = factions.get_by_name(name)
    if faction is not None:
        return faction.id

    mapped = faction_slugs.get(name)
    if mapped is not None:
        faction = factions.get_by_slug(mapped)
        if faction is None:
            log.warning("Faction %r maps to %s, which is not in the catalog", name, mapped)
            result.unresolved_factions.add(name)
            return None
        return faction.id

    slug = to_slug(name)
    faction = factions.get_by_slug(slug)
    if faction is not None:
        return faction.id
    if not slug:
        result.unresolved_factions.add(name)
        return None

    faction = Faction(
        slug=slug,
        name=name,
        faction_type=infer_faction_type(name),
        is_clan=is_clan_faction(name),
    )
    factions.add(faction)
    result.new_factions.append(slug)
    log.info("Created faction %s (%s, %s)", slug, name, faction.faction_type)
    return faction.id


def upsert_availability(
    unit_id: UUID,
    notes: Iterable[AvailabilityNote],
    *,
    repositories: ReconcileRepositories,
    force: bool = False,
    era_slugs: Mapping[str, str] = ERA_SLUGS,
    faction_slugs: Mapping[str, str] = FACTION_SLUGS,
) -> AvailabilityResult:
    """Insert the missing ``(faction, era)`` rows for ``unit_id``.

    With ``force`` the unit's stored rows are replaced by exactly the given set.
    Rows whose era or faction cannot be resolved are skipped.
    """

    result = AvailabilityResult()
    pairs: dict[tuple[UUID, UUID], None] = {}
    for note in notes:
        era_id = _era_id(note.era, repositories, era_slugs, result)
        if era_id is None:
            continue
        faction_id = _faction_id(note.faction, repositories, faction_slugs, result)
        if faction_id is None:
            continue
        pairs[(faction_id, era_id)] = None

    availability = repositories.availability
    if force:
        result.cleared = availability.clear_unit(unit_id)
        existing: set[tuple[UUID, UUID]] = set()
    else:
        existing = availability.keys_for_unit(unit_id)

    for faction_id, era_id in pairs:
        if (faction_id, era_id) in existing:
            result.existing += 1
            continue
        availability.add(
            UnitAvailability(
                unit_id=unit_id,
                faction_id=faction_id,
                era_id=era_id,
                source=DataSource.MUL,
            )
        )
        result.inserted += 1
    return result
