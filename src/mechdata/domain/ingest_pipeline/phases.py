"""The ordered phases that upsert one parsed unit.

Each phase compares what is stored with what was parsed and only writes on a
difference, so re-ingesting an unchanged archive leaves every row untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from mechdata.domain.catalog import ResolutionStatus
from mechdata.domain.model import (
    DataSource,
    Equipment,
    LoadoutEntry,
    MechData,
    Quirk,
    Unit,
    UnitChassis,
    UnitLocation,
)
from mechdata.domain.model.base import utcnow
from mechdata.domain.parsing import categorize_equipment, equipment_tech_base
from mechdata.domain.reconciliation.merge import apply_field, should_write
from mechdata.domain.slugs import equipment_slug

from .context import ResolutionGap, UpsertOutcome

if TYPE_CHECKING:
    from uuid import UUID

    from mechdata.domain.model import ComponentCategory
    from mechdata.domain.parsing import ParsedUnit

    from .context import IngestContext

log = getLogger(__name__)


def _assign_changed(entity: object, values: dict[str, object]) -> bool:
    changed = False
    for name, value in values.items():
        if getattr(entity, name) != value:
            setattr(entity, name, value)
            changed = True
    return changed


@dataclass(slots=True)
class ChassisPhase:
    """Find or create the chassis by slug; only fill what an earlier variant left empty."""

    name: str = "chassis"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        repository = context.uow.repositories.chassis
        chassis = repository.get_by_slug(parsed.chassis_slug)
        if chassis is None:
            chassis = UnitChassis(
                slug=parsed.chassis_slug,
                name=parsed.chassis.strip(),
                unit_type=parsed.unit_type,
                tech_base=parsed.tech_base,
                tonnage=parsed.tonnage,
                intro_year=parsed.intro_year,
                description=parsed.description,
            )
            repository.add(chassis)
            context.record(self.name, UpsertOutcome.CREATED)
        else:
            updates: dict[str, object] = {}
            if chassis.description is None and parsed.description:
                updates["description"] = parsed.description
            if parsed.intro_year is not None and (
                chassis.intro_year is None or parsed.intro_year < chassis.intro_year
            ):
                updates["intro_year"] = parsed.intro_year
            if _assign_changed(chassis, updates):
                chassis.updated_at = utcnow()
                context.record(self.name, UpsertOutcome.UPDATED)
            else:
                context.record(self.name, UpsertOutcome.UNCHANGED)
        context.chassis = chassis


@dataclass(slots=True)
class UnitPhase:
    """Upsert the variant by slug. ``updated_at`` only moves when something changed."""

    name: str = "units"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        repository = context.uow.repositories.units
        chassis = context.require_chassis()
        scalars: dict[str, object] = {
            "chassis_id": chassis.id,
            "variant": parsed.model.strip(),
            "full_name": parsed.full_name,
            "tech_base": parsed.tech_base,
            "rules_level": parsed.rules_level,
            "tonnage": parsed.tonnage,
            "source_book": parsed.source_book,
            "description": parsed.description,
        }
        unit = repository.get_by_slug(parsed.slug)
        if unit is None:
            unit = Unit(slug=parsed.slug, **scalars)  # pyright: ignore[reportArgumentType]
            self._merge_sourced_fields(unit, parsed, context)
            repository.add(unit)
            context.record(self.name, UpsertOutcome.CREATED)
        else:
            if unit.chassis_id != chassis.id:
                # Slugs ignore unit type, so a mech and a vehicle with one name collide.
                log.warning(
                    "Unit %s moves to chassis %s (%s); another file may share its name",
                    unit.slug,
                    chassis.slug,
                    parsed.unit_type,
                )
            changed = _assign_changed(unit, scalars)
            changed = self._merge_sourced_fields(unit, parsed, context) or changed
            if changed:
                unit.updated_at = utcnow()
                context.record(self.name, UpsertOutcome.UPDATED)
            else:
                context.record(self.name, UpsertOutcome.UNCHANGED)
        context.unit = unit

    @staticmethod
    def _merge_sourced_fields(unit: Unit, parsed: ParsedUnit, context: IngestContext) -> bool:
        changed = apply_field(unit, "intro_year", parsed.intro_year, DataSource.MEGAMEK)
        mul_id = parsed.mul_id
        if mul_id is None or not should_write(unit, "mul_id", mul_id, DataSource.MEGAMEK):
            return changed
        holder = context.uow.repositories.units.get_by_mul_id(mul_id)
        if holder is not None and holder is not unit:
            log.warning(
                "MUL id %s of %s already belongs to %s; leaving it unset",
                mul_id,
                unit.slug,
                holder.slug,
            )
            return changed
        return apply_field(unit, "mul_id", mul_id, DataSource.MEGAMEK) or changed


@dataclass(slots=True)
class LocationsPhase:
    """Replace the unit's location rows when the parsed set differs."""

    name: str = "locations"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        unit = context.require_unit()
        repository = context.uow.repositories.locations
        desired = [
            UnitLocation(
                unit_id=unit.id,
                location=location.location,
                position=position,
                armor_points=location.armor,
                rear_armor=location.rear_armor,
                structure_points=location.structure,
            )
            for position, location in enumerate(parsed.locations)
        ]
        existing = repository.list_for_unit(unit.id)
        if [row.values() for row in existing] == [row.values() for row in desired]:
            context.record(self.name, UpsertOutcome.UNCHANGED)
            return
        repository.replace(unit.id, desired)
        context.record(self.name, UpsertOutcome.UPDATED if existing else UpsertOutcome.CREATED)


@dataclass(slots=True)
class LoadoutPhase:
    """Resolve each label to one equipment row and replace the loadout on change."""

    name: str = "loadout"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        unit = context.require_unit()
        repository = context.uow.repositories.loadout
        desired: list[LoadoutEntry] = []
        for entry in parsed.loadout:
            equipment_id = self._equipment_id(entry.label, parsed, context)
            if equipment_id is None:
                continue
            desired.append(
                LoadoutEntry(
                    unit_id=unit.id,
                    position=len(desired),
                    equipment_id=equipment_id,
                    location=entry.location,
                    quantity=entry.quantity,
                    is_rear_facing=entry.is_rear_facing,
                )
            )
        existing = repository.list_for_unit(unit.id)
        if [row.values() for row in existing] == [row.values() for row in desired]:
            context.record(self.name, UpsertOutcome.UNCHANGED)
            return
        repository.replace(unit.id, desired)
        context.record(self.name, UpsertOutcome.UPDATED if existing else UpsertOutcome.CREATED)

    @staticmethod
    def _equipment_id(label: str, parsed: ParsedUnit, context: IngestContext) -> UUID | None:
        slug = equipment_slug(label)
        if not slug:
            return None
        known = context.pending_equipment.get(slug) or context.equipment_cache.get(slug)
        if known is not None:
            return known

        repository = context.uow.repositories.equipment
        equipment = repository.get_by_slug(slug)
        if equipment is None:
            equipment = Equipment(
                slug=slug,
                name=label.strip(),
                category=categorize_equipment(label),
                tech_base=equipment_tech_base(label),
                rules_level=parsed.rules_level,
            )
            repository.add(equipment)
            context.record("equipment", UpsertOutcome.CREATED)
        context.pending_equipment[slug] = equipment.id
        return equipment.id


def _quirk_name(slug: str) -> str:
    return " ".join(part.capitalize() for part in slug.split("-"))


@dataclass(slots=True)
class QuirksPhase:
    """Attach parsed quirks and drop pairs that are no longer in the file."""

    name: str = "quirks"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        unit = context.require_unit()
        repository = context.uow.repositories.quirks
        desired: set[UUID] = set()
        for slug in dict.fromkeys(parsed.quirks):
            quirk = repository.get_by_slug(slug)
            if quirk is None:
                quirk = Quirk(slug=slug, name=_quirk_name(slug))
                repository.add(quirk)
            desired.add(quirk.id)

        current = repository.quirk_ids_for_unit(unit.id)
        to_attach = desired - current
        to_detach = current - desired
        if not to_attach and not to_detach:
            context.record(self.name, UpsertOutcome.UNCHANGED)
            return
        repository.detach(unit.id, to_detach)
        repository.attach(unit.id, to_attach)
        context.record(self.name, UpsertOutcome.UPDATED if current else UpsertOutcome.CREATED)


@dataclass(slots=True)
class MechDataPhase:
    """Upsert construction attributes with every component category resolved or flagged."""

    name: str = "mech_data"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        if parsed.mech_data is None:
            return
        unit = context.require_unit()
        source = parsed.mech_data
        resolutions = context.resolver.resolve_components(source.component_labels())

        values: dict[str, object] = {
            "config": source.config,
            "is_omnimech": source.is_omnimech,
            "engine_rating": source.engine_rating,
            "walk_mp": source.walk_mp,
            "jump_mp": source.jump_mp,
            "heat_sink_count": source.heat_sink_count,
        }
        unresolved: set[ComponentCategory] = set()
        for category, resolution in resolutions.items():
            values[f"{category.value}_label"] = resolution.label
            values[f"{category.value}_type_id"] = resolution.type_id
            if resolution.is_gap:
                unresolved.add(category)
            if resolution.status is ResolutionStatus.UNRESOLVED and resolution.label is not None:
                context.gaps.append(ResolutionGap(unit.slug, category, resolution.label))
        values["unresolved_components"] = unresolved

        repository = context.uow.repositories.mech_data
        mech_data = repository.get(unit.id)
        if mech_data is None:
            mech_data = MechData(unit_id=unit.id, **values)  # pyright: ignore[reportArgumentType]
            repository.add(mech_data)
            context.record(self.name, UpsertOutcome.CREATED)
        elif _assign_changed(mech_data, values):
            mech_data.updated_at = utcnow()
            context.record(self.name, UpsertOutcome.UPDATED)
        else:
            context.record(self.name, UpsertOutcome.UNCHANGED)


def default_phases() -> tuple[
    ChassisPhase, UnitPhase, LocationsPhase, LoadoutPhase, QuirksPhase, MechDataPhase
]:
    return (
        ChassisPhase(),
        UnitPhase(),
        LocationsPhase(),
        LoadoutPhase(),
        QuirksPhase(),
        MechDataPhase(),
    )
