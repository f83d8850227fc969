"""Reader for MegaMek ``.blk`` files (tag delimited vehicle, fighter and support units)."""

from __future__ import annotations

from mechdata.domain.model import Location, UnitType
from mechdata.domain.slugs import to_slug

from .common import (
    read_float,
    read_int,
    rules_level_from_type,
    strip_quotes,
    tech_base_from_text,
)
from .records import ParsedLoadoutEntry, ParsedLocation, ParsedUnit, merge_loadout

_EQUIPMENT_SUFFIX = "equipment"

_BLK_LOCATIONS: dict[str, Location] = {
    "front": Location.FRONT,
    "rear": Location.REAR,
    "right": Location.RIGHT_SIDE,
    "left": Location.LEFT_SIDE,
    "turret": Location.TURRET,
    "body": Location.BODY,
    "left arm": Location.LEFT_ARM,
    "right arm": Location.RIGHT_ARM,
}

_UNIT_TYPES: dict[str, UnitType] = {
    "tank": UnitType.VEHICLE,
    "vtol": UnitType.VEHICLE,
    "naval": UnitType.VEHICLE,
    "wheeled vehicle": UnitType.VEHICLE,
    "tracked vehicle": UnitType.VEHICLE,
    "aero": UnitType.FIGHTER,
    "aerospacespacefighter": UnitType.FIGHTER,
    "aerospacefighter": UnitType.FIGHTER,
    "conv_fighter": UnitType.FIGHTER,
    "conventional fighter": UnitType.FIGHTER,
}

# Order of the values inside a vehicle <armor> block.
_VEHICLE_ARMOR_ORDER: tuple[Location, ...] = (
    Location.FRONT,
    Location.RIGHT_SIDE,
    Location.LEFT_SIDE,
    Location.REAR,
    Location.TURRET,
)


def read_blk_tags(text: str) -> tuple[dict[str, str], list[tuple[str, str]]]:
    """Split a ``.blk`` document into plain tag values and equipment placements.

    Returns ``(tags, equipment)`` where ``equipment`` holds ``(location, label)`` pairs
    taken from every ``<... Equipment>`` block in file order.
    """

    tags: dict[str, str] = {}
    equipment: list[tuple[str, str]] = []
    current_tag: str | None = None
    values: list[str] = []

    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("#"):
            continue
        if line.startswith("</"):
            if current_tag is None:
                continue
            if current_tag.lower().endswith(_EQUIPMENT_SUFFIX):
                location = current_tag.lower().removesuffix(_EQUIPMENT_SUFFIX).strip()
                equipment.extend((location, value) for value in values if value)
            else:
                tags[current_tag] = "\n".join(values).strip()
            current_tag = None
            values = []
        elif line.startswith("<") and line.endswith(">"):
            current_tag = line[1:-1].strip()
            values = []
        elif current_tag is not None:
            values.append(line)
    return tags, equipment


def parse_blk(text: str, default_unit_type: UnitType = UnitType.OTHER) -> ParsedUnit | None:
    """Parse one ``.blk`` file; ``None`` when ``Name`` or a numeric ``tonnage`` is missing.

    A ``Name`` without letters or digits counts as missing.
    """

    tags, equipment = read_blk_tags(text)

    chassis = tags.get("Name", "").strip()
    tonnage = read_float(tags.get("tonnage"))
    if not to_slug(chassis) or tonnage is None:
        return None

    unit_type = _UNIT_TYPES.get(tags.get("UnitType", "").strip().lower(), default_unit_type)
    type_text = tags.get("type", "")
    overview = tags.get("overview")

    loadout = [
        ParsedLoadoutEntry(label=label, location=_BLK_LOCATIONS.get(location))
        for location, label in equipment
    ]
    quirks: list[str] = []
    for line in tags.get("quirks", "").splitlines():
        slug = to_slug(line)
        if slug and slug not in quirks:
            quirks.append(slug)

    return ParsedUnit(
        chassis=chassis,
        model=tags.get("Model", "").strip(),
        unit_type=unit_type,
        tonnage=tonnage,
        tech_base=tech_base_from_text(type_text),
        rules_level=rules_level_from_type(type_text),
        mul_id=read_int(tags.get("mul id:", tags.get("mul id"))),
        intro_year=read_int(tags.get("year")),
        source_book=(tags.get("source") or "").strip() or None,
        description=strip_quotes(overview) if overview is not None else None,
        locations=_vehicle_locations(tags.get("armor")) if unit_type is UnitType.VEHICLE else [],
        loadout=merge_loadout(loadout),
        quirks=quirks,
    )


def _vehicle_locations(armor_block: str | None) -> list[ParsedLocation]:
    if not armor_block:
        return []
    points = [read_int(line) for line in armor_block.splitlines()]
    return [
        ParsedLocation(location=location, armor=value)
        for location, value in zip(_VEHICLE_ARMOR_ORDER, points, strict=False)
        if value is not None
    ]
