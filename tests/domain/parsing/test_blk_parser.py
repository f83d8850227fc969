from __future__ import annotations

from typing import TYPE_CHECKING

from mechdata.domain.model import Location, RulesLevel, TechBase, UnitType
from mechdata.domain.parsing import parse_blk, parse_document
from mechdata.domain.parsing.blk import read_blk_tags
from tests.helpers.units import blk_document, mech_mtf, mtf_document, vehicle_blk

if TYPE_CHECKING:
    from pathlib import Path


def test_manticore_golden(data_dir: Path) -> None:
    text = (data_dir / "Manticore Heavy Tank.blk").read_text(encoding="utf-8")

    parsed = parse_blk(text)

    assert parsed is not None
    assert parsed.full_name == "Manticore Heavy Tank (Standard)"
    assert parsed.slug == "manticore-heavy-tank-standard"
    assert parsed.chassis_slug == "manticore-heavy-tank-vehicle"
    assert parsed.unit_type is UnitType.VEHICLE
    assert parsed.tonnage == 60.0
    assert parsed.mul_id == 2001
    assert parsed.intro_year == 2710
    assert parsed.source_book == "TRO 3039"
    assert parsed.tech_base is TechBase.INNER_SPHERE
    assert parsed.rules_level is RulesLevel.ADVANCED
    assert parsed.description == "A heavy tank built around a turret-mounted PPC."
    assert parsed.quirks == ["easy-maintain"]
    assert parsed.mech_data is None
    assert [(row.location, row.armor) for row in parsed.locations] == [
        (Location.FRONT, 47),
        (Location.RIGHT_SIDE, 38),
        (Location.LEFT_SIDE, 38),
        (Location.REAR, 28),
        (Location.TURRET, 40),
    ]
    assert [(entry.label, entry.location) for entry in parsed.loadout] == [
        ("Medium Laser", Location.FRONT),
        ("PPC", Location.TURRET),
        ("LRM 10", Location.TURRET),
        ("SRM 6", Location.TURRET),
        ("IS Ammo LRM-10", Location.BODY),
        ("IS Ammo SRM-6", Location.BODY),
    ]


def test_read_blk_tags_separates_equipment_blocks() -> None:
    tags, equipment = read_blk_tags(vehicle_blk(equipment={"Front": ("Medium Laser", "")}))

    assert tags["Name"] == "Manticore Heavy Tank"
    assert tags["armor"] == "47\n38\n38\n28\n40"
    assert equipment == [("front", "Medium Laser")]


def test_repeated_equipment_merges_into_quantity() -> None:
    parsed = parse_blk(vehicle_blk(equipment={"Turret": ("SRM 2", "SRM 2", "SRM 2")}))

    assert parsed is not None
    assert [(e.label, e.location, e.quantity) for e in parsed.loadout] == [
        ("SRM 2", Location.TURRET, 3)
    ]


def test_unknown_unit_type_falls_back_to_directory_default() -> None:
    text = vehicle_blk(unit_type="SupportTank")

    assert parse_blk(text, UnitType.VEHICLE).unit_type is UnitType.VEHICLE  # type: ignore[union-attr]
    other = parse_blk(text)
    assert other is not None
    assert other.unit_type is UnitType.OTHER
    assert other.locations == []


def test_missing_name_or_tonnage_is_unparseable() -> None:
    assert parse_blk(vehicle_blk(name="")) is None
    assert parse_blk(vehicle_blk(tonnage="sixty")) is None


def test_parse_document_dispatches_on_format() -> None:
    mech = parse_document(mtf_document(mech_mtf()))
    vehicle = parse_document(blk_document(vehicle_blk()))

    assert mech is not None
    assert mech.unit_type is UnitType.MECH
    assert vehicle is not None
    assert vehicle.unit_type is UnitType.VEHICLE


def test_name_without_letters_or_digits_is_unparseable() -> None:
    assert parse_blk(vehicle_blk("★ ★", "Heavy Tank"), UnitType.VEHICLE) is None
