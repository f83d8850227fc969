from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mechdata.domain.model import Location, RulesLevel, TechBase, UnitType
from mechdata.domain.parsing import parse_mtf
from mechdata.domain.parsing.mtf import is_structural_slot
from tests.helpers.units import mech_mtf

if TYPE_CHECKING:
    from pathlib import Path

    from mechdata.domain.parsing import ParsedUnit


@pytest.fixture
def atlas(data_dir: Path) -> ParsedUnit:
    parsed = parse_mtf((data_dir / "Atlas AS7-D.mtf").read_text(encoding="utf-8"))
    assert parsed is not None
    return parsed


def test_atlas_identity(atlas: ParsedUnit) -> None:
    assert atlas.chassis == "Atlas"
    assert atlas.model == "AS7-D"
    assert atlas.full_name == "Atlas AS7-D"
    assert atlas.slug == "atlas-as7-d"
    assert atlas.chassis_slug == "atlas-mech"
    assert atlas.unit_type is UnitType.MECH
    assert atlas.tonnage == 100
    assert atlas.mul_id == 140
    assert atlas.intro_year == 2755
    assert atlas.tech_base is TechBase.INNER_SPHERE
    assert atlas.rules_level is RulesLevel.STANDARD
    assert atlas.source_book == "TRO 3025"
    assert atlas.description == "The Atlas is the most feared BattleMech of the Succession Wars."
    assert atlas.quirks == ["command-mech", "distracting"]


def test_atlas_mech_data_keeps_labels_verbatim(atlas: ParsedUnit) -> None:
    mech = atlas.mech_data
    assert mech is not None
    assert mech.config == "Biped"
    assert mech.is_omnimech is False
    assert mech.engine_rating == 300
    assert mech.engine_label == "Fusion Engine(IS)"
    assert mech.heat_sink_count == 20
    assert mech.heat_sink_label == "Single"
    assert mech.walk_mp == 3
    assert mech.jump_mp == 0
    assert mech.armor_label == "Standard(Inner Sphere)"
    assert mech.structure_label == "IS Standard"
    assert mech.gyro_label == "Standard Gyro"
    assert mech.cockpit_label == "Standard Cockpit"
    assert mech.myomer_label == "Standard"


def test_atlas_locations_follow_body_order(atlas: ParsedUnit) -> None:
    assert [(row.location, row.armor, row.rear_armor) for row in atlas.locations] == [
        (Location.LEFT_ARM, 34, None),
        (Location.RIGHT_ARM, 34, None),
        (Location.LEFT_TORSO, 32, 10),
        (Location.RIGHT_TORSO, 32, 10),
        (Location.CENTER_TORSO, 47, 14),
        (Location.HEAD, 9, None),
        (Location.LEFT_LEG, 41, None),
        (Location.RIGHT_LEG, 41, None),
    ]


def test_atlas_loadout_counts_weapons_once(atlas: ParsedUnit) -> None:
    rows = [
        (entry.label, entry.location, entry.quantity, entry.is_rear_facing)
        for entry in atlas.loadout
    ]

    assert rows == [
        ("Medium Laser", Location.LEFT_ARM, 1, False),
        ("Medium Laser", Location.RIGHT_ARM, 1, False),
        ("LRM 20", Location.LEFT_TORSO, 1, False),
        ("SRM 6", Location.RIGHT_TORSO, 1, False),
        ("AC/20", Location.RIGHT_TORSO, 1, False),
        ("Medium Laser", Location.CENTER_TORSO, 2, True),
        ("Heat Sink", Location.LEFT_ARM, 1, False),
        ("Heat Sink", Location.RIGHT_ARM, 1, False),
        ("IS Ammo LRM-20", Location.LEFT_TORSO, 2, False),
        ("Heat Sink", Location.LEFT_TORSO, 2, False),
        ("IS Ammo AC/20", Location.RIGHT_TORSO, 2, False),
        ("Heat Sink", Location.LEFT_LEG, 1, False),
        ("Heat Sink", Location.RIGHT_LEG, 1, False),
    ]


def test_missing_chassis_or_mass_is_unparseable() -> None:
    text = mech_mtf()

    assert parse_mtf(text.replace("Chassis:Griffin\n", "")) is None
    assert parse_mtf(text.replace("mass:55\n", "")) is None
    assert parse_mtf(text.replace("mass:55\n", "mass:heavy\n")) is None


def test_absent_component_lines_stay_none() -> None:
    parsed = parse_mtf(mech_mtf(armor=None, structure=None))

    assert parsed is not None
    assert parsed.mech_data is not None
    assert parsed.mech_data.armor_label is None
    assert parsed.mech_data.structure_label is None
    assert parsed.mech_data.gyro_label is None


def test_omnimech_config_and_clan_tech_base() -> None:
    text = mech_mtf("Timber Wolf", "Prime").replace("Config:Biped", "Config:Biped Omnimech")
    text = text.replace("techbase:Inner Sphere", "techbase:Clan")

    parsed = parse_mtf(text)

    assert parsed is not None
    assert parsed.mech_data is not None
    assert parsed.mech_data.is_omnimech is True
    assert parsed.tech_base is TechBase.CLAN


def test_slot_annotations_and_rear_markers() -> None:
    text = mech_mtf(
        weapons=(),
        slots={
            "Left Torso": (
                "ISCASE",
                "Guardian ECM Suite (omnipod)",
                "Guardian ECM Suite (omnipod)",
                "Streak SRM 2 (R)",
            ),
        },
    )

    parsed = parse_mtf(text)

    assert parsed is not None
    assert [(e.label, e.quantity, e.is_rear_facing) for e in parsed.loadout] == [
        ("Guardian ECM Suite", 2, False),
        ("Streak SRM 2", 1, True),
    ]


def test_weapon_lines_with_ammo_suffix_and_location_codes() -> None:
    text = mech_mtf(weapons=("2 Medium Laser, LA, Ammo:0", "LRM 10, Right Torso"), slots={})

    parsed = parse_mtf(text)

    assert parsed is not None
    assert [(e.label, e.location, e.quantity) for e in parsed.loadout] == [
        ("Medium Laser", Location.LEFT_ARM, 2),
        ("LRM 10", Location.RIGHT_TORSO, 1),
    ]


@pytest.mark.parametrize(
    ("label", "structural"),
    [
        ("Shoulder", True),
        ("XL Engine", True),
        ("Endo Steel", True),
        ("Ferro-Fibrous", True),
        ("-Empty-", True),
        ("Medium Laser", False),
        ("Heat Sink", False),
        ("IS Ammo AC/20", False),
    ],
)
def test_is_structural_slot(label: str, structural: bool) -> None:  # noqa: FBT001
    assert is_structural_slot(label) is structural


def test_overlong_numbers_are_dropped_instead_of_raising() -> None:
    digits = "9" * 5000
    text = mech_mtf(
        engine=f"{digits} Fusion Engine",
        heat_sinks=f"{digits} Double",
        weapons=(f"{digits} Medium Laser, Left Arm",),
        slots={},
    )

    parsed = parse_mtf(text)

    assert parsed is not None
    assert parsed.mech_data is not None
    assert parsed.mech_data.engine_rating is None
    assert parsed.mech_data.engine_label == "Fusion Engine"
    assert parsed.mech_data.heat_sink_count is None
    assert [(e.location, e.quantity) for e in parsed.loadout] == [(Location.LEFT_ARM, 1)]


@pytest.mark.parametrize("chassis", ["★★★", "  --  ", "漢字"])
def test_chassis_without_slug_characters_is_unparseable(chassis: str) -> None:
    assert parse_mtf(mech_mtf(chassis, "Prime")) is None
