from __future__ import annotations

import pytest
from pydantic import ValidationError

from mechdata.adapters.mul import (
    MulQuickListUnit,
    parse_quicklist,
    to_catalog_record,
)
from mechdata.domain.model import AvailabilityNote

DASHER = {
    "Id": 805,
    "Name": "Dasher (Fire Moth) A",
    "Class": "Dasher",
    "Variant": "A",
    "Tonnage": 20,
    "BattleValue": 1034,
    "Cost": 0,
    "Rules": "Standard",
    "DateIntroduced": "3050",
    "Technology": {"Id": 2, "Name": "Clan"},
    "Role": {"Id": 4, "Name": " Striker "},
    "Type": {"Id": 18, "Name": "BattleMech"},
    "ImageUrl": "https://example.invalid/dasher.png",
}


def test_quicklist_accepts_the_wrapped_and_bare_shapes() -> None:
    wrapped = parse_quicklist({"Units": [DASHER]})
    bare = parse_quicklist([DASHER])

    assert [unit.id for unit in wrapped] == [805]
    assert [unit.id for unit in bare] == [805]


@pytest.mark.parametrize("payload", [{"Results": []}, "Units", 42])
def test_quicklist_rejects_unknown_shapes(payload: object) -> None:
    with pytest.raises(ValueError, match="QuickList"):
        parse_quicklist(payload)


def test_quicklist_requires_an_id() -> None:
    with pytest.raises(ValidationError):
        parse_quicklist([{"Name": "Nameless"}])


def test_unit_fields_and_derived_values() -> None:
    unit = MulQuickListUnit.model_validate(DASHER)

    assert unit.class_name == "Dasher"
    assert unit.tonnage == 20.0
    assert unit.bv == 1034
    assert unit.positive_cost is None
    assert unit.role_name == "Striker"
    assert unit.technology_name == "Clan"
    assert unit.intro_year == 3050


@pytest.mark.parametrize(
    ("raw", "year"),
    [("3050", 3050), ("c. 2750 (Star League)", 2750), ("unknown", None), (None, None)],
)
def test_intro_year_is_read_from_the_first_four_digits(raw: str | None, year: int | None) -> None:
    unit = MulQuickListUnit.model_validate({"Id": 1, "Name": "X", "DateIntroduced": raw})

    assert unit.intro_year == year


def test_to_catalog_record_maps_placeholders_to_none() -> None:
    unit = MulQuickListUnit.model_validate({**DASHER, "BattleValue": 0, "Role": {"Name": ""}})

    record = to_catalog_record(unit)

    assert record.bv is None
    assert record.cost is None
    assert record.role is None
    assert record.availability is None


def test_to_catalog_record_carries_names_and_availability() -> None:
    unit = MulQuickListUnit.model_validate(DASHER)
    notes = [AvailabilityNote(faction="Clan Wolf", era="Clan Invasion")]

    record = to_catalog_record(unit, notes)

    assert record.external_id == 805
    assert record.name == "Dasher (Fire Moth) A"
    assert record.clan_name == "Fire Moth A"
    assert record.bv == 1034
    assert record.role == "Striker"
    assert record.rules == "Standard"
    assert record.technology == "Clan"
    assert record.availability == (AvailabilityNote(faction="Clan Wolf", era="Clan Invasion"),)


def test_empty_detail_page_gives_empty_availability() -> None:
    record = to_catalog_record(MulQuickListUnit.model_validate(DASHER), [])

    assert record.availability == ()
