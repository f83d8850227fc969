from __future__ import annotations

import pytest

from mechdata.domain.reconciliation import (
    dual_name_alternatives,
    extract_clan_name,
    normalize_name,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Awesome AWS-8Q (Smith)", "Awesome AWS-8Q"),
        ("  Atlas   AS7-D ", "Atlas AS7-D"),
        ("Dasher (Fire Moth) A", "Dasher"),
        ("(Unnamed)", ""),
    ],
)
def test_normalize_name(name: str, expected: str) -> None:
    assert normalize_name(name) == expected


def test_extract_clan_name() -> None:
    assert extract_clan_name("Dasher (Fire Moth) A") == "Fire Moth A"
    assert extract_clan_name("Awesome AWS-8Q (Smith)") is None
    assert extract_clan_name("Atlas AS7-D") is None
    assert extract_clan_name("Broken (Name A") is None


def test_dual_name_alternatives() -> None:
    assert dual_name_alternatives("Dasher (Fire Moth) A") == ["Dasher A", "Fire Moth A"]
    assert dual_name_alternatives("Mad Cat (Timber Wolf)") == ["Mad Cat", "Timber Wolf"]
    assert dual_name_alternatives("Atlas AS7-D") == []
    assert dual_name_alternatives("(Fire Moth) A") == []
