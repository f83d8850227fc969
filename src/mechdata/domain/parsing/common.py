"""Value readers shared by both unit file formats.

None of these raise: unreadable values come back as ``None`` or a default.
"""

from __future__ import annotations

import math
import re

from mechdata.domain.model import RulesLevel, TechBase

_LEADING_INT = re.compile(r"^\s*(-?\d+)")

_RULES_LEVEL_BY_NUMBER = {
    0: RulesLevel.INTRODUCTORY,
    1: RulesLevel.STANDARD,
    2: RulesLevel.ADVANCED,
    3: RulesLevel.EXPERIMENTAL,
    4: RulesLevel.UNOFFICIAL,
    5: RulesLevel.UNOFFICIAL,
}


def read_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def read_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        number = float(value.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def split_leading_int(value: str) -> tuple[int | None, str]:
    """Split ``"300 XL Engine"`` into ``(300, "XL Engine")``."""

    match = _LEADING_INT.match(value)
    if match is None:
        return None, value.strip()
    rest = value[match.end() :].strip()
    try:
        return int(match.group(1)), rest
    except ValueError:
        return None, rest


def strip_quotes(value: str) -> str:
    return value.strip().strip('"').strip()


def tech_base_from_text(value: str) -> TechBase:
    lowered = value.lower()
    if "clan" in lowered and "inner" not in lowered:
        return TechBase.CLAN
    if "mixed" in lowered:
        return TechBase.MIXED
    if "primitive" in lowered:
        return TechBase.PRIMITIVE
    return TechBase.INNER_SPHERE


def rules_level_from_number(value: str | None) -> RulesLevel:
    number = read_int(value)
    if number is None:
        return RulesLevel.STANDARD
    return _RULES_LEVEL_BY_NUMBER.get(number, RulesLevel.STANDARD)


def rules_level_from_type(value: str) -> RulesLevel:
    lowered = value.lower()
    if "level 1" in lowered:
        return RulesLevel.STANDARD
    if "level 2" in lowered:
        return RulesLevel.ADVANCED
    if "level 3" in lowered:
        return RulesLevel.EXPERIMENTAL
    if "unofficial" in lowered:
        return RulesLevel.UNOFFICIAL
    return RulesLevel.STANDARD
