"""Keyword classification of equipment labels as they appear in unit files."""

from __future__ import annotations

import re

from mechdata.domain.model import EquipmentCategory, TechBase

_ENERGY_KEYWORDS = ("laser", "ppc", "flamer", "plasma rifle")
_MISSILE_KEYWORDS = (
    "lrm",
    "srm",
    "streak",
    "narc",
    "ams",
    "mml",
    "atm",
    "rocket",
    "arrow",
    "thunderbolt",
)
_BALLISTIC_KEYWORDS = (
    "autocannon",
    "ac/",
    "gauss",
    "rifle",
    "lbx",
    "lb ",
    "ultra",
    "rotary",
    "hag",
    "machine gun",
)
_PHYSICAL_KEYWORDS = ("hatchet", "sword", "claw", "mace", "talons", "retractable blade")

_AMMO_TOKENS = re.compile(r"\b(?:ammo|ammunition)\b", re.IGNORECASE)
_TECH_PREFIX = re.compile(r"^(?:is|cl|clan)\s+", re.IGNORECASE)
_AMMO_SUFFIX = re.compile(r"\s*\((?:clan|is)\)\s*$", re.IGNORECASE)
_AMMO_VARIANTS = re.compile(r"\s*-\s*(?:full|half|artemis.*|narc.*|cluster|incendiary)$", re.IGNORECASE)


def categorize_equipment(label: str) -> EquipmentCategory:  # noqa: PLR0911
    """Assign a category from keywords; the first matching rule wins."""

    name = label.lower()
    if "ammo" in name:
        return EquipmentCategory.AMMUNITION
    if "heat sink" in name or "heatsink" in name:
        return EquipmentCategory.HEAT_SINK
    if "jump jet" in name or "jumpjet" in name:
        return EquipmentCategory.JUMP_JET
    if "targeting computer" in name or "targetingcomputer" in name:
        return EquipmentCategory.TARGETING_COMPUTER
    if "gyro" in name:
        return EquipmentCategory.GYRO
    if "cockpit" in name:
        return EquipmentCategory.COCKPIT
    if "actuator" in name:
        return EquipmentCategory.ACTUATOR
    if "endo steel" in name or "endo-steel" in name or "structure" in name:
        return EquipmentCategory.STRUCTURE
    if "ferro" in name or "reactive" in name or "stealth" in name:
        return EquipmentCategory.ARMOR
    if "engine" in name:
        return EquipmentCategory.ENGINE
    if any(keyword in name for keyword in _ENERGY_KEYWORDS):
        return EquipmentCategory.ENERGY_WEAPON
    if any(keyword in name for keyword in _MISSILE_KEYWORDS):
        return EquipmentCategory.MISSILE_WEAPON
    if any(keyword in name for keyword in _BALLISTIC_KEYWORDS):
        return EquipmentCategory.BALLISTIC_WEAPON
    if any(keyword in name for keyword in _PHYSICAL_KEYWORDS):
        return EquipmentCategory.PHYSICAL_WEAPON
    return EquipmentCategory.EQUIPMENT


def equipment_tech_base(label: str) -> TechBase:
    """MegaMek prefixes Clan gear with ``CL`` (``CLERLargeLaser``) or ``Clan``."""

    stripped = label.strip()
    if stripped.startswith("CL") or stripped.lower().startswith("clan"):
        return TechBase.CLAN
    return TechBase.INNER_SPHERE


def ammo_parent_candidates(label: str) -> list[str]:
    """Candidate weapon labels fed by an ammunition label, most specific first.

    ``"IS Ammo AC/20"`` yields ``["AC/20"]``; ``"Clan Ammo LRM-15 Artemis-capable"``
    style suffixes are peeled off one at a time.
    """

    name = _AMMO_TOKENS.sub(" ", label)
    name = _AMMO_SUFFIX.sub("", name)
    name = " ".join(name.split())
    name = _TECH_PREFIX.sub("", name)

    candidates: list[str] = []
    if name:
        candidates.append(name)
    trimmed = _AMMO_VARIANTS.sub("", name).strip()
    if trimmed and trimmed not in candidates:
        candidates.append(trimmed)
    return candidates
