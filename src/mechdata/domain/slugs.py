"""Deterministic slugs and label normalization.

``equipment_slug`` is the single normalization shared by the per-run equipment
identity cache and the ``equipment.slug`` uniqueness constraint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mechdata.domain.model import UnitType


def to_slug(text: str) -> str:
    """Lower-case ASCII alphanumerics, collapsing every other run into one hyphen.

    >>> to_slug("Atlas AS7-D")
    'atlas-as7-d'
    """

    parts: list[str] = []
    pending_hyphen = False
    for char in text:
        if char.isascii() and char.isalnum():
            if pending_hyphen and parts:
                parts.append("-")
            parts.append(char.lower())
            pending_hyphen = False
        else:
            pending_hyphen = True
    return "".join(parts)


def unit_full_name(chassis: str, model: str | None) -> str:
    chassis = chassis.strip()
    model = (model or "").strip()
    return f"{chassis} {model}" if model else chassis


def unit_slug(chassis: str, model: str | None) -> str:
    return to_slug(unit_full_name(chassis, model))


def chassis_slug(name: str, unit_type: UnitType) -> str:
    """Chassis names only collide within one unit type (``demolisher-vehicle``)."""

    return f"{to_slug(name)}-{unit_type.value}"


def equipment_slug(label: str) -> str:
    return to_slug(label)


def normalize_label(label: str) -> str:
    """Normalize a component label for alias lookup: trim, collapse spaces, case-fold."""

    return " ".join(label.split()).casefold()
