"""Pure parsers turning MegaMek unit files into ``ParsedUnit`` records."""

from __future__ import annotations

from .blk import parse_blk
from .equipment import ammo_parent_candidates, categorize_equipment, equipment_tech_base
from .mtf import parse_mtf
from .records import (
    ParsedLoadoutEntry,
    ParsedLocation,
    ParsedMechData,
    ParsedUnit,
    SourceDocument,
    SourceFormat,
)


def parse_document(document: SourceDocument) -> ParsedUnit | None:
    """Dispatch a decoded archive entry to the parser for its format."""

    if document.format is SourceFormat.MTF:
        return parse_mtf(document.text)
    return parse_blk(document.text, document.default_unit_type)


__all__ = [
    "ParsedLoadoutEntry",
    "ParsedLocation",
    "ParsedMechData",
    "ParsedUnit",
    "SourceDocument",
    "SourceFormat",
    "ammo_parent_candidates",
    "categorize_equipment",
    "equipment_tech_base",
    "parse_blk",
    "parse_document",
    "parse_mtf",
]
