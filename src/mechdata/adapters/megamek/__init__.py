"""MegaMek unit archive adapter."""

from __future__ import annotations

from .archive import ArchiveError, UnitArchive, classify_entry

__all__ = ["ArchiveError", "UnitArchive", "classify_entry"]
