"""Reference catalog: curated component types, aliases, eras and factions."""

from __future__ import annotations

from .equipment_stats import (
    SLUG_ALIASES,
    EquipmentStats,
    EquipmentStatsReport,
    apply_equipment_stats,
)
from .resolver import AliasResolver, ComponentResolution, ResolutionStatus
from .seed_data import CATALOG_VERSION, COMPONENT_SEEDS, DEFAULT_COMPONENT_LABELS
from .seeding import AliasConflictError, CatalogSeedReport, seed_reference_catalog

__all__ = [
    "CATALOG_VERSION",
    "COMPONENT_SEEDS",
    "DEFAULT_COMPONENT_LABELS",
    "SLUG_ALIASES",
    "AliasConflictError",
    "AliasResolver",
    "CatalogSeedReport",
    "ComponentResolution",
    "EquipmentStats",
    "EquipmentStatsReport",
    "ResolutionStatus",
    "apply_equipment_stats",
    "seed_reference_catalog",
]
