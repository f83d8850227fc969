"""Public domain model surface."""

from __future__ import annotations

from mechdata.domain.model.availability import (
    AvailabilityNote,
    ExternalCatalogRecord,
    UnitAvailability,
)
from mechdata.domain.model.base import Entity, new_id, utcnow
from mechdata.domain.model.catalog import (
    COMPONENT_TYPE_CLASSES,
    ArmorType,
    CockpitType,
    ComponentType,
    DatasetMetadata,
    EngineType,
    Era,
    Faction,
    GyroType,
    HeatSinkType,
    MyomerType,
    StructureType,
)
from mechdata.domain.model.enums import (
    ComponentCategory,
    DataSource,
    EquipmentCategory,
    FactionType,
    Location,
    RulesLevel,
    TechBase,
    UnitType,
)
from mechdata.domain.model.equipment import Equipment
from mechdata.domain.model.units import (
    LoadoutEntry,
    MechData,
    Quirk,
    Unit,
    UnitChassis,
    UnitLocation,
)

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "new_id",
    "utcnow",
    # units
    "UnitChassis",
    "Unit",
    "UnitLocation",
    "LoadoutEntry",
    "Quirk",
    "MechData",
    # equipment
    "Equipment",
    # reference catalog
    "ComponentType",
    "EngineType",
    "ArmorType",
    "StructureType",
    "HeatSinkType",
    "GyroType",
    "CockpitType",
    "MyomerType",
    "COMPONENT_TYPE_CLASSES",
    "Era",
    "Faction",
    "DatasetMetadata",
    # availability
    "UnitAvailability",
    "AvailabilityNote",
    "ExternalCatalogRecord",
    # enums
    "ComponentCategory",
    "DataSource",
    "EquipmentCategory",
    "FactionType",
    "Location",
    "RulesLevel",
    "TechBase",
    "UnitType",
]
