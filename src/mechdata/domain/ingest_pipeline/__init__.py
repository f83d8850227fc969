"""Unit ingestion pipeline.

Each parsed unit is upserted by an ``IngestionPipeline`` of explicit phases inside
its own unit of work. Runs share an ``EquipmentIdentityCache`` so every distinct
equipment label maps to exactly one row.
"""

from __future__ import annotations

from .context import (
    EntityCounter,
    IngestContext,
    IngestRunReport,
    ResolutionGap,
    UnitFailure,
    UpsertOutcome,
)
from .identity_cache import EquipmentIdentityCache
from .orchestrator import IngestionPipeline, PhaseFailedError, PipelinePhase
from .phases import (
    ChassisPhase,
    LoadoutPhase,
    LocationsPhase,
    MechDataPhase,
    QuirksPhase,
    UnitPhase,
    default_phases,
)
from .runner import (
    IngestAbortedError,
    default_pipeline,
    finalize_ingest_run,
    ingest_unit,
    ingest_units,
    link_ammunition,
    refresh_observed_locations,
)

__all__ = [
    "ChassisPhase",
    "EntityCounter",
    "EquipmentIdentityCache",
    "IngestAbortedError",
    "IngestContext",
    "IngestRunReport",
    "IngestionPipeline",
    "LoadoutPhase",
    "LocationsPhase",
    "MechDataPhase",
    "PhaseFailedError",
    "PipelinePhase",
    "QuirksPhase",
    "ResolutionGap",
    "UnitFailure",
    "UnitPhase",
    "UpsertOutcome",
    "default_phases",
    "default_pipeline",
    "finalize_ingest_run",
    "ingest_unit",
    "ingest_units",
    "link_ammunition",
    "refresh_observed_locations",
]
