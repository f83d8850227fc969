"""Cross-source reconciliation: matching external records to units and merging them."""

from __future__ import annotations

from .availability import AvailabilityResult, upsert_availability
from .engine import ReconcileReport, RecordFailure, reconcile_catalog
from .mappings import ERA_SLUGS, FACTION_SLUGS, infer_faction_type, is_clan_faction
from .matcher import (
    CatalogMatch,
    CatalogMatcher,
    DualNameStrategy,
    ExactSlugStrategy,
    FullNameStrategy,
    MatchStrategy,
    MatchTier,
    NormalizedSlugStrategy,
    OverrideStrategy,
    UnitIndex,
    UnmatchedRecord,
    default_strategies,
)
from .merge import (
    MERGEABLE_FIELDS,
    SOURCE_PRIORITY,
    MergeResult,
    apply_field,
    field_owner,
    merge_catalog_record,
    should_write,
)
from .names import dual_name_alternatives, extract_clan_name, normalize_name

__all__ = [
    "ERA_SLUGS",
    "FACTION_SLUGS",
    "MERGEABLE_FIELDS",
    "SOURCE_PRIORITY",
    "AvailabilityResult",
    "CatalogMatch",
    "CatalogMatcher",
    "DualNameStrategy",
    "ExactSlugStrategy",
    "FullNameStrategy",
    "MatchStrategy",
    "MatchTier",
    "MergeResult",
    "NormalizedSlugStrategy",
    "OverrideStrategy",
    "ReconcileReport",
    "RecordFailure",
    "UnitIndex",
    "UnmatchedRecord",
    "apply_field",
    "default_strategies",
    "dual_name_alternatives",
    "extract_clan_name",
    "field_owner",
    "infer_faction_type",
    "is_clan_faction",
    "merge_catalog_record",
    "normalize_name",
    "reconcile_catalog",
    "should_write",
    "upsert_availability",
]
