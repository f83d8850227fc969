"""Match external catalog records to stored units.

Strategies run in a fixed order and the first hit wins; there is no scoring.
A record no strategy accepts becomes an ``UnmatchedRecord`` for manual curation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from mechdata.domain.slugs import to_slug

from .names import dual_name_alternatives, normalize_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from mechdata.domain.model import ExternalCatalogRecord, Unit

log = getLogger(__name__)


class MatchTier(StrEnum):
    OVERRIDE = "override"
    EXACT_SLUG = "exact_slug"
    NORMALIZED_SLUG = "normalized_slug"
    FULL_NAME = "full_name"
    DUAL_NAME = "dual_name"


@dataclass(frozen=True, slots=True)
class CatalogMatch:
    unit_id: UUID
    slug: str
    tier: MatchTier


@dataclass(frozen=True, slots=True)
class UnmatchedRecord:
    external_id: int
    name: str
    computed_slug: str
    tonnage: float | None
    reason: str


@dataclass(slots=True)
class UnitIndex:
    """Slug and lower-cased full-name lookups over every stored unit."""

    by_slug: dict[str, UUID] = field(default_factory=dict)
    by_name: dict[str, tuple[str, UUID]] = field(default_factory=dict)

    @classmethod
    def from_units(cls, units: Iterable[Unit]) -> UnitIndex:
        index = cls()
        for unit in units:
            index.by_slug[unit.slug] = unit.id
            index.by_name.setdefault(unit.full_name.lower(), (unit.slug, unit.id))
        return index

    def slug(self, slug: str, tier: MatchTier) -> CatalogMatch | None:
        unit_id = self.by_slug.get(slug)
        return CatalogMatch(unit_id, slug, tier) if unit_id is not None else None

    def name(self, name: str, tier: MatchTier) -> CatalogMatch | None:
        hit = self.by_name.get(name.lower())
        return CatalogMatch(hit[1], hit[0], tier) if hit is not None else None


class MatchStrategy(Protocol):
    tier: MatchTier

    def match(self, record: ExternalCatalogRecord, index: UnitIndex) -> CatalogMatch | None: ...


@dataclass(slots=True)
class OverrideStrategy:
    overrides: Mapping[int, str]
    tier: MatchTier = MatchTier.OVERRIDE

    def match(self, record: ExternalCatalogRecord, index: UnitIndex) -> CatalogMatch | None:
        slug = self.overrides.get(record.external_id)
        if slug is None:
            return None
        hit = index.slug(slug, self.tier)
        if hit is None:
            log.warning(
                "Override for MUL id %s points at unknown unit %s", record.external_id, slug
            )
        return hit


@dataclass(slots=True)
class ExactSlugStrategy:
    tier: MatchTier = MatchTier.EXACT_SLUG

    def match(self, record: ExternalCatalogRecord, index: UnitIndex) -> CatalogMatch | None:
        return index.slug(to_slug(record.name), self.tier)


@dataclass(slots=True)
class NormalizedSlugStrategy:
    tier: MatchTier = MatchTier.NORMALIZED_SLUG

    def match(self, record: ExternalCatalogRecord, index: UnitIndex) -> CatalogMatch | None:
        normalized = to_slug(normalize_name(record.name))
        if not normalized or normalized == to_slug(record.name):
            return None
        return index.slug(normalized, self.tier)


@dataclass(slots=True)
class FullNameStrategy:
    tier: MatchTier = MatchTier.FULL_NAME

    def match(self, record: ExternalCatalogRecord, index: UnitIndex) -> CatalogMatch | None:
        hit = index.name(record.name.strip(), self.tier)
        if hit is not None:
            return hit
        normalized = normalize_name(record.name)
        if normalized and normalized.lower() != record.name.strip().lower():
            return index.name(normalized, self.tier)
        return None


@dataclass(slots=True)
class DualNameStrategy:
    tier: MatchTier = MatchTier.DUAL_NAME

    def match(self, record: ExternalCatalogRecord, index: UnitIndex) -> CatalogMatch | None:
        alternatives = dual_name_alternatives(record.name)
        for alternative in alternatives:
            hit = index.slug(to_slug(alternative), self.tier)
            if hit is not None:
                return hit
        for alternative in alternatives:
            hit = index.name(alternative, self.tier)
            if hit is not None:
                return hit
        return None


def default_strategies(overrides: Mapping[int, str] | None = None) -> tuple[MatchStrategy, ...]:
    return (
        OverrideStrategy(dict(overrides or {})),
        ExactSlugStrategy(),
        NormalizedSlugStrategy(),
        FullNameStrategy(),
        DualNameStrategy(),
    )


@dataclass(slots=True)
class CatalogMatcher:
    index: UnitIndex
    strategies: Sequence[MatchStrategy] = field(default_factory=default_strategies)

    @classmethod
    def for_units(
        cls, units: Iterable[Unit], *, overrides: Mapping[int, str] | None = None
    ) -> CatalogMatcher:
        return cls(UnitIndex.from_units(units), default_strategies(overrides))

    def match(self, record: ExternalCatalogRecord) -> CatalogMatch | UnmatchedRecord:
        for strategy in self.strategies:
            hit = strategy.match(record, self.index)
            if hit is not None:
                return hit
        return UnmatchedRecord(
            external_id=record.external_id,
            name=record.name,
            computed_slug=to_slug(record.name),
            tonnage=record.tonnage,
            reason=self._miss_reason(record),
        )

    def _miss_reason(self, record: ExternalCatalogRecord) -> str:
        if record.external_id in _overrides_of(self.strategies):
            return "override target not found"
        return "no unit with a matching slug or name"


def _overrides_of(strategies: Sequence[MatchStrategy]) -> Mapping[int, str]:
    for strategy in strategies:
        if isinstance(strategy, OverrideStrategy):
            return strategy.overrides
    return {}
