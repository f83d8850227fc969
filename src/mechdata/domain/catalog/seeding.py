"""Idempotent seeding of the reference catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from mechdata.domain.model import (
    COMPONENT_TYPE_CLASSES,
    ComponentCategory,
    ComponentType,
    Era,
    Faction,
)
from mechdata.domain.slugs import normalize_label

from .seed_data import COMPONENT_SEEDS, ERAS, FACTIONS, ComponentSeed

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from mechdata.domain.ports.persistence import (
        ComponentTypeRepository,
        EraRepository,
        FactionRepository,
    )
    from mechdata.domain.ports.unit_of_work import CatalogUnitOfWork

log = getLogger(__name__)


class AliasConflictError(ValueError):
    """Raised when one normalized alias would point at two canonical types."""

    def __init__(self, category: ComponentCategory, alias: str, existing: str, incoming: str) -> None:
        super().__init__(
            f"{category} alias {alias!r} maps to both {existing!r} and {incoming!r}"
        )
        self.category = category
        self.alias = alias


@dataclass(slots=True)
class CatalogSeedReport:
    types_created: int = 0
    types_updated: int = 0
    aliases_created: int = 0
    eras_created: int = 0
    factions_created: int = 0
    per_category: dict[ComponentCategory, int] = field(default_factory=dict)


def check_alias_uniqueness(seeds: Mapping[ComponentCategory, tuple[ComponentSeed, ...]]) -> None:
    """Fail before touching the database if the curated aliases contradict each other."""

    for category, entries in seeds.items():
        owners: dict[str, str] = {}
        for seed in entries:
            for label in (seed.name, *seed.aliases):
                alias = normalize_label(label)
                owner = owners.setdefault(alias, seed.slug)
                if owner != seed.slug:
                    raise AliasConflictError(category, alias, owner, seed.slug)


def seed_reference_catalog(
    uow: CatalogUnitOfWork,
    *,
    seeds: Mapping[ComponentCategory, tuple[ComponentSeed, ...]] = COMPONENT_SEEDS,
) -> CatalogSeedReport:
    """Insert missing component types, aliases, eras and factions; refresh type properties.

    The caller owns the transaction boundary (``with uow: ...; uow.commit()``).
    """

    check_alias_uniqueness(seeds)
    report = CatalogSeedReport()
    repositories = uow.repositories
    for category, entries in seeds.items():
        for seed in entries:
            component = _upsert_component(repositories.component_types, category, seed, report)
            _ensure_aliases(repositories.component_types, category, component, seed, report)
        report.per_category[category] = len(entries)

    _seed_eras(repositories.eras, report)
    _seed_factions(repositories.factions, report)
    log.info(
        "Reference catalog seeded: types created=%s updated=%s, aliases created=%s, "
        "eras created=%s, factions created=%s",
        report.types_created,
        report.types_updated,
        report.aliases_created,
        report.eras_created,
        report.factions_created,
    )
    return report


def _upsert_component(
    repository: ComponentTypeRepository,
    category: ComponentCategory,
    seed: ComponentSeed,
    report: CatalogSeedReport,
) -> ComponentType:
    existing = repository.get_by_slug(category, seed.slug)
    values: dict[str, object] = {
        "name": seed.name,
        "tech_base": seed.tech_base,
        "rules_level": seed.rules_level,
        "intro_year": seed.intro_year,
        **seed.properties,
    }
    if existing is None:
        component = COMPONENT_TYPE_CLASSES[category](slug=seed.slug, **values)
        repository.add(component)
        report.types_created += 1
        return component

    changed = False
    for name, value in values.items():
        if getattr(existing, name) != value:
            setattr(existing, name, value)
            changed = True
    if changed:
        report.types_updated += 1
    return existing


def _ensure_aliases(
    repository: ComponentTypeRepository,
    category: ComponentCategory,
    component: ComponentType,
    seed: ComponentSeed,
    report: CatalogSeedReport,
) -> None:
    known: dict[str, UUID] = repository.aliases(category)
    for label in (seed.name, *seed.aliases):
        alias = normalize_label(label)
        owner = known.get(alias)
        if owner is None:
            repository.add_alias(category, alias=alias, label=label, type_id=component.id)
            known[alias] = component.id
            report.aliases_created += 1
        elif owner != component.id:
            raise AliasConflictError(category, alias, str(owner), seed.slug)


def _seed_eras(repository: EraRepository, report: CatalogSeedReport) -> None:
    for seed in ERAS:
        if repository.get_by_slug(seed.slug) is not None:
            continue
        repository.add(
            Era(slug=seed.slug, name=seed.name, start_year=seed.start_year, end_year=seed.end_year)
        )
        report.eras_created += 1


def _seed_factions(repository: FactionRepository, report: CatalogSeedReport) -> None:
    for seed in FACTIONS:
        if repository.get_by_slug(seed.slug) is not None:
            continue
        repository.add(
            Faction(
                slug=seed.slug,
                name=seed.name,
                short_name=seed.short_name,
                faction_type=seed.faction_type,
                is_clan=seed.is_clan,
            )
        )
        report.factions_created += 1
