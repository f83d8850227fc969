from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from mechdata.domain.catalog import EquipmentStats, apply_equipment_stats
from mechdata.domain.model import DataSource, Equipment, EquipmentCategory, TechBase

if TYPE_CHECKING:
    from uuid import UUID

NOW = datetime(2025, 3, 1, tzinfo=UTC)


class FakeEquipmentRepository:
    def __init__(self, *items: Equipment) -> None:
        self.items = {item.slug: item for item in items}

    def add(self, entity: Equipment) -> None:
        self.items[entity.slug] = entity

    def get_by_slug(self, slug: str) -> Equipment | None:
        return self.items.get(slug)

    def list_all(self) -> list[Equipment]:
        return list(self.items.values())

    def slug_index(self) -> dict[str, UUID]:
        return {slug: item.id for slug, item in self.items.items()}

    def observed_locations(self) -> dict[UUID, set[str]]:
        return {}


def _equipment(slug: str, **stats: object) -> Equipment:
    return Equipment(
        slug=slug,
        name=slug,
        category=EquipmentCategory.ENERGY_WEAPON,
        tech_base=TechBase.INNER_SPHERE,
        **stats,  # pyright: ignore[reportArgumentType]
    )


@pytest.fixture
def repository() -> FakeEquipmentRepository:
    return FakeEquipmentRepository(
        _equipment("medium-laser", tonnage=1.0),
        _equipment("clerlargelaser"),
        _equipment(
            "ppc",
            tonnage=7.0,
            crits=3,
            damage="10",
            heat=10,
            range_min=3,
            range_short=6,
            range_medium=12,
            range_long=18,
            bv=176,
        ),
    )


def test_fill_only_writes_empty_columns(repository: FakeEquipmentRepository) -> None:
    report = apply_equipment_stats(
        repository,
        [EquipmentStats(slug="medium-laser", tonnage=2.0, heat=3, damage="5")],
        now=NOW,
    )

    laser = repository.items["medium-laser"]
    assert report.updated == 1
    assert laser.tonnage == 1.0
    assert laser.heat == 3
    assert laser.damage == "5"
    assert laser.stats_source is DataSource.SEED
    assert laser.stats_updated_at == NOW


def test_complete_rows_are_left_alone(repository: FakeEquipmentRepository) -> None:
    report = apply_equipment_stats(repository, [EquipmentStats(slug="ppc", heat=15)], now=NOW)

    assert report.unchanged == 1
    assert repository.items["ppc"].heat == 10
    assert repository.items["ppc"].stats_updated_at is None


def test_force_overwrites_every_stat(repository: FakeEquipmentRepository) -> None:
    report = apply_equipment_stats(
        repository, [EquipmentStats(slug="ppc", heat=15)], force=True, now=NOW
    )

    ppc = repository.items["ppc"]
    assert report.updated == 1
    assert ppc.heat == 15
    assert ppc.tonnage is None
    assert ppc.stats_updated_at == NOW


def test_slug_aliases_and_missing_rows(repository: FakeEquipmentRepository) -> None:
    report = apply_equipment_stats(
        repository,
        [
            EquipmentStats(slug="clan-er-large-laser", tonnage=4.0),
            EquipmentStats(slug="imaginary-cannon", tonnage=99.0),
        ],
        now=NOW,
    )

    assert report.alias_hits == 1
    assert report.updated == 1
    assert report.not_found == 1
    assert repository.items["clerlargelaser"].tonnage == 4.0
