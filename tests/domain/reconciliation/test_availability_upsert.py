from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mechdata.domain.ingest_pipeline import ingest_units
from mechdata.domain.model import AvailabilityNote, FactionType
from mechdata.domain.reconciliation import upsert_availability
from tests.helpers.units import mech_mtf, mtf_document

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from mechdata.adapters.sqlalchemy import (
        SqlAlchemyIngestUnitOfWork,
        SqlAlchemyReconcileUnitOfWork,
    )
    from mechdata.domain.catalog import AliasResolver

    ReconcileFactory = Callable[[], SqlAlchemyReconcileUnitOfWork]

NOTES = (
    AvailabilityNote(faction="Lyran Commonwealth", era="Star League"),
    AvailabilityNote(faction="Clan Wolf", era="Clan Invasion"),
    AvailabilityNote(faction="Mercenary", era="Star League"),
    AvailabilityNote(faction="Lyran Commonwealth", era="Star League"),
)


@pytest.fixture
def unit_id(
    ingest_uow_factory: Callable[[], SqlAlchemyIngestUnitOfWork],
    seeded_resolver: AliasResolver,
) -> UUID:
    ingest_units(
        [mtf_document(mech_mtf())], uow_factory=ingest_uow_factory, resolver=seeded_resolver
    )
    with ingest_uow_factory() as uow:
        unit = uow.repositories.units.get_by_slug("griffin-grf-1n")
        assert unit is not None
        return unit.id


def test_rows_are_inserted_once(reconcile_uow_factory: ReconcileFactory, unit_id: UUID) -> None:
    with reconcile_uow_factory() as uow:
        first = upsert_availability(unit_id, NOTES, repositories=uow.repositories)
        uow.commit()

    with reconcile_uow_factory() as uow:
        second = upsert_availability(unit_id, NOTES, repositories=uow.repositories)
        uow.commit()
        keys = uow.repositories.availability.keys_for_unit(unit_id)

    assert (first.inserted, first.existing) == (3, 0)
    assert (second.inserted, second.existing) == (0, 3)
    assert len(keys) == 3


def test_force_replaces_the_stored_set(
    reconcile_uow_factory: ReconcileFactory, unit_id: UUID
) -> None:
    with reconcile_uow_factory() as uow:
        upsert_availability(unit_id, NOTES, repositories=uow.repositories)
        uow.commit()

    with reconcile_uow_factory() as uow:
        result = upsert_availability(
            unit_id, NOTES[:1], repositories=uow.repositories, force=True
        )
        uow.commit()
        keys = uow.repositories.availability.keys_for_unit(unit_id)
        steiner = uow.repositories.factions.get_by_slug("steiner")
        star_league = uow.repositories.eras.get_by_slug("star-league")

    assert (result.cleared, result.inserted) == (3, 1)
    assert steiner is not None
    assert star_league is not None
    assert keys == {(steiner.id, star_league.id)}


def test_unknown_faction_is_created_once(
    reconcile_uow_factory: ReconcileFactory, unit_id: UUID
) -> None:
    notes = [
        AvailabilityNote(faction="Circinus Federation", era="Star League"),
        AvailabilityNote(faction="Circinus Federation", era="Jihad"),
        AvailabilityNote(faction="Clan Burrock", era="Clan Invasion"),
    ]

    with reconcile_uow_factory() as uow:
        result = upsert_availability(unit_id, notes, repositories=uow.repositories)
        uow.commit()
        circinus = uow.repositories.factions.get_by_slug("circinus-federation")
        burrock = uow.repositories.factions.get_by_slug("clan-burrock")

    assert result.inserted == 3
    assert result.new_factions == ["circinus-federation", "clan-burrock"]
    assert circinus is not None
    assert circinus.faction_type is FactionType.OTHER
    assert burrock is not None
    assert burrock.is_clan
    assert burrock.faction_type is FactionType.CLAN


def test_unmapped_era_is_skipped_and_reported(
    reconcile_uow_factory: ReconcileFactory, unit_id: UUID
) -> None:
    notes = [
        AvailabilityNote(faction="Lyran Commonwealth", era="Far Future"),
        AvailabilityNote(faction="Lyran Commonwealth", era="Clan Invasion"),
    ]

    with reconcile_uow_factory() as uow:
        result = upsert_availability(unit_id, notes, repositories=uow.repositories)
        uow.commit()

    assert result.inserted == 1
    assert result.unmapped_eras == {"Far Future"}


def test_mapping_to_a_missing_catalog_faction_is_unresolved(
    reconcile_uow_factory: ReconcileFactory, unit_id: UUID
) -> None:
    notes = [AvailabilityNote(faction="Lyran Alliance", era="Jihad")]

    with reconcile_uow_factory() as uow:
        result = upsert_availability(
            unit_id,
            notes,
            repositories=uow.repositories,
            faction_slugs={"Lyran Alliance": "lyran-alliance-proper"},
        )

    assert result.inserted == 0
    assert result.unresolved_factions == {"Lyran Alliance"}
