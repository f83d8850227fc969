from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select

from mechdata.adapters.sqlalchemy.mappings import (
    chassis_table,
    equipment_table,
    loadout_table,
    unit_quirk_table,
    unit_table,
)
from mechdata.config import IngestConfig
from mechdata.domain.ingest_pipeline import (
    IngestAbortedError,
    default_pipeline,
    ingest_units,
)
from mechdata.domain.ingest_pipeline import runner as runner_module
from mechdata.domain.model import ComponentCategory, DataSource, UnitType
from mechdata.domain.parsing import parse_document
from tests.helpers.units import blk_document, mech_mtf, mtf_document, vehicle_blk

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sqlalchemy import Table

    from mechdata.adapters.sqlalchemy import SqlAlchemyIngestUnitOfWork
    from mechdata.domain.catalog import AliasResolver
    from mechdata.domain.ingest_pipeline import IngestContext, IngestRunReport
    from mechdata.domain.parsing import ParsedUnit, SourceDocument

    IngestFactory = Callable[[], SqlAlchemyIngestUnitOfWork]


@dataclass(slots=True)
class _FailingPhase:
    slug: str
    name: str = "failing"

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None:
        _ = context
        if parsed.slug == self.slug:
            raise RuntimeError(f"cannot store {parsed.slug}")


def _ingest(
    factory: IngestFactory,
    resolver: AliasResolver,
    *documents: SourceDocument,
    config: IngestConfig | None = None,
    failing_slug: str | None = None,
) -> IngestRunReport:
    pipeline = default_pipeline()
    if failing_slug is not None:
        pipeline = pipeline.with_phase(_FailingPhase(failing_slug))
    return ingest_units(
        documents, uow_factory=factory, resolver=resolver, config=config, pipeline=pipeline
    )


def _count(factory: IngestFactory, table: Table) -> int:
    with factory() as uow:
        return uow.session.execute(select(func.count()).select_from(table)).scalar_one()


def _atlas(data_dir: Path) -> SourceDocument:
    return mtf_document(
        (data_dir / "Atlas AS7-D.mtf").read_text(encoding="utf-8"), name="mechs/Atlas AS7-D.mtf"
    )


def test_atlas_is_stored_with_every_child_row(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver, data_dir: Path
) -> None:
    report = _ingest(ingest_uow_factory, seeded_resolver, _atlas(data_dir))

    assert report.units_ingested == 1
    assert report.resolution_gaps == []
    with ingest_uow_factory() as uow:
        repositories = uow.repositories
        unit = repositories.units.get_by_slug("atlas-as7-d")
        assert unit is not None
        assert unit.mul_id == 140
        assert unit.field_sources == {
            "intro_year": DataSource.MEGAMEK,
            "mul_id": DataSource.MEGAMEK,
        }
        chassis = repositories.chassis.get_by_slug("atlas-mech")
        assert chassis is not None
        assert unit.chassis_id == chassis.id
        assert len(repositories.locations.list_for_unit(unit.id)) == 8
        assert len(repositories.loadout.list_for_unit(unit.id)) == 13
        assert len(repositories.quirks.quirk_ids_for_unit(unit.id)) == 2
        mech = repositories.mech_data.get(unit.id)
        assert mech is not None
        assert mech.engine_rating == 300
        assert mech.engine_label == "Fusion Engine(IS)"
        assert mech.unresolved_components == set()
        assert all(type_id is not None for _, _, type_id in mech.components())
    assert _count(ingest_uow_factory, equipment_table) == 7


def test_reingesting_an_unchanged_file_touches_nothing(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver, data_dir: Path
) -> None:
    _ingest(ingest_uow_factory, seeded_resolver, _atlas(data_dir))
    with ingest_uow_factory() as uow:
        unit = uow.repositories.units.get_by_slug("atlas-as7-d")
        assert unit is not None
        first_updated_at = unit.updated_at

    report = _ingest(ingest_uow_factory, seeded_resolver, _atlas(data_dir))

    for kind in ("chassis", "units", "locations", "loadout", "quirks", "mech_data"):
        counter = report.counters[kind]
        assert (counter.created, counter.updated, counter.unchanged) == (0, 0, 1), kind
    assert report.counters["equipment"].created == 0
    with ingest_uow_factory() as uow:
        unit = uow.repositories.units.get_by_slug("atlas-as7-d")
        assert unit is not None
        assert unit.updated_at == first_updated_at
    assert _count(ingest_uow_factory, unit_table) == 1
    assert _count(ingest_uow_factory, unit_quirk_table) == 2


def test_shared_equipment_label_becomes_one_row(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    documents = [
        mtf_document(
            mech_mtf("Trooper", f"TR-{index}", weapons=("1 Medium Laser, Right Arm",), slots={}),
            name=f"mechs/Trooper TR-{index}.mtf",
        )
        for index in range(100)
    ]

    report = _ingest(ingest_uow_factory, seeded_resolver, *documents)

    assert report.units_ingested == 100
    assert report.counters["equipment"].created == 1
    assert _count(ingest_uow_factory, equipment_table) == 1
    assert _count(ingest_uow_factory, loadout_table) == 100


def test_failed_unit_rolls_back_alone(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    failing = mtf_document(mech_mtf("Wraith", "TR1"), name="mechs/Wraith TR1.mtf")
    healthy = mtf_document(mech_mtf("Warhammer", "WHM-6R"), name="mechs/Warhammer WHM-6R.mtf")

    report = _ingest(
        ingest_uow_factory, seeded_resolver, failing, healthy, failing_slug="wraith-tr1"
    )

    assert report.units_ingested == 1
    assert [(f.source, f.unit_slug) for f in report.unit_failures] == [
        ("mechs/Wraith TR1.mtf", "wraith-tr1")
    ]
    assert report.unit_failures[0].error == (
        "failing phase failed for wraith-tr1: cannot store wraith-tr1"
    )
    with ingest_uow_factory() as uow:
        assert uow.repositories.units.get_by_slug("wraith-tr1") is None
        warhammer = uow.repositories.units.get_by_slug("warhammer-whm-6r")
        assert warhammer is not None
        loadout = uow.repositories.loadout.list_for_unit(warhammer.id)
        ppc = uow.repositories.equipment.get_by_slug("ppc")
        assert ppc is not None
        assert [row.equipment_id for row in loadout] == [ppc.id]


def test_max_errors_aborts_the_run(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    documents = [
        mtf_document(mech_mtf("Wraith", "TR1"), name=f"mechs/copy-{index}.mtf")
        for index in range(5)
    ]

    with pytest.raises(IngestAbortedError) as excinfo:
        _ingest(
            ingest_uow_factory,
            seeded_resolver,
            *documents,
            config=IngestConfig(max_errors=2),
            failing_slug="wraith-tr1",
        )

    assert excinfo.value.report.error_count == 2
    assert excinfo.value.report.documents == 2


def test_unparseable_documents_are_counted(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    broken = mtf_document("Version:1.0\nModel:NOPE\n", name="mechs/broken.mtf")

    report = _ingest(ingest_uow_factory, seeded_resolver, broken)

    assert report.documents == 1
    assert report.parse_failures == ["mechs/broken.mtf"]
    assert report.units_ingested == 0


def test_one_bad_file_does_not_stop_the_batch(
    ingest_uow_factory: IngestFactory,
    seeded_resolver: AliasResolver,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    overlong = mtf_document(
        mech_mtf("Atlas", "AS7-D", engine="9" * 5000 + " Fusion Engine"),
        name="mechs/Atlas AS7-D.mtf",
    )
    exploding = mtf_document(mech_mtf("Wraith", "TR1"), name="mechs/Wraith TR1.mtf")
    healthy = mtf_document(mech_mtf("Warhammer", "WHM-6R"), name="mechs/Warhammer WHM-6R.mtf")

    def parse(document: SourceDocument) -> ParsedUnit | None:
        if document.name == exploding.name:
            raise ValueError("malformed location block")
        return parse_document(document)

    monkeypatch.setattr(runner_module, "parse_document", parse)

    report = _ingest(ingest_uow_factory, seeded_resolver, overlong, exploding, healthy)

    assert report.documents == 3
    assert report.parse_failures == ["mechs/Wraith TR1.mtf"]
    assert report.units_ingested == 2
    with ingest_uow_factory() as uow:
        atlas = uow.repositories.units.get_by_slug("atlas-as7-d")
        assert atlas is not None
        mech = uow.repositories.mech_data.get(atlas.id)
        assert mech is not None
        assert mech.engine_rating is None
        assert uow.repositories.units.get_by_slug("warhammer-whm-6r") is not None


def test_unknown_component_label_is_kept_and_flagged(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    document = mtf_document(mech_mtf(armor="Ferro-Fibrous Prototype", structure=None))

    report = _ingest(ingest_uow_factory, seeded_resolver, document)

    assert [(gap.category, gap.label) for gap in report.resolution_gaps] == [
        (ComponentCategory.ARMOR, "Ferro-Fibrous Prototype")
    ]
    with ingest_uow_factory() as uow:
        unit = uow.repositories.units.get_by_slug("griffin-grf-1n")
        assert unit is not None
        mech = uow.repositories.mech_data.get(unit.id)
        assert mech is not None
        assert mech.armor_label == "Ferro-Fibrous Prototype"
        assert mech.armor_type_id is None
        assert mech.unresolved_components == {ComponentCategory.ARMOR, ComponentCategory.STRUCTURE}
        assert mech.gyro_type_id is not None
        assert mech.gyro_label is None


def test_duplicate_mul_id_is_left_unset_on_the_second_unit(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    first = mtf_document(mech_mtf("Griffin", "GRF-1N", mul_id=1272), name="mechs/a.mtf")
    second = mtf_document(mech_mtf("Griffin", "GRF-1S", mul_id=1272), name="mechs/b.mtf")

    report = _ingest(ingest_uow_factory, seeded_resolver, first, second)

    assert report.units_ingested == 2
    with ingest_uow_factory() as uow:
        units = uow.repositories.units
        assert units.get_by_slug("griffin-grf-1n").mul_id == 1272  # type: ignore[union-attr]
        assert units.get_by_slug("griffin-grf-1s").mul_id is None  # type: ignore[union-attr]


def test_values_owned_by_higher_sources_survive_reingestion(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    document = mtf_document(mech_mtf(era=2492))
    _ingest(ingest_uow_factory, seeded_resolver, document)
    with ingest_uow_factory() as uow:
        unit = uow.repositories.units.get_by_slug("griffin-grf-1n")
        assert unit is not None
        unit.intro_year = 2500
        unit.field_sources = {**unit.field_sources, "intro_year": DataSource.MUL}
        uow.commit()

    report = _ingest(ingest_uow_factory, seeded_resolver, document)

    assert report.counters["units"].unchanged == 1
    with ingest_uow_factory() as uow:
        unit = uow.repositories.units.get_by_slug("griffin-grf-1n")
        assert unit is not None
        assert unit.intro_year == 2500
        assert unit.field_sources["intro_year"] is DataSource.MUL


def test_chassis_keeps_the_earliest_intro_year(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    _ingest(
        ingest_uow_factory,
        seeded_resolver,
        mtf_document(mech_mtf("Griffin", "GRF-1S", era=3050), name="mechs/a.mtf"),
        mtf_document(mech_mtf("Griffin", "GRF-1N", era=2492), name="mechs/b.mtf"),
        mtf_document(mech_mtf("Griffin", "GRF-3M", era=3060), name="mechs/c.mtf"),
    )

    with ingest_uow_factory() as uow:
        chassis = uow.repositories.chassis.get_by_slug("griffin-mech")
        assert chassis is not None
        assert chassis.intro_year == 2492


def test_same_chassis_name_across_unit_types_gets_two_chassis_rows(
    ingest_uow_factory: IngestFactory, seeded_resolver: AliasResolver
) -> None:
    report = _ingest(
        ingest_uow_factory,
        seeded_resolver,
        mtf_document(mech_mtf("Demolisher", "DMO-1K"), name="mechs/Demolisher DMO-1K.mtf"),
        blk_document(vehicle_blk("Demolisher", "Heavy Tank"), name="vehicles/Demolisher.blk"),
    )

    assert report.counters["chassis"].created == 2
    with ingest_uow_factory() as uow:
        mech_chassis = uow.repositories.chassis.get_by_slug("demolisher-mech")
        vehicle_chassis = uow.repositories.chassis.get_by_slug("demolisher-vehicle")
        mech = uow.repositories.units.get_by_slug("demolisher-dmo-1k")
        tank = uow.repositories.units.get_by_slug("demolisher-heavy-tank")
        assert mech_chassis is not None
        assert vehicle_chassis is not None
        assert mech_chassis.unit_type is UnitType.MECH
        assert vehicle_chassis.unit_type is UnitType.VEHICLE
        assert mech is not None
        assert tank is not None
        assert mech.chassis_id == mech_chassis.id
        assert tank.chassis_id == vehicle_chassis.id
    assert _count(ingest_uow_factory, chassis_table) == 2


def test_unit_moving_between_chassis_is_logged(
    ingest_uow_factory: IngestFactory,
    seeded_resolver: AliasResolver,
    caplog: pytest.LogCaptureFixture,
) -> None:
    mech = mtf_document(mech_mtf("Demolisher", "II"), name="mechs/Demolisher II.mtf")
    tank = blk_document(vehicle_blk("Demolisher", "II"), name="vehicles/Demolisher II.blk")

    with caplog.at_level(logging.WARNING, logger="mechdata.domain.ingest_pipeline.phases"):
        report = _ingest(ingest_uow_factory, seeded_resolver, mech, tank)

    assert report.units_ingested == 2
    assert any(
        "demolisher-ii moves to chassis demolisher-vehicle" in record.getMessage()
        for record in caplog.records
    )
