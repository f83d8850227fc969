from __future__ import annotations

import csv
import json
from typing import TYPE_CHECKING

from mechdata.adapters.reports import (
    UNMATCHED_CSV_FIELDS,
    IngestSummary,
    ReconcileSummary,
    SeedSummary,
    write_run_report,
    write_unmatched_csv,
)
from mechdata.domain.catalog import CatalogSeedReport, EquipmentStatsReport
from mechdata.domain.ingest_pipeline import (
    IngestRunReport,
    ResolutionGap,
    UnitFailure,
    UpsertOutcome,
)
from mechdata.domain.model import ComponentCategory
from mechdata.domain.reconciliation import MatchTier, ReconcileReport, UnmatchedRecord

if TYPE_CHECKING:
    from pathlib import Path

UNMATCHED = [
    UnmatchedRecord(
        external_id=3,
        name="Marauder MAD-3R",
        computed_slug="marauder-mad-3r",
        tonnage=75.0,
        reason="no unit with a matching slug or name",
    ),
    UnmatchedRecord(
        external_id=99,
        name='Odd "Quoted", Name',
        computed_slug="odd-quoted-name",
        tonnage=None,
        reason="override target not found",
    ),
]


def test_unmatched_csv_has_one_row_per_record(tmp_path: Path) -> None:
    path = tmp_path / "out" / "unmatched_mul_units.csv"

    count = write_unmatched_csv(path, UNMATCHED)

    with path.open(encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        rows = list(reader)
        assert tuple(reader.fieldnames or ()) == UNMATCHED_CSV_FIELDS
    assert count == 2
    assert rows[0] == {
        "external_id": "3",
        "name": "Marauder MAD-3R",
        "computed_slug": "marauder-mad-3r",
        "tonnage": "75.0",
        "reason": "no unit with a matching slug or name",
    }
    assert rows[1]["name"] == 'Odd "Quoted", Name'
    assert rows[1]["tonnage"] == ""


def test_empty_unmatched_csv_still_has_a_header(tmp_path: Path) -> None:
    path = tmp_path / "unmatched.csv"

    assert write_unmatched_csv(path, []) == 0
    assert path.read_text(encoding="utf-8").strip() == ",".join(UNMATCHED_CSV_FIELDS)


def test_ingest_summary_is_written_as_json(tmp_path: Path) -> None:
    report = IngestRunReport(dataset_version="0.50.0", documents=3, units_ingested=1)
    report.parse_failures.append("mechs/broken.mtf")
    report.unit_failures.append(UnitFailure("mechs/x.mtf", "x-1", "boom"))
    report.resolution_gaps.append(
        ResolutionGap("griffin-grf-1n", ComponentCategory.ARMOR, "Ferro-Fibrous Prototype")
    )
    report.counters["units"].record(UpsertOutcome.CREATED)

    path = write_run_report(tmp_path / "reports", IngestSummary.from_report(report), name="ingest")

    assert path.parent == tmp_path / "reports"
    assert path.name.startswith("ingest-")
    assert path.suffix == ".json"
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["kind"] == "ingest"
    assert payload["dataset_version"] == "0.50.0"
    assert payload["failures"] == [{"source": "mechs/x.mtf", "unit": "x-1", "error": "boom"}]
    assert payload["resolution_gaps"] == [
        {"unit_slug": "griffin-grf-1n", "category": "armor", "label": "Ferro-Fibrous Prototype"}
    ]
    assert payload["counters"]["units"] == {"created": 1, "updated": 0, "unchanged": 0}


def test_reconcile_summary_flattens_counters() -> None:
    report = ReconcileReport(records=4, availability_inserted=2)
    report.matched_by_tier[MatchTier.EXACT_SLUG] += 2
    report.matched_by_tier[MatchTier.DUAL_NAME] += 1
    report.fields_written.update(["bv", "bv", "role"])
    report.unmapped_eras.update({"Far Future", "Age of Myth"})
    report.unmatched.extend(UNMATCHED[:1])

    summary = ReconcileSummary.from_report(report)

    assert summary.matched == 3
    assert summary.matched_by_tier == {"exact_slug": 2, "dual_name": 1}
    assert summary.fields_written == {"bv": 2, "role": 1}
    assert summary.unmapped_eras == ["Age of Myth", "Far Future"]
    assert [entry.external_id for entry in summary.unmatched] == [3]


def test_seed_summary_includes_equipment_stats_when_given() -> None:
    seed = CatalogSeedReport(types_created=5, aliases_created=12)
    seed.per_category[ComponentCategory.ARMOR] = 5
    stats = EquipmentStatsReport(updated=3, not_found=1)

    summary = SeedSummary.from_reports(seed, catalog_version="2025.2", stats=stats)
    bare = SeedSummary.from_reports(seed, catalog_version="2025.2")

    assert summary.per_category == {"armor": 5}
    assert summary.equipment_stats == {
        "updated": 3,
        "unchanged": 0,
        "not_found": 1,
        "alias_hits": 0,
    }
    assert bare.equipment_stats is None
