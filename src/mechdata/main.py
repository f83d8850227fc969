#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from mechdata.adapters.mul import RawResponseStore
from mechdata.app import fetch_mul_catalog, import_mul_catalog, ingest_archive, seed_catalog
from mechdata.common.logging import configure_logging
from mechdata.config import get_mul_config, get_storage_config
from mechdata.config.mul import DEFAULT_MUL_UNIT_TYPES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType


def _unit_types(value: str) -> tuple[int, ...]:
    try:
        types = tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid unit type list: {value}") from exc
    if not types:
        raise argparse.ArgumentTypeError("At least one unit type is required")
    return types


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("Value must be zero or positive")
    return number


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mechdata", description="BattleTech unit data ingestion and reconciliation"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    seed = commands.add_parser("seed", help="Seed the reference catalog")
    seed.add_argument(
        "--equipment-stats",
        type=Path,
        help="JSON file of equipment stats to apply to existing equipment rows",
    )
    seed.add_argument(
        "--force",
        action="store_true",
        help="Overwrite equipment stats that are already set",
    )

    ingest = commands.add_parser("ingest", help="Ingest a MegaMek unit_files.zip archive")
    ingest.add_argument("--zip", dest="zip_path", type=Path, required=True, help="Archive path")
    ingest.add_argument("--version", help="Dataset version label (default: today's date)")
    ingest.add_argument(
        "--max-errors",
        type=_non_negative_int,
        help="Abort after this many failed units (0 means unlimited)",
    )

    fetch = commands.add_parser("mul-fetch", help="Download the Master Unit List")
    fetch.add_argument(
        "--types",
        type=_unit_types,
        help="Comma-separated MUL unit type ids (default: %s)"
        % ",".join(str(unit_type) for unit_type in DEFAULT_MUL_UNIT_TYPES),
    )
    fetch.add_argument("--delay", type=float, help="Seconds to wait between requests")
    fetch.add_argument("--output", type=Path, help="Raw store directory")
    fetch.add_argument(
        "--retry-failed",
        action="store_true",
        help="Retry requests that previously failed permanently",
    )
    fetch.add_argument(
        "--skip-details",
        action="store_true",
        help="Only fetch QuickLists, not per-unit detail pages",
    )

    mul_import = commands.add_parser("mul-import", help="Merge fetched MUL data onto units")
    mul_import.add_argument("--input", type=Path, help="Raw store directory")
    mul_import.add_argument(
        "--overrides", type=Path, help="JSON object of MUL id to unit slug overrides"
    )
    mul_import.add_argument(
        "--force",
        action="store_true",
        help="Overwrite values owned by higher-priority sources and replace availability",
    )
    mul_import.add_argument(
        "--skip-availability", action="store_true", help="Only merge unit fields"
    )
    return parser.parse_args(list(argv))


def _run(args: argparse.Namespace) -> None:
    match args.command:
        case "seed":
            seed, stats = seed_catalog(equipment_stats_path=args.equipment_stats, force=args.force)
            print(
                f"Seeded {seed.types_created} component types and "
                f"{seed.aliases_created} aliases"
                + (f", updated stats on {stats.updated} equipment rows" if stats else "")
            )
        case "ingest":
            report = ingest_archive(
                args.zip_path, version=args.version, max_errors=args.max_errors
            )
            print(
                f"Ingested {report.units_ingested} units from {report.documents} files "
                f"({len(report.parse_failures)} parse failures, {report.error_count} errors, "
                f"{len(report.resolution_gaps)} unresolved components)"
            )
        case "mul-fetch":
            config = get_mul_config()
            if args.types:
                config = replace(config, unit_types=args.types)
            if args.delay is not None:
                config = replace(config, delay_seconds=args.delay)
            store = RawResponseStore(args.output) if args.output else None
            manifest = fetch_mul_catalog(
                config=config,
                store=store,
                retry_failed=args.retry_failed,
                skip_details=args.skip_details,
            )
            print(
                f"Fetched {manifest.partitions_fetched} QuickList partitions and "
                f"{manifest.detail_pages_fetched} detail pages "
                f"({manifest.total_mul_ids} MUL ids, {manifest.failures} failures)"
            )
        case "mul-import":
            store = RawResponseStore(args.input) if args.input else None
            report = import_mul_catalog(
                store=store,
                overrides_path=args.overrides,
                force=args.force,
                skip_availability=args.skip_availability,
            )
            print(
                f"Matched {report.matched} of {report.records} MUL units "
                f"({len(report.unmatched)} unmatched, "
                f"{report.availability_inserted} availability rows added)"
            )
        case _:
            raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        get_storage_config().ensure_data_dir()
        _run(parsed_args)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
