"""On-disk store of raw Master Unit List responses.

Layout under the store root::

    quicklist/<type>-<min>-<max>.json
    details/<mul id>.html
    failures.json
    manifest.json

A body is written before it is parsed, and a stored file is never fetched again,
so an interrupted fetch resumes where it stopped.
"""

from __future__ import annotations

import json
import tempfile
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .schema import FAILURES_ADAPTER, FetchManifest

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .schema import FetchFailure

log = getLogger(__name__)

_QUICKLIST_DIR = "quicklist"
_DETAILS_DIR = "details"
_FAILURES_FILE = "failures.json"
_MANIFEST_FILE = "manifest.json"


def _atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        handle.write(content)
        temp_path = Path(handle.name)
    try:
        temp_path.replace(path)
    finally:
        temp_path.unlink(missing_ok=True)


def partition_key(unit_type: int, min_tons: int, max_tons: int) -> str:
    return f"{unit_type}-{min_tons}-{max_tons}"


def detail_key(mul_id: int) -> str:
    return f"detail-{mul_id}"


@dataclass(slots=True)
class RawResponseStore:
    root: Path

    @property
    def quicklist_dir(self) -> Path:
        return self.root / _QUICKLIST_DIR

    @property
    def details_dir(self) -> Path:
        return self.root / _DETAILS_DIR

    def quicklist_path(self, unit_type: int, min_tons: int, max_tons: int) -> Path:
        return self.quicklist_dir / f"{partition_key(unit_type, min_tons, max_tons)}.json"

    def detail_path(self, mul_id: int) -> Path:
        return self.details_dir / f"{mul_id}.html"

    def has_quicklist(self, unit_type: int, min_tons: int, max_tons: int) -> bool:
        return self.quicklist_path(unit_type, min_tons, max_tons).is_file()

    def has_detail(self, mul_id: int) -> bool:
        return self.detail_path(mul_id).is_file()

    def write_quicklist(self, unit_type: int, min_tons: int, max_tons: int, body: str) -> Path:
        path = self.quicklist_path(unit_type, min_tons, max_tons)
        _atomic_write_text(path, body)
        return path

    def write_detail(self, mul_id: int, body: str) -> Path:
        path = self.detail_path(mul_id)
        _atomic_write_text(path, body)
        return path

    def read_quicklist(self, path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    def read_detail(self, mul_id: int) -> str | None:
        path = self.detail_path(mul_id)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def quicklist_files(self) -> Iterator[Path]:
        """Stored partitions in a stable order (type, then lower tonnage bound)."""

        if not self.quicklist_dir.is_dir():
            return iter(())
        return iter(sorted(self.quicklist_dir.glob("*.json"), key=_partition_sort_key))

    def load_failures(self) -> dict[str, FetchFailure]:
        path = self.root / _FAILURES_FILE
        if not path.is_file():
            return {}
        return FAILURES_ADAPTER.validate_json(path.read_bytes())

    def save_failures(self, failures: dict[str, FetchFailure]) -> None:
        payload = FAILURES_ADAPTER.dump_json(failures, indent=2).decode("utf-8")
        _atomic_write_text(self.root / _FAILURES_FILE, payload)

    def load_manifest(self) -> FetchManifest | None:
        path = self.root / _MANIFEST_FILE
        if not path.is_file():
            return None
        return FetchManifest.model_validate_json(path.read_bytes())

    def save_manifest(self, manifest: FetchManifest) -> Path:
        path = self.root / _MANIFEST_FILE
        _atomic_write_text(path, manifest.model_dump_json(indent=2))
        log.info("Manifest written to %s", path)
        return path


def _partition_sort_key(path: Path) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in path.stem.split("-"))
    except ValueError:
        return (1 << 30,)
