"""Read unit files out of a MegaMek ``unit_files.zip`` archive."""

from __future__ import annotations

import zipfile
from logging import getLogger
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from mechdata.domain.model import UnitType
from mechdata.domain.parsing import SourceDocument, SourceFormat

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)


class ArchiveError(RuntimeError):
    """Raised when the archive itself cannot be opened or listed."""


def classify_entry(name: str) -> tuple[SourceFormat, UnitType] | None:
    """Return the format and default unit type for an entry, or None to skip it.

    BLK files take their default type from the directory that holds them.
    """

    path = PurePosixPath(name.lower())
    if name.endswith("/"):
        return None
    if path.suffix == ".mtf":
        return SourceFormat.MTF, UnitType.MECH
    if path.suffix != ".blk":
        return None
    directory = path.parent.name
    if "vehicle" in directory or "vee" in directory:
        return SourceFormat.BLK, UnitType.VEHICLE
    if "fighter" in directory or "aero" in directory:
        return SourceFormat.BLK, UnitType.FIGHTER
    return SourceFormat.BLK, UnitType.OTHER


class UnitArchive:
    """Iterate decoded unit files; unreadable or foreign entries are skipped and counted."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.total_entries = 0
        self.skipped = 0
        self.non_utf8: list[str] = []

    def documents(self) -> Iterator[SourceDocument]:
        try:
            archive = zipfile.ZipFile(self.path)
        except (OSError, zipfile.BadZipFile) as exc:
            raise ArchiveError(f"Cannot open archive {self.path}: {exc}") from exc

        with archive:
            entries = archive.infolist()
            self.total_entries = len(entries)
            log.info("Opened %s with %s entries", self.path, self.total_entries)
            for info in entries:
                classified = classify_entry(info.filename)
                if info.is_dir() or classified is None:
                    self.skipped += 1
                    continue
                source_format, default_type = classified
                try:
                    text = archive.read(info).decode("utf-8")
                except UnicodeDecodeError:
                    log.warning("Skipping non-UTF-8 entry %s", info.filename)
                    self.non_utf8.append(info.filename)
                    self.skipped += 1
                    continue
                except (OSError, zipfile.BadZipFile) as exc:
                    raise ArchiveError(f"Cannot read {info.filename}: {exc}") from exc
                yield SourceDocument(
                    name=info.filename,
                    format=source_format,
                    text=text,
                    default_unit_type=default_type,
                )
