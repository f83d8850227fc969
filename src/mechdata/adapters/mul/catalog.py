"""Read a fetched MUL store back as domain catalog records."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .detail import parse_availability
from .schema import parse_quicklist
from .translator import to_catalog_record

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mechdata.domain.model import ExternalCatalogRecord

    from .schema import MulQuickListUnit
    from .store import RawResponseStore

log = getLogger(__name__)


@dataclass(slots=True)
class MulCatalogReader:
    """Yield one record per MUL id across all stored partitions; the first listing wins."""

    store: RawResponseStore
    include_availability: bool = True
    unreadable_files: list[str] = field(default_factory=list)
    duplicates: int = 0
    missing_details: int = 0

    def load_units(self) -> list[MulQuickListUnit]:
        seen: set[int] = set()
        units: list[MulQuickListUnit] = []
        for path in self.store.quicklist_files():
            try:
                listed = parse_quicklist(self.store.read_quicklist(path))
            except (ValueError, ValidationError) as exc:
                log.error("Skipping unreadable QuickList %s: %s", path, exc)
                self.unreadable_files.append(path.name)
                continue
            for unit in listed:
                if unit.id in seen:
                    self.duplicates += 1
                    continue
                seen.add(unit.id)
                units.append(unit)
        log.info(
            "Loaded %s unique MUL units (%s duplicates dropped)", len(units), self.duplicates
        )
        return units

    def records(self) -> Iterator[ExternalCatalogRecord]:
        for unit in self.load_units():
            if not self.include_availability:
                yield to_catalog_record(unit)
                continue
            html = self.store.read_detail(unit.id)
            if html is None:
                self.missing_details += 1
                yield to_catalog_record(unit)
                continue
            yield to_catalog_record(unit, parse_availability(html))
