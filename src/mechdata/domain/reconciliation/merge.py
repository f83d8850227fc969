"""Field-level merge of external catalog values under a fixed source priority.

Every mergeable field carries a source tag in ``Unit.field_sources``. A value is
written when the field is empty, when the incoming source ranks at or above the
source that last wrote it, or when the caller forces it. ``None`` never overwrites.
A filled field without a tag is treated as MegaMek-owned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from mechdata.domain.model import DataSource
from mechdata.domain.model.base import utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from mechdata.domain.model import ExternalCatalogRecord, Unit
    from mechdata.domain.ports.persistence import UnitRepository

log = getLogger(__name__)

SOURCE_PRIORITY: Final[dict[DataSource, int]] = {
    DataSource.MEGAMEK: 0,
    DataSource.SEED: 1,
    DataSource.MUL: 2,
    DataSource.MANUAL: 3,
}

MERGEABLE_FIELDS: Final[tuple[str, ...]] = (
    "bv",
    "cost",
    "role",
    "clan_name",
    "mul_id",
    "intro_year",
)


@dataclass(slots=True)
class MergeResult:
    written: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)
    released_mul_ids: int = 0


def field_owner(unit: Unit, name: str) -> DataSource | None:
    if getattr(unit, name) is None:
        return None
    return unit.field_sources.get(name, DataSource.MEGAMEK)


def should_write(
    unit: Unit,
    name: str,
    value: object,
    source: DataSource,
    *,
    force: bool = False,
) -> bool:
    if value is None or getattr(unit, name) == value:
        return False
    owner = field_owner(unit, name)
    if owner is None or force:
        return True
    return SOURCE_PRIORITY[source] >= SOURCE_PRIORITY[owner]


def _tag(unit: Unit, name: str, source: DataSource) -> None:
    # Reassign so the ORM sees the change.
    sources = dict(unit.field_sources)
    sources[name] = source
    unit.field_sources = sources


def apply_field(
    unit: Unit,
    name: str,
    value: object,
    source: DataSource,
    *,
    force: bool = False,
) -> bool:
    """Write ``value`` to ``unit.<name>`` if the priority rule allows it.

    An equal value re-tags the field when ``source`` outranks its current owner.
    """

    if value is not None and getattr(unit, name) == value:
        owner = field_owner(unit, name)
        if owner is not None and SOURCE_PRIORITY[source] > SOURCE_PRIORITY[owner]:
            _tag(unit, name, source)
        return False
    if not should_write(unit, name, value, source, force=force):
        return False
    setattr(unit, name, value)
    _tag(unit, name, source)
    return True


def merge_catalog_record(
    unit: Unit,
    record: ExternalCatalogRecord,
    *,
    units: UnitRepository,
    force: bool = False,
    source: DataSource = DataSource.MUL,
    now: datetime | None = None,
) -> MergeResult:
    """Merge one external record onto ``unit`` and stamp ``last_mul_import_at``.

    Claiming ``mul_id`` first clears it on any other unit holding it.
    """

    result = MergeResult()
    incoming: dict[str, object] = {
        "bv": record.bv,
        "cost": record.cost,
        "role": record.role,
        "clan_name": record.clan_name,
        "mul_id": record.external_id,
        "intro_year": record.intro_year,
    }
    for name in MERGEABLE_FIELDS:
        value = incoming[name]
        if name == "mul_id" and should_write(unit, name, value, source, force=force):
            result.released_mul_ids = units.release_mul_id(record.external_id, keep=unit.id)
            if result.released_mul_ids:
                log.warning(
                    "MUL id %s moved to %s from %s other unit(s)",
                    record.external_id,
                    unit.slug,
                    result.released_mul_ids,
                )
        if apply_field(unit, name, value, source, force=force):
            result.written.append(name)
        elif value is not None and getattr(unit, name) != value:
            result.kept.append(name)
    unit.last_mul_import_at = now or utcnow()
    return result
