"""Apply curated combat stats onto equipment rows created by ingestion."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from mechdata.domain.model import DataSource, Equipment
from mechdata.domain.model.base import utcnow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from mechdata.domain.ports.persistence import EquipmentRepository

log = getLogger(__name__)


# Curated stats files use readable slugs; MegaMek internal names slugify differently.
SLUG_ALIASES: Final[dict[str, str]] = {
    # Clan energy
    "clan-er-large-laser": "clerlargelaser",
    "clan-er-medium-laser": "clermediumlaser",
    "clan-er-small-laser": "clersmalllaser",
    "clan-er-ppc": "clerppc",
    "clan-large-pulse-laser": "cllargepulselaser",
    "clan-medium-pulse-laser": "clmediumpulselaser",
    "clan-small-pulse-laser": "clsmallpulselaser",
    "clan-er-flamer": "clerflamer",
    "clan-plasma-cannon": "clplasmacannon",
    # IS pulse lasers
    "pulse-large-laser": "islargepulselaser",
    "pulse-medium-laser": "ismediumpulselaser",
    "pulse-small-laser": "issmallpulselaser",
    # IS ballistic
    "ultra-autocannon-2": "isultraac2",
    "ultra-autocannon-5": "isultraac5",
    "ultra-autocannon-10": "isultraac10",
    "ultra-autocannon-20": "isultraac20",
    "rotary-autocannon-5": "isrotaryac5",
    "light-autocannon-5": "light-ac-5",
    # Clan ballistic
    "clan-ultra-autocannon-2": "clultraac2",
    "clan-ultra-autocannon-5": "clultraac5",
    "clan-ultra-autocannon-10": "clultraac10",
    "clan-ultra-autocannon-20": "clultraac20",
    "clan-lb-2-x-ac": "cllbxac2",
    "clan-lb-5-x-ac": "cllbxac5",
    "clan-lb-10-x-ac": "cllbxac10",
    "clan-lb-20-x-ac": "cllbxac20",
    "clan-gauss-rifle": "clgaussrifle",
    # Clan missile
    "clan-srm-2": "clsrm2",
    "clan-srm-4": "clsrm4",
    "clan-srm-6": "clsrm6",
    "clan-lrm-5": "cllrm5",
    "clan-lrm-10": "cllrm10",
    "clan-lrm-15": "cllrm15",
    "clan-lrm-20": "cllrm20",
    "clan-streak-srm-2": "clstreaksrm2",
    "clan-streak-srm-4": "clstreaksrm4",
    "clan-streak-srm-6": "clstreaksrm6",
    "clan-arrow-iv": "clarrowiv",
    "narc-missile-beacon": "narc",
    # Electronics
    "guardian-ecm-suite": "isguardianecmsuite",
    "clan-ecm-suite": "clecmsuite",
    "beagle-active-probe": "beagleactiveprobe",
    "clan-active-probe": "clactiveprobe",
    "clan-anti-missile-system": "clantimissilesystem",
    "targeting-computer": "istargeting-computer",
    "artemis-iv-fcs": "isartemisiv",
    "c3-master-computer": "isc3mastercomputer",
    "c3-slave-unit": "isc3slaveunit",
}


@dataclass(frozen=True, slots=True, kw_only=True)
class EquipmentStats:
    slug: str
    tonnage: float | None = None
    crits: int | None = None
    damage: str | None = None
    heat: int | None = None
    range_min: int | None = None
    range_short: int | None = None
    range_medium: int | None = None
    range_long: int | None = None
    bv: int | None = None

    def values(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in Equipment.STAT_FIELDS}


@dataclass(slots=True)
class EquipmentStatsReport:
    updated: int = 0
    unchanged: int = 0
    not_found: int = 0
    alias_hits: int = 0


def apply_equipment_stats(
    repository: EquipmentRepository,
    entries: Iterable[EquipmentStats],
    *,
    force: bool = False,
    now: datetime | None = None,
) -> EquipmentStatsReport:
    """Write stats onto matching equipment rows.

    Without ``force`` only empty columns are filled and rows with every stat already
    present are left alone; with ``force`` every stat is overwritten, including with
    ``None``.
    """

    report = EquipmentStatsReport()
    stamp = now or utcnow()
    for entry in entries:
        equipment = repository.get_by_slug(entry.slug)
        if equipment is None and entry.slug in SLUG_ALIASES:
            equipment = repository.get_by_slug(SLUG_ALIASES[entry.slug])
            if equipment is not None:
                report.alias_hits += 1
        if equipment is None:
            log.warning("No equipment row matches stats slug %s", entry.slug)
            report.not_found += 1
            continue

        if _apply_entry(equipment, entry, force=force, now=stamp):
            report.updated += 1
        else:
            report.unchanged += 1

    log.info(
        "Equipment stats applied: updated=%s alias_hits=%s not_found=%s unchanged=%s",
        report.updated,
        report.alias_hits,
        report.not_found,
        report.unchanged,
    )
    return report


def _apply_entry(equipment: Equipment, entry: EquipmentStats, *, force: bool, now: datetime) -> bool:
    if force:
        for name, value in entry.values().items():
            setattr(equipment, name, value)
        equipment.stats_source = DataSource.SEED
        equipment.stats_updated_at = now
        return True

    if all(getattr(equipment, name) is not None for name in Equipment.STAT_FIELDS):
        return False
    for name, value in entry.values().items():
        if getattr(equipment, name) is None and value is not None:
            setattr(equipment, name, value)
    if equipment.stats_source is None:
        equipment.stats_source = DataSource.SEED
    if equipment.stats_updated_at is None:
        equipment.stats_updated_at = now
    return True
