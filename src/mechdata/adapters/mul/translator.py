"""Translate MUL QuickList entries into domain catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mechdata.domain.model import ExternalCatalogRecord
from mechdata.domain.reconciliation.names import extract_clan_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mechdata.domain.model import AvailabilityNote

    from .schema import MulQuickListUnit


def to_catalog_record(
    unit: MulQuickListUnit,
    availability: Iterable[AvailabilityNote] | None = None,
) -> ExternalCatalogRecord:
    return ExternalCatalogRecord(
        external_id=unit.id,
        name=unit.name.strip(),
        tonnage=unit.tonnage,
        bv=unit.bv,
        cost=unit.positive_cost,
        role=unit.role_name,
        clan_name=extract_clan_name(unit.name),
        intro_year=unit.intro_year,
        rules=unit.rules,
        technology=unit.technology_name,
        availability=tuple(availability) if availability is not None else None,
    )
