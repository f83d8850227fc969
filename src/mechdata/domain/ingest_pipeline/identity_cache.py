"""Per-run equipment identity cache."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID


class EquipmentIdentityCache:
    """Map ``equipment_slug(label)`` to the id of its committed equipment row.

    One cache belongs to one ingestion run. Ids only enter the cache through
    ``promote`` after the unit that created or found them has committed, so a rolled
    back unit can never leave a dangling id behind.
    """

    def __init__(self) -> None:
        self._ids: dict[str, UUID] = {}
        self._lock = threading.Lock()

    def get(self, slug: str) -> UUID | None:
        with self._lock:
            return self._ids.get(slug)

    def warm(self, index: Mapping[str, UUID]) -> None:
        with self._lock:
            self._ids.update(index)

    def promote(self, committed: Mapping[str, UUID]) -> None:
        """Publish ids learned by a committed unit. The first id seen for a slug wins."""

        with self._lock:
            for slug, equipment_id in committed.items():
                self._ids.setdefault(slug, equipment_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)

    def __contains__(self, slug: object) -> bool:
        with self._lock:
            return slug in self._ids
