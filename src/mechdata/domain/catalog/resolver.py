"""Resolve free-text component labels to canonical component type ids.

Responsibilities:
- normalize a label and look it up in its category's alias set
- report labels that are absent or unknown instead of guessing
- fill the standard gyro, cockpit and myomer when a file omits them

Out of scope:
- fuzzy or partial matching; an unknown label is a curation task for the alias tables
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from mechdata.domain.model import ComponentCategory
from mechdata.domain.slugs import normalize_label

from .seed_data import DEFAULT_COMPONENT_LABELS

if TYPE_CHECKING:
    from collections.abc import Mapping
    from uuid import UUID

    from mechdata.domain.ports.persistence import ComponentTypeRepository


class ResolutionStatus(StrEnum):
    RESOLVED = "resolved"
    DEFAULTED = "defaulted"
    UNRESOLVED = "unresolved"
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class ComponentResolution:
    category: ComponentCategory
    label: str | None
    type_id: UUID | None
    status: ResolutionStatus

    @property
    def is_gap(self) -> bool:
        """True when the category ends without a canonical reference."""

        return self.type_id is None


class AliasResolver:
    """Read-only snapshot of the alias tables, loaded once per run."""

    def __init__(self, aliases: Mapping[ComponentCategory, Mapping[str, UUID]]) -> None:
        self._aliases = {category: dict(aliases.get(category, {})) for category in ComponentCategory}

    @classmethod
    def from_repository(cls, repository: ComponentTypeRepository) -> AliasResolver:
        return cls({category: repository.aliases(category) for category in ComponentCategory})

    def lookup(self, category: ComponentCategory, label: str) -> UUID | None:
        return self._aliases[category].get(normalize_label(label))

    def resolve(self, category: ComponentCategory, label: str | None) -> ComponentResolution:
        if label is None or not label.strip():
            return ComponentResolution(category, None, None, ResolutionStatus.ABSENT)
        type_id = self.lookup(category, label)
        if type_id is None:
            return ComponentResolution(category, label, None, ResolutionStatus.UNRESOLVED)
        return ComponentResolution(category, label, type_id, ResolutionStatus.RESOLVED)

    def resolve_components(
        self, labels: Mapping[ComponentCategory, str | None]
    ) -> dict[ComponentCategory, ComponentResolution]:
        """Resolve every category, then default-fill gyro, cockpit and myomer when absent.

        Engine, armor, structure and heat sinks are never defaulted. A label that is
        present but unknown stays unresolved in every category.
        """

        resolutions = {
            category: self.resolve(category, labels.get(category)) for category in ComponentCategory
        }
        for category, default_label in DEFAULT_COMPONENT_LABELS.items():
            if resolutions[category].status is not ResolutionStatus.ABSENT:
                continue
            type_id = self.lookup(category, default_label)
            if type_id is not None:
                resolutions[category] = ComponentResolution(
                    category, None, type_id, ResolutionStatus.DEFAULTED
                )
        return resolutions
