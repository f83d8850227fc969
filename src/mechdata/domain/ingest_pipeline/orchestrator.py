"""Ordered phases that turn one parsed unit into stored rows."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from mechdata.domain.parsing import ParsedUnit

    from .context import IngestContext


class PipelinePhase(Protocol):
    name: str

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> None: ...


class PhaseFailedError(RuntimeError):
    """A phase raised; ``phase`` names it and the original error is the cause."""

    def __init__(self, phase: str, unit_slug: str, cause: Exception) -> None:
        super().__init__(f"{phase} phase failed for {unit_slug}: {cause}")
        self.phase = phase
        self.unit_slug = unit_slug


@dataclass(slots=True)
class IngestionPipeline:
    """Runs its phases inside the caller's unit of work and never commits."""

    phases: Sequence[PipelinePhase] = field(default_factory=tuple)

    def with_phase(self, phase: PipelinePhase) -> IngestionPipeline:
        return IngestionPipeline(phases=(*self.phases, phase))

    def extend(self, phases: Iterable[PipelinePhase]) -> IngestionPipeline:
        return IngestionPipeline(phases=(*self.phases, *phases))

    def run(self, parsed: ParsedUnit, *, context: IngestContext) -> IngestContext:
        for phase in self.phases:
            try:
                phase.run(parsed, context=context)
            except Exception as exc:
                raise PhaseFailedError(phase.name, parsed.slug, exc) from exc
        return context
