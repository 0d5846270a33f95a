"""Phase-based orchestrator for the note ingest pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .context import NoteContext

log = getLogger(__name__)


class PipelinePhase(Protocol):
    """Contract implemented by each ingestion phase."""

    name: str

    def run(self, context: NoteContext) -> None: ...


@dataclass(slots=True)
class NoteIngestionPipeline:
    """Compose and execute the ordered pipeline phases.

    Phases run sequentially on one ``NoteContext``; an exception raised by a phase
    stops the run and propagates to the caller.
    """

    phases: Sequence[PipelinePhase] = field(default_factory=tuple)

    def with_phase(self, phase: PipelinePhase) -> NoteIngestionPipeline:
        """Return a new pipeline appending ``phase`` at the end."""

        return NoteIngestionPipeline(phases=(*self.phases, phase))

    def extend(self, phases: Iterable[PipelinePhase]) -> NoteIngestionPipeline:
        """Return a new pipeline with the provided ``phases`` concatenated."""

        return NoteIngestionPipeline(phases=(*self.phases, *tuple(phases)))

    def run(self, context: NoteContext) -> NoteContext:
        for phase in self.phases:
            log.debug("Running phase %s", phase.name)
            phase.run(context)
        return context
