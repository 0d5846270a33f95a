"""Extraction phase: categorize the note and pull typed candidates out of it."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notegraph.domain.ports import ExtractionOracle

    from .context import NoteContext

log = getLogger(__name__)


@dataclass(slots=True)
class ExtractionPhase:
    """Ask the extraction oracle for the analysis.

    ``ExtractionError`` propagates; the runner turns it into a failed result.
    """

    oracle: ExtractionOracle
    name: str = "extraction"

    def run(self, context: NoteContext) -> None:
        analysis = self.oracle.analyze_text(context.text)
        context.analysis = analysis
        log.info(
            "Categorized note as %s (confidence %.2f) with %s candidate(s), %s employee(s)",
            analysis.category,
            analysis.confidence,
            len(analysis.candidates),
            len(analysis.employees),
        )
        if analysis.missing_fields:
            log.debug("Missing fields: %s", ", ".join(analysis.missing_fields))
