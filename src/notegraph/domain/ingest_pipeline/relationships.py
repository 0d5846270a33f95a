"""Relationship phase: link the entities of the note that share a location."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notegraph.domain.reconciliation import RelationshipInferencer

    from .context import NoteContext

log = getLogger(__name__)


@dataclass(slots=True)
class RelationshipPhase:
    inferencer: RelationshipInferencer
    name: str = "relationships"

    def run(self, context: NoteContext) -> None:
        resolved = context.resolved
        context.relationships = self.inferencer.link(
            resolved.offices, resolved.projects, resolved.regulations
        )
        if context.relationships:
            log.info("Created %s relationship(s)", len(context.relationships))
