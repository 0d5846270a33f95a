"""Resolution phase: merge candidates into stored entities or create new ones."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from notegraph.domain.model import Office, Project, Regulation
from notegraph.domain.reconciliation import ResolvedEntityResolution

if TYPE_CHECKING:
    from notegraph.domain.model import ResolvableEntity
    from notegraph.domain.reconciliation import (
        EntityCreator,
        IdentityResolver,
        MergeEngine,
    )

    from .context import NoteContext

log = getLogger(__name__)


def _ordered(candidates: list[ResolvableEntity]) -> list[ResolvableEntity]:
    """Offices first so projects and regulations can refer to them."""

    rank = {Office: 0, Project: 1, Regulation: 2}
    return sorted(candidates, key=lambda candidate: rank[type(candidate)])


@dataclass(slots=True)
class ResolutionPhase:
    resolver: IdentityResolver
    merger: MergeEngine
    creator: EntityCreator
    name: str = "resolution"

    def run(self, context: NoteContext) -> None:
        analysis = context.require_analysis()
        for candidate in _ordered(analysis.candidates):
            resolution = self.resolver.resolve(candidate)
            if isinstance(resolution, ResolvedEntityResolution):
                log.info(
                    "%s %r matches stored %s (%s, %.2f)",
                    candidate.kind,
                    candidate.display_name,
                    resolution.target.id,
                    resolution.match_kind,
                    resolution.confidence,
                )
                self._merge(resolution.target, candidate, context)
            else:
                log.info("No stored match for %s %r", candidate.kind, candidate.display_name)
                self._create(candidate, context)

    def _merge(
        self, existing: ResolvableEntity, candidate: ResolvableEntity, context: NoteContext
    ) -> None:
        result = self.merger.merge(existing, candidate)
        if not result.success:
            log.warning(
                "Merge into %s %s kept in memory only: %s", existing.kind, existing.id, result.error
            )
        elif not result.was_updated:
            log.debug("%s %s already holds everything in the note", existing.kind, existing.id)
        match result.entity:
            case Office() as office:
                context.resolved.offices.append(office)
                if result.outcome is not None:
                    context.created.merged_offices.append(result.outcome)
            case Project() as project:
                context.resolved.projects.append(project)
            case Regulation() as regulation:
                context.resolved.regulations.append(regulation)

    def _create(self, candidate: ResolvableEntity, context: NoteContext) -> None:
        match candidate:
            case Office():
                outcome = self.creator.create_office(candidate)
                if outcome is not None:
                    context.created.offices.append(outcome)
                    context.resolved.offices.append(outcome.entity)
            case Project():
                project_outcome = self.creator.create_project(candidate)
                if project_outcome is not None:
                    context.created.projects.append(project_outcome)
                    context.resolved.projects.append(project_outcome.entity)
            case Regulation():
                regulation_outcome = self.creator.create_regulation(candidate)
                if regulation_outcome is not None:
                    context.created.regulations.append(regulation_outcome)
                    context.resolved.regulations.append(regulation_outcome.entity)
