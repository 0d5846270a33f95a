"""Workforce phase: attach named employees to the offices of the note."""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from notegraph.domain.model import EntityKind, Office
from notegraph.domain.reconciliation import ResolvedEntityResolution, name_variations

if TYPE_CHECKING:
    from notegraph.domain.reconciliation import IdentityResolver, WorkforceReconciler

    from .context import NoteContext

log = getLogger(__name__)

OFFICE_NAME_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(
        r"(?:goes?\s+(?:into|in|to)|goes\s+in\s+to)\s+([^,\-.]+?)\s+(?:office|firm|company)", re.I
    ),
    re.compile(r"employees?\s+of\s+([^,\-.]+?)\s+(?:office|firm|company)", re.I),
    re.compile(r"part\s+of\s+([^,\-.]+?)\s+(?:office|firm|company)", re.I),
    re.compile(r"works?\s+for\s+([^,\-.]+?)\s+(?:office|firm|company)", re.I),
    re.compile(r"([^,\-.]+?)\s+office[\s,]", re.I),
)


def office_name_from_text(text: str) -> str | None:
    """Office name from phrases like "works for X office"; first pattern that hits wins."""

    for pattern in OFFICE_NAME_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


@dataclass(slots=True)
class WorkforcePhase:
    reconciler: WorkforceReconciler
    resolver: IdentityResolver
    name: str = "workforce"

    def run(self, context: NoteContext) -> None:
        analysis = context.require_analysis()
        employees = [employee for employee in analysis.employees if employee.key]
        if not employees:
            return

        # an office only looked up for its roster stays out of relationship inference
        offices = context.resolved.offices
        if not offices:
            inferred = self._infer_office(context.text)
            if inferred is None:
                log.info("Employees mentioned but no office found; skipping workforce")
                return
            offices = [inferred]

        for index, office in enumerate(offices):
            if office.id is None:
                continue
            reconciliation = self.reconciler.reconcile(
                office, employees, analysis.employee_distribution
            )
            if reconciliation is None:
                continue
            offices[index] = reconciliation.office
            context.created.workforce.append(reconciliation.outcome)
            update = reconciliation.update
            if update.employees_added or update.employees_updated:
                context.workforce_updates.append(update)

    def _infer_office(self, text: str) -> Office | None:
        name = office_name_from_text(text)
        if name is None:
            return None
        log.info("Looking up office %r named in the note", name)
        for attempt in (name, *name_variations(name)):
            resolution = self.resolver.search(EntityKind.OFFICE, attempt)
            if isinstance(resolution, ResolvedEntityResolution) and isinstance(
                resolution.target, Office
            ):
                log.info("Employees belong to stored office %s", resolution.target.id)
                return resolution.target
        return None
