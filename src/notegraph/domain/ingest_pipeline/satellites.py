"""Satellite phase: persist the auxiliary records extracted with the note."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notegraph.domain.reconciliation import SatellitePersister

    from .context import NoteContext

log = getLogger(__name__)


@dataclass(slots=True)
class SatellitePhase:
    persister: SatellitePersister
    name: str = "satellites"

    def run(self, context: NoteContext) -> None:
        analysis = context.require_analysis()
        if not any(analysis.satellites.values()):
            return
        office_ids = [office.id for office in context.resolved.offices if office.id]
        report = self.persister.persist(analysis.satellites, office_ids=office_ids)
        context.satellites = report
        log.info(
            "Stored %s satellite record(s), skipped %s, failed %s",
            report.total_stored,
            report.skipped,
            report.failed,
        )
