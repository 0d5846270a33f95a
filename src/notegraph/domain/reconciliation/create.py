"""Create path for candidates the resolver could not match.

Each ``create_*`` returns ``None`` when the candidate fails validation (the reason
is logged), otherwise a ``Persisted`` outcome or, when the store write fails, a
fully-defaulted ``Local`` entity.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from notegraph.domain.model import (
    UNKNOWN_PLACE,
    ConnectionCounts,
    Financial,
    Jurisdiction,
    JurisdictionLevel,
    Location,
    OfficeSize,
    OfficeStatus,
    ProjectDetails,
    ProjectStatus,
    SizeCategory,
    entity_to_document,
)

from .contracts import Local, Persisted, WriteOutcome, stored_version
from .identifiers import needs_office_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from notegraph.domain.model import Office, Project, Regulation, ResolvableEntity
    from notegraph.domain.ports import DocumentStore

    from .identifiers import IdentifierSynthesizer

log = getLogger(__name__)

DEFAULT_REGULATION_TYPE = "zoning"
DEFAULT_CURRENCY = "USD"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class EntityCreator:
    store: DocumentStore
    identifiers: IdentifierSynthesizer
    clock: Callable[[], datetime] = _utcnow

    def create_office(self, candidate: Office) -> WriteOutcome[Office] | None:
        name = candidate.name.strip()
        if not name:
            log.warning("Skipping office: no name provided")
            return None
        if candidate.headquarters is None or not candidate.headquarters.is_known:
            log.warning("Skipping office %r: headquarters city and country are required", name)
            return None

        office = copy.deepcopy(candidate)
        office.name = name
        if needs_office_id(office.id):
            office.id = self.identifiers.office_id(name, office.headquarters)
            log.info("Generated office id %s for %r", office.id, name)
        office.size = _office_size(office.size)
        office.connection_counts = office.connection_counts or ConnectionCounts()
        office.info_entries = 1
        return self._write(office, fallback=self._local_office)

    def create_project(self, candidate: Project) -> WriteOutcome[Project] | None:
        name = candidate.project_name.strip()
        if not name:
            log.warning("Skipping project: no projectName provided")
            return None
        if candidate.status is None:
            log.warning("Skipping project %r: status is required", name)
            return None

        project = copy.deepcopy(candidate)
        project.project_name = name
        if not project.id:
            project.id = self.identifiers.project_id()
        return self._write(project, fallback=self._local_project)

    def create_regulation(self, candidate: Regulation) -> WriteOutcome[Regulation] | None:
        name = candidate.name.strip()
        if not name:
            log.warning("Skipping regulation: no name provided")
            return None

        regulation = copy.deepcopy(candidate)
        regulation.name = name
        if not regulation.id:
            regulation.id = self.identifiers.regulation_id()
        return self._write(regulation, fallback=self._local_regulation)

    def _write[T: ResolvableEntity](
        self, entity: T, *, fallback: Callable[[T], T]
    ) -> WriteOutcome[T]:
        entity.stamp(self.clock())
        result = self.store.create(entity.kind.collection, entity_to_document(entity))
        if result.success:
            entity.version = stored_version(result.data, 1)
            log.info("Created %s %s (%s)", entity.kind, entity.id, entity.display_name)
            return Persisted(entity=entity)

        log.warning(
            "Store write failed for %s %r, keeping a local entity: %s",
            entity.kind,
            entity.display_name,
            result.error,
        )
        return Local(entity=fallback(entity), error=result.error)

    # local fallbacks fill every field so callers can render them like stored ones

    def _local_office(self, office: Office) -> Office:
        local = copy.deepcopy(office)
        local.id = local.id or self.identifiers.fallback_office_id(local.name)
        local.official_name = local.official_name or local.name
        local.founded = local.founded or self.clock().year
        local.status = local.status or OfficeStatus.ACTIVE
        local.headquarters = local.headquarters or Location(
            city=UNKNOWN_PLACE, country=UNKNOWN_PLACE
        )
        size = local.size or OfficeSize()
        local.size = OfficeSize(
            employee_count=size.employee_count or 0,
            size_category=size.size_category or SizeCategory.MEDIUM,
            annual_revenue=size.annual_revenue or 0.0,
            category_derived=None if size.size_category else True,
        )
        return local

    def _local_project(self, project: Project) -> Project:
        local = copy.deepcopy(project)
        local.status = local.status or ProjectStatus.PLANNING
        local.location = local.location or Location(city=UNKNOWN_PLACE, country=UNKNOWN_PLACE)
        local.financial = local.financial or Financial(budget=0.0, currency=DEFAULT_CURRENCY)
        local.details = local.details or ProjectDetails(
            project_type="unknown", description="Unknown project"
        )
        return local

    def _local_regulation(self, regulation: Regulation) -> Regulation:
        local = copy.deepcopy(regulation)
        local.regulation_type = local.regulation_type or DEFAULT_REGULATION_TYPE
        local.jurisdiction = local.jurisdiction or Jurisdiction(
            level=JurisdictionLevel.CITY, country_name=UNKNOWN_PLACE
        )
        return local


def _office_size(size: OfficeSize | None) -> OfficeSize | None:
    """Keep only the size fields extraction may set; headcount comes from the roster."""

    if size is None or (size.size_category is None and size.annual_revenue is None):
        return None
    return OfficeSize(size_category=size.size_category, annual_revenue=size.annual_revenue)
