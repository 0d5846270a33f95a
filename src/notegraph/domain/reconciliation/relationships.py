"""Location-based links between entities resolved from the same note.

Two entities are linked when they share a city or a country (case-insensitive);
either is enough. The heuristic is coarse and links anything in the same country.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product
from logging import getLogger
from typing import TYPE_CHECKING

from notegraph.domain.model import (
    Collection,
    EntityRef,
    Office,
    Relationship,
    RelationshipType,
    office_from_document,
    office_to_document,
    relationship_to_document,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from notegraph.domain.model import (
        Location,
        MatchBasis,
        Project,
        Regulation,
        ResolvableEntity,
    )
    from notegraph.domain.ports import DocumentStore

log = getLogger(__name__)


def _fold(value: str | None) -> str | None:
    if value is None:
        return None
    folded = value.strip().lower()
    return folded or None


def shared_location(left: Location | None, right: Location | None) -> MatchBasis | None:
    if left is None or right is None:
        return None
    left_city, right_city = _fold(left.city), _fold(right.city)
    if left_city and left_city == right_city:
        return "city"
    left_country, right_country = _fold(left.country), _fold(right.country)
    if left_country and left_country == right_country:
        return "country"
    return None


def _ref(entity: ResolvableEntity) -> EntityRef | None:
    if entity.id is None:
        return None
    return EntityRef(kind=entity.kind, id=entity.id)


def _link(
    source: ResolvableEntity,
    target: ResolvableEntity,
    relationship_type: RelationshipType,
) -> Relationship | None:
    basis = shared_location(source.primary_location(), target.primary_location())
    source_ref, target_ref = _ref(source), _ref(target)
    if basis is None or source_ref is None or target_ref is None:
        return None
    return Relationship(
        source=source_ref,
        target=target_ref,
        relationship_type=relationship_type,
        basis=basis,
    )


def infer_relationships(
    offices: Sequence[Office],
    projects: Sequence[Project],
    regulations: Sequence[Regulation],
) -> list[Relationship]:
    """Propose links for every office/project, office/regulation, project/regulation pair."""

    proposals: list[Relationship | None] = []
    proposals.extend(
        _link(office, project, RelationshipType.OFFICE_PROJECT)
        for office, project in product(offices, projects)
    )
    proposals.extend(
        _link(office, regulation, RelationshipType.OFFICE_REGULATION)
        for office, regulation in product(offices, regulations)
    )
    proposals.extend(
        _link(project, regulation, RelationshipType.PROJECT_REGULATION)
        for project, regulation in product(projects, regulations)
    )

    unique: dict[str, Relationship] = {}
    for relationship in proposals:
        if relationship is not None:
            unique.setdefault(relationship.id, relationship)
    return list(unique.values())


@dataclass(slots=True)
class RelationshipInferencer:
    """Persist inferred links and bump office connection counts, best-effort."""

    store: DocumentStore

    def link(
        self,
        offices: Sequence[Office],
        projects: Sequence[Project],
        regulations: Sequence[Regulation],
    ) -> list[Relationship]:
        created: list[Relationship] = []
        for relationship in infer_relationships(offices, projects, regulations):
            if self._exists(relationship):
                log.debug("Relationship %s already stored", relationship.id)
                continue
            result = self.store.create(
                Collection.RELATIONSHIPS, relationship_to_document(relationship)
            )
            if not result.success:
                log.warning("Failed to store relationship %s: %s", relationship.id, result.error)
                continue
            log.info(
                "Linked %s:%s <-> %s:%s (%s, same %s)",
                relationship.source.kind,
                relationship.source.id,
                relationship.target.kind,
                relationship.target.id,
                relationship.relationship_type,
                relationship.basis,
            )
            self._increment_counts(relationship)
            created.append(relationship)
        return created

    def _exists(self, relationship: Relationship) -> bool:
        result = self.store.query(Collection.RELATIONSHIPS, {"id": relationship.id})
        return result.success and bool(result.data)

    def _increment_counts(self, relationship: Relationship) -> None:
        match relationship.relationship_type:
            case RelationshipType.OFFICE_PROJECT:
                self._bump_office(relationship.source.id, "total_projects")
            case RelationshipType.OFFICE_REGULATION:
                self._bump_office(relationship.source.id, "total_regulations")
            case RelationshipType.PROJECT_REGULATION:
                # projects and regulations carry no counters
                pass

    def _bump_office(self, office_id: str, counter: str) -> None:
        result = self.store.query(Collection.OFFICES, {"id": office_id})
        if not result.success or not result.data:
            log.debug("Office %s not stored; skipping %s increment", office_id, counter)
            return
        office: Office = office_from_document(result.data[0])
        counts = office.connection_counts
        if counts is None:
            return
        setattr(counts, counter, getattr(counts, counter) + 1)
        document = office_to_document(office)
        update = self.store.update(
            Collection.OFFICES,
            office_id,
            {"connectionCounts": document["connectionCounts"]},
            expected_version=office.version,
        )
        if not update.success:
            log.warning("Connection count update for office %s failed: %s", office_id, update.error)
