from __future__ import annotations

from notegraph.adapters.memory import InMemoryDocumentStore
from notegraph.domain.model import (
    Collection,
    Jurisdiction,
    Location,
    Office,
    Project,
    ProjectStatus,
    Regulation,
    RelationshipType,
    office_from_document,
)
from notegraph.domain.reconciliation import RelationshipInferencer, infer_relationships
from notegraph.domain.reconciliation.relationships import shared_location


def _office(office_id: str = "UKLD001", city: str = "London") -> Office:
    return Office(
        id=office_id,
        name="Foster + Partners",
        headquarters=Location(city=city, country="United Kingdom"),
    )


def _project(project_id: str = "project-1", city: str = "london") -> Project:
    return Project(
        id=project_id,
        project_name="Harbour Tower",
        status=ProjectStatus.PLANNING,
        location=Location(city=city, country="United Kingdom"),
    )


def _regulation(country: str = "United Kingdom") -> Regulation:
    return Regulation(
        id="regulation-1",
        name="Building Safety Act",
        jurisdiction=Jurisdiction(country_name=country),
    )


def test_shared_location_prefers_city_then_country() -> None:
    london = Location(city="London", country="United Kingdom")

    assert shared_location(london, Location(city=" LONDON ", country="UK")) == "city"
    assert shared_location(london, Location(city="Leeds", country="united kingdom")) == "country"
    assert shared_location(london, Location(city="Paris", country="France")) is None
    assert shared_location(london, None) is None
    assert shared_location(Location(), Location()) is None


def test_infer_relationships_links_every_matching_pair() -> None:
    relationships = infer_relationships([_office()], [_project()], [_regulation()])

    by_type = {relationship.relationship_type: relationship for relationship in relationships}
    assert set(by_type) == {
        RelationshipType.OFFICE_PROJECT,
        RelationshipType.OFFICE_REGULATION,
        RelationshipType.PROJECT_REGULATION,
    }
    assert by_type[RelationshipType.OFFICE_PROJECT].basis == "city"
    assert by_type[RelationshipType.OFFICE_REGULATION].basis == "country"
    assert by_type[RelationshipType.OFFICE_PROJECT].id == (
        "office-UKLD001-office-project-project-project-1"
    )


def test_infer_relationships_skips_unrelated_or_unidentified_entities() -> None:
    elsewhere = Project(
        id="project-2",
        project_name="Museum",
        status=ProjectStatus.CONCEPT,
        location=Location(city="Tokyo", country="Japan"),
    )
    unsaved = Project(
        project_name="Depot",
        status=ProjectStatus.CONCEPT,
        location=Location(city="London", country="United Kingdom"),
    )

    assert infer_relationships([_office()], [elsewhere, unsaved], []) == []
    assert infer_relationships([], [_project()], []) == []


def test_inferencer_stores_links_and_bumps_office_counts(
    memory_store: InMemoryDocumentStore,
) -> None:
    memory_store.create(
        Collection.OFFICES,
        {
            "id": "UKLD001",
            "name": "Foster + Partners",
            "location": {"headquarters": {"city": "London", "country": "United Kingdom"}},
            "connectionCounts": {"totalProjects": 0, "totalRegulations": 0},
        },
    )
    office = office_from_document(memory_store.all(Collection.OFFICES)[0])

    created = RelationshipInferencer(memory_store).link([office], [_project()], [_regulation()])

    assert len(created) == 3
    stored = memory_store.all(Collection.RELATIONSHIPS)
    assert {document["relationshipType"] for document in stored} == {
        "office-project",
        "office-regulation",
        "project-regulation",
    }
    assert all(document["bidirectional"] for document in stored)
    counts = memory_store.all(Collection.OFFICES)[0]["connectionCounts"]
    assert counts["totalProjects"] == 1
    assert counts["totalRegulations"] == 1


def test_inferencer_does_not_duplicate_existing_links(
    memory_store: InMemoryDocumentStore,
) -> None:
    inferencer = RelationshipInferencer(memory_store)

    first = inferencer.link([_office()], [_project()], [])
    second = inferencer.link([_office()], [_project()], [])

    assert len(first) == 1
    assert second == []
    assert len(memory_store.all(Collection.RELATIONSHIPS)) == 1
