from __future__ import annotations

from datetime import UTC, datetime

from notegraph.domain.model import (
    Employee,
    EntityKind,
    Location,
    Office,
    OfficeSize,
    OfficeStatus,
    ProjectStatus,
    SizeCategory,
    Workforce,
    entity_from_document,
    office_from_document,
    office_to_document,
    project_from_document,
    regulation_from_document,
)


def test_office_document_is_sparse_and_camel_cased() -> None:
    office = Office(
        id="UKLD001",
        name="Foster + Partners",
        headquarters=Location(city="London", country="United Kingdom"),
        size=OfficeSize(size_category=SizeCategory.GLOBAL),
        created_at=datetime(2024, 5, 1, tzinfo=UTC),
    )

    document = office_to_document(office)

    assert document["location"] == {
        "headquarters": {"city": "London", "country": "United Kingdom"},
        "otherOffices": [],
    }
    assert document["size"] == {"sizeCategory": "global"}
    assert document["createdAt"] == "2024-05-01T00:00:00+00:00"
    assert "officialName" not in document
    assert "updatedAt" not in document


def test_office_reads_back_loosely_typed_values() -> None:
    office = office_from_document(
        {
            "id": "UKLD001",
            "name": " Foster + Partners ",
            "founded": "1967",
            "status": "ACTIVE",
            "size": {"employeeCount": 200.0, "sizeCategory": "unknown-size"},
            "specializations": ["architecture", None, "  "],
            "version": 4,
        }
    )

    assert office.name == "Foster + Partners"
    assert office.founded == 1967
    assert office.status is OfficeStatus.ACTIVE
    assert office.size == OfficeSize(employee_count=200)
    assert office.specializations == ["architecture"]
    assert office.version == 4
    assert office.headquarters is None


def test_derived_size_category_is_flagged_in_the_document() -> None:
    size = OfficeSize(employee_count=4, size_category=SizeCategory.BOUTIQUE, category_derived=True)
    document = office_to_document(Office(id="UKLD001", name="Foster + Partners", size=size))

    assert document["size"] == {
        "employeeCount": 4,
        "sizeCategory": "boutique",
        "sizeCategoryDerived": True,
    }
    assert office_from_document(document).size == size


def test_project_and_regulation_documents() -> None:
    project = project_from_document(
        {
            "id": "project-1",
            "projectName": "Harbour Tower",
            "status": "construction",
            "location": {"city": "Oslo", "country": "Norway"},
            "financial": {"budget": "12.5", "currency": "EUR"},
        }
    )
    regulation = regulation_from_document(
        {
            "id": "regulation-1",
            "name": "Fire Code",
            "jurisdiction": {"level": "city", "cityName": "Oslo", "countryName": "Norway"},
        }
    )

    assert project.status is ProjectStatus.CONSTRUCTION
    assert project.financial is not None
    assert project.financial.budget == 12.5
    assert project.primary_location() == Location(city="Oslo", country="Norway")
    assert regulation.primary_location() == Location(city="Oslo", country="Norway")


def test_entity_from_document_dispatches_on_kind() -> None:
    workforce = entity_from_document(
        EntityKind.WORKFORCE,
        {
            "id": "WF-UKLD001",
            "officeId": "UKLD001",
            "employees": [{"name": "Alice"}, {"role": "nameless"}, {"name": "alice "}],
        },
    )

    assert isinstance(workforce, Workforce)
    assert workforce.employees[0] == Employee(name="Alice")
    assert len(workforce.employees) == 2
    assert workforce.unique_employee_count() == 2
