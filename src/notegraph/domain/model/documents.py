"""Translate entities to and from the camelCase documents kept in the store.

Documents are sparse: ``None`` values are omitted so that a partial candidate and a
complete entity share one representation. ``version`` is written by the store and
only read back here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, cast

from .base import Location
from .entities import (
    ConnectionCounts,
    Financial,
    Jurisdiction,
    Office,
    OfficeSize,
    Project,
    ProjectDetails,
    Regulation,
)
from .enums import (
    EntityKind,
    JurisdictionLevel,
    OfficeStatus,
    ProjectStatus,
    RelationshipType,
    SizeCategory,
)
from .relationship import EntityRef, MatchBasis, Relationship
from .workforce import Employee, EmployeeDistribution, Workforce, WorkforceAggregate

type Document = dict[str, Any]


# --- helpers -------------------------------------------------------------------------


def _sparse(values: dict[str, Any]) -> Document:
    return {key: value for key, value in values.items() if value is not None}


def _mapping(value: object) -> dict[str, Any] | None:
    if isinstance(value, dict):
        return cast(dict[str, Any], value)
    return None


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _int(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip()
    try:
        return int(float(text))
    except ValueError:
        return None


def _float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _strings(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    result: list[str] = []
    for item in cast(list[object], value):
        text = _text(item)
        if text is not None:
            result.append(text)
    return result


def _enum[E: (OfficeStatus, ProjectStatus, SizeCategory, JurisdictionLevel)](
    enum_type: type[E], value: object
) -> E | None:
    text = _text(value)
    if text is None:
        return None
    try:
        return enum_type(text.lower())
    except ValueError:
        return None


def _timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    text = _text(value)
    if text is None:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _entity_fields(document: Document) -> dict[str, Any]:
    return {
        "id": _text(document.get("id")),
        "created_at": _timestamp(document.get("createdAt")),
        "updated_at": _timestamp(document.get("updatedAt")),
        "version": _int(document.get("version")) or 0,
    }


def _entity_document(
    *, id: str | None, created_at: datetime | None, updated_at: datetime | None  # noqa: A002
) -> Document:
    return {"id": id, "createdAt": _iso(created_at), "updatedAt": _iso(updated_at)}


def location_to_document(location: Location | None) -> Document | None:
    if location is None:
        return None
    return _sparse({"city": location.city, "country": location.country})


def location_from_document(value: object) -> Location | None:
    document = _mapping(value)
    if document is None:
        return None
    return Location(city=_text(document.get("city")), country=_text(document.get("country")))


# --- offices -------------------------------------------------------------------------


def office_to_document(office: Office) -> Document:
    location: Document | None = None
    if office.headquarters is not None or office.other_offices:
        location = _sparse(
            {
                "headquarters": location_to_document(office.headquarters),
                "otherOffices": [location_to_document(item) for item in office.other_offices],
            }
        )
    size = None
    if office.size is not None:
        size = _sparse(
            {
                "employeeCount": office.size.employee_count,
                "sizeCategory": office.size.size_category,
                "annualRevenue": office.size.annual_revenue,
                "sizeCategoryDerived": True if office.size.category_derived else None,
            }
        )
    counts = None
    if office.connection_counts is not None:
        counts = {
            "totalProjects": office.connection_counts.total_projects,
            "activeProjects": office.connection_counts.active_projects,
            "clients": office.connection_counts.clients,
            "competitors": office.connection_counts.competitors,
            "suppliers": office.connection_counts.suppliers,
            "totalRegulations": office.connection_counts.total_regulations,
        }
    return _sparse(
        {
            **_entity_document(
                id=office.id, created_at=office.created_at, updated_at=office.updated_at
            ),
            "name": office.name,
            "officialName": office.official_name,
            "founded": office.founded,
            "status": office.status,
            "location": location,
            "size": size,
            "specializations": list(office.specializations),
            "notableWorks": list(office.notable_works),
            "connectionCounts": counts,
            "infoEntries": office.info_entries,
        }
    )


def office_from_document(document: Document) -> Office:
    location = _mapping(document.get("location")) or {}
    other_offices: list[Location] = []
    for item in cast(list[object], location.get("otherOffices") or []):
        parsed = location_from_document(item)
        if parsed is not None:
            other_offices.append(parsed)

    size_doc = _mapping(document.get("size"))
    size = None
    if size_doc is not None:
        size = OfficeSize(
            employee_count=_int(size_doc.get("employeeCount")),
            size_category=_enum(SizeCategory, size_doc.get("sizeCategory")),
            annual_revenue=_float(size_doc.get("annualRevenue")),
            category_derived=True if size_doc.get("sizeCategoryDerived") is True else None,
        )

    counts_doc = _mapping(document.get("connectionCounts"))
    counts = None
    if counts_doc is not None:
        counts = ConnectionCounts(
            total_projects=_int(counts_doc.get("totalProjects")) or 0,
            active_projects=_int(counts_doc.get("activeProjects")) or 0,
            clients=_int(counts_doc.get("clients")) or 0,
            competitors=_int(counts_doc.get("competitors")) or 0,
            suppliers=_int(counts_doc.get("suppliers")) or 0,
            total_regulations=_int(counts_doc.get("totalRegulations")) or 0,
        )

    return Office(
        **_entity_fields(document),
        name=_text(document.get("name")) or "",
        official_name=_text(document.get("officialName")),
        founded=_int(document.get("founded")),
        status=_enum(OfficeStatus, document.get("status")),
        headquarters=location_from_document(location.get("headquarters")),
        other_offices=other_offices,
        size=size,
        specializations=_strings(document.get("specializations")),
        notable_works=_strings(document.get("notableWorks")),
        connection_counts=counts,
        info_entries=_int(document.get("infoEntries")),
    )


# --- projects ------------------------------------------------------------------------


def project_to_document(project: Project) -> Document:
    financial = None
    if project.financial is not None:
        financial = _sparse(
            {"budget": project.financial.budget, "currency": project.financial.currency}
        )
    details = None
    if project.details is not None:
        details = _sparse(
            {
                "projectType": project.details.project_type,
                "description": project.details.description,
            }
        )
    return _sparse(
        {
            **_entity_document(
                id=project.id, created_at=project.created_at, updated_at=project.updated_at
            ),
            "projectName": project.project_name,
            "officeId": project.office_id,
            "status": project.status,
            "location": location_to_document(project.location),
            "financial": financial,
            "details": details,
        }
    )


def project_from_document(document: Document) -> Project:
    financial_doc = _mapping(document.get("financial"))
    details_doc = _mapping(document.get("details"))
    return Project(
        **_entity_fields(document),
        project_name=_text(document.get("projectName")) or "",
        office_id=_text(document.get("officeId")),
        status=_enum(ProjectStatus, document.get("status")),
        location=location_from_document(document.get("location")),
        financial=(
            Financial(
                budget=_float(financial_doc.get("budget")),
                currency=_text(financial_doc.get("currency")),
            )
            if financial_doc is not None
            else None
        ),
        details=(
            ProjectDetails(
                project_type=_text(details_doc.get("projectType")),
                description=_text(details_doc.get("description")),
            )
            if details_doc is not None
            else None
        ),
    )


# --- regulations ---------------------------------------------------------------------


def regulation_to_document(regulation: Regulation) -> Document:
    jurisdiction = None
    if regulation.jurisdiction is not None:
        jurisdiction = _sparse(
            {
                "level": regulation.jurisdiction.level,
                "cityName": regulation.jurisdiction.city_name,
                "stateName": regulation.jurisdiction.state_name,
                "countryName": regulation.jurisdiction.country_name,
            }
        )
    return _sparse(
        {
            **_entity_document(
                id=regulation.id,
                created_at=regulation.created_at,
                updated_at=regulation.updated_at,
            ),
            "name": regulation.name,
            "jurisdiction": jurisdiction,
            "regulationType": regulation.regulation_type,
            "effectiveDate": regulation.effective_date,
            "description": regulation.description,
        }
    )


def regulation_from_document(document: Document) -> Regulation:
    jurisdiction_doc = _mapping(document.get("jurisdiction"))
    jurisdiction = None
    if jurisdiction_doc is not None:
        jurisdiction = Jurisdiction(
            level=_enum(JurisdictionLevel, jurisdiction_doc.get("level")),
            city_name=_text(jurisdiction_doc.get("cityName")),
            state_name=_text(jurisdiction_doc.get("stateName")),
            country_name=_text(jurisdiction_doc.get("countryName")),
        )
    return Regulation(
        **_entity_fields(document),
        name=_text(document.get("name")) or "",
        jurisdiction=jurisdiction,
        regulation_type=_text(document.get("regulationType")),
        effective_date=_text(document.get("effectiveDate")),
        description=_text(document.get("description")),
    )


# --- workforce -----------------------------------------------------------------------


def employee_to_document(employee: Employee) -> Document:
    """Serialize with a stable key order: name, description, role, expertise, location."""

    document: Document = {"name": employee.name.strip()}
    if employee.description:
        document["description"] = employee.description
    if employee.role:
        document["role"] = employee.role
    if employee.expertise:
        document["expertise"] = list(employee.expertise)
    location = location_to_document(employee.location)
    if location:
        document["location"] = location
    return document


def employee_from_document(value: object) -> Employee | None:
    document = _mapping(value)
    if document is None:
        return None
    name = _text(document.get("name"))
    if name is None:
        return None
    return Employee(
        name=name,
        description=_text(document.get("description")),
        role=_text(document.get("role")),
        expertise=_strings(document.get("expertise")),
        location=location_from_document(document.get("location")),
    )


def distribution_from_document(value: object) -> EmployeeDistribution | None:
    document = _mapping(value)
    if document is None:
        return None
    return EmployeeDistribution(
        architects=_int(document.get("architects")) or 0,
        engineers=_int(document.get("engineers")) or 0,
        designers=_int(document.get("designers")) or 0,
        administrative=_int(document.get("administrative")) or 0,
    )


def workforce_to_document(workforce: Workforce) -> Document:
    aggregate = None
    if workforce.aggregate is not None:
        distribution = workforce.aggregate.distribution
        aggregate = {
            "totalEmployees": workforce.aggregate.total_employees,
            "distribution": {
                "architects": distribution.architects,
                "engineers": distribution.engineers,
                "designers": distribution.designers,
                "administrative": distribution.administrative,
            },
            "retentionRate": workforce.aggregate.retention_rate,
            "growthRate": workforce.aggregate.growth_rate,
        }
    return _sparse(
        {
            **_entity_document(
                id=workforce.id,
                created_at=workforce.created_at,
                updated_at=workforce.updated_at,
            ),
            "officeId": workforce.office_id,
            "officeName": workforce.office_name,
            "employees": [employee_to_document(employee) for employee in workforce.employees],
            "aggregate": aggregate,
        }
    )


def workforce_from_document(document: Document) -> Workforce:
    employees: list[Employee] = []
    for item in cast(list[object], document.get("employees") or []):
        employee = employee_from_document(item)
        if employee is not None:
            employees.append(employee)

    aggregate_doc = _mapping(document.get("aggregate"))
    aggregate = None
    if aggregate_doc is not None:
        aggregate = WorkforceAggregate(
            total_employees=_int(aggregate_doc.get("totalEmployees")) or 0,
            distribution=distribution_from_document(aggregate_doc.get("distribution"))
            or EmployeeDistribution(),
            retention_rate=_float(aggregate_doc.get("retentionRate")) or 0.0,
            growth_rate=_float(aggregate_doc.get("growthRate")) or 0.0,
        )

    return Workforce(
        **_entity_fields(document),
        office_id=_text(document.get("officeId")) or "",
        office_name=_text(document.get("officeName")),
        employees=employees,
        aggregate=aggregate,
    )


# --- relationships -------------------------------------------------------------------


def relationship_to_document(relationship: Relationship) -> Document:
    return {
        "id": relationship.id,
        "sourceEntity": {"type": relationship.source.kind, "id": relationship.source.id},
        "targetEntity": {"type": relationship.target.kind, "id": relationship.target.id},
        "relationshipType": relationship.relationship_type,
        "basis": relationship.basis,
        "bidirectional": True,
    }


def relationship_from_document(document: Document) -> Relationship:
    source = _mapping(document.get("sourceEntity")) or {}
    target = _mapping(document.get("targetEntity")) or {}
    return Relationship(
        source=EntityRef(kind=EntityKind(str(source.get("type"))), id=str(source.get("id"))),
        target=EntityRef(kind=EntityKind(str(target.get("type"))), id=str(target.get("id"))),
        relationship_type=RelationshipType(str(document.get("relationshipType"))),
        basis=cast(MatchBasis, document.get("basis", "country")),
    )


# --- dispatch ------------------------------------------------------------------------


def entity_to_document(entity: Office | Project | Regulation | Workforce) -> Document:
    match entity:
        case Office():
            return office_to_document(entity)
        case Project():
            return project_to_document(entity)
        case Regulation():
            return regulation_to_document(entity)
        case Workforce():
            return workforce_to_document(entity)


def entity_from_document(
    kind: EntityKind, document: Document
) -> Office | Project | Regulation | Workforce:
    match kind:
        case EntityKind.OFFICE:
            return office_from_document(document)
        case EntityKind.PROJECT:
            return project_from_document(document)
        case EntityKind.REGULATION:
            return regulation_from_document(document)
        case EntityKind.WORKFORCE:
            return workforce_from_document(document)
