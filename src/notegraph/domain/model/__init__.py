"""Domain model for offices, projects, regulations and their workforce."""

from __future__ import annotations

from .base import UNKNOWN_PLACE, Entity, Location
from .documents import (
    Document,
    entity_from_document,
    entity_to_document,
    office_from_document,
    office_to_document,
    project_from_document,
    project_to_document,
    regulation_from_document,
    regulation_to_document,
    relationship_to_document,
    workforce_from_document,
    workforce_to_document,
)
from .entities import (
    ConnectionCounts,
    Financial,
    Jurisdiction,
    Office,
    OfficeSize,
    Project,
    ProjectDetails,
    Regulation,
    ResolvableEntity,
)
from .enums import (
    Category,
    Collection,
    EntityKind,
    JurisdictionLevel,
    OfficeStatus,
    ProjectStatus,
    RelationshipType,
    SatelliteKind,
    SizeCategory,
)
from .relationship import EntityRef, MatchBasis, Relationship
from .workforce import (
    Employee,
    EmployeeDistribution,
    Workforce,
    WorkforceAggregate,
    employee_key,
)

__all__ = [
    "UNKNOWN_PLACE",
    "Category",
    "Collection",
    "ConnectionCounts",
    "Document",
    "Employee",
    "EmployeeDistribution",
    "Entity",
    "EntityKind",
    "EntityRef",
    "Financial",
    "Jurisdiction",
    "JurisdictionLevel",
    "Location",
    "MatchBasis",
    "Office",
    "OfficeSize",
    "OfficeStatus",
    "Project",
    "ProjectDetails",
    "ProjectStatus",
    "Regulation",
    "Relationship",
    "RelationshipType",
    "ResolvableEntity",
    "SatelliteKind",
    "SizeCategory",
    "Workforce",
    "WorkforceAggregate",
    "employee_key",
    "entity_from_document",
    "entity_to_document",
    "office_from_document",
    "office_to_document",
    "project_from_document",
    "project_to_document",
    "regulation_from_document",
    "regulation_to_document",
    "relationship_to_document",
    "workforce_from_document",
    "workforce_to_document",
]
