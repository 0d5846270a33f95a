"""Office, project and regulation entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .base import Entity, Location
from .enums import (
    EntityKind,
    JurisdictionLevel,
    OfficeStatus,
    ProjectStatus,
    SizeCategory,
)


@dataclass(slots=True, kw_only=True)
class OfficeSize:
    employee_count: int | None = None
    size_category: SizeCategory | None = None
    annual_revenue: float | None = None
    # set when the category was computed from the roster headcount
    category_derived: bool | None = None


@dataclass(slots=True, kw_only=True)
class ConnectionCounts:
    total_projects: int = 0
    active_projects: int = 0
    clients: int = 0
    competitors: int = 0
    suppliers: int = 0
    total_regulations: int = 0


@dataclass(slots=True, kw_only=True)
class Office(Entity):
    kind: ClassVar[EntityKind] = EntityKind.OFFICE

    name: str
    official_name: str | None = None
    founded: int | None = None
    status: OfficeStatus | None = None
    headquarters: Location | None = None
    other_offices: list[Location] = field(default_factory=list[Location])
    size: OfficeSize | None = None
    specializations: list[str] = field(default_factory=list[str])
    notable_works: list[str] = field(default_factory=list[str])
    connection_counts: ConnectionCounts | None = None
    info_entries: int | None = None

    @property
    def display_name(self) -> str:
        return self.name

    def primary_location(self) -> Location | None:
        return self.headquarters


@dataclass(slots=True, kw_only=True)
class Financial:
    budget: float | None = None
    currency: str | None = None


@dataclass(slots=True, kw_only=True)
class ProjectDetails:
    project_type: str | None = None
    description: str | None = None


@dataclass(slots=True, kw_only=True)
class Project(Entity):
    kind: ClassVar[EntityKind] = EntityKind.PROJECT

    project_name: str
    office_id: str | None = None
    status: ProjectStatus | None = None
    location: Location | None = None
    financial: Financial | None = None
    details: ProjectDetails | None = None

    @property
    def display_name(self) -> str:
        return self.project_name

    def primary_location(self) -> Location | None:
        return self.location


@dataclass(slots=True, kw_only=True)
class Jurisdiction:
    level: JurisdictionLevel | None = None
    city_name: str | None = None
    state_name: str | None = None
    country_name: str | None = None


@dataclass(slots=True, kw_only=True)
class Regulation(Entity):
    kind: ClassVar[EntityKind] = EntityKind.REGULATION

    name: str
    jurisdiction: Jurisdiction | None = None
    regulation_type: str | None = None
    effective_date: str | None = None
    description: str | None = None

    @property
    def display_name(self) -> str:
        return self.name

    def primary_location(self) -> Location | None:
        if self.jurisdiction is None:
            return None
        return Location(city=self.jurisdiction.city_name, country=self.jurisdiction.country_name)


type ResolvableEntity = Office | Project | Regulation
