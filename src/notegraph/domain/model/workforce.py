"""Per-office employee roster."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .base import Entity, Location
from .enums import EntityKind

WORKFORCE_ID_PREFIX = "WF-"


def employee_key(name: str) -> str:
    return name.strip().lower()


@dataclass(slots=True, kw_only=True)
class Employee:
    name: str
    description: str | None = None
    role: str | None = None
    expertise: list[str] = field(default_factory=list[str])
    location: Location | None = None

    @property
    def key(self) -> str:
        return employee_key(self.name)


@dataclass(slots=True, kw_only=True)
class EmployeeDistribution:
    architects: int = 0
    engineers: int = 0
    designers: int = 0
    administrative: int = 0

    def has_counts(self) -> bool:
        return any((self.architects, self.engineers, self.designers, self.administrative))


@dataclass(slots=True, kw_only=True)
class WorkforceAggregate:
    total_employees: int = 0
    distribution: EmployeeDistribution = field(default_factory=EmployeeDistribution)
    retention_rate: float = 0.0
    growth_rate: float = 0.0


@dataclass(slots=True, kw_only=True)
class Workforce(Entity):
    kind: ClassVar[EntityKind] = EntityKind.WORKFORCE

    office_id: str
    office_name: str | None = None
    employees: list[Employee] = field(default_factory=list[Employee])
    aggregate: WorkforceAggregate | None = None

    @property
    def display_name(self) -> str:
        return self.office_name or self.office_id

    @staticmethod
    def id_for(office_id: str) -> str:
        return f"{WORKFORCE_ID_PREFIX}{office_id}"

    def unique_employee_count(self) -> int:
        return len({employee.name.strip() for employee in self.employees if employee.name.strip()})
