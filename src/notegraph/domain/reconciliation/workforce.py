"""Employee roster reconciliation for an office.

A workforce record (``WF-{officeId}``) is created the first time employees are
mentioned for an office. Employees are keyed by their trimmed, lowercased name; the
office headcount is always derived from the roster, never from extraction.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, cast

from notegraph.domain.model import (
    Collection,
    Employee,
    OfficeSize,
    SizeCategory,
    Workforce,
    WorkforceAggregate,
    office_from_document,
    office_to_document,
    workforce_from_document,
    workforce_to_document,
)

from .contracts import Local, Persisted, WriteOutcome, stored_version

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from notegraph.domain.model import EmployeeDistribution, Office
    from notegraph.domain.ports import DocumentStore

log = getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class RosterMerge:
    employees: list[Employee] = field(default_factory=list[Employee])
    added: int = 0
    updated: int = 0


@dataclass(slots=True, kw_only=True)
class WorkforceUpdate:
    office_id: str
    office_name: str
    employees_added: int
    employees_updated: int
    total_employees: int


@dataclass(slots=True, kw_only=True)
class WorkforceReconciliation:
    outcome: WriteOutcome[Workforce]
    update: WorkforceUpdate
    created: bool
    office: Office


def merge_employee(existing: Employee, incoming: Employee) -> Employee:
    """Newer non-empty description/role/location win; expertise is unioned in order."""

    expertise = list(existing.expertise)
    for tag in incoming.expertise:
        if tag not in expertise:
            expertise.append(tag)
    return Employee(
        name=existing.name,
        description=incoming.description or existing.description,
        role=incoming.role or existing.role,
        expertise=expertise,
        location=copy.deepcopy(incoming.location)
        if incoming.location is not None and (incoming.location.city or incoming.location.country)
        else existing.location,
    )


def merge_roster(existing: Iterable[Employee], incoming: Iterable[Employee]) -> RosterMerge:
    roster: dict[str, Employee] = {}
    for employee in existing:
        if employee.key:
            roster[employee.key] = employee

    merged = RosterMerge()
    for employee in incoming:
        key = employee.key
        if not key:
            log.debug("Skipping employee without a name")
            continue
        current = roster.get(key)
        if current is None:
            roster[key] = Employee(
                name=employee.name.strip(),
                description=employee.description,
                role=employee.role,
                expertise=list(dict.fromkeys(employee.expertise)),
                location=employee.location,
            )
            merged.added += 1
        else:
            roster[key] = merge_employee(current, employee)
            merged.updated += 1

    merged.employees = list(roster.values())
    return merged


def derive_office_size(size: OfficeSize | None, headcount: int) -> OfficeSize:
    """Headcount always comes from the roster.

    A category stated in a note is kept; one computed earlier from the roster is
    recomputed so it follows the headcount as the roster grows.
    """

    current = size or OfficeSize()
    if current.size_category is not None and not current.category_derived:
        return OfficeSize(
            employee_count=headcount,
            size_category=current.size_category,
            annual_revenue=current.annual_revenue,
        )
    return OfficeSize(
        employee_count=headcount,
        size_category=SizeCategory.from_headcount(headcount),
        annual_revenue=current.annual_revenue,
        category_derived=True,
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class WorkforceReconciler:
    store: DocumentStore
    attempts: int = 3
    clock: Callable[[], datetime] = _utcnow

    def reconcile(
        self,
        office: Office,
        employees: list[Employee],
        distribution: EmployeeDistribution | None = None,
    ) -> WorkforceReconciliation | None:
        if office.id is None:
            log.warning("Cannot reconcile employees for office %r without an id", office.name)
            return None
        if not any(employee.key for employee in employees):
            return None

        existing = self._find(office.id)
        if existing is None:
            outcome, roster = self._create(office, employees, distribution)
            created = True
        else:
            outcome, roster = self._merge(existing, employees, distribution)
            created = False

        workforce = outcome.entity
        headcount = workforce.unique_employee_count()
        updated_office = self._update_office_size(office, headcount)
        update = WorkforceUpdate(
            office_id=office.id,
            office_name=office.name,
            employees_added=roster.added,
            employees_updated=roster.updated,
            total_employees=headcount,
        )
        log.info(
            "Workforce for %s: %s added, %s updated, %s total",
            office.name,
            roster.added,
            roster.updated,
            headcount,
        )
        return WorkforceReconciliation(
            outcome=outcome, update=update, created=created, office=updated_office
        )

    def _find(self, office_id: str) -> Workforce | None:
        result = self.store.query(Collection.WORKFORCE, {"officeId": office_id})
        if not result.success:
            log.warning("Workforce lookup for office %s failed: %s", office_id, result.error)
            return None
        if not result.data:
            return None
        return workforce_from_document(result.data[0])

    def _create(
        self,
        office: Office,
        employees: list[Employee],
        distribution: EmployeeDistribution | None,
    ) -> tuple[WriteOutcome[Workforce], RosterMerge]:
        office_id = cast(str, office.id)
        roster = merge_roster((), employees)
        workforce = Workforce(
            id=Workforce.id_for(office_id),
            office_id=office_id,
            office_name=office.name,
            employees=roster.employees,
        )
        _refresh_aggregate(workforce, distribution)
        workforce.stamp(self.clock())
        result = self.store.create(Collection.WORKFORCE, workforce_to_document(workforce))
        if not result.success:
            log.warning("Failed to create workforce for %s: %s", office.name, result.error)
            return Local(entity=workforce, error=result.error), roster
        workforce.version = stored_version(result.data, 1)
        return Persisted(entity=workforce), roster

    def _merge(
        self,
        existing: Workforce,
        employees: list[Employee],
        distribution: EmployeeDistribution | None,
    ) -> tuple[WriteOutcome[Workforce], RosterMerge]:
        base = existing
        for _ in range(self.attempts):
            workforce = copy.deepcopy(base)
            roster = merge_roster(base.employees, employees)
            workforce.employees = roster.employees
            _refresh_aggregate(workforce, distribution)
            workforce.stamp(self.clock())
            document = workforce_to_document(workforce)
            partial = {
                key: document[key]
                for key in ("employees", "aggregate", "updatedAt")
                if key in document
            }
            result = self.store.update(
                Collection.WORKFORCE,
                cast(str, base.id),
                partial,
                expected_version=base.version,
            )
            if result.success:
                workforce.version = stored_version(result.data, base.version + 1)
                return Persisted(entity=workforce), roster
            if not result.conflict:
                log.warning("Failed to update workforce %s: %s", base.id, result.error)
                return Local(entity=workforce, error=result.error), roster
            reloaded = self._find(base.office_id)
            if reloaded is None:
                break
            base = reloaded

        error = f"gave up updating workforce {existing.id} after repeated conflicts"
        log.warning(error)
        roster = merge_roster(base.employees, employees)
        workforce = copy.deepcopy(base)
        workforce.employees = roster.employees
        return Local(entity=workforce, error=error), roster

    def _update_office_size(self, office: Office, headcount: int) -> Office:
        updated = copy.deepcopy(office)
        current = office
        for _ in range(self.attempts):
            updated = copy.deepcopy(current)
            updated.size = derive_office_size(current.size, headcount)
            updated.stamp(self.clock())
            document = office_to_document(updated)
            result = self.store.update(
                Collection.OFFICES,
                cast(str, office.id),
                {"size": document["size"], "updatedAt": document["updatedAt"]},
                expected_version=current.version,
            )
            if result.success:
                updated.version = stored_version(result.data, current.version + 1)
                return updated
            if not result.conflict:
                log.warning(
                    "Could not store headcount for office %s: %s", office.id, result.error
                )
                return updated
            reread = self.store.query(Collection.OFFICES, {"id": office.id})
            if not reread.success or not reread.data:
                break
            current = office_from_document(reread.data[0])
        log.warning("Gave up storing headcount for office %s", office.id)
        return updated


def _refresh_aggregate(workforce: Workforce, distribution: EmployeeDistribution | None) -> None:
    if distribution is None or not distribution.has_counts():
        return
    workforce.aggregate = WorkforceAggregate(
        total_employees=workforce.unique_employee_count(),
        distribution=copy.deepcopy(distribution),
        retention_rate=0.0,
        growth_rate=0.0,
    )
