from __future__ import annotations

from notegraph.adapters.memory import InMemoryDocumentStore
from notegraph.domain.model import (
    Collection,
    Employee,
    EmployeeDistribution,
    Location,
    Office,
    OfficeSize,
    SizeCategory,
    office_from_document,
)
from notegraph.domain.reconciliation import (
    Persisted,
    WorkforceReconciler,
    derive_office_size,
    merge_roster,
)
from tests.helpers.notes import employees


def _stored_office(store: InMemoryDocumentStore, **extra: object) -> Office:
    document: dict[str, object] = {
        "id": "UKLD001",
        "name": "Foster + Partners",
        "location": {"headquarters": {"city": "London", "country": "United Kingdom"}},
        **extra,
    }
    return office_from_document(store.create(Collection.OFFICES, document).unwrap())


def test_merge_roster_dedups_case_insensitively() -> None:
    existing = [Employee(name="Alice Smith", role="Architect", expertise=["BIM"])]
    incoming = [
        Employee(name=" alice smith ", role=None, expertise=["BIM", "Revit"]),
        Employee(name="Bob Jones"),
        Employee(name="   "),
    ]

    roster = merge_roster(existing, incoming)

    assert roster.added == 1
    assert roster.updated == 1
    assert [employee.name for employee in roster.employees] == ["Alice Smith", "Bob Jones"]
    alice = roster.employees[0]
    assert alice.role == "Architect"
    assert alice.expertise == ["BIM", "Revit"]


def test_newer_employee_details_win() -> None:
    existing = [Employee(name="Alice", location=Location(city="London", country="UK"))]
    incoming = [
        Employee(name="ALICE", description="Design lead", location=Location(city="Tokyo"))
    ]

    alice = merge_roster(existing, incoming).employees[0]

    assert alice.name == "Alice"
    assert alice.description == "Design lead"
    assert alice.location == Location(city="Tokyo")


def test_derived_size_follows_headcount_unless_explicit() -> None:
    assert derive_office_size(None, 12) == OfficeSize(
        employee_count=12, size_category=SizeCategory.MEDIUM, category_derived=True
    )
    assert derive_office_size(None, 3).size_category is SizeCategory.BOUTIQUE
    assert derive_office_size(None, 120).size_category is SizeCategory.LARGE
    assert derive_office_size(None, 500).size_category is SizeCategory.GLOBAL
    explicit = OfficeSize(employee_count=999, size_category=SizeCategory.GLOBAL)
    assert derive_office_size(explicit, 4) == OfficeSize(
        employee_count=4, size_category=SizeCategory.GLOBAL
    )


def test_derived_category_is_recomputed_from_the_headcount() -> None:
    derived = OfficeSize(
        employee_count=3,
        size_category=SizeCategory.BOUTIQUE,
        annual_revenue=80.0,
        category_derived=True,
    )

    assert derive_office_size(derived, 12) == OfficeSize(
        employee_count=12,
        size_category=SizeCategory.MEDIUM,
        annual_revenue=80.0,
        category_derived=True,
    )


def test_first_mention_creates_workforce_and_sizes_office(
    memory_store: InMemoryDocumentStore,
) -> None:
    office = _stored_office(memory_store)
    names = [f"Person {index}" for index in range(12)]

    reconciliation = WorkforceReconciler(memory_store).reconcile(office, employees(*names))

    assert reconciliation is not None
    assert reconciliation.created
    assert isinstance(reconciliation.outcome, Persisted)
    assert reconciliation.update.total_employees == 12
    assert reconciliation.update.employees_added == 12

    workforce = memory_store.all(Collection.WORKFORCE)
    assert [document["id"] for document in workforce] == ["WF-UKLD001"]
    stored_office = memory_store.all(Collection.OFFICES)[0]
    assert stored_office["size"] == {
        "employeeCount": 12,
        "sizeCategory": "medium",
        "sizeCategoryDerived": True,
    }
    assert reconciliation.office.size == OfficeSize(
        employee_count=12, size_category=SizeCategory.MEDIUM, category_derived=True
    )


def test_later_mentions_merge_into_the_same_roster(memory_store: InMemoryDocumentStore) -> None:
    office = _stored_office(memory_store)
    reconciler = WorkforceReconciler(memory_store)
    first = reconciler.reconcile(office, employees("Alice", "Bob"))
    assert first is not None

    second = reconciler.reconcile(first.office, employees("alice", "Carol"))

    assert second is not None
    assert not second.created
    assert second.update.employees_added == 1
    assert second.update.employees_updated == 1
    assert second.update.total_employees == 3
    workforce = memory_store.all(Collection.WORKFORCE)
    assert len(workforce) == 1
    assert [item["name"] for item in workforce[0]["employees"]] == ["Alice", "Bob", "Carol"]
    assert memory_store.all(Collection.OFFICES)[0]["size"]["employeeCount"] == 3


def test_roster_growth_moves_the_office_into_a_larger_category(
    memory_store: InMemoryDocumentStore,
) -> None:
    office = _stored_office(memory_store)
    reconciler = WorkforceReconciler(memory_store)
    first = reconciler.reconcile(office, employees(*(f"Early {index}" for index in range(5))))
    assert first is not None
    assert first.office.size is not None
    assert first.office.size.size_category is SizeCategory.BOUTIQUE

    second = reconciler.reconcile(first.office, employees(*(f"Late {index}" for index in range(7))))

    assert second is not None
    assert second.office.size == OfficeSize(
        employee_count=12, size_category=SizeCategory.MEDIUM, category_derived=True
    )
    stored = memory_store.all(Collection.OFFICES)[0]["size"]
    assert stored["employeeCount"] == 12
    assert stored["sizeCategory"] == "medium"


def test_stated_category_survives_roster_growth(memory_store: InMemoryDocumentStore) -> None:
    office = _stored_office(memory_store, size={"sizeCategory": "global"})
    reconciler = WorkforceReconciler(memory_store)
    first = reconciler.reconcile(office, employees("Alice", "Bob"))
    assert first is not None

    second = reconciler.reconcile(first.office, employees(*(f"Late {index}" for index in range(7))))

    assert second is not None
    assert second.office.size == OfficeSize(employee_count=9, size_category=SizeCategory.GLOBAL)


def test_distribution_refreshes_the_aggregate(memory_store: InMemoryDocumentStore) -> None:
    office = _stored_office(memory_store)

    reconciliation = WorkforceReconciler(memory_store).reconcile(
        office,
        employees("Alice", "Bob"),
        EmployeeDistribution(architects=1, engineers=1),
    )

    assert reconciliation is not None
    aggregate = reconciliation.outcome.entity.aggregate
    assert aggregate is not None
    assert aggregate.total_employees == 2
    assert aggregate.distribution.architects == 1


def test_nothing_happens_without_named_employees(memory_store: InMemoryDocumentStore) -> None:
    office = _stored_office(memory_store)

    assert WorkforceReconciler(memory_store).reconcile(office, [Employee(name=" ")]) is None
    assert memory_store.all(Collection.WORKFORCE) == []
