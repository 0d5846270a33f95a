from __future__ import annotations

from notegraph.domain.ingest_pipeline import CreatedEntities, build_summary
from notegraph.domain.ingest_pipeline.summary import (
    LOCAL_SUFFIX,
    NOTHING_CREATED,
    STORED_SUFFIX,
    failed_result,
)
from notegraph.domain.model import Office, Project, ProjectStatus
from notegraph.domain.reconciliation import Local, Persisted, WorkforceUpdate


def _foster() -> Office:
    return Office(id="UKLD001", name="Foster + Partners")


def test_nothing_created() -> None:
    assert build_summary(CreatedEntities(), []) == NOTHING_CREATED


def test_created_and_merged_offices_are_listed() -> None:
    created = CreatedEntities(
        offices=[Persisted(entity=_foster())],
        merged_offices=[Persisted(entity=Office(id="DKCO002", name="BIG"))],
        projects=[
            Persisted(entity=Project(project_name="Harbour", status=ProjectStatus.PLANNING))
        ],
    )

    summary = build_summary(created, [])

    assert summary == (
        "Successfully created: 1 office(s) created: Foster + Partners (UKLD001), "
        "1 office(s) merged (already existing): BIG (DKCO002), "
        f"1 project(s) created{STORED_SUFFIX}"
    )


def test_local_entities_are_flagged() -> None:
    created = CreatedEntities(offices=[Local(entity=_foster(), error="offline")])

    assert build_summary(created, []).endswith(LOCAL_SUFFIX)


def test_workforce_updates_replace_the_record_count() -> None:
    update = WorkforceUpdate(
        office_id="UKLD001",
        office_name="Foster + Partners",
        employees_added=2,
        employees_updated=1,
        total_employees=14,
    )

    summary = build_summary(CreatedEntities(), [update])

    assert summary == (
        "Successfully created: Updated Foster + Partners: 2 new employee(s) added, "
        f"1 employee(s) updated. Total employees: 14{STORED_SUFFIX}"
    )


def test_failed_result_reports_the_error() -> None:
    result = failed_result("oracle unreachable", web_search_performed=True)

    assert not result.success
    assert result.summary == "Error processing text: oracle unreachable"
    assert result.total_created == 0
    assert result.web_search_performed
