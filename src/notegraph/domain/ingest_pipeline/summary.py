"""Produced result of one note and its human-readable recap."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .context import CreatedEntities

if TYPE_CHECKING:
    from collections.abc import Sequence

    from notegraph.domain.model import Office, Relationship
    from notegraph.domain.reconciliation import WorkforceUpdate, WriteOutcome

    from .context import NoteContext

NOTHING_CREATED: Final[str] = "No entities created - no relevant data found in text"
LOCAL_SUFFIX: Final[str] = " (includes local entities - store unavailable)"
STORED_SUFFIX: Final[str] = " (saved to store)"


@dataclass(slots=True, kw_only=True)
class IngestResult:
    success: bool
    entities_created: CreatedEntities = field(default_factory=CreatedEntities)
    workforce_updates: list[WorkforceUpdate] = field(default_factory=list["WorkforceUpdate"])
    summary: str = ""
    total_created: int = 0
    web_search_performed: bool = False
    relationships: list[Relationship] = field(default_factory=list["Relationship"])


def _office_labels(outcomes: Sequence[WriteOutcome[Office]]) -> str:
    labels: list[str] = []
    for outcome in outcomes:
        office = outcome.entity
        if office.name and office.id:
            labels.append(f"{office.name} ({office.id})")
        else:
            labels.append(office.name or office.id or "")
    return ", ".join(labels)


def _workforce_part(update: WorkforceUpdate) -> str | None:
    messages: list[str] = []
    if update.employees_added:
        messages.append(f"{update.employees_added} new employee(s) added")
    if update.employees_updated:
        messages.append(f"{update.employees_updated} employee(s) updated")
    if not messages:
        return None
    return (
        f"Updated {update.office_name}: {', '.join(messages)}. "
        f"Total employees: {update.total_employees}"
    )


def build_summary(created: CreatedEntities, workforce_updates: Sequence[WorkforceUpdate]) -> str:
    parts: list[str] = []
    if created.offices:
        parts.append(f"{len(created.offices)} office(s) created: {_office_labels(created.offices)}")
    if created.merged_offices:
        parts.append(
            f"{len(created.merged_offices)} office(s) merged (already existing): "
            f"{_office_labels(created.merged_offices)}"
        )
    if created.projects:
        parts.append(f"{len(created.projects)} project(s) created")
    if created.regulations:
        parts.append(f"{len(created.regulations)} regulation(s) created")
    if workforce_updates:
        parts.extend(
            part for part in map(_workforce_part, workforce_updates) if part is not None
        )
    elif created.workforce:
        parts.append(f"{len(created.workforce)} workforce record(s) created")

    if not parts:
        return NOTHING_CREATED
    suffix = LOCAL_SUFFIX if created.has_local() else STORED_SUFFIX
    return f"Successfully created: {', '.join(parts)}{suffix}"


def build_result(context: NoteContext) -> IngestResult:
    return IngestResult(
        success=True,
        entities_created=context.created,
        workforce_updates=list(context.workforce_updates),
        summary=build_summary(context.created, context.workforce_updates),
        total_created=context.created.total(),
        web_search_performed=context.web_search_performed,
        relationships=list(context.relationships),
    )


def failed_result(error: Exception | str, *, web_search_performed: bool = False) -> IngestResult:
    return IngestResult(
        success=False,
        summary=f"Error processing text: {error}",
        web_search_performed=web_search_performed,
    )
