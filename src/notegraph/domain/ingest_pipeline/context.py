"""Per-note context shared across the ingest pipeline phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notegraph.domain.model import (
        Office,
        Project,
        Regulation,
        Relationship,
        Workforce,
    )
    from notegraph.domain.ports import Analysis
    from notegraph.domain.reconciliation import (
        SatelliteReport,
        WorkforceUpdate,
        WriteOutcome,
    )


@dataclass(slots=True, kw_only=True)
class TranslationResult:
    success: bool
    original_text: str
    translated_text: str
    detected_language: str | None = None
    error: str | None = None

    @property
    def was_translated(self) -> bool:
        return self.success and self.translated_text != self.original_text


@dataclass(slots=True, kw_only=True)
class ResolvedEntities:
    """Every entity the note touched, created or merged, as it now stands."""

    offices: list[Office] = field(default_factory=list["Office"])
    projects: list[Project] = field(default_factory=list["Project"])
    regulations: list[Regulation] = field(default_factory=list["Regulation"])


@dataclass(slots=True, kw_only=True)
class CreatedEntities:
    offices: list[WriteOutcome[Office]] = field(default_factory=list["WriteOutcome[Office]"])
    projects: list[WriteOutcome[Project]] = field(default_factory=list["WriteOutcome[Project]"])
    regulations: list[WriteOutcome[Regulation]] = field(
        default_factory=list["WriteOutcome[Regulation]"]
    )
    workforce: list[WriteOutcome[Workforce]] = field(
        default_factory=list["WriteOutcome[Workforce]"]
    )
    merged_offices: list[WriteOutcome[Office]] = field(
        default_factory=list["WriteOutcome[Office]"]
    )

    def total(self) -> int:
        return (
            len(self.offices)
            + len(self.projects)
            + len(self.regulations)
            + len(self.workforce)
            + len(self.merged_offices)
        )

    def has_local(self) -> bool:
        outcomes = (
            *self.offices,
            *self.projects,
            *self.regulations,
            *self.workforce,
            *self.merged_offices,
        )
        return any(outcome.is_local for outcome in outcomes)


@dataclass(slots=True)
class NoteContext:
    """Mutable state for one note; phases read upstream fields and fill their own."""

    raw_text: str
    web_search: bool = True
    text: str = ""
    translation: TranslationResult | None = None
    analysis: Analysis | None = None
    web_search_performed: bool = False
    audit_id: str | None = None
    created: CreatedEntities = field(default_factory=CreatedEntities)
    resolved: ResolvedEntities = field(default_factory=ResolvedEntities)
    workforce_updates: list[WorkforceUpdate] = field(default_factory=list["WorkforceUpdate"])
    satellites: SatelliteReport | None = None
    relationships: list[Relationship] = field(default_factory=list["Relationship"])

    def __post_init__(self) -> None:
        if not self.text:
            self.text = self.raw_text

    def require_analysis(self) -> Analysis:
        if self.analysis is None:
            raise RuntimeError("Extraction has not run for this note")
        return self.analysis
