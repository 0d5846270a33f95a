"""Shared reconciliation contract components.

This module holds only the value types exchanged between the resolver, the merge
engine, the creators and the pipeline phases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from notegraph.domain.model import ResolvableEntity


class ResolutionStatus(StrEnum):
    """Outcome produced by identity resolution."""

    NEW = "new"
    RESOLVED = "resolved"


class MatchKind(StrEnum):
    """How the resolver matched a candidate against stored entities."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    HEURISTIC = "heuristic"


@dataclass(slots=True, kw_only=True)
class NewEntityResolution:
    """Candidate has no stored match and should be created."""

    status: Literal[ResolutionStatus.NEW] = ResolutionStatus.NEW
    reason: str | None = None


@dataclass(slots=True, kw_only=True)
class ResolvedEntityResolution[T: ResolvableEntity]:
    """Candidate resolved to one stored entity of the same kind."""

    target: T
    match_kind: MatchKind
    confidence: float
    matched_name: str | None = None
    reason: str | None = None
    status: Literal[ResolutionStatus.RESOLVED] = ResolutionStatus.RESOLVED


type EntityResolution[T: ResolvableEntity] = NewEntityResolution | ResolvedEntityResolution[T]


@dataclass(slots=True, frozen=True, kw_only=True)
class Persisted[T]:
    """Entity written to the store."""

    entity: T
    is_local: Literal[False] = False


@dataclass(slots=True, frozen=True, kw_only=True)
class Local[T]:
    """Entity that only exists in memory because the store write failed.

    Never retried; reported so counts and summaries stay meaningful.
    """

    entity: T
    error: str | None = None
    is_local: Literal[True] = True


type WriteOutcome[T] = Persisted[T] | Local[T]


@dataclass(slots=True, kw_only=True)
class MergeResult[T: ResolvableEntity]:
    """Result of merging a candidate into an existing entity.

    ``success`` is False when the merged state could not be written; ``entity`` then
    still carries the in-memory merge and ``outcome`` is ``Local``.
    """

    success: bool
    entity: T
    changed_fields: list[str] = field(default_factory=list[str])
    outcome: WriteOutcome[T] | None = None
    error: str | None = None

    @property
    def was_updated(self) -> bool:
        return bool(self.changed_fields) and self.success


def stored_version(document: dict[str, object] | None, default: int) -> int:
    """Version the store reported after a write, or ``default`` when it reported none."""

    if document is None:
        return default
    version = document.get("version")
    return version if isinstance(version, int) else default
