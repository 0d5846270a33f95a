"""Identity resolution: find the stored entity a candidate refers to.

Search is always scoped to the candidate's own collection, so an office never
resolves to a project of the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

from notegraph.domain.model import EntityKind, Office, entity_from_document

from .contracts import (
    EntityResolution,
    MatchKind,
    NewEntityResolution,
    ResolvedEntityResolution,
)
from .similarity import similarity

if TYPE_CHECKING:
    from notegraph.domain.model import Document, ResolvableEntity
    from notegraph.domain.ports import DocumentStore

log = getLogger(__name__)

DEFAULT_THRESHOLD: Final[float] = 0.7

ORGANIZATION_SUFFIXES: Final[tuple[str, ...]] = (
    "Architects",
    "Architecture",
    "Architect",
    "Associates",
    "LLC",
    "Ltd",
    "Inc",
    "Studio",
    "Design",
)


def name_variations(name: str) -> list[str]:
    """Alternative spellings of an office name, most specific first.

    Strips one trailing organizational suffix, builds initials for multi-word names
    (plus first word + initials of the rest for longer names) and swaps
    Architecture/Architects. The original name is never part of the result.
    """

    stripped = name.strip()
    variations: list[str] = []

    for suffix in ORGANIZATION_SUFFIXES:
        if stripped.endswith(suffix):
            base = stripped[: -len(suffix)].strip().rstrip(",&+-").strip()
            if base:
                variations.append(base)

    words = stripped.split()
    if len(words) > 1:
        variations.append("".join(word[0] for word in words).upper())
        if len(words) > 2:
            rest = "".join(word[0] for word in words[1:]).upper()
            variations.append(f"{words[0]} {rest}")

    if "Architecture" in stripped:
        variations.append(stripped.replace("Architecture", "Architects"))
    if "Architects" in stripped:
        variations.append(stripped.replace("Architects", "Architecture"))

    unique: list[str] = []
    for variation in variations:
        if variation and variation != stripped and variation not in unique:
            unique.append(variation)
    return unique


@dataclass(slots=True)
class IdentityResolver:
    store: DocumentStore
    threshold: float = DEFAULT_THRESHOLD

    def resolve[T: ResolvableEntity](self, candidate: T) -> EntityResolution[T]:
        """Decide whether ``candidate`` matches a stored entity of its own kind.

        Exact name, then the exact official name of an office, then the fuzzy pass on
        the name. Offices that are still unmatched try each name variation last.
        """

        kind = candidate.kind
        name = candidate.display_name.strip()
        if not name:
            return NewEntityResolution(reason="candidate has no name")

        exact = self._exact(kind, name)
        if exact is None and isinstance(candidate, Office):
            official = (candidate.official_name or "").strip()
            if official and official != name:
                log.debug("Retrying exact office lookup with official name %r", official)
                exact = self._exact(kind, official)
        if exact is not None:
            return cast("EntityResolution[T]", exact)

        resolution = self._fuzzy(kind, name)
        if isinstance(resolution, ResolvedEntityResolution):
            return cast("EntityResolution[T]", resolution)

        if isinstance(candidate, Office):
            for variation in name_variations(name):
                log.debug("Retrying office search with name variation %r", variation)
                resolution = self.search(kind, variation)
                if isinstance(resolution, ResolvedEntityResolution):
                    resolution.match_kind = MatchKind.HEURISTIC
                    resolution.reason = f"matched name variation {variation!r}"
                    return cast("EntityResolution[T]", resolution)

        return NewEntityResolution(reason=f"no stored {kind} resembles {name!r}")

    def search(self, kind: EntityKind, name: str) -> EntityResolution[ResolvableEntity]:
        """Exact match on the canonical name field, then the fuzzy pass."""

        exact = self._exact(kind, name)
        if exact is not None:
            return exact
        return self._fuzzy(kind, name)

    def _exact(
        self, kind: EntityKind, name: str
    ) -> ResolvedEntityResolution[ResolvableEntity] | None:
        result = self.store.query(kind.collection, {kind.name_field: name})
        if not result.success:
            log.warning("Exact %s lookup for %r failed: %s", kind, name, result.error)
            return None
        documents = result.data or []
        if len(documents) != 1:
            if documents:
                log.info(
                    "Exact %s lookup for %r is ambiguous (%s hits)", kind, name, len(documents)
                )
            return None
        return ResolvedEntityResolution(
            target=self._entity(kind, documents[0]),
            match_kind=MatchKind.EXACT,
            confidence=1.0,
            matched_name=name,
        )

    def _fuzzy(self, kind: EntityKind, name: str) -> EntityResolution[ResolvableEntity]:
        result = self.store.query(kind.collection)
        if not result.success:
            log.warning("Listing %s for fuzzy match failed: %s", kind.collection, result.error)
            return NewEntityResolution(reason="store unavailable")

        best: tuple[float, Document] | None = None
        for document in result.data or []:
            stored_name = document.get(kind.name_field)
            if not isinstance(stored_name, str):
                continue
            score = similarity(name, stored_name)
            if score <= self.threshold:
                continue
            if best is None or score > best[0]:
                best = (score, document)

        if best is None:
            return NewEntityResolution(reason=f"no {kind} above similarity {self.threshold}")

        score, document = best
        matched = document.get(kind.name_field)
        log.info("Fuzzy matched %s %r to %r (%.2f)", kind, name, matched, score)
        return ResolvedEntityResolution(
            target=self._entity(kind, document),
            match_kind=MatchKind.FUZZY,
            confidence=score,
            matched_name=cast(str, document.get(kind.name_field)),
        )

    @staticmethod
    def _entity(kind: EntityKind, document: Document) -> ResolvableEntity:
        return cast("ResolvableEntity", entity_from_document(kind, document))
