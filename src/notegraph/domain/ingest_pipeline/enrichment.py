"""Enrichment phase: back-fill missing office headquarters through web search."""

from __future__ import annotations

import re
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from notegraph.domain.errors import OracleError
from notegraph.domain.model import Location, Office

if TYPE_CHECKING:
    from notegraph.domain.ports import LocationHint, WebSearchOracle
    from notegraph.domain.reconciliation import IdentifierSynthesizer

    from .context import NoteContext

log = getLogger(__name__)

LOCATION_INDICATORS: Final[tuple[str, ...]] = (
    "based in",
    "located in",
    "headquarters in",
    "office in",
    "studio in",
    "from",
    "in",
    "at",
    "barcelona",
    "madrid",
    "london",
    "paris",
    "berlin",
    "new york",
    "san francisco",
    "los angeles",
    "chicago",
    "toronto",
    "spain",
    "france",
    "germany",
    "united kingdom",
    "united states",
    "canada",
)

_INDICATOR_PATTERNS: Final[tuple[tuple[str, re.Pattern[str]], ...]] = tuple(
    (indicator, re.compile(rf"\b{re.escape(indicator)}\b")) for indicator in LOCATION_INDICATORS
)


def location_in_text(name: str, text: str, *, window: int = 200) -> bool:
    """True when a location indicator appears within ``window`` chars of ``name``.

    Only the first mention of the name is considered; an absent name means no.
    """

    haystack = text.lower()
    needle = name.strip().lower()
    if not needle:
        return False
    index = haystack.find(needle)
    if index == -1:
        return False
    context = haystack[max(0, index - window) : index + len(needle) + window]
    for indicator, pattern in _INDICATOR_PATTERNS:
        if pattern.search(context):
            log.debug("Found location indicator %r near %r", indicator, name)
            return True
    return False


def apply_location_hint(office: Office, hint: LocationHint) -> bool:
    """Fill the headquarters from ``hint`` keeping present values; True if anything changed."""

    current = office.headquarters or Location()
    city = current.city or hint.city
    country = current.country or hint.country
    if city == current.city and country == current.country:
        return False
    office.headquarters = Location(city=city, country=country)
    return True


@dataclass(slots=True)
class EnrichmentPhase:
    oracle: WebSearchOracle
    identifiers: IdentifierSynthesizer
    window: int = 200
    name: str = "enrichment"

    def run(self, context: NoteContext) -> None:
        if not context.web_search:
            log.info("Web search disabled for this note; skipping enrichment")
            return

        analysis = context.require_analysis()
        for candidate in analysis.candidates:
            if not isinstance(candidate, Office) or not candidate.name.strip():
                continue
            headquarters = candidate.headquarters
            if headquarters is not None and headquarters.city and headquarters.country:
                continue
            if location_in_text(candidate.name, context.text, window=self.window):
                log.info(
                    "Location for %r is mentioned in the note; skipping web search", candidate.name
                )
                continue
            self._enrich(candidate, context)

    def _enrich(self, office: Office, context: NoteContext) -> None:
        log.info("Searching the web for the location of %r", office.name)
        context.web_search_performed = True
        try:
            hint = self.oracle.search_office_location(office.name)
        except OracleError as exc:
            log.warning("Web search for %r failed: %s", office.name, exc)
            return
        if hint is None or not hint.has_location:
            log.info("Web search found no location for %r", office.name)
            return
        if not apply_location_hint(office, hint):
            return

        headquarters = office.headquarters
        if headquarters is not None and headquarters.city and headquarters.country:
            office.id = self.identifiers.office_id(office.name, headquarters)
        log.info(
            "Enriched %r with headquarters %s, %s (id %s)",
            office.name,
            headquarters.city if headquarters else None,
            headquarters.country if headquarters else None,
            office.id,
        )
