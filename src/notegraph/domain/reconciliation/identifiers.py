"""Readable identifiers for newly created entities.

Office ids look like ``UKLD042``: two-letter country code, two-letter city code and a
random three digit suffix. Collisions are checked against the store and retried; when
every attempt collides the suffix widens to six digits.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

from notegraph.domain.model import Collection

if TYPE_CHECKING:
    from collections.abc import Callable

    from notegraph.domain.model import Location
    from notegraph.domain.ports import DocumentStore

log = getLogger(__name__)

SUFFIX_DIGITS: Final[int] = 3
WIDE_SUFFIX_DIGITS: Final[int] = 6
NO_LOCATION_MARKER: Final[str] = "NO_LOCATION_DATA"
UNKNOWN_CODE: Final[str] = "XX"

COUNTRY_CODES: Final[dict[str, str]] = {
    "united states": "US",
    "usa": "US",
    "us": "US",
    "united kingdom": "UK",
    "uk": "UK",
    "canada": "CA",
    "germany": "DE",
    "france": "FR",
    "japan": "JP",
    "china": "CN",
    "australia": "AU",
    "netherlands": "NL",
    "switzerland": "CH",
    "italy": "IT",
    "spain": "SP",
}

CITY_CODES: Final[dict[str, str]] = {
    "san francisco": "SF",
    "new york": "NY",
    "los angeles": "LA",
    "chicago": "CH",
    "london": "LD",
    "paris": "PR",
    "berlin": "BL",
    "tokyo": "TK",
    "sydney": "SY",
    "toronto": "TO",
    "vancouver": "VC",
    "amsterdam": "AM",
    "zurich": "ZH",
    "milan": "ML",
    "madrid": "MD",
}

_NON_LETTER = re.compile(r"[^A-Z]")


def letter_code(value: str, length: int = 2) -> str:
    """Leading letters uppercased, non-letters as ``X``, right-padded with ``X``."""

    prefix = _NON_LETTER.sub("X", value.strip()[:length].upper())
    return prefix.ljust(length, "X")


def country_code(country: str) -> str:
    return COUNTRY_CODES.get(country.strip().lower()) or letter_code(country)


def city_code(city: str) -> str:
    return CITY_CODES.get(city.strip().lower()) or letter_code(city)


def needs_office_id(office_id: str | None) -> bool:
    """Oracle-supplied ids are kept unless missing or carrying a placeholder code."""

    if not office_id or not office_id.strip():
        return True
    return UNKNOWN_CODE in office_id or NO_LOCATION_MARKER in office_id


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class IdentifierSynthesizer:
    store: DocumentStore | None = None
    rng: random.Random = field(default_factory=random.Random)
    attempts: int = 10
    clock: Callable[[], datetime] = _utcnow

    def office_id(self, name: str, headquarters: Location | None) -> str:
        if headquarters is not None and headquarters.city and headquarters.country:
            prefix = country_code(headquarters.country) + city_code(headquarters.city)
        else:
            prefix = letter_code(name) + UNKNOWN_CODE
        return self._unique(Collection.OFFICES, prefix)

    def fallback_office_id(self, name: str) -> str:
        """Name-only id used for local entities; never checked against the store."""

        return letter_code(name) + UNKNOWN_CODE + self._digits(SUFFIX_DIGITS)

    def project_id(self) -> str:
        return self._timestamped("project")

    def regulation_id(self) -> str:
        return self._timestamped("regulation")

    def _timestamped(self, prefix: str) -> str:
        millis = int(self.clock().timestamp() * 1000)
        return f"{prefix}-{millis}-{self.rng.randrange(16**6):06x}"

    def _digits(self, width: int) -> str:
        return str(self.rng.randrange(10**width)).zfill(width)

    def _unique(self, collection: Collection, prefix: str) -> str:
        for _ in range(self.attempts):
            candidate = prefix + self._digits(SUFFIX_DIGITS)
            if not self._taken(collection, candidate):
                return candidate
            log.debug("Identifier %s already taken in %s", candidate, collection)
        log.warning(
            "No free %s-digit id for prefix %s after %s attempts; widening suffix",
            SUFFIX_DIGITS,
            prefix,
            self.attempts,
        )
        for _ in range(self.attempts):
            candidate = prefix + self._digits(WIDE_SUFFIX_DIGITS)
            if not self._taken(collection, candidate):
                return candidate
        # the store's primary key still rejects a duplicate on create
        return prefix + self._digits(WIDE_SUFFIX_DIGITS)

    def _taken(self, collection: Collection, candidate: str) -> bool:
        if self.store is None:
            return False
        result = self.store.query(collection, {"id": candidate})
        if not result.success:
            log.warning("Could not check id %s for collisions: %s", candidate, result.error)
            return False
        return bool(result.data)
