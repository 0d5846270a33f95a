"""Validation, id assignment and persistence of auxiliary records.

Satellite records (clients, technology, financials, ...) are stored as the oracle
returned them, after a required-field check and, when they carry no ``id``, a
readable id built from their own fields.
"""

from __future__ import annotations

import copy
import random
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from notegraph.common.documents import lookup_path
from notegraph.domain.model import SatelliteKind

from .identifiers import letter_code

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from notegraph.domain.model import Document
    from notegraph.domain.ports import DocumentStore

log = getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def _text(record: Mapping[str, Any], path: str) -> str:
    value = lookup_path(record, path)
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return ""


def _present(record: Mapping[str, Any], path: str) -> bool:
    value = lookup_path(record, path)
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, bool):
        return True
    if isinstance(value, int | float):
        return value != 0
    return isinstance(value, dict | list) and bool(value)


@dataclass(frozen=True, slots=True)
class SatelliteRule:
    """Required fields (all of ``required``, at least one of ``any_of``) plus an id."""

    required: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    needs_office: bool = False

    def missing(self, record: Mapping[str, Any]) -> list[str]:
        missing = [path for path in self.required if not _present(record, path)]
        if self.any_of and not any(_present(record, path) for path in self.any_of):
            missing.append(" or ".join(self.any_of))
        return missing


SATELLITE_RULES: Final[dict[SatelliteKind, SatelliteRule]] = {
    SatelliteKind.CLIENTS: SatelliteRule(required=("clientName",)),
    SatelliteKind.TECHNOLOGY: SatelliteRule(
        required=("technologyName", "officeId"), needs_office=True
    ),
    SatelliteKind.FINANCIALS: SatelliteRule(
        required=("amount", "recordType", "officeId"), needs_office=True
    ),
    SatelliteKind.SUPPLY_CHAIN: SatelliteRule(required=("supplierName",)),
    SatelliteKind.LAND_DATA: SatelliteRule(required=("location.city", "location.country")),
    SatelliteKind.CITY_DATA: SatelliteRule(required=("cityId",)),
    SatelliteKind.PROJECT_DATA: SatelliteRule(required=("projectId",)),
    SatelliteKind.COMPANY_STRUCTURE: SatelliteRule(required=("officeId",), needs_office=True),
    SatelliteKind.DIVISION_PERCENTAGES: SatelliteRule(
        required=("officeId", "divisionType"), needs_office=True
    ),
    SatelliteKind.NEWS_ARTICLES: SatelliteRule(any_of=("title", "url")),
    SatelliteKind.POLITICAL_CONTEXT: SatelliteRule(required=("jurisdiction.country",)),
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class SatelliteIdentifiers:
    rng: random.Random = field(default_factory=random.Random)
    clock: Callable[[], datetime] = _utcnow

    def id_for(self, kind: SatelliteKind, record: Mapping[str, Any]) -> str:
        match kind:
            case SatelliteKind.CLIENTS:
                return f"CLI-{letter_code(_text(record, 'clientName'), 4)}-{self._digits(4)}"
            case SatelliteKind.TECHNOLOGY:
                tech = letter_code(_text(record, "technologyName"), 3)
                return f"{self._office4(record)}-TECH-{tech}-{self._digits(3)}"
            case SatelliteKind.FINANCIALS:
                record_type = _text(record, "recordType")[:3].upper()
                return f"{self._office4(record)}-FIN-{record_type}-{self._stamp(6)}"
            case SatelliteKind.SUPPLY_CHAIN:
                return f"SUP-{letter_code(_text(record, 'supplierName'), 4)}-{self._digits(4)}"
            case SatelliteKind.LAND_DATA:
                country = _text(record, "location.country")[:2].upper()
                city = letter_code(_text(record, "location.city"), 3)
                return f"LAND-{country}{city}-{self._digits(4)}"
            case SatelliteKind.CITY_DATA:
                return f"CITY-{_text(record, 'cityId')}"
            case SatelliteKind.PROJECT_DATA:
                return f"PROJ-{_text(record, 'projectId')}"
            case SatelliteKind.COMPANY_STRUCTURE:
                return f"STRUCT-{_text(record, 'officeId')}"
            case SatelliteKind.DIVISION_PERCENTAGES:
                division = _text(record, "divisionType")[:3].upper()
                year = _text(record, "period.year") or str(self.clock().year)
                return f"{self._office4(record)}-DIV-{division}-{year}"
            case SatelliteKind.NEWS_ARTICLES:
                title = (_text(record, "title") or "article")[:6].upper()
                code = _NON_ALNUM.sub("X", title).ljust(6, "X")
                return f"NEWS-{code}-{self._stamp(8)}"
            case SatelliteKind.POLITICAL_CONTEXT:
                country = _text(record, "jurisdiction.country")[:2].upper()
                level = _text(record, "jurisdiction.level")[:1].upper() or "N"
                state = _text(record, "jurisdiction.state")[:2].upper()
                city = _text(record, "jurisdiction.cityId")[:3].upper()
                return f"POL-{country}{level}{state}{city}-{self._digits(4)}"

    @staticmethod
    def _office4(record: Mapping[str, Any]) -> str:
        return _text(record, "officeId")[:4]

    def _digits(self, width: int) -> str:
        return str(self.rng.randrange(10**width)).zfill(width)

    def _stamp(self, width: int) -> str:
        return str(int(self.clock().timestamp() * 1000))[-width:]


@dataclass(slots=True, kw_only=True)
class SatelliteReport:
    stored: dict[SatelliteKind, list[Document]] = field(
        default_factory=dict[SatelliteKind, list["Document"]]
    )
    skipped: int = 0
    failed: int = 0

    @property
    def total_stored(self) -> int:
        return sum(len(records) for records in self.stored.values())


@dataclass(slots=True)
class SatellitePersister:
    store: DocumentStore
    identifiers: SatelliteIdentifiers = field(default_factory=SatelliteIdentifiers)

    def persist(
        self,
        satellites: Mapping[SatelliteKind, Sequence[Mapping[str, Any]]],
        *,
        office_ids: Sequence[str] = (),
    ) -> SatelliteReport:
        """Store every valid record, one collection at a time.

        ``office_ids`` are the offices resolved in the same note; with exactly one,
        records lacking ``officeId`` inherit it.
        """

        inherited = office_ids[0] if len(office_ids) == 1 else None
        report = SatelliteReport()
        for kind, records in satellites.items():
            rule = SATELLITE_RULES[kind]
            for raw in records:
                record = self._prepare(rule, raw, inherited)
                missing = rule.missing(record)
                if missing:
                    log.warning("Skipping %s record: missing %s", kind, ", ".join(missing))
                    report.skipped += 1
                    continue
                if not _text(record, "id"):
                    record["id"] = self.identifiers.id_for(kind, record)
                result = self.store.create(kind.collection, record)
                if not result.success:
                    log.warning(
                        "Failed to store %s record %s: %s", kind, record["id"], result.error
                    )
                    report.failed += 1
                    continue
                log.info("Stored %s record %s", kind, record["id"])
                report.stored.setdefault(kind, []).append(result.data or record)
        return report

    @staticmethod
    def _prepare(
        rule: SatelliteRule, raw: Mapping[str, Any], inherited: str | None
    ) -> dict[str, Any]:
        record = copy.deepcopy(dict(raw))
        if rule.needs_office and inherited and not _text(record, "officeId"):
            record["officeId"] = inherited
        return record
