"""Translate the model's JSON answer into a domain ``Analysis``."""

from __future__ import annotations

import copy
import json
import re
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final, cast

from pydantic import ValidationError

from notegraph.domain.errors import ExtractionError
from notegraph.domain.model import (
    Category,
    Employee,
    EmployeeDistribution,
    EntityKind,
    JurisdictionLevel,
    Location,
    OfficeStatus,
    ProjectStatus,
    SatelliteKind,
    SizeCategory,
    entity_from_document,
)
from notegraph.domain.ports import Analysis, LocationHint

from .schema import AnalysisPayload, LocationAnswer

if TYPE_CHECKING:
    from enum import StrEnum

    from notegraph.domain.model import ResolvableEntity

    from .schema import EmployeePayload, EmployeeDistributionPayload, Extraction, RawRecord

log = getLogger(__name__)

_KIND_BY_CATEGORY: Final[dict[Category, EntityKind]] = {
    Category.OFFICE: EntityKind.OFFICE,
    Category.PROJECT: EntityKind.PROJECT,
    Category.REGULATION: EntityKind.REGULATION,
}

# fields the store owns; the model never gets to set them
_STORE_FIELDS: Final[tuple[str, ...]] = ("createdAt", "updatedAt", "version")

_ENUM_FIELDS: Final[dict[EntityKind, tuple[tuple[str, type[StrEnum]], ...]]] = {
    EntityKind.OFFICE: (("status", OfficeStatus), ("size.sizeCategory", SizeCategory)),
    EntityKind.PROJECT: (("status", ProjectStatus),),
    EntityKind.REGULATION: (("jurisdiction.level", JurisdictionLevel),),
}

COUNTRY_LINE: Final[re.Pattern[str]] = re.compile(r"country[:\s]*(.+?)(?:\n|$)", re.IGNORECASE)
CITY_LINE: Final[re.Pattern[str]] = re.compile(r"city[:\s]*(.+?)(?:\n|$)", re.IGNORECASE)


def extract_json_object(text: str) -> dict[str, Any]:
    """Parse the JSON object between the first ``{`` and the last ``}`` of ``text``."""

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("No JSON object found in the model answer")
    parsed = json.loads(text[start : end + 1])
    if not isinstance(parsed, dict):
        raise ValueError("The model answer is not a JSON object")
    return cast(dict[str, Any], parsed)


def parse_analysis(text: str) -> Analysis:
    try:
        payload = AnalysisPayload.model_validate(extract_json_object(text))
    except (ValueError, ValidationError) as exc:
        raise ExtractionError(f"Failed to parse the analysis answer: {exc}") from exc
    return analysis_from_payload(payload)


def analysis_from_payload(payload: AnalysisPayload) -> Analysis:
    categorization = payload.categorization
    category = _category(categorization.category)
    extraction = payload.extraction

    candidates: list[ResolvableEntity] = []
    kind = _KIND_BY_CATEGORY.get(category)
    if kind is not None:
        for record in extraction.records():
            candidates.append(_candidate(kind, record))

    return Analysis(
        category=category,
        confidence=categorization.confidence,
        reasoning=categorization.reasoning,
        candidates=candidates,
        missing_fields=list(extraction.missing_fields),
        extraction_confidence=extraction.confidence,
        extraction_reasoning=extraction.reasoning,
        employees=[_employee(item) for item in extraction.employees if item.name.strip()],
        employee_distribution=_distribution(extraction.employee_distribution),
        satellites=_satellites(extraction),
    )


def _category(value: str) -> Category:
    try:
        return Category(value.strip().lower())
    except ValueError:
        log.warning("Unknown category %r from the model; treating as unknown", value)
        return Category.UNKNOWN


def _candidate(kind: EntityKind, record: RawRecord) -> ResolvableEntity:
    document = copy.deepcopy(record)
    for key in _STORE_FIELDS:
        document.pop(key, None)
    if kind is EntityKind.OFFICE:
        size = document.get("size")
        if isinstance(size, dict) and cast(dict[str, Any], size).pop("employeeCount", None):
            log.debug("Dropped extracted employeeCount; headcount comes from the roster")
    _log_unknown_enums(kind, document)
    return cast("ResolvableEntity", entity_from_document(kind, document))


def _log_unknown_enums(kind: EntityKind, document: RawRecord) -> None:
    for path, enum_type in _ENUM_FIELDS.get(kind, ()):
        value: object = document
        for part in path.split("."):
            value = cast(dict[str, Any], value).get(part) if isinstance(value, dict) else None
        if value is None:
            continue
        try:
            enum_type(str(value).strip().lower())
        except ValueError:
            log.warning("Dropping unknown %s %s value %r", kind, path, value)


def _employee(payload: EmployeePayload) -> Employee:
    location = None
    if payload.location is not None and (payload.location.city or payload.location.country):
        location = Location(city=payload.location.city, country=payload.location.country)
    return Employee(
        name=payload.name.strip(),
        role=payload.role or None,
        description=payload.description or None,
        expertise=[tag for tag in payload.expertise if tag.strip()],
        location=location,
    )


def _distribution(payload: EmployeeDistributionPayload | None) -> EmployeeDistribution | None:
    if payload is None:
        return None
    return EmployeeDistribution(
        architects=payload.architects,
        engineers=payload.engineers,
        designers=payload.designers,
        administrative=payload.administrative,
    )


def _satellites(extraction: Extraction) -> dict[SatelliteKind, list[dict[str, Any]]]:
    lists: dict[SatelliteKind, list[RawRecord]] = {
        SatelliteKind.CLIENTS: extraction.clients,
        SatelliteKind.TECHNOLOGY: extraction.technology,
        SatelliteKind.FINANCIALS: extraction.financials,
        SatelliteKind.SUPPLY_CHAIN: extraction.supply_chain,
        SatelliteKind.LAND_DATA: extraction.land_data,
        SatelliteKind.CITY_DATA: extraction.city_data,
        SatelliteKind.PROJECT_DATA: extraction.project_data,
        SatelliteKind.COMPANY_STRUCTURE: extraction.company_structure,
        SatelliteKind.DIVISION_PERCENTAGES: extraction.division_percentages,
        SatelliteKind.NEWS_ARTICLES: extraction.news_articles,
        SatelliteKind.POLITICAL_CONTEXT: extraction.political_context,
    }
    return {kind: list(records) for kind, records in lists.items() if records}


# --- web search ----------------------------------------------------------------------


def parse_location_answer(text: str) -> LocationHint | None:
    """JSON answer first, then ``country: ...`` / ``city: ...`` lines."""

    try:
        answer = LocationAnswer.model_validate(extract_json_object(text))
    except (ValueError, ValidationError):
        log.debug("No JSON in the web search answer; falling back to line parsing")
    else:
        return _hint(answer.country, answer.city, answer.website, answer.description)

    country = COUNTRY_LINE.search(text)
    city = CITY_LINE.search(text)
    return _hint(
        country.group(1) if country else None,
        city.group(1) if city else None,
        None,
        None,
    )


def _hint(
    country: str | None, city: str | None, website: str | None, description: str | None
) -> LocationHint | None:
    hint = LocationHint(
        country=_clean(country),
        city=_clean(city),
        website=_clean(website),
        description=_clean(description),
    )
    return hint if hint.has_location else None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip().strip('",').strip()
    if not cleaned or cleaned.lower() in {"null", "none", "unknown"}:
        return None
    return cleaned
