from __future__ import annotations

import json

import pytest

from notegraph.adapters.anthropic import parse_analysis, parse_location_answer
from notegraph.domain.errors import ExtractionError
from notegraph.domain.model import (
    Category,
    Location,
    Office,
    OfficeSize,
    Project,
    ProjectStatus,
    SatelliteKind,
    SizeCategory,
)
from notegraph.domain.ports import LocationHint


def test_office_answer_becomes_a_candidate(analysis_answer: str) -> None:
    analysis = parse_analysis(analysis_answer)

    assert analysis.category is Category.OFFICE
    assert analysis.confidence == 0.94
    assert analysis.missing_fields == ["annualRevenue"]
    (office,) = analysis.candidates
    assert isinstance(office, Office)
    assert office.id == "UKLD001"
    assert office.headquarters == Location(city="London", country="United Kingdom")
    assert office.other_offices == [Location(city="Tokyo", country="Japan")]
    assert office.size == OfficeSize(size_category=SizeCategory.GLOBAL)
    assert office.created_at is None


def test_employees_and_satellites_are_carried(analysis_answer: str) -> None:
    analysis = parse_analysis(analysis_answer)

    (employee,) = analysis.employees
    assert employee.name == "Maria Lopez"
    assert employee.expertise == ["BIM", "facades"]
    assert employee.location == Location(city="London", country="United Kingdom")
    assert analysis.employee_distribution is not None
    assert analysis.employee_distribution.architects == 12
    assert set(analysis.satellites) == {SatelliteKind.CLIENTS, SatelliteKind.NEWS_ARTICLES}


def test_list_of_records_yields_several_candidates() -> None:
    answer = json.dumps(
        {
            "categorization": {"category": "PROJECT", "confidence": 0.8},
            "extraction": {
                "extractedData": [
                    {"projectName": "Harbour Tower", "status": "construction"},
                    {"projectName": "Museum", "status": "on hold"},
                ]
            },
        }
    )

    analysis = parse_analysis(answer)

    assert analysis.category is Category.PROJECT
    assert [type(candidate) for candidate in analysis.candidates] == [Project, Project]
    first, second = analysis.candidates
    assert isinstance(first, Project)
    assert isinstance(second, Project)
    assert first.status is ProjectStatus.CONSTRUCTION
    assert second.status is None


def test_unknown_category_has_no_candidates() -> None:
    answer = json.dumps(
        {
            "categorization": {"category": "recipe"},
            "extraction": {"extractedData": {"name": "Pancakes"}},
        }
    )

    analysis = parse_analysis(answer)

    assert analysis.category is Category.UNKNOWN
    assert analysis.candidates == []


@pytest.mark.parametrize(
    "answer",
    ["I could not analyze this note.", '{"categorization": ', '{"categorization": []}'],
)
def test_unparseable_answers_raise(answer: str) -> None:
    with pytest.raises(ExtractionError):
        parse_analysis(answer)


def test_location_answer_from_json() -> None:
    hint = parse_location_answer(
        'Found it: {"country": "Japan", "city": "Tokyo", "website": null, "description": ""}'
    )

    assert hint == LocationHint(country="Japan", city="Tokyo")


def test_location_answer_from_lines() -> None:
    hint = parse_location_answer("Headquarters\nCountry: Denmark\nCity: Copenhagen\n")

    assert hint == LocationHint(country="Denmark", city="Copenhagen")


def test_location_answer_without_location_is_none() -> None:
    assert parse_location_answer('{"country": "null", "city": "Unknown"}') is None
    assert parse_location_answer("No results.") is None
