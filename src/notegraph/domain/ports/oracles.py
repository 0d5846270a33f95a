"""Ports for the external oracles consulted by the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from notegraph.domain.model import Category

if TYPE_CHECKING:
    from notegraph.domain.model import (
        Employee,
        EmployeeDistribution,
        ResolvableEntity,
        SatelliteKind,
    )


@dataclass(slots=True, kw_only=True)
class Analysis:
    """Categorization plus extracted candidates for one note."""

    category: Category
    confidence: float = 0.0
    reasoning: str = ""
    candidates: list[ResolvableEntity] = field(default_factory=list["ResolvableEntity"])
    missing_fields: list[str] = field(default_factory=list[str])
    extraction_confidence: float = 0.0
    extraction_reasoning: str = ""
    employees: list[Employee] = field(default_factory=list["Employee"])
    employee_distribution: EmployeeDistribution | None = None
    satellites: dict[SatelliteKind, list[dict[str, Any]]] = field(
        default_factory=dict["SatelliteKind", list[dict[str, Any]]]
    )


@dataclass(slots=True, kw_only=True)
class LocationHint:
    country: str | None = None
    city: str | None = None
    website: str | None = None
    description: str | None = None

    @property
    def has_location(self) -> bool:
        return bool(self.country or self.city)


@runtime_checkable
class TranslationOracle(Protocol):
    def detect_english(self, text: str) -> bool: ...

    def translate(self, text: str) -> str: ...


@runtime_checkable
class ExtractionOracle(Protocol):
    def analyze_text(self, text: str) -> Analysis:
        """Return the analysis or raise ``ExtractionError``."""
        ...


@runtime_checkable
class WebSearchOracle(Protocol):
    def search_office_location(self, name: str) -> LocationHint | None: ...
