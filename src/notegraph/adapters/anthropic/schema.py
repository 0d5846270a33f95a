"""Anthropic Messages API payloads and the JSON answers requested from the model."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)

type RawRecord = dict[str, Any]


class AnthropicBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "Anthropic %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


# Messages API ---------------------------------------------------------------


class ContentBlock(AnthropicBaseModel):
    """One content block; only ``text`` blocks carry the answer."""

    type: str
    text: str | None = None


class Usage(AnthropicBaseModel):
    input_tokens: int = 0
    output_tokens: int = 0


class MessageResponse(AnthropicBaseModel):
    id: str
    type: str = "message"
    role: str = "assistant"
    model: str | None = None
    content: list[ContentBlock] = Field(default_factory=list[ContentBlock])
    stop_reason: str | None = None
    usage: Usage | None = None

    @property
    def text(self) -> str:
        """Concatenated text of all text blocks."""

        return "".join(block.text or "" for block in self.content if block.type == "text")


class ErrorDetail(AnthropicBaseModel):
    type: str
    message: str


class ErrorResponse(AnthropicBaseModel):
    type: str = "error"
    error: ErrorDetail


# Analysis answer ------------------------------------------------------------


class Categorization(AnthropicBaseModel):
    category: str = "unknown"
    confidence: float = 0.0
    reasoning: str = ""


class LocationPayload(AnthropicBaseModel):
    city: str | None = None
    country: str | None = None


class EmployeePayload(AnthropicBaseModel):
    name: str = ""
    role: str | None = None
    description: str | None = None
    expertise: list[str] = Field(default_factory=list[str])
    location: LocationPayload | None = None


class EmployeeDistributionPayload(AnthropicBaseModel):
    architects: int = 0
    engineers: int = 0
    designers: int = 0
    administrative: int = 0


class Extraction(AnthropicBaseModel):
    extracted_data: RawRecord | list[RawRecord] | None = Field(
        default=None, alias="extractedData"
    )
    confidence: float = 0.0
    missing_fields: list[str] = Field(default_factory=list[str], alias="missingFields")
    reasoning: str = ""
    employees: list[EmployeePayload] = Field(default_factory=list[EmployeePayload])
    employee_distribution: EmployeeDistributionPayload | None = Field(
        default=None, alias="employeeDistribution"
    )
    clients: list[RawRecord] = Field(default_factory=list[RawRecord])
    technology: list[RawRecord] = Field(default_factory=list[RawRecord])
    financials: list[RawRecord] = Field(default_factory=list[RawRecord])
    supply_chain: list[RawRecord] = Field(default_factory=list[RawRecord], alias="supplyChain")
    land_data: list[RawRecord] = Field(default_factory=list[RawRecord], alias="landData")
    city_data: list[RawRecord] = Field(default_factory=list[RawRecord], alias="cityData")
    project_data: list[RawRecord] = Field(default_factory=list[RawRecord], alias="projectData")
    company_structure: list[RawRecord] = Field(
        default_factory=list[RawRecord], alias="companyStructure"
    )
    division_percentages: list[RawRecord] = Field(
        default_factory=list[RawRecord], alias="divisionPercentages"
    )
    news_articles: list[RawRecord] = Field(default_factory=list[RawRecord], alias="newsArticles")
    political_context: list[RawRecord] = Field(
        default_factory=list[RawRecord], alias="politicalContext"
    )

    @field_validator(
        "missing_fields",
        "employees",
        "clients",
        "technology",
        "financials",
        "supply_chain",
        "land_data",
        "city_data",
        "project_data",
        "company_structure",
        "division_percentages",
        "news_articles",
        "political_context",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, value: object) -> object:
        return [] if value is None else value

    def records(self) -> list[RawRecord]:
        if self.extracted_data is None:
            return []
        if isinstance(self.extracted_data, list):
            return self.extracted_data
        return [self.extracted_data]


class AnalysisPayload(AnthropicBaseModel):
    categorization: Categorization = Field(default_factory=Categorization)
    extraction: Extraction = Field(default_factory=Extraction)
    overall_confidence: float | None = Field(default=None, alias="overallConfidence")


class LocationAnswer(AnthropicBaseModel):
    country: str | None = None
    city: str | None = None
    website: str | None = None
    description: str | None = None
