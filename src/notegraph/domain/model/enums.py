"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    OFFICE = "office"
    PROJECT = "project"
    REGULATION = "regulation"
    WORKFORCE = "workforce"

    @property
    def collection(self) -> Collection:
        return _COLLECTION_BY_KIND[self]

    @property
    def name_field(self) -> str:
        """Document key holding the canonical display name."""

        return "projectName" if self is EntityKind.PROJECT else "name"


class Collection(StrEnum):
    OFFICES = "offices"
    PROJECTS = "projects"
    REGULATIONS = "regulations"
    WORKFORCE = "workforce"
    RELATIONSHIPS = "relationships"
    USER_INPUTS = "userInputs"

    CLIENTS = "clients"
    TECHNOLOGY = "technology"
    FINANCIALS = "financials"
    SUPPLY_CHAIN = "supplyChain"
    LAND_DATA = "landData"
    CITY_DATA = "cityData"
    PROJECT_DATA = "projectData"
    COMPANY_STRUCTURE = "companyStructure"
    DIVISION_PERCENTAGES = "divisionPercentages"
    NEWS_ARTICLES = "newsArticles"
    POLITICAL_CONTEXT = "politicalContext"


_COLLECTION_BY_KIND = {
    EntityKind.OFFICE: Collection.OFFICES,
    EntityKind.PROJECT: Collection.PROJECTS,
    EntityKind.REGULATION: Collection.REGULATIONS,
    EntityKind.WORKFORCE: Collection.WORKFORCE,
}


class Category(StrEnum):
    """Primary category assigned to a note by the extraction oracle."""

    OFFICE = "office"
    PROJECT = "project"
    REGULATION = "regulation"
    UNKNOWN = "unknown"


class OfficeStatus(StrEnum):
    ACTIVE = "active"
    ACQUIRED = "acquired"
    DISSOLVED = "dissolved"


class SizeCategory(StrEnum):
    BOUTIQUE = "boutique"
    MEDIUM = "medium"
    LARGE = "large"
    GLOBAL = "global"

    @classmethod
    def from_headcount(cls, headcount: int) -> SizeCategory:
        if headcount < 10:
            return cls.BOUTIQUE
        if headcount < 50:
            return cls.MEDIUM
        if headcount < 200:
            return cls.LARGE
        return cls.GLOBAL


class ProjectStatus(StrEnum):
    CONCEPT = "concept"
    PLANNING = "planning"
    CONSTRUCTION = "construction"
    COMPLETED = "completed"


class JurisdictionLevel(StrEnum):
    CITY = "city"
    STATE = "state"
    COUNTRY = "country"


class RelationshipType(StrEnum):
    OFFICE_PROJECT = "office-project"
    OFFICE_REGULATION = "office-regulation"
    PROJECT_REGULATION = "project-regulation"


class SatelliteKind(StrEnum):
    """Auxiliary record families extracted next to the primary category."""

    CLIENTS = "clients"
    TECHNOLOGY = "technology"
    FINANCIALS = "financials"
    SUPPLY_CHAIN = "supplyChain"
    LAND_DATA = "landData"
    CITY_DATA = "cityData"
    PROJECT_DATA = "projectData"
    COMPANY_STRUCTURE = "companyStructure"
    DIVISION_PERCENTAGES = "divisionPercentages"
    NEWS_ARTICLES = "newsArticles"
    POLITICAL_CONTEXT = "politicalContext"

    @property
    def collection(self) -> Collection:
        return Collection(self.value)
