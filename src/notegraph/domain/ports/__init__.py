"""Ports consumed by the note pipeline."""

from __future__ import annotations

from .oracles import (
    Analysis,
    ExtractionOracle,
    LocationHint,
    TranslationOracle,
    WebSearchOracle,
)
from .store import DocumentStore, StoreResult

__all__ = [
    "Analysis",
    "DocumentStore",
    "ExtractionOracle",
    "LocationHint",
    "StoreResult",
    "TranslationOracle",
    "WebSearchOracle",
]
