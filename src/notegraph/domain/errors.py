"""Domain-level error types."""

from __future__ import annotations


class NotegraphError(RuntimeError):
    """Base class for pipeline failures."""


class OracleError(NotegraphError):
    """An external oracle could not produce an answer."""


class ExtractionError(OracleError):
    """The extraction oracle was unreachable or returned an unparseable answer.

    Fatal for the note being processed: no entities are created.
    """


class TranslationError(OracleError):
    """Language detection or translation failed."""


class WebSearchError(OracleError):
    """The web-search oracle failed."""


class StoreError(NotegraphError):
    """The document store rejected or failed an operation."""
