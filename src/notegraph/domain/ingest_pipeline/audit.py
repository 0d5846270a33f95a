"""Audit trail of submitted notes in the ``userInputs`` collection.

Audit writes are best-effort: failures are logged and never stop the note.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

from notegraph.domain.model import Collection

if TYPE_CHECKING:
    from collections.abc import Callable

    from notegraph.domain.ports import DocumentStore

    from .context import NoteContext, TranslationResult
    from .summary import IngestResult

log = getLogger(__name__)

PREVIEW_LENGTH: Final[int] = 1000
PENDING: Final[str] = "pending"


def text_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def preview(text: str) -> str:
    return text[:PREVIEW_LENGTH] + "..." if len(text) > PREVIEW_LENGTH else text


def _translation_document(translation: TranslationResult | None) -> dict[str, Any] | None:
    if translation is None:
        return None
    return {
        "wasTranslated": translation.was_translated,
        "originalLanguage": translation.detected_language,
        "translatedText": translation.translated_text,
        "error": translation.error,
    }


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class AuditRecorder:
    store: DocumentStore
    clock: Callable[[], datetime] = _utcnow

    def record(self, text: str, translation: TranslationResult | None) -> str | None:
        """Store the pending audit document and return its id."""

        document: dict[str, Any] = {
            "text": preview(text),
            "fullText": text,
            "textHash": text_hash(text),
            "timestamp": self.clock().isoformat(),
            "processed": False,
            "length": len(text),
            "wordCount": len(text.split(" ")),
            "processingResult": PENDING,
            "translation": _translation_document(translation),
        }
        result = self.store.create(Collection.USER_INPUTS, document)
        if not result.success or result.data is None:
            log.warning("Failed to save user input: %s", result.error)
            return None
        log.info("User input saved")
        return result.data.get("id")

    def complete(self, audit_id: str, result: IngestResult) -> None:
        created = result.entities_created
        update = self.store.update(
            Collection.USER_INPUTS,
            audit_id,
            {
                "processed": True,
                "entitiesCreated": {
                    "offices": len(created.offices),
                    "projects": len(created.projects),
                    "regulations": len(created.regulations),
                },
                "processingResult": result.summary,
            },
        )
        if not update.success:
            log.warning("Failed to update user input %s: %s", audit_id, update.error)


@dataclass(slots=True)
class AuditPhase:
    recorder: AuditRecorder
    name: str = "audit"

    def run(self, context: NoteContext) -> None:
        context.audit_id = self.recorder.record(context.raw_text, context.translation)
