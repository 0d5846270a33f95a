"""Language normalization phase: make sure downstream phases read English."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from notegraph.domain.errors import OracleError

from .context import TranslationResult

if TYPE_CHECKING:
    from notegraph.domain.ports import TranslationOracle

    from .context import NoteContext

log = getLogger(__name__)

ENGLISH = "English"
NON_ENGLISH = "Non-English"


@dataclass(slots=True)
class LanguageNormalizer:
    """Detect English and translate otherwise.

    Detection failures count as English and translation failures fall back to the
    original text; neither stops the note.
    """

    oracle: TranslationOracle

    def normalize(self, text: str) -> TranslationResult:
        if not text.strip():
            return TranslationResult(
                success=True, original_text=text, translated_text=text, detected_language=ENGLISH
            )

        try:
            is_english = self.oracle.detect_english(text)
        except OracleError as exc:
            log.warning("Language detection failed, assuming English: %s", exc)
            is_english = True

        if is_english:
            return TranslationResult(
                success=True, original_text=text, translated_text=text, detected_language=ENGLISH
            )

        log.info("Translating note to English")
        try:
            translated = self.oracle.translate(text)
        except OracleError as exc:
            log.warning("Translation failed, continuing with the original text: %s", exc)
            return TranslationResult(
                success=False, original_text=text, translated_text=text, error=str(exc)
            )
        return TranslationResult(
            success=True,
            original_text=text,
            translated_text=translated.strip() or text,
            detected_language=NON_ENGLISH,
        )


@dataclass(slots=True)
class NormalizationPhase:
    normalizer: LanguageNormalizer
    name: str = "normalization"

    def run(self, context: NoteContext) -> None:
        result = self.normalizer.normalize(context.raw_text)
        context.translation = result
        context.text = result.translated_text
