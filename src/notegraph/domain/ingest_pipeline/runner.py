"""Entry points for running the note ingest pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from notegraph.domain.errors import ExtractionError
from notegraph.domain.reconciliation import (
    EntityCreator,
    IdentifierSynthesizer,
    IdentityResolver,
    MergeEngine,
    RelationshipInferencer,
    SatellitePersister,
    WorkforceReconciler,
)

from .audit import AuditPhase, AuditRecorder
from .context import NoteContext
from .enrichment import EnrichmentPhase
from .extraction import ExtractionPhase
from .normalization import LanguageNormalizer, NormalizationPhase
from .orchestrator import NoteIngestionPipeline
from .relationships import RelationshipPhase
from .resolution import ResolutionPhase
from .satellites import SatellitePhase
from .summary import build_result, failed_result
from .workforce import WorkforcePhase

if TYPE_CHECKING:
    from notegraph.config import PipelineConfig
    from notegraph.domain.ports import (
        DocumentStore,
        ExtractionOracle,
        TranslationOracle,
        WebSearchOracle,
    )

    from .orchestrator import PipelinePhase
    from .summary import IngestResult

log = getLogger(__name__)


def build_note_pipeline(
    *,
    store: DocumentStore,
    extraction: ExtractionOracle,
    translation: TranslationOracle,
    web_search: WebSearchOracle,
    config: PipelineConfig,
    audit: AuditRecorder | None = None,
) -> NoteIngestionPipeline:
    """Assemble the default phases in execution order around one store."""

    identifiers = IdentifierSynthesizer(store=store, attempts=config.id_attempts)
    resolver = IdentityResolver(store=store, threshold=config.similarity_threshold)
    phases: list[PipelinePhase] = [
        NormalizationPhase(LanguageNormalizer(translation)),
        ExtractionPhase(extraction),
        EnrichmentPhase(web_search, identifiers, window=config.location_window),
    ]
    if audit is not None:
        phases.append(AuditPhase(audit))
    phases.extend(
        [
            ResolutionPhase(
                resolver,
                MergeEngine(store, attempts=config.merge_attempts),
                EntityCreator(store, identifiers),
            ),
            WorkforcePhase(WorkforceReconciler(store, attempts=config.merge_attempts), resolver),
            SatellitePhase(SatellitePersister(store)),
            RelationshipPhase(RelationshipInferencer(store)),
        ]
    )
    return NoteIngestionPipeline(phases=tuple(phases))


@dataclass(slots=True)
class NoteProcessor:
    """Run one note through the pipeline and turn the context into a result.

    An ``ExtractionError`` yields ``success=False`` and no entities; every other
    exception propagates.
    """

    pipeline: NoteIngestionPipeline
    audit: AuditRecorder | None = None
    web_search_default: bool = True

    def process(self, text: str, *, web_search: bool | None = None) -> IngestResult:
        enabled = self.web_search_default if web_search is None else web_search
        context = NoteContext(raw_text=text, web_search=enabled)
        log.info("Processing note (%s chars, web search %s)", len(text), "on" if enabled else "off")
        try:
            self.pipeline.run(context)
        except ExtractionError as exc:
            log.warning("Extraction failed: %s", exc)
            result = failed_result(exc, web_search_performed=context.web_search_performed)
        else:
            result = build_result(context)

        if self.audit is not None and context.audit_id is not None:
            self.audit.complete(context.audit_id, result)
        log.info(result.summary)
        return result
