"""Note ingestion pipeline for Notegraph.

The pipeline is split into explicit, testable phases: normalization, extraction,
enrichment, audit, resolution, workforce, satellites and relationships. Each phase
reads and fills one ``NoteContext`` so domain rules stay adapter-free.
"""

from __future__ import annotations

from .audit import AuditPhase, AuditRecorder
from .context import CreatedEntities, NoteContext, ResolvedEntities, TranslationResult
from .enrichment import EnrichmentPhase, location_in_text
from .extraction import ExtractionPhase
from .normalization import LanguageNormalizer, NormalizationPhase
from .orchestrator import NoteIngestionPipeline, PipelinePhase
from .relationships import RelationshipPhase
from .resolution import ResolutionPhase
from .runner import NoteProcessor, build_note_pipeline
from .satellites import SatellitePhase
from .summary import IngestResult, build_summary
from .workforce import WorkforcePhase, office_name_from_text

__all__ = [
    "AuditPhase",
    "AuditRecorder",
    "CreatedEntities",
    "EnrichmentPhase",
    "ExtractionPhase",
    "IngestResult",
    "LanguageNormalizer",
    "NormalizationPhase",
    "NoteContext",
    "NoteIngestionPipeline",
    "NoteProcessor",
    "PipelinePhase",
    "RelationshipPhase",
    "ResolutionPhase",
    "ResolvedEntities",
    "SatellitePhase",
    "TranslationResult",
    "WorkforcePhase",
    "build_note_pipeline",
    "build_summary",
    "location_in_text",
    "office_name_from_text",
]
