"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

from notegraph.adapters.anthropic import (
    AnthropicClient,
    ClaudeExtractionOracle,
    ClaudeTranslationOracle,
    ClaudeWebSearchOracle,
)
from notegraph.adapters.memory import InMemoryDocumentStore
from notegraph.adapters.sqlalchemy import SqlAlchemyDocumentStore, is_started, startup
from notegraph.config import get_anthropic_config, get_pipeline_config
from notegraph.domain.ingest_pipeline import AuditRecorder, NoteProcessor, build_note_pipeline
from notegraph.domain.model import EntityKind, entity_to_document, relationship_to_document
from notegraph.domain.reconciliation import IdentityResolver, Local, ResolvedEntityResolution

if TYPE_CHECKING:
    from notegraph.config import PipelineConfig
    from notegraph.domain.ingest_pipeline import IngestResult
    from notegraph.domain.model import ResolvableEntity
    from notegraph.domain.ports import (
        DocumentStore,
        ExtractionOracle,
        TranslationOracle,
        WebSearchOracle,
    )
    from notegraph.domain.reconciliation import EntityResolution, WriteOutcome

type StoreKind = Literal["sql", "memory"]

log = getLogger(__name__)


def build_store(kind: StoreKind = "sql") -> DocumentStore:
    if kind == "memory":
        log.info("Using the in-memory store; nothing will be persisted")
        return InMemoryDocumentStore()
    if not is_started():
        startup()
    return SqlAlchemyDocumentStore()


def build_processor(
    *,
    store: DocumentStore | None = None,
    store_kind: StoreKind = "sql",
    extraction: ExtractionOracle | None = None,
    translation: TranslationOracle | None = None,
    web_search: WebSearchOracle | None = None,
    config: PipelineConfig | None = None,
) -> NoteProcessor:
    """Wire the pipeline from configuration, using Claude for any oracle not given."""

    effective_store = store or build_store(store_kind)
    effective_config = config or get_pipeline_config()
    if extraction is None or translation is None or web_search is None:
        client = AnthropicClient(config=get_anthropic_config())
        extraction = extraction or ClaudeExtractionOracle(client)
        translation = translation or ClaudeTranslationOracle(client)
        web_search = web_search or ClaudeWebSearchOracle(client)

    audit = AuditRecorder(effective_store)
    pipeline = build_note_pipeline(
        store=effective_store,
        extraction=extraction,
        translation=translation,
        web_search=web_search,
        config=effective_config,
        audit=audit,
    )
    return NoteProcessor(
        pipeline=pipeline, audit=audit, web_search_default=effective_config.web_search
    )


def ingest_note(
    text: str,
    *,
    web_search: bool | None = None,
    processor: NoteProcessor | None = None,
    store_kind: StoreKind = "sql",
) -> IngestResult:
    """Process one note with the configured adapters."""

    effective_processor = processor or build_processor(store_kind=store_kind)
    result = effective_processor.process(text, web_search=web_search)
    log.info(
        "Finished note: success=%s, created=%s, relationships=%s",
        result.success,
        result.total_created,
        len(result.relationships),
    )
    return result


def search_entity(
    kind: EntityKind | str,
    name: str,
    *,
    store: DocumentStore | None = None,
    store_kind: StoreKind = "sql",
) -> EntityResolution[ResolvableEntity]:
    """Run the identity resolver's read path for one name."""

    effective_store = store or build_store(store_kind)
    resolver = IdentityResolver(
        store=effective_store, threshold=get_pipeline_config().similarity_threshold
    )
    resolution = resolver.search(EntityKind(kind), name)
    if isinstance(resolution, ResolvedEntityResolution):
        log.info(
            "Found %s %r (%s, %.2f)",
            kind,
            resolution.target.display_name,
            resolution.match_kind,
            resolution.confidence,
        )
    else:
        log.info("No stored %s matches %r", kind, name)
    return resolution


def _outcome_document(outcome: WriteOutcome[Any]) -> dict[str, Any]:
    document: dict[str, Any] = {
        "persisted": not outcome.is_local,
        "entity": entity_to_document(outcome.entity),
    }
    if isinstance(outcome, Local) and outcome.error:
        document["error"] = outcome.error
    return document


def result_to_document(result: IngestResult) -> dict[str, Any]:
    """JSON-ready view of an ``IngestResult``."""

    created = result.entities_created
    return {
        "success": result.success,
        "summary": result.summary,
        "totalCreated": result.total_created,
        "webSearchPerformed": result.web_search_performed,
        "entitiesCreated": {
            "offices": [_outcome_document(item) for item in created.offices],
            "projects": [_outcome_document(item) for item in created.projects],
            "regulations": [_outcome_document(item) for item in created.regulations],
            "workforce": [_outcome_document(item) for item in created.workforce],
            "mergedOffices": [_outcome_document(item) for item in created.merged_offices],
        },
        "workforceUpdates": [
            {
                "officeId": update.office_id,
                "officeName": update.office_name,
                "employeesAdded": update.employees_added,
                "employeesUpdated": update.employees_updated,
                "totalEmployees": update.total_employees,
            }
            for update in result.workforce_updates
        ],
        "relationships": [relationship_to_document(item) for item in result.relationships],
    }
