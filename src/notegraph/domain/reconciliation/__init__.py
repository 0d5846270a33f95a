"""Reconciliation of extracted candidates against the stored entity graph.

Layered flow for one note:
1) resolve each candidate to a stored entity of its kind (exact, fuzzy, heuristic)
2) merge into the match or create a new entity with a synthesized id
3) reconcile the office workforce roster and derive headcount
4) persist satellite records and infer location-based relationships
"""

from __future__ import annotations

from .contracts import (
    EntityResolution,
    Local,
    MatchKind,
    MergeResult,
    NewEntityResolution,
    Persisted,
    ResolutionStatus,
    ResolvedEntityResolution,
    WriteOutcome,
)
from .create import EntityCreator
from .identifiers import IdentifierSynthesizer, needs_office_id
from .merge import MergeEngine, merge_entities
from .relationships import RelationshipInferencer, infer_relationships
from .resolve import IdentityResolver, name_variations
from .satellites import SatelliteIdentifiers, SatellitePersister, SatelliteReport
from .similarity import levenshtein, similarity
from .workforce import (
    WorkforceReconciler,
    WorkforceReconciliation,
    WorkforceUpdate,
    derive_office_size,
    merge_roster,
)

__all__ = [
    "EntityCreator",
    "EntityResolution",
    "IdentifierSynthesizer",
    "IdentityResolver",
    "Local",
    "MatchKind",
    "MergeEngine",
    "MergeResult",
    "NewEntityResolution",
    "Persisted",
    "RelationshipInferencer",
    "ResolutionStatus",
    "ResolvedEntityResolution",
    "SatelliteIdentifiers",
    "SatellitePersister",
    "SatelliteReport",
    "WorkforceReconciler",
    "WorkforceReconciliation",
    "WorkforceUpdate",
    "WriteOutcome",
    "derive_office_size",
    "infer_relationships",
    "levenshtein",
    "merge_entities",
    "merge_roster",
    "name_variations",
    "needs_office_id",
    "similarity",
]
