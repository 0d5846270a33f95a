"""Field-level merge of a candidate into a stored entity.

Rules per field family:

- scalars are overwritten only when the incoming value is present and differs;
- list fields are unioned, skipping values already present (case-sensitive), other
  office locations deduplicated on ``(city, country)``;
- nested objects are shallow-merged sub-field by sub-field;
- ``id`` and the store-managed fields are never touched.

Changed fields are reported with their document names (``location.headquarters``).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, fields
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final, cast

from notegraph.domain.model import (
    Location,
    Office,
    Project,
    Regulation,
    entity_from_document,
    entity_to_document,
)

from .contracts import Local, MergeResult, Persisted, stored_version

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from notegraph.domain.model import Document, ResolvableEntity
    from notegraph.domain.ports import DocumentStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScalarRule:
    attribute: str
    document_name: str


@dataclass(frozen=True, slots=True)
class NestedRule:
    attribute: str
    document_name: str


@dataclass(frozen=True, slots=True)
class UnionRule:
    attribute: str
    document_name: str
    key: Callable[[Any], Hashable] | None = None


type MergeRule = ScalarRule | NestedRule | UnionRule


def _location_key(location: Location) -> tuple[str, str]:
    return location.key()


OFFICE_RULES: Final[tuple[MergeRule, ...]] = (
    ScalarRule("official_name", "officialName"),
    ScalarRule("founded", "founded"),
    ScalarRule("status", "status"),
    NestedRule("headquarters", "location.headquarters"),
    UnionRule("other_offices", "location.otherOffices", key=_location_key),
    NestedRule("size", "size"),
    UnionRule("specializations", "specializations"),
    UnionRule("notable_works", "notableWorks"),
)

PROJECT_RULES: Final[tuple[MergeRule, ...]] = (
    ScalarRule("project_name", "projectName"),
    ScalarRule("office_id", "officeId"),
    ScalarRule("status", "status"),
    NestedRule("location", "location"),
    NestedRule("details", "details"),
    NestedRule("financial", "financial"),
)

REGULATION_RULES: Final[tuple[MergeRule, ...]] = (
    ScalarRule("name", "name"),
    ScalarRule("regulation_type", "regulationType"),
    ScalarRule("description", "description"),
    ScalarRule("effective_date", "effectiveDate"),
    NestedRule("jurisdiction", "jurisdiction"),
)


def rules_for(entity: ResolvableEntity) -> tuple[MergeRule, ...]:
    match entity:
        case Office():
            return OFFICE_RULES
        case Project():
            return PROJECT_RULES
        case Regulation():
            return REGULATION_RULES


def merge_entities[T: ResolvableEntity](existing: T, incoming: T) -> tuple[T, list[str]]:
    """Return a merged copy of ``existing`` and the changed document field names.

    ``existing`` itself is left untouched.
    """

    if type(existing) is not type(incoming):
        raise TypeError(
            f"Cannot merge {type(incoming).__name__} into {type(existing).__name__}"
        )

    merged = copy.deepcopy(existing)
    changed: list[str] = []
    for rule in rules_for(existing):
        if _apply_rule(rule, merged, incoming):
            changed.append(rule.document_name)
    if (
        isinstance(merged, Office)
        and isinstance(incoming, Office)
        and _keep_stated_size_category(merged, incoming)
        and "size" not in changed
    ):
        changed.append("size")
    return merged, changed


def _apply_rule(rule: MergeRule, merged: object, incoming: object) -> bool:
    new_value = getattr(incoming, rule.attribute)
    if new_value is None:
        return False
    current = getattr(merged, rule.attribute)

    match rule:
        case ScalarRule():
            if isinstance(new_value, str) and not new_value.strip():
                return False
            if new_value == current:
                return False
            setattr(merged, rule.attribute, new_value)
            return True
        case NestedRule():
            if current is None:
                setattr(merged, rule.attribute, copy.deepcopy(new_value))
                return True
            return _shallow_merge(current, new_value)
        case UnionRule():
            return _union(cast(list[Any], current), cast(list[Any], new_value), rule.key)


def _keep_stated_size_category(merged: Office, incoming: Office) -> bool:
    # a category stated in the note replaces one derived from the roster
    stated = incoming.size
    if stated is None or stated.size_category is None or stated.category_derived:
        return False
    if merged.size is None or not merged.size.category_derived:
        return False
    merged.size.category_derived = None
    return True


def _shallow_merge(current: object, incoming: object) -> bool:
    changed = False
    for item in fields(cast(Any, incoming)):
        value = getattr(incoming, item.name)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if getattr(current, item.name) != value:
            setattr(current, item.name, copy.deepcopy(value))
            changed = True
    return changed


def _union(
    current: list[Any], incoming: list[Any], key: Callable[[Any], Hashable] | None
) -> bool:
    seen = {key(item) if key else item for item in current}
    changed = False
    for item in incoming:
        marker = key(item) if key else item
        if marker in seen:
            continue
        current.append(copy.deepcopy(item))
        seen.add(marker)
        changed = True
    return changed


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class MergeEngine:
    """Merge candidates into stored entities and write the result back.

    Writes are conditional on the ``version`` read with the entity. When another
    writer got there first the stored entity is re-read and the candidate merged
    over it again, up to ``attempts`` times.
    """

    store: DocumentStore
    attempts: int = 3
    clock: Callable[[], datetime] = _utcnow

    def merge[T: ResolvableEntity](self, existing: T, incoming: T) -> MergeResult[T]:
        base = existing
        merged, changed = merge_entities(base, incoming)
        if not changed:
            log.info("No changes for %s %s", existing.kind, existing.id)
            return MergeResult(success=True, entity=merged, outcome=Persisted(entity=merged))

        for attempt in range(1, self.attempts + 1):
            self._touch(merged)
            partial = self._partial(merged, changed)
            result = self.store.update(
                existing.kind.collection,
                cast(str, existing.id),
                partial,
                expected_version=base.version,
            )
            if result.success:
                merged.version = stored_version(result.data, base.version + 1)
                log.info(
                    "Merged %s %s: %s", existing.kind, existing.id, ", ".join(changed)
                )
                return MergeResult(
                    success=True,
                    entity=merged,
                    changed_fields=changed,
                    outcome=Persisted(entity=merged),
                )
            if not result.conflict:
                log.warning(
                    "Failed to write merge for %s %s: %s", existing.kind, existing.id, result.error
                )
                return MergeResult(
                    success=False,
                    entity=merged,
                    changed_fields=changed,
                    outcome=Local(entity=merged, error=result.error),
                    error=result.error,
                )

            log.info(
                "Version conflict merging %s %s (attempt %s/%s); re-reading",
                existing.kind,
                existing.id,
                attempt,
                self.attempts,
            )
            reloaded = self._reload(base)
            if reloaded is None:
                break
            base = reloaded
            merged, changed = merge_entities(base, incoming)
            if not changed:
                return MergeResult(success=True, entity=merged, outcome=Persisted(entity=merged))

        error = f"gave up merging {existing.kind} {existing.id} after {self.attempts} conflicts"
        log.warning(error)
        return MergeResult(
            success=False,
            entity=merged,
            changed_fields=changed,
            outcome=Local(entity=merged, error=error),
            error=error,
        )

    def _touch(self, merged: ResolvableEntity) -> None:
        merged.stamp(self.clock())
        if isinstance(merged, Office):
            merged.info_entries = (merged.info_entries or 1) + 1

    @staticmethod
    def _partial(merged: ResolvableEntity, changed: list[str]) -> Document:
        document = entity_to_document(merged)
        keys = {name.split(".", 1)[0] for name in changed} | {"updatedAt", "infoEntries"}
        return {key: document[key] for key in keys if key in document}

    def _reload[T: ResolvableEntity](self, entity: T) -> T | None:
        result = self.store.query(entity.kind.collection, {"id": entity.id})
        if not result.success or not result.data:
            log.warning("Could not re-read %s %s: %s", entity.kind, entity.id, result.error)
            return None
        return cast(T, entity_from_document(entity.kind, result.data[0]))
