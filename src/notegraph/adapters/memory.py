"""In-process document store for tests and dry runs."""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from logging import getLogger
from threading import Lock
from typing import TYPE_CHECKING, Any

from notegraph.common.documents import matches_filters, new_document_id, to_plain_json
from notegraph.domain.ports import StoreResult

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from notegraph.domain.model import Document

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryDocumentStore:
    """Same contract as the SQL store, held in nested dicts.

    Documents are copied on the way in and out so callers never share state with
    the store.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = Lock()
        self.writes = 0

    def create(self, collection: str, document: Mapping[str, Any]) -> StoreResult[Document]:
        body = to_plain_json(document)
        document_id = str(body.get("id") or new_document_id())
        body["id"] = document_id
        now = self._clock().isoformat()
        if not body.get("createdAt"):
            body["createdAt"] = now
        if not body.get("updatedAt"):
            body["updatedAt"] = body["createdAt"]
        body["version"] = 1

        with self._lock:
            documents = self._collections.setdefault(collection, {})
            if document_id in documents:
                log.warning("Rejected duplicate %s document %s", collection, document_id)
                return StoreResult(
                    success=False, error=f"{collection} document {document_id} already exists"
                )
            documents[document_id] = body
            self.writes += 1
        return StoreResult(success=True, data=copy.deepcopy(body))

    def update(
        self,
        collection: str,
        document_id: str,
        partial: Mapping[str, Any],
        *,
        expected_version: int | None = None,
    ) -> StoreResult[Document]:
        changes = to_plain_json(partial)
        for key in ("id", "version", "createdAt"):
            changes.pop(key, None)

        with self._lock:
            stored = self._collections.get(collection, {}).get(document_id)
            if stored is None:
                return StoreResult(
                    success=False, error=f"{collection} document {document_id} not found"
                )
            if expected_version is not None and stored["version"] != expected_version:
                return StoreResult(
                    success=False,
                    conflict=True,
                    error=f"{collection} document {document_id} changed concurrently",
                )
            stored.update(changes)
            if not changes.get("updatedAt"):
                stored["updatedAt"] = self._clock().isoformat()
            stored["version"] += 1
            self.writes += 1
            return StoreResult(success=True, data=copy.deepcopy(stored))

    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
    ) -> StoreResult[list[Document]]:
        with self._lock:
            documents = list(self._collections.get(collection, {}).values())
        return StoreResult(
            success=True,
            data=[copy.deepcopy(doc) for doc in documents if matches_filters(doc, filters)],
        )

    def all(self, collection: str) -> list[Document]:
        return self.query(collection).unwrap()
