"""Document store port."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from notegraph.domain.model import Document


@dataclass(slots=True, kw_only=True)
class StoreResult[T]:
    """Outcome of one store call.

    ``conflict`` is set when a conditional update was rejected because the stored
    ``version`` moved on since the caller read it.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    conflict: bool = False

    def unwrap(self) -> T:
        if not self.success or self.data is None:
            raise ValueError(self.error or "store result carries no data")
        return self.data


@runtime_checkable
class DocumentStore(Protocol):
    """Generic create/update/query document API.

    ``create`` assigns an id when the document has none and rejects duplicates.
    ``update`` replaces the given top-level keys; with ``expected_version`` it only
    applies when the stored version still matches. ``query`` matches equality
    filters on top-level or dotted keys.
    """

    def create(self, collection: str, document: Mapping[str, Any]) -> StoreResult[Document]: ...

    def update(
        self,
        collection: str,
        document_id: str,
        partial: Mapping[str, Any],
        *,
        expected_version: int | None = None,
    ) -> StoreResult[Document]: ...

    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
    ) -> StoreResult[list[Document]]: ...
