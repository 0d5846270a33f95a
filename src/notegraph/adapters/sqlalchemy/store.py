"""Document store backed by the SQLAlchemy ``documents`` table."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from notegraph.common.documents import matches_filters, new_document_id, to_plain_json
from notegraph.domain.ports import StoreResult

from .mappings import documents_table
from .unit_of_work import SqlAlchemyUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from sqlalchemy import CursorResult

    from notegraph.domain.model import Document

log = getLogger(__name__)

# keys the store owns; callers cannot overwrite them through ``update``
_PROTECTED_KEYS = ("id", "version", "createdAt")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _with_version(body: Mapping[str, Any], version: int) -> Document:
    document = dict(body)
    document["version"] = version
    return document


class SqlAlchemyDocumentStore:
    """``DocumentStore`` over one JSON column per document.

    Every write runs in its own unit of work. Updates compare the stored ``version``
    inside the ``UPDATE`` statement, so two writers that read the same version cannot
    both succeed.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], SqlAlchemyUnitOfWork] = SqlAlchemyUnitOfWork,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def create(self, collection: str, document: Mapping[str, Any]) -> StoreResult[Document]:
        body = to_plain_json(document)
        body.pop("version", None)
        document_id = str(body.get("id") or new_document_id())
        body["id"] = document_id

        now = self._clock()
        created_at = _parse_timestamp(body.get("createdAt")) or now
        updated_at = _parse_timestamp(body.get("updatedAt")) or created_at
        if not body.get("createdAt"):
            body["createdAt"] = created_at.isoformat()
        if not body.get("updatedAt"):
            body["updatedAt"] = updated_at.isoformat()

        stmt = insert(documents_table).values(
            collection=collection,
            id=document_id,
            body=body,
            version=1,
            created_at=created_at,
            updated_at=updated_at,
        )
        try:
            with self._uow_factory() as uow:
                uow.session.execute(stmt)
                uow.commit()
        except IntegrityError:
            log.warning("Rejected duplicate %s document %s", collection, document_id)
            return StoreResult(
                success=False, error=f"{collection} document {document_id} already exists"
            )
        except SQLAlchemyError as exc:
            log.warning("Failed to create %s document %s: %s", collection, document_id, exc)
            return StoreResult(success=False, error=str(exc))

        log.debug("Created %s document %s", collection, document_id)
        return StoreResult(success=True, data=_with_version(body, 1))

    def update(
        self,
        collection: str,
        document_id: str,
        partial: Mapping[str, Any],
        *,
        expected_version: int | None = None,
    ) -> StoreResult[Document]:
        changes = to_plain_json(partial)
        for key in _PROTECTED_KEYS:
            changes.pop(key, None)

        table = documents_table
        try:
            with self._uow_factory() as uow:
                row = uow.session.execute(
                    select(table.c.body, table.c.version)
                    .where(table.c.collection == collection)
                    .where(table.c.id == document_id)
                ).one_or_none()
                if row is None:
                    return StoreResult(
                        success=False, error=f"{collection} document {document_id} not found"
                    )
                current_version = int(row.version)
                if expected_version is not None and current_version != expected_version:
                    log.info(
                        "Version conflict on %s document %s: expected %s, found %s",
                        collection,
                        document_id,
                        expected_version,
                        current_version,
                    )
                    return StoreResult(
                        success=False,
                        conflict=True,
                        error=f"{collection} document {document_id} changed concurrently",
                    )

                body = dict(cast(dict[str, Any], row.body))
                body.update(changes)
                updated_at = _parse_timestamp(changes.get("updatedAt")) or self._clock()
                if not changes.get("updatedAt"):
                    body["updatedAt"] = updated_at.isoformat()
                new_version = current_version + 1

                result = cast(
                    "CursorResult[Any]",
                    uow.session.execute(
                        update(table)
                        .where(table.c.collection == collection)
                        .where(table.c.id == document_id)
                        .where(table.c.version == current_version)
                        .values(body=body, version=new_version, updated_at=updated_at)
                    ),
                )
                if result.rowcount != 1:
                    uow.rollback()
                    return StoreResult(
                        success=False,
                        conflict=True,
                        error=f"{collection} document {document_id} changed concurrently",
                    )
                uow.commit()
        except SQLAlchemyError as exc:
            log.warning("Failed to update %s document %s: %s", collection, document_id, exc)
            return StoreResult(success=False, error=str(exc))

        return StoreResult(success=True, data=_with_version(body, new_version))

    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
    ) -> StoreResult[list[Document]]:
        table = documents_table
        stmt = (
            select(table.c.body, table.c.version)
            .where(table.c.collection == collection)
            .order_by(table.c.created_at, table.c.id)
        )
        if filters and isinstance(filters.get("id"), str):
            stmt = stmt.where(table.c.id == filters["id"])

        try:
            with self._uow_factory() as uow:
                rows = uow.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            log.warning("Failed to query %s: %s", collection, exc)
            return StoreResult(success=False, error=str(exc))

        documents = [
            document
            for document in (
                _with_version(cast(dict[str, Any], row.body), int(row.version)) for row in rows
            )
            if matches_filters(document, filters)
        ]
        return StoreResult(success=True, data=documents)
