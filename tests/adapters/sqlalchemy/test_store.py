from __future__ import annotations

import pytest

from notegraph.adapters.memory import InMemoryDocumentStore
from notegraph.adapters.sqlalchemy import SqlAlchemyDocumentStore
from notegraph.domain.ports import DocumentStore


@pytest.fixture(params=["sql", "memory"])
def store(request: pytest.FixtureRequest) -> DocumentStore:
    if request.param == "sql":
        return request.getfixturevalue("sql_store")
    return InMemoryDocumentStore()


def _foster() -> dict[str, object]:
    return {
        "id": "UKLD001",
        "name": "Foster + Partners",
        "location": {"headquarters": {"city": "London", "country": "United Kingdom"}},
        "specializations": ["architecture"],
    }


def test_stores_satisfy_the_port(sql_store: SqlAlchemyDocumentStore) -> None:
    assert isinstance(sql_store, DocumentStore)
    assert isinstance(InMemoryDocumentStore(), DocumentStore)


def test_create_assigns_version_and_timestamps(store: DocumentStore) -> None:
    result = store.create("offices", {**_foster(), "version": 7})

    document = result.unwrap()
    assert document["version"] == 1
    assert document["createdAt"]
    assert document["updatedAt"] == document["createdAt"]


def test_create_generates_missing_ids(store: DocumentStore) -> None:
    document = store.create("userInputs", {"text": "note"}).unwrap()

    assert document["id"]
    assert store.query("userInputs", {"id": document["id"]}).unwrap()[0]["text"] == "note"


def test_duplicate_ids_are_rejected(store: DocumentStore) -> None:
    store.create("offices", _foster())

    result = store.create("offices", _foster())

    assert not result.success
    assert not result.conflict
    assert result.error is not None
    assert "already exists" in result.error


def test_same_id_in_another_collection_is_fine(store: DocumentStore) -> None:
    store.create("offices", _foster())

    assert store.create("workforce", {"id": "UKLD001"}).success


def test_update_merges_top_level_keys_and_bumps_version(store: DocumentStore) -> None:
    store.create("offices", _foster())

    result = store.update(
        "offices",
        "UKLD001",
        {"specializations": ["architecture", "engineering"], "id": "other", "version": 99},
        expected_version=1,
    )

    document = result.unwrap()
    assert document["version"] == 2
    assert document["id"] == "UKLD001"
    assert document["name"] == "Foster + Partners"
    assert document["specializations"] == ["architecture", "engineering"]
    (stored,) = store.query("offices").unwrap()
    assert stored == document


def test_stale_version_is_a_conflict(store: DocumentStore) -> None:
    store.create("offices", _foster())
    store.update("offices", "UKLD001", {"founded": 1967}, expected_version=1)

    result = store.update("offices", "UKLD001", {"founded": 1970}, expected_version=1)

    assert not result.success
    assert result.conflict
    (stored,) = store.query("offices").unwrap()
    assert stored["founded"] == 1967
    assert stored["version"] == 2


def test_update_of_missing_document_fails(store: DocumentStore) -> None:
    result = store.update("offices", "nope", {"name": "x"})

    assert not result.success
    assert not result.conflict
    assert result.error is not None
    assert "not found" in result.error


def test_query_filters_on_nested_paths(store: DocumentStore) -> None:
    store.create("offices", _foster())
    store.create(
        "offices",
        {
            "id": "JPTK001",
            "name": "SANAA",
            "location": {"headquarters": {"city": "Tokyo", "country": "Japan"}},
        },
    )

    tokyo = store.query("offices", {"location.headquarters.city": "Tokyo"}).unwrap()
    named = store.query("offices", {"name": "Foster + Partners"}).unwrap()

    assert [document["id"] for document in tokyo] == ["JPTK001"]
    assert [document["id"] for document in named] == ["UKLD001"]
    assert store.query("offices", {"name": "Nobody"}).unwrap() == []
    assert store.query("projects").unwrap() == []
