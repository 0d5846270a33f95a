from __future__ import annotations

import random
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from notegraph.adapters.memory import InMemoryDocumentStore
from notegraph.domain.model import Collection, Location
from notegraph.domain.ports import StoreResult
from notegraph.domain.reconciliation import IdentifierSynthesizer, needs_office_id
from notegraph.domain.reconciliation.identifiers import city_code, country_code, letter_code

if TYPE_CHECKING:
    from collections.abc import Mapping

    from notegraph.domain.model import Document


class _EverythingTaken(InMemoryDocumentStore):
    def query(
        self,
        collection: str,
        filters: Mapping[str, object] | None = None,
    ) -> StoreResult[list[Document]]:
        _ = collection
        return StoreResult(success=True, data=[dict(filters or {})])


@pytest.mark.parametrize(
    ("value", "expected"),
    [("London", "LO"), ("O'Neil", "OX"), ("A", "AX"), ("", "XX"), (" berlin ", "BE")],
)
def test_letter_code_pads_and_masks(value: str, expected: str) -> None:
    assert letter_code(value) == expected


def test_known_places_use_the_lookup_tables() -> None:
    assert country_code("United Kingdom") == "UK"
    assert country_code("usa") == "US"
    assert city_code("London") == "LD"
    assert city_code("New York") == "NY"
    assert country_code("Portugal") == "PO"
    assert city_code("Porto") == "PO"


def test_office_id_combines_country_and_city_codes() -> None:
    synthesizer = IdentifierSynthesizer(rng=random.Random(1))

    office_id = synthesizer.office_id(
        "Foster + Partners", Location(city="London", country="United Kingdom")
    )

    assert re.fullmatch(r"UKLD\d{3}", office_id)


def test_office_id_without_location_uses_the_name() -> None:
    synthesizer = IdentifierSynthesizer(rng=random.Random(1))

    assert re.fullmatch(r"SNXX\d{3}", synthesizer.office_id("Snohetta", None))


def test_office_id_skips_taken_candidates(memory_store: InMemoryDocumentStore) -> None:
    taken = "UKLD" + str(random.Random(7).randrange(1000)).zfill(3)
    memory_store.create(Collection.OFFICES, {"id": taken, "name": "Existing"})
    synthesizer = IdentifierSynthesizer(store=memory_store, rng=random.Random(7))

    office_id = synthesizer.office_id(
        "Foster + Partners", Location(city="London", country="United Kingdom")
    )

    assert office_id != taken
    assert office_id.startswith("UKLD")


def test_office_id_widens_suffix_after_repeated_collisions() -> None:
    synthesizer = IdentifierSynthesizer(store=_EverythingTaken(), attempts=2)

    office_id = synthesizer.office_id("Foster", Location(city="Paris", country="France"))

    assert re.fullmatch(r"FRPR\d{6}", office_id)


def test_project_and_regulation_ids_embed_the_clock() -> None:
    moment = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    synthesizer = IdentifierSynthesizer(rng=random.Random(3), clock=lambda: moment)
    millis = int(moment.timestamp() * 1000)

    assert re.fullmatch(rf"project-{millis}-[0-9a-f]{{6}}", synthesizer.project_id())
    assert re.fullmatch(rf"regulation-{millis}-[0-9a-f]{{6}}", synthesizer.regulation_id())


@pytest.mark.parametrize(
    ("office_id", "expected"),
    [
        (None, True),
        ("", True),
        ("UKXX001", True),
        ("FOSTER_NO_LOCATION_DATA", True),
        ("UKLD001", False),
    ],
)
def test_needs_office_id(office_id: str | None, expected: bool) -> None:
    assert needs_office_id(office_id) is expected
