from __future__ import annotations

import pytest

from notegraph.domain.reconciliation import levenshtein, similarity


@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("", "", 0),
        ("abc", "", 3),
        ("kitten", "sitting", 3),
        ("flaw", "lawn", 2),
        ("same", "same", 0),
    ],
)
def test_levenshtein_counts_unit_edits(left: str, right: str, expected: int) -> None:
    assert levenshtein(left, right) == expected
    assert levenshtein(right, left) == expected


def test_similarity_is_case_insensitive() -> None:
    assert similarity("FOSTER + PARTNERS", "foster + partners") == 1.0


def test_similarity_of_two_empty_strings_is_one() -> None:
    assert similarity("", "") == 1.0


def test_similar_office_names_clear_the_threshold() -> None:
    assert similarity("Foster + Partners", "Foster and Partners") > 0.7


def test_unrelated_office_names_stay_below_the_threshold() -> None:
    assert similarity("Foster + Partners", "Zaha Hadid Architects") <= 0.7


def test_similarity_is_normalized_by_the_longer_name() -> None:
    # one substitution over four characters
    assert similarity("abcd", "abce") == pytest.approx(0.75)


@pytest.mark.parametrize(
    ("left", "right"),
    [("Foster + Partners", "Foster and Partners"), ("BIG", "Bjarke Ingels Group"), ("", "OMA")],
)
def test_similarity_matches_edit_distance_over_longer_name(left: str, right: str) -> None:
    longest = max(len(left), len(right))
    distance = levenshtein(left.lower(), right.lower())

    assert similarity(left, right) == pytest.approx(1 - distance / longest)
