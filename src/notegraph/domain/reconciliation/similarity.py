"""Normalized Levenshtein similarity used for fuzzy name matching."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein


def levenshtein(left: str, right: str) -> int:
    """Edit distance with unit costs for insertion, deletion and substitution."""

    return Levenshtein.distance(left, right)


def similarity(left: str, right: str) -> float:
    """Case-insensitive similarity in ``[0, 1]``; two empty strings are identical.

    One minus the edit distance over the length of the longer name.
    """

    return Levenshtein.normalized_similarity(left.lower(), right.lower())
