"""Helpers shared by the document store adapters."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, cast
from uuid import uuid4

if TYPE_CHECKING:
    from collections.abc import Mapping

_MISSING = object()


def new_document_id() -> str:
    return uuid4().hex


def lookup_path(document: Mapping[str, Any], path: str) -> object:
    """Resolve a dotted key such as ``jurisdiction.countryName``."""

    current: object = document
    for part in path.split("."):
        if not isinstance(current, dict):
            return _MISSING
        current = cast(dict[str, Any], current).get(part, _MISSING)
        if current is _MISSING:
            return _MISSING
    return current


def matches_filters(document: Mapping[str, Any], filters: Mapping[str, object] | None) -> bool:
    if not filters:
        return True
    for path, expected in filters.items():
        value = lookup_path(document, path)
        if value is _MISSING or value != expected:
            return False
    return True


def to_plain_json(document: Mapping[str, Any]) -> dict[str, Any]:
    """Round-trip through ``json`` so enums and tuples become plain JSON values."""

    return cast(dict[str, Any], json.loads(json.dumps(document, default=str)))
