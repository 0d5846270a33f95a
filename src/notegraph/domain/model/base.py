"""Shared value objects and the entity base class."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import EntityKind

UNKNOWN_PLACE = "Unknown"


@dataclass(slots=True, kw_only=True)
class Location:
    city: str | None = None
    country: str | None = None

    @property
    def is_known(self) -> bool:
        """Both parts present and neither is the ``Unknown`` placeholder."""

        return _known(self.city) and _known(self.country)

    def key(self) -> tuple[str, str]:
        return (self.city or "", self.country or "")


def _known(value: str | None) -> bool:
    return bool(value and value.strip()) and value != UNKNOWN_PLACE


@dataclass(slots=True, kw_only=True)
class Entity:
    """Base for stored entities.

    ``version`` is owned by the document store and bumped on every write; it is
    what conditional updates compare against.
    """

    kind: ClassVar[EntityKind]

    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    version: int = 0

    @property
    def display_name(self) -> str:
        raise NotImplementedError

    def primary_location(self) -> Location | None:
        return None

    def stamp(self, now: datetime) -> None:
        """Set timestamps for a write at ``now`` keeping ``updated_at >= created_at``."""

        if self.created_at is None:
            self.created_at = now
        self.updated_at = max(now, self.created_at)
