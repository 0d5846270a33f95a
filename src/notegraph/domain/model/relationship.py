"""Links proposed between entities resolved from the same note."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .enums import EntityKind, RelationshipType  # noqa: TC001

type MatchBasis = Literal["city", "country"]


@dataclass(slots=True, frozen=True, kw_only=True)
class EntityRef:
    kind: EntityKind
    id: str


@dataclass(slots=True, frozen=True, kw_only=True)
class Relationship:
    """Bidirectional link; ``source``/``target`` order is only a storage convention."""

    source: EntityRef
    target: EntityRef
    relationship_type: RelationshipType
    basis: MatchBasis

    @property
    def id(self) -> str:
        source = f"{self.source.kind}-{self.source.id}"
        target = f"{self.target.kind}-{self.target.id}"
        return f"{source}-{self.relationship_type}-{target}"
