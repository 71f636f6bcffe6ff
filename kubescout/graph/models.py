"""Data structures for the resource relationship graph."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class RelationType(StrEnum):
    """Types of relationships between Kubernetes resources."""

    OWNS = "owns"
    SELECTS = "selects"
    MOUNTS = "mounts"
    REFERENCES = "references"


@dataclass(frozen=True)
class RelationEdge:
    """A directed, typed edge between two ResourceIDs.

    ``synthesized`` marks an edge whose source endpoint was built from a
    reference because the object itself was not scanned.
    """

    source: str
    target: str
    type: RelationType
    synthesized: bool = False

    def to_dict(self) -> dict[str, object]:
        doc: dict[str, object] = {"from": self.source, "to": self.target, "type": str(self.type)}
        if self.synthesized:
            doc["synthesized"] = True
        return doc
