"""GSF (gsf/v1) snapshot assembly.

Combines per-resource ownership with the relation graph into the versioned
document consumed by reporting tools. Entry and relation IDs use the
``cluster/namespace/group/kind/name`` format; downstream tooling joins on it.
"""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime

from kubescout.graph.models import RelationEdge
from kubescout.graph.relations import build_relations
from kubescout.models.ownership import Ownership
from kubescout.models.resources import ResourceRecord
from kubescout.observability.logging import get_logger
from kubescout.observability.metrics import (
    relations_built_total,
    resources_classified_total,
    snapshot_duration_seconds,
)
from kubescout.ownership.resolver import resolve_ownership

_logger = get_logger("snapshot")

GSF_VERSION = "gsf/v1"


@dataclass(frozen=True)
class GSFEntry:
    id: str
    cluster: str
    namespace: str
    kind: str
    name: str
    api_version: str
    owner: Ownership
    labels: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        doc: dict[str, object] = {
            "id": self.id,
            "cluster": self.cluster,
            "namespace": self.namespace,
            "kind": self.kind,
            "name": self.name,
            "apiVersion": self.api_version,
        }
        if not self.owner.is_native:
            doc["owner"] = self.owner.to_dict()
        if self.labels:
            doc["labels"] = dict(self.labels)
        return doc


@dataclass
class GSFSummary:
    total: int = 0
    by_kind: dict[str, int] = field(default_factory=dict)
    by_owner: dict[str, int] = field(default_factory=dict)
    drifted: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "byKind": dict(self.by_kind),
            "byOwner": dict(self.by_owner),
            "drifted": self.drifted,
        }


@dataclass
class GSFSnapshot:
    cluster: str
    generated_at: datetime
    entries: list[GSFEntry] = field(default_factory=list)
    relations: list[RelationEdge] = field(default_factory=list)
    summary: GSFSummary = field(default_factory=GSFSummary)
    version: str = GSF_VERSION


def _selected(record: ResourceRecord, namespace: str | None, kind: str | None) -> bool:
    if namespace and record.namespace != namespace:
        return False
    if kind and record.kind != kind:
        return False
    return True


def build_snapshot(
    records: Sequence[ResourceRecord],
    cluster: str,
    *,
    include_relations: bool = True,
    include_crossplane: bool = False,
    namespace: str | None = None,
    kind: str | None = None,
    generated_at: datetime | None = None,
) -> GSFSnapshot:
    """Classify ``records`` and assemble a GSF snapshot.

    ``namespace``/``kind`` filter the record set before relations are built,
    so edges only connect resources that survived the filter (plus owners
    synthesized from references).
    """
    t_start = time.monotonic()
    selected = [r for r in records if _selected(r, namespace, kind)]

    entries: list[GSFEntry] = []
    by_kind: Counter[str] = Counter()
    by_owner: Counter[str] = Counter()
    for record in selected:
        owner = resolve_ownership(record)
        entries.append(
            GSFEntry(
                id=record.resource_id(cluster),
                cluster=cluster,
                namespace=record.namespace,
                kind=record.kind,
                name=record.name,
                api_version=record.api_version,
                owner=owner,
                labels=dict(record.labels),
            )
        )
        by_kind[record.kind] += 1
        by_owner[str(owner.type)] += 1
        resources_classified_total.labels(owner=str(owner.type)).inc()

    relations: list[RelationEdge] = []
    if include_relations:
        relations = build_relations(selected, cluster, include_crossplane=include_crossplane)
        for edge in relations:
            relations_built_total.labels(type=str(edge.type)).inc()

    snapshot = GSFSnapshot(
        cluster=cluster,
        generated_at=generated_at or datetime.now(tz=UTC),
        entries=entries,
        relations=relations,
        summary=GSFSummary(total=len(entries), by_kind=dict(by_kind), by_owner=dict(by_owner)),
    )

    duration = time.monotonic() - t_start
    snapshot_duration_seconds.observe(duration)
    _logger.info(
        "snapshot_built",
        cluster=cluster,
        entries=len(entries),
        relations=len(relations),
        duration_ms=round(duration * 1000.0, 2),
    )
    return snapshot


def snapshot_to_dict(snapshot: GSFSnapshot) -> dict[str, object]:
    """Render a snapshot as the camelCase JSON-ready GSF document."""
    generated_at = snapshot.generated_at.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    return {
        "version": snapshot.version,
        "generatedAt": generated_at,
        "cluster": snapshot.cluster,
        "entries": [e.to_dict() for e in snapshot.entries],
        "relations": [r.to_dict() for r in snapshot.relations],
        "summary": snapshot.summary.to_dict(),
    }
