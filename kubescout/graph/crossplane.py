"""Crossplane composition lineage: Claim -> Composite Resource (XR) -> managed resource.

Resolution is XR-first and uses only fields present on the scanned objects
(labels and ownerReferences). A node that could not be found among the
records is still returned, built from the label or reference that named it,
with ``present=False``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from kubescout.graph.models import RelationEdge, RelationType
from kubescout.models.resources import OwnerReference, ResourceRecord, resource_id
from kubescout.ownership.resolver import (
    CROSSPLANE_CLAIM_NAMESPACE,
    CROSSPLANE_COMPOSITE,
    crossplane_owner_reference,
)

CROSSPLANE_CLAIM_NAME = "crossplane.io/claim-name"


@dataclass(frozen=True)
class LineageNode:
    """One link in a lineage chain."""

    id: str
    present: bool


@dataclass
class CrossplaneLineage:
    managed: LineageNode
    composite: LineageNode | None = None
    claim: LineageNode | None = None
    evidence: list[str] = field(default_factory=list)


class _RecordIndex:
    """Deterministic lookups over a record set; first match wins."""

    def __init__(self, records: Sequence[ResourceRecord]) -> None:
        self._records = records
        self._by_key: dict[tuple[str, str, str, str], ResourceRecord] = {}
        for record in records:
            self._by_key.setdefault((record.api_version, record.kind, record.namespace, record.name), record)

    def by_reference(self, ref: OwnerReference) -> ResourceRecord | None:
        return self._by_key.get((ref.api_version, ref.kind, "", ref.name))

    def by_name(self, name: str) -> ResourceRecord | None:
        return next((r for r in self._records if r.name == name), None)

    def by_name_namespace(self, name: str, namespace: str) -> ResourceRecord | None:
        return next((r for r in self._records if r.name == name and r.namespace == namespace), None)


def _is_composed(record: ResourceRecord) -> bool:
    composite = record.labels.get(CROSSPLANE_COMPOSITE)
    if composite:
        # Crossplane labels an XR with its own name as well.
        return composite != record.name
    return crossplane_owner_reference(record) is not None


def _resolve(
    target: ResourceRecord,
    index: _RecordIndex,
    cluster: str,
) -> CrossplaneLineage:
    lineage = CrossplaneLineage(managed=LineageNode(target.resource_id(cluster), present=True))
    xr: ResourceRecord | None = None

    composite = target.labels.get(CROSSPLANE_COMPOSITE)
    if composite:
        lineage.evidence.append(f"label:{CROSSPLANE_COMPOSITE}")
        xr = index.by_name(composite)
        if xr is not None:
            lineage.composite = LineageNode(xr.resource_id(cluster), present=True)
        else:
            lineage.composite = LineageNode(
                resource_id(cluster, "", "", "CompositeResource", composite), present=False
            )
    else:
        ref = crossplane_owner_reference(target)
        if ref is not None:
            lineage.evidence.append(f"ownerRef:{ref.api_version}/{ref.kind}")
            xr = index.by_reference(ref)
            if xr is not None:
                lineage.composite = LineageNode(xr.resource_id(cluster), present=True)
            else:
                lineage.composite = LineageNode(
                    resource_id(cluster, "", ref.group, ref.kind, ref.name), present=False
                )

    if lineage.composite is None:
        lineage.evidence.append("xr:unresolved")
        return lineage

    claim_name = target.labels.get(CROSSPLANE_CLAIM_NAME, "")
    claim_namespace = target.labels.get(CROSSPLANE_CLAIM_NAMESPACE, "")
    if not claim_name and xr is not None:
        claim_name = xr.labels.get(CROSSPLANE_CLAIM_NAME, "")
        claim_namespace = xr.labels.get(CROSSPLANE_CLAIM_NAMESPACE, "")
    if claim_name:
        lineage.evidence.append("label:crossplane.io/claim-*")
        claim = index.by_name_namespace(claim_name, claim_namespace)
        if claim is not None:
            lineage.claim = LineageNode(claim.resource_id(cluster), present=True)
        else:
            lineage.claim = LineageNode(
                resource_id(cluster, claim_namespace, "", "Claim", claim_name), present=False
            )
    return lineage


def resolve_crossplane_lineage(
    target: ResourceRecord,
    records: Sequence[ResourceRecord],
    cluster: str,
) -> CrossplaneLineage | None:
    """Build the lineage chain for ``target``; None when it is not Crossplane-composed."""
    if not _is_composed(target):
        return None
    return _resolve(target, _RecordIndex(records), cluster)


def build_crossplane_relations(records: Sequence[ResourceRecord], cluster: str) -> list[RelationEdge]:
    """Emit ``claim -> XR`` and ``XR -> managed`` ``owns`` edges."""
    index = _RecordIndex(records)
    edges: list[RelationEdge] = []
    seen: set[tuple[str, str]] = set()
    for record in records:
        if not _is_composed(record):
            continue
        lineage = _resolve(record, index, cluster)
        if lineage.composite is None:
            continue
        links = [(lineage.composite, lineage.managed)]
        if lineage.claim is not None:
            links.append((lineage.claim, lineage.composite))
        for source, target in links:
            if (source.id, target.id) in seen:
                continue
            seen.add((source.id, target.id))
            synthesized = not (source.present and target.present)
            edges.append(RelationEdge(source.id, target.id, RelationType.OWNS, synthesized=synthesized))
    return edges
