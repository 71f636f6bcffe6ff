"""Relation extractors over a scanned resource set.

Each extractor is a pure function ``(records, cluster) -> list[RelationEdge]``.
None of them reads shared state, so they can run in any order (or
concurrently) and their outputs are simply concatenated. Consumers must not
rely on edge ordering across extractor types.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from kubescout.graph.crossplane import build_crossplane_relations
from kubescout.graph.models import RelationEdge, RelationType
from kubescout.models.resources import ResourceRecord, resource_id
from kubescout.observability.logging import get_logger

_logger = get_logger("graph.relations")

Extractor = Callable[[Sequence[ResourceRecord], str], list[RelationEdge]]


def _core_id(cluster: str, namespace: str, kind: str, name: str) -> str:
    return resource_id(cluster, namespace, "", kind, name)


def build_owns_relations(records: Sequence[ResourceRecord], cluster: str) -> list[RelationEdge]:
    """Emit ``owner -> child`` edges from ownerReferences.

    The owner is found by UID among the scanned records. When the owner's
    kind was not scanned its ID is synthesized from the reference itself (in
    the child's namespace) so lineage is preserved.
    """
    uid_to_id = {r.uid: r.resource_id(cluster) for r in records if r.uid}

    edges: list[RelationEdge] = []
    for record in records:
        if not record.owner_references:
            continue
        child_id = record.resource_id(cluster)
        for ref in record.owner_references:
            owner_id = uid_to_id.get(ref.uid) if ref.uid else None
            synthesized = owner_id is None
            if owner_id is None:
                owner_id = resource_id(cluster, record.namespace, ref.group, ref.kind, ref.name)
            edges.append(RelationEdge(owner_id, child_id, RelationType.OWNS, synthesized=synthesized))
    return edges


def matches_selector(labels: Mapping[str, str], selector: Mapping[str, str]) -> bool:
    """True when every selector entry is present and equal in ``labels``."""
    return all(key in labels and labels[key] == value for key, value in selector.items())


def build_selects_relations(records: Sequence[ResourceRecord], cluster: str) -> list[RelationEdge]:
    """Emit ``Service -> Pod`` edges for same-namespace selector matches."""
    pods_by_namespace: dict[str, list[ResourceRecord]] = defaultdict(list)
    for record in records:
        if record.kind == "Pod":
            pods_by_namespace[record.namespace].append(record)

    edges: list[RelationEdge] = []
    for record in records:
        if record.kind != "Service" or not record.selector:
            continue
        service_id = record.resource_id(cluster)
        for pod in pods_by_namespace.get(record.namespace, ()):
            if matches_selector(pod.labels, record.selector):
                edges.append(RelationEdge(service_id, pod.resource_id(cluster), RelationType.SELECTS))
    return edges


def build_mounts_relations(records: Sequence[ResourceRecord], cluster: str) -> list[RelationEdge]:
    """Emit ``Pod -> ConfigMap|Secret`` edges for configMap and secret volumes."""
    edges: list[RelationEdge] = []
    for record in records:
        if record.kind != "Pod":
            continue
        pod_id = record.resource_id(cluster)
        for volume in record.volumes:
            config_map = volume.get("configMap")
            if isinstance(config_map, dict) and config_map.get("name"):
                target = _core_id(cluster, record.namespace, "ConfigMap", str(config_map["name"]))
                edges.append(RelationEdge(pod_id, target, RelationType.MOUNTS))
            secret = volume.get("secret")
            if isinstance(secret, dict) and secret.get("secretName"):
                target = _core_id(cluster, record.namespace, "Secret", str(secret["secretName"]))
                edges.append(RelationEdge(pod_id, target, RelationType.MOUNTS))
    return edges


def _container_targets(container: Mapping[str, Any]) -> Iterable[tuple[str, str]]:
    """Yield ``(kind, name)`` for every ConfigMap/Secret a container references."""
    env_from = container.get("envFrom")
    for source in env_from if isinstance(env_from, list) else ():
        if not isinstance(source, dict):
            continue
        cm_ref = source.get("configMapRef")
        if isinstance(cm_ref, dict) and cm_ref.get("name"):
            yield "ConfigMap", str(cm_ref["name"])
        secret_ref = source.get("secretRef")
        if isinstance(secret_ref, dict) and secret_ref.get("name"):
            yield "Secret", str(secret_ref["name"])

    env_vars = container.get("env")
    for env in env_vars if isinstance(env_vars, list) else ():
        if not isinstance(env, dict):
            continue
        value_from = env.get("valueFrom")
        if not isinstance(value_from, dict):
            continue
        cm_key = value_from.get("configMapKeyRef")
        if isinstance(cm_key, dict) and cm_key.get("name"):
            yield "ConfigMap", str(cm_key["name"])
        secret_key = value_from.get("secretKeyRef")
        if isinstance(secret_key, dict) and secret_key.get("name"):
            yield "Secret", str(secret_key["name"])


def build_references_relations(records: Sequence[ResourceRecord], cluster: str) -> list[RelationEdge]:
    """Emit one ``Pod -> ConfigMap|Secret`` edge per distinct env reference.

    A Secret pulled in via ``envFrom`` and again via ``secretKeyRef`` is a
    single dependency and yields a single edge.
    """
    edges: list[RelationEdge] = []
    for record in records:
        if record.kind != "Pod":
            continue
        pod_id = record.resource_id(cluster)
        seen: set[tuple[str, str]] = set()
        for container in record.containers:
            for target in _container_targets(container):
                if target in seen:
                    continue
                seen.add(target)
                kind, name = target
                edges.append(
                    RelationEdge(pod_id, _core_id(cluster, record.namespace, kind, name), RelationType.REFERENCES)
                )
    return edges


RELATION_EXTRACTORS: tuple[Extractor, ...] = (
    build_owns_relations,
    build_selects_relations,
    build_mounts_relations,
    build_references_relations,
)


def build_relations(
    records: Sequence[ResourceRecord],
    cluster: str,
    *,
    include_crossplane: bool = False,
) -> list[RelationEdge]:
    """Run every extractor over ``records`` and concatenate their edges."""
    extractors: list[Extractor] = list(RELATION_EXTRACTORS)
    if include_crossplane:
        extractors.append(build_crossplane_relations)

    edges: list[RelationEdge] = []
    for extractor in extractors:
        edges.extend(extractor(records, cluster))
    _logger.debug("relations_built", resources=len(records), edges=len(edges))
    return edges
