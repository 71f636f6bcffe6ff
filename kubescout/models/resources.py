"""Normalized resource records and the load-bearing ResourceID format."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def api_group(api_version: str) -> str:
    """Return the API group of an apiVersion string.

    Core-group versions ("v1") have no group and yield "".
    """
    group, sep, _ = api_version.partition("/")
    return group if sep else ""


def resource_id(cluster: str, namespace: str, group: str, kind: str, name: str) -> str:
    """Build the ``cluster/namespace/group/kind/name`` identifier.

    Empty segments are preserved positionally, so a core-group ConfigMap in
    namespace ``prod`` is ``c1/prod//ConfigMap/app-config``. Downstream
    tooling joins on this string; do not change the format.
    """
    return f"{cluster}/{namespace}/{group}/{kind}/{name}"


@dataclass(frozen=True)
class OwnerReference:
    """One entry of ``metadata.ownerReferences``."""

    api_version: str
    kind: str
    name: str
    uid: str = ""
    controller: bool = False

    @property
    def group(self) -> str:
        return api_group(self.api_version)


@dataclass(frozen=True)
class ResourceRecord:
    """Normalized view of one cluster object.

    Produced by the collector's normalization step, consumed by ownership
    resolution, relation extraction and snapshot assembly. Only Pod, Service
    and workload kinds carry ``containers``/``volumes``/``selector``; every
    other kind leaves them empty.
    """

    kind: str
    namespace: str
    name: str
    api_version: str = "v1"
    uid: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    owner_references: tuple[OwnerReference, ...] = ()
    containers: tuple[dict[str, Any], ...] = ()
    volumes: tuple[dict[str, Any], ...] = ()
    selector: dict[str, str] = field(default_factory=dict)

    @property
    def group(self) -> str:
        return api_group(self.api_version)

    def resource_id(self, cluster: str) -> str:
        return resource_id(cluster, self.namespace, self.group, self.kind, self.name)
