"""Normalization of raw Kubernetes objects into engine inputs.

Accepts objects as returned by the API server or ``kubectl get -o json``
(camelCase keys). Only the ``spec`` fields the engine needs are kept.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from kubescout.models.resources import OwnerReference, ResourceRecord
from kubescout.patterns.models import ArgoApplication, FluxDeployer, GitSource, Workload

_POD_TEMPLATE_KINDS = frozenset({"Deployment", "StatefulSet", "DaemonSet", "ReplicaSet", "Job"})


class MalformedResourceError(ValueError):
    """Raised when an object does not have the shape of a Kubernetes resource."""


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise MalformedResourceError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _string_map(value: Any, where: str) -> dict[str, str]:
    return {str(k): str(v) for k, v in _mapping(value, where).items() if v is not None}


def _pod_spec(kind: str, spec: Mapping[str, Any]) -> Mapping[str, Any]:
    if kind == "Pod":
        return spec
    if kind in _POD_TEMPLATE_KINDS:
        template = _mapping(spec.get("template"), "spec.template")
        return _mapping(template.get("spec"), "spec.template.spec")
    if kind == "CronJob":
        job_template = _mapping(spec.get("jobTemplate"), "spec.jobTemplate")
        job_spec = _mapping(job_template.get("spec"), "spec.jobTemplate.spec")
        template = _mapping(job_spec.get("template"), "spec.jobTemplate.spec.template")
        return _mapping(template.get("spec"), "spec.jobTemplate.spec.template.spec")
    return {}


def _dicts(value: Any) -> tuple[dict[str, Any], ...]:
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, dict))


def _owner_references(value: Any) -> tuple[OwnerReference, ...]:
    refs = []
    for ref in _dicts(value):
        if not ref.get("kind") or not ref.get("name"):
            continue
        refs.append(
            OwnerReference(
                api_version=str(ref.get("apiVersion", "")),
                kind=str(ref["kind"]),
                name=str(ref["name"]),
                uid=str(ref.get("uid", "")),
                controller=bool(ref.get("controller", False)),
            )
        )
    return tuple(refs)


def normalize_object(obj: Any) -> ResourceRecord:
    """Convert one raw object into a ResourceRecord."""
    if not isinstance(obj, Mapping):
        raise MalformedResourceError(f"resource must be an object, got {type(obj).__name__}")
    kind = obj.get("kind")
    if not isinstance(kind, str) or not kind:
        raise MalformedResourceError("resource has no kind")
    metadata = _mapping(obj.get("metadata"), "metadata")
    spec = _mapping(obj.get("spec"), "spec")
    pod_spec = _pod_spec(kind, spec)

    selector: dict[str, str] = {}
    if kind == "Service":
        selector = _string_map(spec.get("selector"), "spec.selector")

    return ResourceRecord(
        kind=kind,
        namespace=str(metadata.get("namespace") or ""),
        name=str(metadata.get("name") or ""),
        api_version=str(obj.get("apiVersion") or "v1"),
        uid=str(metadata.get("uid") or ""),
        labels=_string_map(metadata.get("labels"), "metadata.labels"),
        annotations=_string_map(metadata.get("annotations"), "metadata.annotations"),
        owner_references=_owner_references(metadata.get("ownerReferences")),
        containers=_dicts(pod_spec.get("containers")),
        volumes=_dicts(pod_spec.get("volumes")),
        selector=selector,
    )


def load_objects(document: Any) -> list[dict[str, Any]]:
    """Flatten a single object, a ``List`` kind or a JSON array into objects."""
    if isinstance(document, list):
        items = document
    elif isinstance(document, Mapping) and isinstance(document.get("items"), list):
        items = document["items"]
    elif isinstance(document, Mapping):
        items = [document]
    else:
        raise MalformedResourceError(f"expected an object or array, got {type(document).__name__}")
    for item in items:
        if not isinstance(item, Mapping):
            raise MalformedResourceError(f"list item must be an object, got {type(item).__name__}")
    return [dict(item) for item in items]


def normalize_objects(objects: Iterable[Any]) -> list[ResourceRecord]:
    return [normalize_object(obj) for obj in objects]


@dataclass
class PatternInputs:
    """Controller objects and workloads split out for the pattern pipeline."""

    sources: list[GitSource] = field(default_factory=list)
    deployers: list[FluxDeployer] = field(default_factory=list)
    applications: list[ArgoApplication] = field(default_factory=list)
    workloads: list[Workload] = field(default_factory=list)
    namespaces: list[str] = field(default_factory=list)


def _first_image(pod_spec: Mapping[str, Any]) -> str:
    containers = _dicts(pod_spec.get("containers"))
    return str(containers[0].get("image", "")) if containers else ""


def extract_pattern_inputs(objects: Iterable[Any]) -> PatternInputs:
    """Split raw objects into the pattern pipeline's inputs.

    ``namespaces`` collects Namespace objects when present, otherwise every
    namespace a workload lives in.
    """
    inputs = PatternInputs()
    namespace_objects: list[str] = []
    for obj in objects:
        record = normalize_object(obj)
        spec = _mapping(obj.get("spec"), "spec")
        group = record.group

        if record.kind == "GitRepository" and group == "source.toolkit.fluxcd.io":
            inputs.sources.append(
                GitSource(name=record.name, namespace=record.namespace, url=str(spec.get("url") or ""))
            )
        elif record.kind == "Kustomization" and group == "kustomize.toolkit.fluxcd.io":
            source_ref = _mapping(spec.get("sourceRef"), "spec.sourceRef")
            if source_ref.get("kind", "GitRepository") != "GitRepository":
                continue
            inputs.deployers.append(
                FluxDeployer(
                    name=record.name,
                    namespace=record.namespace,
                    path=str(spec.get("path") or ""),
                    source_name=str(source_ref.get("name") or ""),
                    source_namespace=str(source_ref.get("namespace") or ""),
                )
            )
        elif record.kind == "Application" and group == "argoproj.io":
            source = _mapping(spec.get("source"), "spec.source")
            destination = _mapping(spec.get("destination"), "spec.destination")
            inputs.applications.append(
                ArgoApplication(
                    name=record.name,
                    namespace=record.namespace,
                    repo_url=str(source.get("repoURL") or ""),
                    path=str(source.get("path") or ""),
                    destination_namespace=str(destination.get("namespace") or ""),
                )
            )
        elif record.kind == "Deployment":
            inputs.workloads.append(
                Workload(
                    name=record.name,
                    namespace=record.namespace,
                    image=_first_image(_pod_spec(record.kind, spec)),
                    kind=record.kind,
                )
            )
        elif record.kind == "Namespace":
            namespace_objects.append(record.name)

    inputs.namespaces = namespace_objects or sorted({w.namespace for w in inputs.workloads})
    return inputs
