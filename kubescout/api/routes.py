"""Route handlers for the kubescout REST API.

Handlers are synchronous: every endpoint runs the pure inference engine over
the objects in the request body, so FastAPI dispatches them to its
threadpool.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

from kubescout.api.schemas import HealthResponse, OwnershipRequest, PatternsRequest, SnapshotRequest
from kubescout.collector.normalize import extract_pattern_inputs, normalize_object, normalize_objects
from kubescout.models.config import KubeScoutConfig
from kubescout.observability.logging import get_logger
from kubescout.ownership.resolver import matching_rule, resolve_ownership
from kubescout.patterns.analysis import analyze_patterns
from kubescout.snapshot import build_snapshot, snapshot_to_dict

_log = get_logger("api.routes")

router = APIRouter()


def _config(request: Request) -> KubeScoutConfig:
    config: KubeScoutConfig = request.app.state.config
    return config


@router.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    from kubescout import __version__

    return HealthResponse(status="ok", version=__version__, cluster=_config(request).cluster_name)


@router.post("/snapshot")
def snapshot(body: SnapshotRequest, request: Request) -> dict[str, Any]:
    """Classify the posted resources and return a GSF document."""
    config = _config(request)
    records = normalize_objects(body.resources)
    result = build_snapshot(
        records,
        body.cluster or config.cluster_name,
        include_relations=config.snapshot.include_relations if body.relations is None else body.relations,
        include_crossplane=config.snapshot.include_crossplane if body.crossplane is None else body.crossplane,
        namespace=body.namespace or None,
        kind=body.kind or None,
    )
    return snapshot_to_dict(result)


@router.post("/ownership")
def ownership(body: OwnershipRequest, request: Request) -> dict[str, Any]:
    """Classify a single resource."""
    record = normalize_object(body.resource)
    owner = resolve_ownership(record)
    rule = matching_rule(record)
    _log.debug("ownership_resolved", kind=record.kind, name=record.name, rule=rule.name if rule else None)
    return {
        "id": record.resource_id(_config(request).cluster_name),
        "owner": owner.to_dict(),
        "rule": rule.name if rule else None,
    }


@router.post("/patterns")
def patterns(body: PatternsRequest, request: Request) -> dict[str, Any]:
    """Derive repository patterns and the suggested organization."""
    inputs = extract_pattern_inputs(body.resources)
    result = analyze_patterns(
        inputs.sources,
        inputs.deployers,
        inputs.applications,
        inputs.workloads,
        namespaces=inputs.namespaces,
        config=_config(request).patterns,
        organization=body.organization or None,
    )
    return result.to_dict()
