"""Shared fixtures for kubescout integration tests.

Provides a realistic cluster dump (raw objects as ``kubectl get -o json``
would return them) so integration tests can exercise the full
normalize -> classify -> graph -> patterns pipelines without a cluster.
"""

from __future__ import annotations

from typing import Any

import pytest

from kubescout.collector.normalize import normalize_objects
from kubescout.models.resources import ResourceRecord

# ---------------------------------------------------------------------------
# Object factory helpers
# ---------------------------------------------------------------------------


def make_object(
    kind: str,
    name: str,
    namespace: str = "",
    api_version: str = "v1",
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
    uid: str = "",
    owner_references: list[dict[str, Any]] | None = None,
    spec: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Create a raw Kubernetes object with sensible defaults for testing."""
    metadata: dict[str, Any] = {"name": name}
    if namespace:
        metadata["namespace"] = namespace
    if labels:
        metadata["labels"] = labels
    if annotations:
        metadata["annotations"] = annotations
    if uid:
        metadata["uid"] = uid
    if owner_references:
        metadata["ownerReferences"] = owner_references
    obj: dict[str, Any] = {"apiVersion": api_version, "kind": kind, "metadata": metadata}
    if spec is not None:
        obj["spec"] = spec
    return obj


def make_deployment(
    name: str,
    namespace: str,
    image: str = "",
    labels: dict[str, str] | None = None,
    annotations: dict[str, str] | None = None,
    uid: str = "",
) -> dict[str, Any]:
    return make_object(
        "Deployment",
        name,
        namespace,
        api_version="apps/v1",
        labels=labels,
        annotations=annotations,
        uid=uid,
        spec={
            "selector": {"matchLabels": {"app": name}},
            "template": {
                "metadata": {"labels": {"app": name}},
                "spec": {"containers": [{"name": name, "image": image or f"ghcr.io/acme/{name}:1.0.0"}]},
            },
        },
    )


def _owner(kind: str, name: str, uid: str, api_version: str = "apps/v1") -> dict[str, Any]:
    return {"apiVersion": api_version, "kind": kind, "name": name, "uid": uid, "controller": True}


def _flux_labels(kustomization: str) -> dict[str, str]:
    return {
        "kustomize.toolkit.fluxcd.io/name": kustomization,
        "kustomize.toolkit.fluxcd.io/namespace": "flux-system",
    }


def _build_cluster_objects() -> list[dict[str, Any]]:
    objects: list[dict[str, Any]] = []

    # Namespaces
    for ns in (
        "flux-system",
        "argocd",
        "kube-system",
        "checkout-dev",
        "checkout-staging",
        "checkout-prod",
        "team-payments-prod",
        "team-payments-dev",
        "crossplane-system",
    ):
        objects.append(make_object("Namespace", ns))

    # Flux sources and deployers
    objects += [
        make_object(
            "GitRepository",
            "platform",
            "flux-system",
            api_version="source.toolkit.fluxcd.io/v1",
            spec={"url": "https://github.com/acme/platform-infra.git"},
        ),
        make_object(
            "GitRepository",
            "apps",
            "flux-system",
            api_version="source.toolkit.fluxcd.io/v1",
            spec={"url": "https://github.com/acme/apps"},
        ),
        make_object(
            "GitRepository",
            "podinfo",
            "flux-system",
            api_version="source.toolkit.fluxcd.io/v1",
            spec={"url": "https://github.com/stefanprodan/podinfo"},
        ),
    ]
    for name, path, source in (
        ("ingress", "./infrastructure/components/ingress/base", "platform"),
        ("cert-manager", "./infrastructure/components/cert-manager/base", "platform"),
        ("checkout-dev", "./apps/checkout/overlays/dev", "apps"),
        ("checkout-staging", "./apps/checkout/overlays/staging", "apps"),
        ("checkout-prod", "./apps/checkout/overlays/prod", "apps"),
        ("payments", "./apps/payments/base", "apps"),
        ("podinfo", "./kustomize", "podinfo"),
    ):
        objects.append(
            make_object(
                "Kustomization",
                name,
                "flux-system",
                api_version="kustomize.toolkit.fluxcd.io/v1",
                spec={"path": path, "sourceRef": {"kind": "GitRepository", "name": source}},
            )
        )

    # Argo CD application pointing at the same apps repository
    objects.append(
        make_object(
            "Application",
            "payments",
            "argocd",
            api_version="argoproj.io/v1alpha1",
            spec={
                "source": {"repoURL": "https://github.com/acme/apps", "path": "apps/payments/overlays/prod"},
                "destination": {"namespace": "team-payments-prod"},
            },
        )
    )

    # checkout: Flux-managed in three environments, with the full workload chain in prod
    for env in ("dev", "staging", "prod"):
        ns = f"checkout-{env}"
        objects.append(
            make_deployment(
                "checkout",
                ns,
                image=f"ghcr.io/acme/checkout:{env}",
                labels=_flux_labels(ns),
                uid=f"deploy-checkout-{env}",
            )
        )
    objects += [
        make_object(
            "ReplicaSet",
            "checkout-5d8f",
            "checkout-prod",
            api_version="apps/v1",
            uid="rs-checkout-prod",
            owner_references=[_owner("Deployment", "checkout", "deploy-checkout-prod")],
        ),
        make_object(
            "Pod",
            "checkout-5d8f-x1",
            "checkout-prod",
            labels={"app": "checkout"},
            uid="pod-checkout-prod",
            owner_references=[_owner("ReplicaSet", "checkout-5d8f", "rs-checkout-prod")],
            spec={
                "containers": [
                    {
                        "name": "checkout",
                        "image": "ghcr.io/acme/checkout:prod",
                        "envFrom": [{"secretRef": {"name": "checkout-db"}}],
                        "env": [
                            {
                                "name": "DB_PASSWORD",
                                "valueFrom": {"secretKeyRef": {"name": "checkout-db", "key": "password"}},
                            },
                            {
                                "name": "FEATURES",
                                "valueFrom": {"configMapKeyRef": {"name": "checkout-flags", "key": "all"}},
                            },
                        ],
                    }
                ],
                "volumes": [
                    {"name": "config", "configMap": {"name": "checkout-config"}},
                    {"name": "tls", "secret": {"secretName": "checkout-tls"}},
                    {"name": "tmp", "emptyDir": {}},
                ],
            },
        ),
        make_object("Service", "checkout", "checkout-prod", spec={"selector": {"app": "checkout"}}),
        make_object("ConfigMap", "checkout-config", "checkout-prod", labels=_flux_labels("checkout-prod")),
        make_object("Secret", "checkout-tls", "checkout-prod"),
    ]

    # payments team: Argo CD in prod, ConfigHub-managed in dev
    objects += [
        make_deployment(
            "payments-api",
            "team-payments-prod",
            annotations={
                "argocd.argoproj.io/tracking-id": "payments:apps/Deployment:team-payments-prod/payments-api"
            },
        ),
        make_deployment(
            "payments-worker",
            "team-payments-prod",
            labels={"argocd.argoproj.io/instance": "payments"},
        ),
        make_deployment(
            "payments-api",
            "team-payments-dev",
            labels={
                "confighub.com/UnitSlug": "payments-api-dev",
                "argocd.argoproj.io/instance": "payments",
            },
            annotations={"confighub.com/SpaceName": "payments-dev"},
        ),
    ]

    # kube-system: Helm-installed add-on and a native workload
    objects += [
        make_deployment(
            "metrics-server",
            "kube-system",
            labels={"app.kubernetes.io/managed-by": "Helm"},
            annotations={
                "meta.helm.sh/release-name": "metrics-server",
                "meta.helm.sh/release-namespace": "kube-system",
            },
        ),
        make_deployment("coredns", "kube-system"),
    ]

    # Crossplane: claim -> XR -> managed resource
    objects += [
        make_object("PostgresInstance", "orders-db", "checkout-prod", api_version="db.acme.io/v1"),
        make_object(
            "XPostgresInstance",
            "orders-db-7hx2",
            api_version="db.acme.io/v1",
            labels={
                "crossplane.io/composite": "orders-db-7hx2",
                "crossplane.io/claim-name": "orders-db",
                "crossplane.io/claim-namespace": "checkout-prod",
            },
        ),
        make_object(
            "Instance",
            "orders-db-7hx2-rds",
            api_version="rds.aws.upbound.io/v1beta1",
            labels={"crossplane.io/composite": "orders-db-7hx2"},
        ),
    ]
    return objects


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def cluster_objects() -> list[dict[str, Any]]:
    """Raw objects for a small multi-tool cluster."""
    return _build_cluster_objects()


@pytest.fixture()
def cluster_records(cluster_objects: list[dict[str, Any]]) -> list[ResourceRecord]:
    """The cluster objects normalized into ResourceRecords."""
    return normalize_objects(cluster_objects)
