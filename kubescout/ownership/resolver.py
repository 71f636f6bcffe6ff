"""Ownership resolution from label and annotation evidence.

Rules are evaluated top to bottom and the first matching rule wins. ConfigHub
comes first: once ConfigHub manages a resource it re-emits the labels of the
controller it replaced, so any GitOps label on such a resource is stale
evidence.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from kubescout.models.ownership import NATIVE, Ownership, OwnerType
from kubescout.models.resources import OwnerReference, ResourceRecord
from kubescout.observability.logging import get_logger
from kubescout.ownership.tracking import DEFAULT_ARGOCD_NAMESPACE, parse_tracking_id

_logger = get_logger("ownership")

CONFIGHUB_UNIT_SLUG = "confighub.com/UnitSlug"
CONFIGHUB_SPACE_NAME = "confighub.com/SpaceName"
FLUX_KUSTOMIZE_NAME = "kustomize.toolkit.fluxcd.io/name"
FLUX_KUSTOMIZE_NAMESPACE = "kustomize.toolkit.fluxcd.io/namespace"
FLUX_HELM_NAME = "helm.toolkit.fluxcd.io/name"
FLUX_HELM_NAMESPACE = "helm.toolkit.fluxcd.io/namespace"
ARGOCD_INSTANCE = "argocd.argoproj.io/instance"
ARGOCD_TRACKING_ID = "argocd.argoproj.io/tracking-id"
MANAGED_BY = "app.kubernetes.io/managed-by"
HELM_RELEASE_NAME = "meta.helm.sh/release-name"
HELM_RELEASE_NAMESPACE = "meta.helm.sh/release-namespace"
TERRAFORM_RUN_ID = "app.terraform.io/run-id"
TERRAFORM_WORKSPACE = "app.terraform.io/workspace-name"
TERRAFORM_MANAGED = "app.terraform.io/managed"
CROSSPLANE_COMPOSITE = "crossplane.io/composite"
CROSSPLANE_CLAIM_NAMESPACE = "crossplane.io/claim-namespace"

DEFAULT_FLUX_NAMESPACE = "flux-system"
CROSSPLANE_GROUP_MARKERS = ("crossplane.io", "upbound.io")


@dataclass(frozen=True)
class OwnershipRule:
    """One precedence step: classify when the predicate holds."""

    name: str
    predicate: Callable[[ResourceRecord], bool]
    classify: Callable[[ResourceRecord], Ownership]


def _confighub(record: ResourceRecord) -> Ownership:
    slug = record.labels.get(CONFIGHUB_UNIT_SLUG) or record.annotations.get(CONFIGHUB_UNIT_SLUG, "")
    space = record.annotations.get(CONFIGHUB_SPACE_NAME) or record.labels.get(CONFIGHUB_SPACE_NAME, "")
    return Ownership(type=OwnerType.CONFIGHUB, sub_type=slug, name=slug, namespace=space)


def _flux(name_key: str, namespace_key: str) -> Callable[[ResourceRecord], Ownership]:
    def classify(record: ResourceRecord) -> Ownership:
        name = record.labels[name_key]
        namespace = record.labels.get(namespace_key) or DEFAULT_FLUX_NAMESPACE
        return Ownership(type=OwnerType.FLUX, sub_type=name, name=name, namespace=namespace)

    return classify


def _argocd_instance(record: ResourceRecord) -> Ownership:
    return Ownership(
        type=OwnerType.ARGOCD,
        sub_type="application",
        name=record.labels[ARGOCD_INSTANCE],
        namespace=DEFAULT_ARGOCD_NAMESPACE,
    )


def _argocd_tracking(record: ResourceRecord) -> Ownership:
    tracking_id = record.annotations[ARGOCD_TRACKING_ID]
    ref = parse_tracking_id(tracking_id)
    if ref is None:
        _logger.debug(
            "tracking_id_unparseable",
            kind=record.kind,
            namespace=record.namespace,
            name=record.name,
            tracking_id=tracking_id,
        )
        return Ownership(type=OwnerType.ARGOCD, sub_type="application")
    return Ownership(
        type=OwnerType.ARGOCD,
        sub_type="application",
        name=ref.app_name,
        namespace=ref.app_namespace,
    )


def _helm(record: ResourceRecord) -> Ownership:
    return Ownership(
        type=OwnerType.HELM,
        sub_type="release",
        name=record.annotations.get(HELM_RELEASE_NAME, ""),
        namespace=record.annotations.get(HELM_RELEASE_NAMESPACE, ""),
    )


def _terraform(record: ResourceRecord) -> Ownership:
    if TERRAFORM_RUN_ID in record.annotations:
        return Ownership(
            type=OwnerType.TERRAFORM,
            sub_type="workspace",
            name=record.annotations.get(TERRAFORM_WORKSPACE, ""),
        )
    return Ownership(type=OwnerType.TERRAFORM, sub_type="managed")


def crossplane_owner_reference(record: ResourceRecord) -> OwnerReference | None:
    for ref in record.owner_references:
        if any(marker in ref.group for marker in CROSSPLANE_GROUP_MARKERS):
            return ref
    return None


def _crossplane(record: ResourceRecord) -> Ownership:
    composite = record.labels.get(CROSSPLANE_COMPOSITE)
    if composite:
        return Ownership(
            type=OwnerType.CROSSPLANE,
            sub_type="composite",
            name=composite,
            namespace=record.labels.get(CROSSPLANE_CLAIM_NAMESPACE, ""),
        )
    ref = crossplane_owner_reference(record)
    return Ownership(type=OwnerType.CROSSPLANE, sub_type="owner-reference", name=ref.name if ref else "")


OWNERSHIP_RULES: tuple[OwnershipRule, ...] = (
    OwnershipRule(
        "confighub",
        lambda r: CONFIGHUB_UNIT_SLUG in r.labels or CONFIGHUB_UNIT_SLUG in r.annotations,
        _confighub,
    ),
    OwnershipRule(
        "flux-kustomization",
        lambda r: FLUX_KUSTOMIZE_NAME in r.labels,
        _flux(FLUX_KUSTOMIZE_NAME, FLUX_KUSTOMIZE_NAMESPACE),
    ),
    OwnershipRule(
        "flux-helmrelease",
        lambda r: FLUX_HELM_NAME in r.labels,
        _flux(FLUX_HELM_NAME, FLUX_HELM_NAMESPACE),
    ),
    OwnershipRule("argocd-instance", lambda r: ARGOCD_INSTANCE in r.labels, _argocd_instance),
    OwnershipRule("argocd-tracking-id", lambda r: ARGOCD_TRACKING_ID in r.annotations, _argocd_tracking),
    OwnershipRule("helm", lambda r: r.labels.get(MANAGED_BY) == "Helm", _helm),
    OwnershipRule(
        "terraform",
        lambda r: TERRAFORM_RUN_ID in r.annotations or TERRAFORM_MANAGED in r.labels,
        _terraform,
    ),
    OwnershipRule(
        "crossplane",
        lambda r: bool(r.labels.get(CROSSPLANE_COMPOSITE)) or crossplane_owner_reference(r) is not None,
        _crossplane,
    ),
)


def resolve_ownership(
    record: ResourceRecord,
    rules: Sequence[OwnershipRule] = OWNERSHIP_RULES,
) -> Ownership:
    """Classify who manages ``record``; ``Native`` when no rule matches."""
    for rule in rules:
        if rule.predicate(record):
            return rule.classify(record)
    return NATIVE


def matching_rule(
    record: ResourceRecord,
    rules: Sequence[OwnershipRule] = OWNERSHIP_RULES,
) -> OwnershipRule | None:
    """Return the rule that decides ``record``'s ownership, if any."""
    for rule in rules:
        if rule.predicate(record):
            return rule
    return None
