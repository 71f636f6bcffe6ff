"""Ownership classification data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class OwnerType(StrEnum):
    """Controller or tool responsible for a resource's lifecycle."""

    FLUX = "Flux"
    ARGOCD = "ArgoCD"
    HELM = "Helm"
    TERRAFORM = "Terraform"
    CROSSPLANE = "Crossplane"
    CONFIGHUB = "ConfigHub"
    NATIVE = "Native"


@dataclass(frozen=True)
class Ownership:
    """Inferred owner of a resource.

    ``name``/``namespace`` identify the owning controller object (the Flux
    Kustomization, the Argo CD Application, the Helm release), never the
    resource being classified. ``NATIVE`` means no controller evidence was
    found; it is a classification, not an error.
    """

    type: OwnerType = OwnerType.NATIVE
    sub_type: str = ""
    name: str = ""
    namespace: str = ""

    @property
    def is_native(self) -> bool:
        return self.type is OwnerType.NATIVE

    def to_dict(self) -> dict[str, str]:
        doc = {"type": str(self.type)}
        if self.sub_type:
            doc["subType"] = self.sub_type
        if self.name:
            doc["name"] = self.name
        if self.namespace:
            doc["namespace"] = self.namespace
        return doc


NATIVE = Ownership()
