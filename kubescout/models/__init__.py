"""Core data structures for kubescout."""

from kubescout.models.config import KubeScoutConfig
from kubescout.models.ownership import NATIVE, Ownership, OwnerType
from kubescout.models.resources import OwnerReference, ResourceRecord, api_group, resource_id

__all__ = [
    "KubeScoutConfig",
    "NATIVE",
    "OwnerReference",
    "OwnerType",
    "Ownership",
    "ResourceRecord",
    "api_group",
    "resource_id",
]
