"""Ownership resolution: who manages a resource, inferred from labels and annotations."""

from kubescout.ownership.resolver import OWNERSHIP_RULES, OwnershipRule, matching_rule, resolve_ownership
from kubescout.ownership.tracking import TrackingRef, parse_tracking_id

__all__ = [
    "OWNERSHIP_RULES",
    "OwnershipRule",
    "TrackingRef",
    "matching_rule",
    "parse_tracking_id",
    "resolve_ownership",
]
