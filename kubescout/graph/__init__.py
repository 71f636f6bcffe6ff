"""Resource relationship graph.

Typed edges derived from declared configuration: ownerReferences (owns),
Service selectors (selects), ConfigMap/Secret volumes (mounts), container
env references (references) and, optionally, Crossplane composition lineage.
"""

from kubescout.graph.crossplane import (
    CrossplaneLineage,
    LineageNode,
    build_crossplane_relations,
    resolve_crossplane_lineage,
)
from kubescout.graph.models import RelationEdge, RelationType
from kubescout.graph.relations import (
    RELATION_EXTRACTORS,
    build_mounts_relations,
    build_owns_relations,
    build_references_relations,
    build_relations,
    build_selects_relations,
    matches_selector,
)

__all__ = [
    "CrossplaneLineage",
    "LineageNode",
    "RELATION_EXTRACTORS",
    "RelationEdge",
    "RelationType",
    "build_crossplane_relations",
    "build_mounts_relations",
    "build_owns_relations",
    "build_references_relations",
    "build_relations",
    "build_selects_relations",
    "matches_selector",
    "resolve_crossplane_lineage",
]
