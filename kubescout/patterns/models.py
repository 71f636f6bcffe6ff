"""GitOps pattern data structures: pipeline inputs and synthesized outputs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum


class RepoTool(StrEnum):
    """GitOps controllers that reference a repository."""

    FLUX = "Flux"
    ARGOCD = "ArgoCD"
    FLUX_ARGOCD = "Flux+ArgoCD"


class PatternType(StrEnum):
    """How a repository is used across deployers."""

    UNUSED = "unused"
    PLATFORM = "platform"
    EXTERNAL = "external"
    MONOREPO = "monorepo"
    POLYREPO = "polyrepo"


# ---------------------------------------------------------------------------
# Inputs (normalized from controller objects)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GitSource:
    """A Flux GitRepository."""

    name: str
    namespace: str
    url: str


@dataclass(frozen=True)
class FluxDeployer:
    """A Flux Kustomization applying ``path`` from a GitRepository."""

    name: str
    namespace: str
    path: str
    source_name: str
    source_namespace: str = ""


@dataclass(frozen=True)
class ArgoApplication:
    """An Argo CD Application."""

    name: str
    namespace: str
    repo_url: str
    path: str = ""
    destination_namespace: str = ""


@dataclass(frozen=True)
class Workload:
    """A deployed workload and its primary container image."""

    name: str
    namespace: str
    image: str = ""
    kind: str = "Deployment"


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass
class RepoPattern:
    """One inferred Git source repository.

    ``paths`` and ``apps`` accumulate without duplicates while deployers are
    folded in; ``pattern_type`` and ``named_pattern`` are only meaningful once
    accumulation is complete.
    """

    url: str
    owner: str
    name: str
    tool: RepoTool
    paths: list[str] = field(default_factory=list)
    apps: list[str] = field(default_factory=list)
    pattern_type: PatternType = PatternType.UNUSED
    named_pattern: str = ""

    def add_path(self, path: str) -> None:
        if path and path not in self.paths:
            self.paths.append(path)

    def add_app(self, app: str) -> None:
        if app and app not in self.apps:
            self.apps.append(app)

    def to_dict(self) -> dict[str, object]:
        return {
            "url": self.url,
            "owner": self.owner,
            "name": self.name,
            "paths": list(self.paths),
            "apps": list(self.apps),
            "tool": str(self.tool),
            "patternType": str(self.pattern_type),
            "namedPattern": self.named_pattern,
        }


@dataclass
class EnvChain:
    """One application deployed under the same name in two or more namespaces."""

    app_name: str
    environments: dict[str, str] = field(default_factory=dict)  # namespace -> image

    def to_dict(self) -> dict[str, object]:
        return {"appName": self.app_name, "environments": dict(self.environments)}


@dataclass
class TeamPattern:
    """Namespaces grouped under one team by the ``team-<name>`` convention."""

    name: str
    namespaces: list[str] = field(default_factory=list)
    workloads: int = 0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


@dataclass
class SuggestedSpace:
    name: str
    workloads: list[str] = field(default_factory=list)
    env: str = "default"


@dataclass
class SuggestedHub:
    name: str
    app_spaces: list[SuggestedSpace] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "appSpaces": [asdict(space) for space in self.app_spaces],
        }


@dataclass
class SuggestedOrg:
    """Suggested organization -> hub -> app space hierarchy."""

    organization: str
    hubs: list[SuggestedHub] = field(default_factory=list)

    def hub(self, name: str) -> SuggestedHub | None:
        return next((h for h in self.hubs if h.name == name), None)

    def to_dict(self) -> dict[str, object]:
        return {"organization": self.organization, "hubs": [h.to_dict() for h in self.hubs]}


@dataclass
class PatternsResult:
    """Everything the pattern pipeline derives from one cluster."""

    repos: list[RepoPattern] = field(default_factory=list)
    env_chains: list[EnvChain] = field(default_factory=list)
    teams: list[TeamPattern] = field(default_factory=list)
    env_groups: dict[str, list[str]] = field(default_factory=dict)
    suggested: SuggestedOrg = field(default_factory=lambda: SuggestedOrg(organization="your-org"))

    def to_dict(self) -> dict[str, object]:
        return {
            "repos": [r.to_dict() for r in self.repos],
            "envChains": [c.to_dict() for c in self.env_chains],
            "teams": [t.to_dict() for t in self.teams],
            "envGroups": {k: list(v) for k, v in self.env_groups.items()},
            "suggested": self.suggested.to_dict(),
        }
