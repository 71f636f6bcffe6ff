"""Repository pattern inference from GitOps deployers.

Repositories are discovered from Flux GitRepositories and Argo CD
Applications, then every deployer that references a repository folds its
path and name into it. Classification runs last, once accumulation is
complete.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from kubescout.models.config import DEFAULT_INTERNAL_OWNERS, DEFAULT_UPSTREAM_OWNERS
from kubescout.observability.logging import get_logger
from kubescout.patterns.models import (
    ArgoApplication,
    FluxDeployer,
    GitSource,
    PatternType,
    RepoPattern,
    RepoTool,
)

_logger = get_logger("patterns.repos")

EXTERNAL_OWNER = "external"

# https://github.com/owner/repo(.git) or git@github.com:owner/repo(.git)
_RE_HOSTED_GIT_URL = re.compile(
    r"^(?:[a-z+]+://)?(?:[^@/]+@)?(?:github\.com|gitlab\.com|bitbucket\.org)[:/](?P<path>.+?)/?$",
    re.IGNORECASE,
)

_PLATFORM_MARKERS = ("platform", "infrastructure", "infra")

NAMED_PATTERN_CONTROL_PLANE = "D2 (Control Plane)"
NAMED_PATTERN_CLUSTER_PER_DIR = "Banko (Cluster-per-Dir)"
NAMED_PATTERN_ENV_PER_FOLDER = "Arnie (Env-per-Folder)"


def parse_git_url(url: str) -> tuple[str, str]:
    """Split a hosted Git URL into ``(owner, name)``.

    URLs on unrecognized hosts yield ``("external", url)``.
    """
    trimmed = url.strip()
    if trimmed.endswith(".git"):
        trimmed = trimmed[: -len(".git")]
    match = _RE_HOSTED_GIT_URL.match(trimmed)
    if match:
        segments = [s for s in match.group("path").split("/") if s]
        if len(segments) >= 2:
            return segments[-2], segments[-1]
    return EXTERNAL_OWNER, url


def merge_tool(current: RepoTool, seen_by: RepoTool) -> RepoTool:
    """Combine the tool already recorded for a repo with a new sighting."""
    if current == seen_by:
        return current
    return RepoTool.FLUX_ARGOCD


def _is_internal_owner(owner: str, internal_owners: Sequence[str]) -> bool:
    lowered = owner.lower()
    return any(marker.lower() in lowered for marker in internal_owners)


def classify_repo_pattern(
    repo: RepoPattern,
    upstream_owners: Sequence[str] = DEFAULT_UPSTREAM_OWNERS,
    monorepo_threshold: int = 3,
    internal_owners: Sequence[str] = DEFAULT_INTERNAL_OWNERS,
) -> PatternType:
    """Classify how a fully-accumulated repository is used.

    Order matters: a platform-named repo with many apps is ``platform``,
    not ``monorepo``. Owners matching ``internal_owners`` are never
    ``external``, even when they also match an upstream owner.
    """
    if not repo.apps:
        return PatternType.UNUSED

    name = repo.name.lower()
    if any(marker in name for marker in _PLATFORM_MARKERS):
        return PatternType.PLATFORM

    if repo.owner and not _is_internal_owner(repo.owner, internal_owners):
        if any(upstream in repo.owner for upstream in upstream_owners):
            return PatternType.EXTERNAL

    if len(repo.apps) > monorepo_threshold or len(repo.paths) > monorepo_threshold:
        return PatternType.MONOREPO

    return PatternType.POLYREPO


def detect_named_pattern(paths: Iterable[str]) -> str:
    """Identify a well-known reference layout from path markers.

    Components+base is checked before clusters, so a repo with both is a
    control-plane layout rather than cluster-per-directory.
    """
    has_envs = has_base = has_clusters = has_components = has_overlays = False
    for path in paths:
        lowered = path.lower()
        has_envs = has_envs or "/envs/" in lowered or "/environments/" in lowered
        has_base = has_base or "/base" in lowered
        has_clusters = has_clusters or "/clusters/" in lowered
        has_components = has_components or "/components/" in lowered
        has_overlays = has_overlays or "/overlays/" in lowered

    if has_components and has_base:
        return NAMED_PATTERN_CONTROL_PLANE
    if has_clusters:
        return NAMED_PATTERN_CLUSTER_PER_DIR
    if has_base and (has_overlays or has_envs):
        return NAMED_PATTERN_ENV_PER_FOLDER
    if has_envs:
        return NAMED_PATTERN_ENV_PER_FOLDER
    return ""


class RepoPatternBuilder:
    """Accumulates repositories keyed by URL.

    ``insert_or_get`` is the only way a repository enters the builder, so a
    URL seen by both Flux and Argo CD is merged rather than duplicated.
    """

    def __init__(
        self,
        upstream_owners: Sequence[str] = DEFAULT_UPSTREAM_OWNERS,
        monorepo_threshold: int = 3,
        internal_owners: Sequence[str] = DEFAULT_INTERNAL_OWNERS,
    ) -> None:
        self._repos: dict[str, RepoPattern] = {}
        self._upstream_owners = tuple(upstream_owners)
        self._internal_owners = tuple(internal_owners)
        self._monorepo_threshold = monorepo_threshold

    def __len__(self) -> int:
        return len(self._repos)

    def insert_or_get(self, url: str, tool: RepoTool) -> RepoPattern:
        repo = self._repos.get(url)
        if repo is None:
            owner, name = parse_git_url(url)
            repo = RepoPattern(url=url, owner=owner, name=name, tool=tool)
            self._repos[url] = repo
        else:
            repo.tool = merge_tool(repo.tool, tool)
        return repo

    def add_flux(self, sources: Iterable[GitSource], deployers: Iterable[FluxDeployer]) -> None:
        """Register GitRepositories and fold in the Kustomizations that use them."""
        deployers = list(deployers)
        for source in sources:
            if not source.url:
                continue
            repo = self.insert_or_get(source.url, RepoTool.FLUX)
            for deployer in deployers:
                source_namespace = deployer.source_namespace or deployer.namespace
                if deployer.source_name == source.name and source_namespace == source.namespace:
                    repo.add_path(deployer.path)
                    repo.add_app(deployer.name)

    def add_argo(self, applications: Iterable[ArgoApplication]) -> None:
        for app in applications:
            if not app.repo_url:
                continue
            repo = self.insert_or_get(app.repo_url, RepoTool.ARGOCD)
            repo.add_path(app.path)
            repo.add_app(app.name)

    def build(self) -> list[RepoPattern]:
        """Classify every repository and return them sorted by owner, then name."""
        for repo in self._repos.values():
            repo.pattern_type = classify_repo_pattern(
                repo, self._upstream_owners, self._monorepo_threshold, self._internal_owners
            )
            repo.named_pattern = detect_named_pattern(repo.paths)
        repos = sorted(self._repos.values(), key=lambda r: (r.owner, r.name))
        _logger.debug("repo_patterns_built", repos=len(repos))
        return repos


def build_repo_patterns(
    sources: Iterable[GitSource],
    deployers: Iterable[FluxDeployer],
    applications: Iterable[ArgoApplication],
    upstream_owners: Sequence[str] = DEFAULT_UPSTREAM_OWNERS,
    monorepo_threshold: int = 3,
    internal_owners: Sequence[str] = DEFAULT_INTERNAL_OWNERS,
) -> list[RepoPattern]:
    builder = RepoPatternBuilder(upstream_owners, monorepo_threshold, internal_owners)
    builder.add_flux(sources, deployers)
    builder.add_argo(applications)
    return builder.build()
