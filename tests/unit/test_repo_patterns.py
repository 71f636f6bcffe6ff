"""Tests for repository discovery, classification and named-pattern detection."""

from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from kubescout.patterns.models import (
    ArgoApplication,
    FluxDeployer,
    GitSource,
    PatternType,
    RepoPattern,
    RepoTool,
)
from kubescout.patterns.repos import (
    NAMED_PATTERN_CLUSTER_PER_DIR,
    NAMED_PATTERN_CONTROL_PLANE,
    NAMED_PATTERN_ENV_PER_FOLDER,
    RepoPatternBuilder,
    build_repo_patterns,
    classify_repo_pattern,
    detect_named_pattern,
    merge_tool,
    parse_git_url,
)


def _repos_counter(pattern: str) -> float:
    return REGISTRY.get_sample_value("kubescout_repos_classified_total", {"pattern": pattern}) or 0.0


def _make_repo(
    name: str = "apps",
    owner: str = "acme",
    apps: list[str] | None = None,
    paths: list[str] | None = None,
) -> RepoPattern:
    return RepoPattern(
        url=f"https://github.com/{owner}/{name}",
        owner=owner,
        name=name,
        tool=RepoTool.FLUX,
        apps=apps if apps is not None else ["web"],
        paths=paths or [],
    )


class TestParseGitUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/acme/platform.git", ("acme", "platform")),
            ("https://github.com/acme/platform", ("acme", "platform")),
            ("git@github.com:acme/platform.git", ("acme", "platform")),
            ("ssh://git@github.com/acme/platform", ("acme", "platform")),
            ("https://gitlab.com/group/sub/repo.git", ("sub", "repo")),
            ("https://bitbucket.org/team/repo", ("team", "repo")),
            ("https://github.com/acme/platform/", ("acme", "platform")),
        ],
    )
    def test_hosted(self, url: str, expected: tuple[str, str]) -> None:
        assert parse_git_url(url) == expected

    def test_unknown_host_is_external(self) -> None:
        url = "https://git.internal.example.com/acme/platform.git"
        assert parse_git_url(url) == ("external", url)

    def test_host_without_repo_is_external(self) -> None:
        assert parse_git_url("https://github.com/acme") == ("external", "https://github.com/acme")


class TestMergeTool:
    def test_same_tool(self) -> None:
        assert merge_tool(RepoTool.FLUX, RepoTool.FLUX) is RepoTool.FLUX

    def test_different_tools(self) -> None:
        assert merge_tool(RepoTool.FLUX, RepoTool.ARGOCD) is RepoTool.FLUX_ARGOCD
        assert merge_tool(RepoTool.FLUX_ARGOCD, RepoTool.FLUX) is RepoTool.FLUX_ARGOCD


class TestClassifyRepoPattern:
    def test_zero_apps_is_unused(self) -> None:
        assert classify_repo_pattern(_make_repo(name="platform", apps=[])) is PatternType.UNUSED

    def test_platform_name_wins_over_monorepo(self) -> None:
        repo = _make_repo(name="platform-infra", apps=["a", "b", "c", "d", "e"])
        assert classify_repo_pattern(repo) is PatternType.PLATFORM

    @pytest.mark.parametrize("name", ["Infrastructure", "infra-live", "k8s-platform"])
    def test_platform_markers(self, name: str) -> None:
        assert classify_repo_pattern(_make_repo(name=name)) is PatternType.PLATFORM

    def test_upstream_owner_is_external(self) -> None:
        assert classify_repo_pattern(_make_repo(name="podinfo", owner="stefanprodan")) is PatternType.EXTERNAL

    def test_custom_upstream_owners(self) -> None:
        repo = _make_repo(owner="bitnami")
        assert classify_repo_pattern(repo) is PatternType.POLYREPO
        assert classify_repo_pattern(repo, upstream_owners=("bitnami",)) is PatternType.EXTERNAL

    @pytest.mark.parametrize("owner", ["acme-fluxcd", "Internal-argoproj-mirror"])
    def test_internal_owner_is_never_external(self, owner: str) -> None:
        assert classify_repo_pattern(_make_repo(owner=owner)) is PatternType.POLYREPO

    def test_custom_internal_owners(self) -> None:
        repo = _make_repo(owner="initech-fluxcd")
        assert classify_repo_pattern(repo) is PatternType.EXTERNAL
        assert classify_repo_pattern(repo, internal_owners=("initech",)) is PatternType.POLYREPO

    def test_more_than_three_apps_is_monorepo(self) -> None:
        assert classify_repo_pattern(_make_repo(apps=["a", "b", "c", "d"])) is PatternType.MONOREPO

    def test_more_than_three_paths_is_monorepo(self) -> None:
        repo = _make_repo(apps=["a"], paths=["./a", "./b", "./c", "./d"])
        assert classify_repo_pattern(repo) is PatternType.MONOREPO

    def test_three_apps_is_polyrepo(self) -> None:
        assert classify_repo_pattern(_make_repo(apps=["a", "b", "c"])) is PatternType.POLYREPO

    def test_threshold_parameter(self) -> None:
        repo = _make_repo(apps=["a", "b"])
        assert classify_repo_pattern(repo, monorepo_threshold=1) is PatternType.MONOREPO


class TestDetectNamedPattern:
    def test_components_and_base_beat_clusters(self) -> None:
        paths = ["./platform/components/x/base", "./clusters/y"]
        assert detect_named_pattern(paths) == NAMED_PATTERN_CONTROL_PLANE

    def test_clusters(self) -> None:
        assert detect_named_pattern(["./clusters/prod/", "./apps"]) == NAMED_PATTERN_CLUSTER_PER_DIR

    def test_base_and_overlays(self) -> None:
        assert detect_named_pattern(["./app/base", "./app/overlays/prod"]) == NAMED_PATTERN_ENV_PER_FOLDER

    def test_envs_alone(self) -> None:
        assert detect_named_pattern(["./deploy/envs/staging"]) == NAMED_PATTERN_ENV_PER_FOLDER
        assert detect_named_pattern(["./deploy/environments/prod"]) == NAMED_PATTERN_ENV_PER_FOLDER

    def test_case_insensitive(self) -> None:
        assert detect_named_pattern(["./Clusters/Prod"]) == NAMED_PATTERN_CLUSTER_PER_DIR

    def test_no_markers(self) -> None:
        assert detect_named_pattern(["./apps/web", "./apps/api"]) == ""
        assert detect_named_pattern([]) == ""

    def test_base_alone_is_not_a_pattern(self) -> None:
        assert detect_named_pattern(["./app/base"]) == ""


class TestRepoPatternBuilder:
    def test_insert_or_get_creates_once(self) -> None:
        builder = RepoPatternBuilder()
        first = builder.insert_or_get("https://github.com/acme/apps", RepoTool.FLUX)
        second = builder.insert_or_get("https://github.com/acme/apps", RepoTool.FLUX)
        assert first is second
        assert len(builder) == 1

    def test_flux_and_argo_merge(self) -> None:
        url = "https://github.com/acme/apps"
        builder = RepoPatternBuilder()
        builder.add_flux([GitSource("apps", "flux-system", url)], [])
        builder.add_argo([ArgoApplication("web", "argocd", url, path="web")])
        (repo,) = builder.build()
        assert repo.tool is RepoTool.FLUX_ARGOCD
        assert repo.apps == ["web"]

    def test_flux_deployers_fold_into_matching_source(self) -> None:
        sources = [
            GitSource("apps", "flux-system", "https://github.com/acme/apps"),
            GitSource("apps", "other", "https://github.com/acme/other-apps"),
        ]
        deployers = [
            FluxDeployer("web", "flux-system", "./apps/web", "apps"),
            FluxDeployer("api", "team-a", "./apps/api", "apps", source_namespace="flux-system"),
            FluxDeployer("web", "flux-system", "./apps/web", "apps"),
            FluxDeployer("elsewhere", "flux-system", "./x", "apps", source_namespace="other"),
        ]
        builder = RepoPatternBuilder()
        builder.add_flux(sources, deployers)
        repos = {r.name: r for r in builder.build()}
        assert repos["apps"].apps == ["web", "api"]
        assert repos["apps"].paths == ["./apps/web", "./apps/api"]
        assert repos["other-apps"].apps == ["elsewhere"]

    def test_source_without_deployers_is_unused(self) -> None:
        builder = RepoPatternBuilder()
        builder.add_flux([GitSource("apps", "flux-system", "https://github.com/acme/apps")], [])
        (repo,) = builder.build()
        assert repo.pattern_type is PatternType.UNUSED

    def test_empty_urls_and_paths_are_ignored(self) -> None:
        builder = RepoPatternBuilder()
        builder.add_flux([GitSource("none", "flux-system", "")], [])
        builder.add_argo([ArgoApplication("no-repo", "argocd", ""), ArgoApplication("web", "argocd", "https://github.com/acme/web")])
        (repo,) = builder.build()
        assert repo.paths == []
        assert repo.apps == ["web"]

    def test_build_sorted_by_owner_then_name(self) -> None:
        apps = [
            ArgoApplication("a", "argocd", "https://github.com/zeta/apps"),
            ArgoApplication("b", "argocd", "https://github.com/acme/web"),
            ArgoApplication("c", "argocd", "https://github.com/acme/api"),
        ]
        repos = build_repo_patterns([], [], apps)
        assert [(r.owner, r.name) for r in repos] == [("acme", "api"), ("acme", "web"), ("zeta", "apps")]

    def test_named_pattern_assigned_on_build(self) -> None:
        url = "https://github.com/acme/fleet"
        apps = [
            ArgoApplication("prod", "argocd", url, path="clusters/prod/"),
            ArgoApplication("dev", "argocd", url, path="clusters/dev/"),
        ]
        (repo,) = build_repo_patterns([], [], apps)
        assert repo.named_pattern == ""
        apps.append(ArgoApplication("infra", "argocd", url, path="fleet/clusters/prod"))
        (repo,) = build_repo_patterns([], [], apps)
        assert repo.named_pattern == NAMED_PATTERN_CLUSTER_PER_DIR

    def test_build_does_not_touch_metrics(self) -> None:
        apps = [ArgoApplication("web", "argocd", "https://github.com/acme/web", path="deploy")]
        before = _repos_counter("polyrepo")
        build_repo_patterns([], [], apps)
        assert _repos_counter("polyrepo") == before


class TestRepoPatternDocument:
    def test_to_dict(self) -> None:
        repo = _make_repo(apps=["web"], paths=["./web"])
        repo.pattern_type = PatternType.POLYREPO
        assert repo.to_dict() == {
            "url": "https://github.com/acme/apps",
            "owner": "acme",
            "name": "apps",
            "paths": ["./web"],
            "apps": ["web"],
            "tool": "Flux",
            "patternType": "polyrepo",
            "namedPattern": "",
        }
