"""End-to-end pattern pipeline: controller objects and workloads -> PatternsResult."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from kubescout.models.config import PatternConfig
from kubescout.observability.logging import get_logger
from kubescout.observability.metrics import repos_classified_total
from kubescout.patterns.environments import build_env_chains, detect_env_groups
from kubescout.patterns.models import ArgoApplication, FluxDeployer, GitSource, PatternsResult, Workload
from kubescout.patterns.organization import suggest_organization
from kubescout.patterns.repos import build_repo_patterns
from kubescout.patterns.teams import detect_team_patterns

_logger = get_logger("patterns.analysis")


def analyze_patterns(
    sources: Sequence[GitSource],
    deployers: Sequence[FluxDeployer],
    applications: Sequence[ArgoApplication],
    workloads: Sequence[Workload],
    namespaces: Iterable[str] | None = None,
    config: PatternConfig | None = None,
    organization: str | None = None,
) -> PatternsResult:
    """Derive repositories, env chains, teams, env groups and the suggested org.

    ``namespaces`` defaults to the namespaces the workloads live in;
    ``organization`` overrides the owner inferred from the repositories.
    """
    config = config or PatternConfig()
    if namespaces is None:
        namespaces = sorted({w.namespace for w in workloads})

    repos = build_repo_patterns(
        sources,
        deployers,
        applications,
        upstream_owners=config.upstream_owners,
        monorepo_threshold=config.monorepo_threshold,
        internal_owners=config.internal_owners,
    )
    for repo in repos:
        repos_classified_total.labels(pattern=str(repo.pattern_type)).inc()
    chains = build_env_chains(workloads)
    teams = detect_team_patterns(workloads)
    result = PatternsResult(
        repos=repos,
        env_chains=chains,
        teams=teams,
        env_groups=detect_env_groups(namespaces),
        suggested=suggest_organization(repos, teams, chains, organization=organization),
    )
    _logger.info(
        "patterns_analyzed",
        repos=len(repos),
        env_chains=len(chains),
        teams=len(teams),
        hubs=len(result.suggested.hubs),
    )
    return result
