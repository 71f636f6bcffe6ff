"""Suggested organization synthesis.

Hubs come from three independent sources, folded into one accumulate-only
map keyed by hub name:

1. platform repositories -> a single shared ``platform`` hub
2. team patterns         -> one hub per team
3. environment chains    -> one hub per app deployed to more than two namespaces
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from kubescout.observability.logging import get_logger
from kubescout.patterns.environments import infer_env, ordered_namespaces
from kubescout.patterns.models import (
    EnvChain,
    PatternType,
    RepoPattern,
    SuggestedHub,
    SuggestedOrg,
    SuggestedSpace,
    TeamPattern,
)
from kubescout.patterns.repos import EXTERNAL_OWNER

_logger = get_logger("patterns.organization")

DEFAULT_ORGANIZATION = "your-org"
PLATFORM_HUB = "platform"


class HubBuilder:
    """Accumulate-only hub map; an existing hub is never replaced."""

    def __init__(self) -> None:
        self._hubs: dict[str, SuggestedHub] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._hubs

    def insert_or_get(self, name: str) -> SuggestedHub:
        hub = self._hubs.get(name)
        if hub is None:
            hub = SuggestedHub(name=name)
            self._hubs[name] = hub
        return hub

    def build(self) -> list[SuggestedHub]:
        return sorted(self._hubs.values(), key=lambda h: h.name)


def infer_organization(repos: Iterable[RepoPattern]) -> str:
    """Most frequent owner among in-house repositories.

    Ties keep the owner seen first.
    """
    counts: Counter[str] = Counter()
    for repo in repos:
        if repo.owner and repo.owner != EXTERNAL_OWNER and repo.pattern_type is not PatternType.EXTERNAL:
            counts[repo.owner] += 1

    organization, best = DEFAULT_ORGANIZATION, 0
    for owner, count in counts.items():
        if count > best:
            organization, best = owner, count
    return organization


def _add_platform_hub(hubs: HubBuilder, repos: Sequence[RepoPattern]) -> None:
    for repo in repos:
        if repo.pattern_type is not PatternType.PLATFORM:
            continue
        hub = hubs.insert_or_get(PLATFORM_HUB)
        for app in repo.apps:
            hub.app_spaces.append(SuggestedSpace(name=app, workloads=[app], env="shared"))


def _add_team_hubs(hubs: HubBuilder, teams: Sequence[TeamPattern]) -> None:
    for team in teams:
        if not team.namespaces:
            continue
        hub = hubs.insert_or_get(team.name)
        per_namespace = team.workloads // len(team.namespaces)
        for namespace in team.namespaces:
            hub.app_spaces.append(
                SuggestedSpace(
                    name=namespace,
                    workloads=[f"{per_namespace} workloads"],
                    env=infer_env(namespace),
                )
            )


def _add_chain_hubs(hubs: HubBuilder, chains: Sequence[EnvChain]) -> None:
    for chain in chains:
        if len(chain.environments) <= 2 or chain.app_name in hubs:
            continue
        hub = hubs.insert_or_get(chain.app_name)
        for namespace in ordered_namespaces(chain):
            env = infer_env(namespace)
            hub.app_spaces.append(
                SuggestedSpace(
                    name=f"{chain.app_name}-{env}",
                    workloads=[f"{namespace}/{chain.app_name}"],
                    env=env,
                )
            )


def suggest_organization(
    repos: Sequence[RepoPattern],
    teams: Sequence[TeamPattern],
    chains: Sequence[EnvChain],
    organization: str | None = None,
) -> SuggestedOrg:
    """Synthesize the organization -> hub -> app space hierarchy."""
    hubs = HubBuilder()
    _add_platform_hub(hubs, repos)
    _add_team_hubs(hubs, teams)
    _add_chain_hubs(hubs, chains)

    org = SuggestedOrg(
        organization=organization or infer_organization(repos),
        hubs=hubs.build(),
    )
    _logger.debug("organization_suggested", organization=org.organization, hubs=len(org.hubs))
    return org
