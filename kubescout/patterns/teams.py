"""Team ownership clusters from the ``team-<name>`` namespace convention."""

from __future__ import annotations

from collections.abc import Iterable

from kubescout.patterns.models import TeamPattern, Workload

TEAM_PREFIX = "team-"


def team_name(namespace: str) -> str | None:
    """Return the team a namespace belongs to, or None outside the convention.

    The team is everything after the prefix, so ``team-payments-prod`` is
    team ``payments-prod``.
    """
    ns = namespace.lower()
    if not ns.startswith(TEAM_PREFIX):
        return None
    return ns[len(TEAM_PREFIX) :] or None


def detect_team_patterns(workloads: Iterable[Workload]) -> list[TeamPattern]:
    """Teams ordered by workload count (descending), then name."""
    teams: dict[str, TeamPattern] = {}
    for workload in workloads:
        name = team_name(workload.namespace)
        if name is None:
            continue
        team = teams.setdefault(name, TeamPattern(name=name))
        if workload.namespace not in team.namespaces:
            team.namespaces.append(workload.namespace)
        team.workloads += 1
    return sorted(teams.values(), key=lambda t: (-t.workloads, t.name))
