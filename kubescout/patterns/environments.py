"""Environment inference from namespace names, and cross-namespace app chains."""

from __future__ import annotations

from collections.abc import Iterable

from kubescout.patterns.models import EnvChain, Workload

ENV_GROUP_KEYS = ("production", "staging", "dev", "team", "system")


def env_priority(namespace: str) -> int:
    """Promotion order of a namespace: dev/qa < staging/stage < prod < everything else.

    Other components sort by this value; keep the ordering stable.
    """
    ns = namespace.lower()
    if "dev" in ns or "qa" in ns:
        return 1
    if "staging" in ns or "stage" in ns:
        return 2
    if "prod" in ns:
        return 3
    return 4


def ordered_namespaces(chain: EnvChain) -> list[str]:
    """Namespaces of a chain in promotion order: dev/qa, staging, prod, then the rest."""
    return sorted(chain.environments, key=lambda ns: (env_priority(ns), ns))


def infer_env(namespace: str) -> str:
    """Environment tag of a namespace: prod, staging, dev or default."""
    ns = namespace.lower()
    if "prod" in ns:
        return "prod"
    if "staging" in ns or "stage" in ns:
        return "staging"
    if "dev" in ns or "qa" in ns:
        return "dev"
    return "default"


def build_env_chains(workloads: Iterable[Workload]) -> list[EnvChain]:
    """Group workloads by name; keep apps present in two or more namespaces."""
    by_app: dict[str, dict[str, str]] = {}
    for workload in workloads:
        by_app.setdefault(workload.name, {})[workload.namespace] = workload.image

    chains = [
        EnvChain(app_name=app, environments=envs)
        for app, envs in by_app.items()
        if len(envs) >= 2
    ]
    chains.sort(key=lambda c: c.app_name)
    return chains


def detect_env_groups(namespaces: Iterable[str]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {key: [] for key in ENV_GROUP_KEYS}
    for namespace in namespaces:
        ns = namespace.lower()
        if "prod" in ns:
            groups["production"].append(namespace)
        elif "staging" in ns or "stage" in ns:
            groups["staging"].append(namespace)
        elif "dev" in ns or "qa" in ns or "test" in ns:
            groups["dev"].append(namespace)
        elif ns.startswith("team-"):
            groups["team"].append(namespace)
        elif ns.endswith("-system"):
            groups["system"].append(namespace)
    return groups
