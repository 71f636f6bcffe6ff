"""GitOps pattern synthesis: repositories, environment chains, teams and the suggested organization."""

from kubescout.patterns.analysis import analyze_patterns
from kubescout.patterns.environments import (
    build_env_chains,
    detect_env_groups,
    env_priority,
    infer_env,
    ordered_namespaces,
)
from kubescout.patterns.models import (
    ArgoApplication,
    EnvChain,
    FluxDeployer,
    GitSource,
    PatternsResult,
    PatternType,
    RepoPattern,
    RepoTool,
    SuggestedHub,
    SuggestedOrg,
    SuggestedSpace,
    TeamPattern,
    Workload,
)
from kubescout.patterns.organization import HubBuilder, infer_organization, suggest_organization
from kubescout.patterns.repos import (
    RepoPatternBuilder,
    build_repo_patterns,
    classify_repo_pattern,
    detect_named_pattern,
    merge_tool,
    parse_git_url,
)
from kubescout.patterns.teams import detect_team_patterns, team_name

__all__ = [
    "ArgoApplication",
    "EnvChain",
    "FluxDeployer",
    "GitSource",
    "HubBuilder",
    "PatternType",
    "PatternsResult",
    "RepoPattern",
    "RepoPatternBuilder",
    "RepoTool",
    "SuggestedHub",
    "SuggestedOrg",
    "SuggestedSpace",
    "TeamPattern",
    "Workload",
    "analyze_patterns",
    "build_env_chains",
    "build_repo_patterns",
    "classify_repo_pattern",
    "detect_env_groups",
    "detect_named_pattern",
    "detect_team_patterns",
    "env_priority",
    "infer_env",
    "infer_organization",
    "merge_tool",
    "ordered_namespaces",
    "parse_git_url",
    "suggest_organization",
    "team_name",
]
