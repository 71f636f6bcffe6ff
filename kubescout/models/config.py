"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_UPSTREAM_OWNERS: tuple[str, ...] = ("stefanprodan", "argoproj", "fluxcd")
DEFAULT_INTERNAL_OWNERS: tuple[str, ...] = ("acme", "internal")


@dataclass
class SnapshotConfig:
    """Snapshot assembly configuration."""

    include_relations: bool = True
    include_crossplane: bool = False


@dataclass
class PatternConfig:
    """Repository classification thresholds."""

    upstream_owners: tuple[str, ...] = DEFAULT_UPSTREAM_OWNERS
    internal_owners: tuple[str, ...] = DEFAULT_INTERNAL_OWNERS
    monorepo_threshold: int = 3


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class KubeScoutConfig:
    """Top-level kubescout configuration."""

    cluster_name: str = "default"
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    patterns: PatternConfig = field(default_factory=PatternConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
