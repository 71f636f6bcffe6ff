"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubescout.models.config import (
    DEFAULT_INTERNAL_OWNERS,
    DEFAULT_UPSTREAM_OWNERS,
    APIConfig,
    KubeScoutConfig,
    LogConfig,
    PatternConfig,
    SnapshotConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBESCOUT_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_list(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = _env(key, "")
    if not raw.strip():
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> KubeScoutConfig:
    """Load configuration from KUBESCOUT_* environment variables."""
    return KubeScoutConfig(
        cluster_name=_env("CLUSTER_NAME", "default") or "default",
        snapshot=SnapshotConfig(
            include_relations=_env_bool("INCLUDE_RELATIONS", True),
            include_crossplane=_env_bool("INCLUDE_CROSSPLANE", False),
        ),
        patterns=PatternConfig(
            upstream_owners=_env_list("UPSTREAM_OWNERS", DEFAULT_UPSTREAM_OWNERS),
            internal_owners=_env_list("INTERNAL_OWNERS", DEFAULT_INTERNAL_OWNERS),
            monorepo_threshold=_env_int("MONOREPO_THRESHOLD", 3, min_val=1),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
