"""Prometheus metrics for the inference pipelines."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

resources_classified_total = Counter(
    "kubescout_resources_classified_total",
    "Resources classified by ownership resolution",
    ["owner"],
)

relations_built_total = Counter(
    "kubescout_relations_built_total",
    "Relation edges emitted by the graph extractors",
    ["type"],
)

repos_classified_total = Counter(
    "kubescout_repos_classified_total",
    "Git source repositories classified by pattern type",
    ["pattern"],
)

snapshot_duration_seconds = Histogram(
    "kubescout_snapshot_duration_seconds",
    "Wall time spent assembling a GSF snapshot",
    buckets=(0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)
