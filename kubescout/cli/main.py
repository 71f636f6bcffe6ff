"""kubescout command-line interface.

Every command writes a single JSON document to stdout (or ``--output``);
logs go to stderr.

    kubectl get deploy,rs,pods,svc,cm -A -o json | kubescout snapshot
    kubescout snapshot --live -n payments --crossplane
    kubescout patterns --input cluster.json
    kubescout serve --port 8080
"""

from __future__ import annotations

import asyncio
import json
from typing import IO, Any

import click

from kubescout import __version__
from kubescout.collector.normalize import (
    MalformedResourceError,
    extract_pattern_inputs,
    load_objects,
    normalize_objects,
)
from kubescout.config import load_config
from kubescout.models.config import KubeScoutConfig
from kubescout.observability.logging import get_logger, setup_logging
from kubescout.patterns.analysis import analyze_patterns
from kubescout.snapshot import build_snapshot, snapshot_to_dict

_logger = get_logger("cli")


def _read_objects(source: IO[str] | None, live: bool, namespace: str | None) -> list[dict[str, Any]]:
    if live:
        from kubescout.collector.lister import ClusterConfigError, collect_objects

        try:
            return asyncio.run(collect_objects(namespace))
        except ClusterConfigError as exc:
            raise click.ClickException(str(exc)) from exc
    if source is None:
        raise click.UsageError("one of --input or --live is required")
    try:
        document = json.load(source)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{source.name}: invalid JSON: {exc}") from exc
    try:
        return load_objects(document)
    except MalformedResourceError as exc:
        raise click.ClickException(f"{source.name}: {exc}") from exc


def _emit(doc: dict[str, Any], output: IO[str]) -> None:
    json.dump(doc, output, indent=2)
    output.write("\n")


@click.group("kubescout")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override KUBESCOUT_LOG_LEVEL.",
)
@click.version_option(version=__version__, prog_name="kubescout")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """kubescout: Kubernetes ownership, relation graph and GitOps pattern inference."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(f"invalid configuration: {exc}") from exc
    if log_level:
        config.log.level = log_level.lower()
    setup_logging(config.log.level)
    ctx.obj = {"config": config}


@cli.command("snapshot")
@click.option("--input", "-i", "source", type=click.File("r"), default=None, help="JSON file of objects ('-' for stdin).")
@click.option("--live", is_flag=True, help="Collect objects from the current cluster.")
@click.option("--cluster", default=None, help="Cluster name used in resource IDs.")
@click.option("--namespace", "-n", default=None, help="Only include this namespace.")
@click.option("--kind", "-k", default=None, help="Only include this kind.")
@click.option("--relations/--no-relations", default=None, help="Build the relation graph.")
@click.option("--crossplane/--no-crossplane", default=None, help="Add Crossplane lineage edges.")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Write the document here.")
@click.pass_context
def snapshot(
    ctx: click.Context,
    source: IO[str] | None,
    live: bool,
    cluster: str | None,
    namespace: str | None,
    kind: str | None,
    relations: bool | None,
    crossplane: bool | None,
    output: IO[str],
) -> None:
    """Emit a GSF snapshot of ownership and relations."""
    config: KubeScoutConfig = ctx.obj["config"]
    objects = _read_objects(source, live, namespace)
    try:
        records = normalize_objects(objects)
    except MalformedResourceError as exc:
        raise click.ClickException(str(exc)) from exc

    result = build_snapshot(
        records,
        cluster or config.cluster_name,
        include_relations=config.snapshot.include_relations if relations is None else relations,
        include_crossplane=config.snapshot.include_crossplane if crossplane is None else crossplane,
        namespace=namespace,
        kind=kind,
    )
    _emit(snapshot_to_dict(result), output)


@cli.command("patterns")
@click.option("--input", "-i", "source", type=click.File("r"), default=None, help="JSON file of objects ('-' for stdin).")
@click.option("--live", is_flag=True, help="Collect objects from the current cluster.")
@click.option("--organization", default=None, help="Organization name for the suggested hierarchy.")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Write the document here.")
@click.pass_context
def patterns(
    ctx: click.Context,
    source: IO[str] | None,
    live: bool,
    organization: str | None,
    output: IO[str],
) -> None:
    """Classify GitOps repositories and suggest an organization."""
    config: KubeScoutConfig = ctx.obj["config"]
    objects = _read_objects(source, live, None)
    try:
        inputs = extract_pattern_inputs(objects)
    except MalformedResourceError as exc:
        raise click.ClickException(str(exc)) from exc

    result = analyze_patterns(
        inputs.sources,
        inputs.deployers,
        inputs.applications,
        inputs.workloads,
        namespaces=inputs.namespaces,
        config=config.patterns,
        organization=organization,
    )
    _emit(result.to_dict(), output)


@cli.command("serve")
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Override KUBESCOUT_API_PORT.")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.pass_context
def serve(ctx: click.Context, port: int | None, host: str) -> None:
    """Serve the REST API with uvicorn."""
    import uvicorn

    from kubescout.api.app import create_app

    config: KubeScoutConfig = ctx.obj["config"]
    if port is not None:
        config.api.port = port
    _logger.info("api_starting", host=host, port=config.api.port)
    uvicorn.run(create_app(config), host=host, port=config.api.port, log_level=config.log.level)
