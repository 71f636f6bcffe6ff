"""Entry point for `python -m kubescout`.

Usage:
    python -m kubescout snapshot --input cluster.json
    uv run python -m kubescout serve
"""

from __future__ import annotations

from kubescout.cli import cli

cli()
