"""kubescout command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubescout`` script).
"""

from kubescout.cli.main import cli

__all__ = ["cli"]
