"""CLI package for vaultgraph.

This package provides the command-line interface using Typer.
The CLI is a thin wrapper around the commands layer.
"""

from vaultgraph.cli.app import app, console

__all__ = ["app", "console"]
