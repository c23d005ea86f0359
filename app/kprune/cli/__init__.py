"""CLI package for kprune.

This package contains the Typer application and all subcommands.
"""

from kprune.cli.main import app

__all__ = ["app"]
