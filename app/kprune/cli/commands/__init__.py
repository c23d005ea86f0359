"""CLI commands for kprune.

This package contains all subcommand implementations.
"""

from kprune.cli.commands import prune, scan

__all__ = ["prune", "scan"]
