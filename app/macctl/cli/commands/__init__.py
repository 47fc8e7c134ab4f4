"""CLI commands for macctl.

This package contains all subcommand implementations.
"""

from macctl.cli.commands import apply, diff, init, search

__all__ = ["apply", "diff", "init", "search"]
