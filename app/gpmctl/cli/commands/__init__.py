"""CLI commands for gpmctl.

This package contains all subcommand implementations.
"""

from gpmctl.cli.commands import config, install

__all__ = ["config", "install"]
