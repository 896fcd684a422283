"""CLI package for gpmctl.

This package contains the Typer application and all subcommands.
"""

from gpmctl.cli.main import app

__all__ = ["app"]
