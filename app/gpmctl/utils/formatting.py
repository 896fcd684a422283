"""Shared Rich consoles and one-line message helpers.

Regular output goes to stdout; warnings and errors go to stderr so they
stay visible when stdout is piped.
"""

import sys

from rich.console import Console
from rich.markup import escape

from gpmctl.core.theme import get_theme


def _color_system(stream: object) -> str | None:
    # Hex theme colors need truecolor; let Rich decide for pipes and files
    isatty = getattr(stream, "isatty", None)
    return "truecolor" if isatty is not None and isatty() else None


console = Console(theme=get_theme(), color_system=_color_system(sys.stdout))
err_console = Console(theme=get_theme(), stderr=True, color_system=_color_system(sys.stderr))


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[info]{escape(message)}[/]")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning to stderr."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error to stderr."""
    err_console.print(f"[error]Error:[/] {escape(message)}")
