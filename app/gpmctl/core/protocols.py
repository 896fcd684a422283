"""Protocols for the collaborators the installer depends on.

The installation engine never talks to a terminal, the network or an
archive format directly. Callers inject implementations of these
interfaces; the CLI wires the default ones.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from gpmctl.models.action import ResolvedDependencies
from gpmctl.models.package import Package

# Asks a yes/no question and returns the answer.
ConfirmFn = Callable[[str], bool]

# Receives download progress as a percentage (0-100).
ProgressFn = Callable[[int], None]


class Reporter(Protocol):
    """Append-only sink for user-facing status lines.

    Lines may carry Rich console markup using the theme style names.
    """

    def report(self, line: str) -> None:
        """Emit one status line."""
        ...

    def progress(self, percent: int) -> None:
        """Redraw the current progress line with a new percentage."""
        ...


class Transfer(Protocol):
    """Fetches remote content."""

    def get(self, url: str, on_progress: ProgressFn | None = None) -> bytes:
        """Download a URL and return its body.

        Raises:
            TransportError: If the transfer fails.
        """
        ...


class Installer(Protocol):
    """Extracts a package archive into place."""

    def install(self, archive: Path, destination: Path, install_path: str, is_theme: bool) -> None:
        """Install an archive under destination/install_path.

        Raises:
            InstallerError: If the archive cannot be opened or extracted.
        """
        ...


class Catalog(Protocol):
    """Resolves package names to metadata and computes dependencies."""

    def find_packages(self, names: list[str]) -> tuple[dict[str, Package], list[str]]:
        """Look up packages by name.

        Returns:
            Tuple of (found packages keyed by slug in request order, not-found names).
        """
        ...

    def find_package(self, name: str) -> Package | None:
        """Look up a single package by name."""
        ...

    def get_dependencies(self, names: list[str]) -> ResolvedDependencies:
        """Resolve the dependencies of the given packages.

        Raises:
            ResolutionError: If the dependencies cannot be resolved.
        """
        ...
