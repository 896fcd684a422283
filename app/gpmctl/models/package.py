"""Package models for catalog entries.

This module defines the immutable data structures describing an
installable plugin or theme as supplied by the catalog.
"""

from dataclasses import dataclass, field
from enum import Enum

# Reserved subdirectory that marks bundled demo content
DEMO_DIR_NAME = "_demo"


class PackageType(Enum):
    """Kind of installable package."""

    PLUGIN = "plugin"
    THEME = "theme"

    @property
    def install_dir(self) -> str:
        """Directory under ``user/`` that holds packages of this kind."""
        return f"{self.value}s"


@dataclass(frozen=True, slots=True)
class DependencySpec:
    """A dependency declared by a package.

    Attributes:
        name: Slug of the required package (or the platform slug).
        version: Version requirement string (e.g. '>=1.2', '~2.0'), if any.
    """

    name: str
    version: str | None = None


@dataclass(frozen=True, slots=True)
class Package:
    """Represents an installable package known to the catalog.

    This is an immutable data structure; the orchestrator only reads it.

    Attributes:
        slug: Lower-case identifier (e.g. 'admin', 'quark').
        name: Human-readable display name.
        package_type: Plugin or theme.
        install_path: Install path relative to the destination root.
        version: Installable version offered by the catalog, if any.
        available: Newer version available for an installed package, if any.
        repository: Source repository URL, if any.
        zipball_url: Archive download URL, if any.
        dependencies: Declared dependencies in declaration order.
    """

    slug: str
    name: str
    package_type: PackageType
    install_path: str
    version: str | None = field(default=None)
    available: str | None = field(default=None)
    repository: str | None = field(default=None)
    zipball_url: str | None = field(default=None)
    dependencies: tuple[DependencySpec, ...] = field(default=())

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.slug:
            msg = "Package slug cannot be empty"
            raise ValueError(msg)
        if not self.install_path:
            msg = "Package install path cannot be empty"
            raise ValueError(msg)

    @property
    def is_theme(self) -> bool:
        """Check if this package is a theme."""
        return self.package_type == PackageType.THEME

    @property
    def has_installable_version(self) -> bool:
        """Check if the catalog offers a version that can be downloaded."""
        return self.version is not None

    @property
    def display_version(self) -> str:
        """Version shown when preparing an install."""
        return self.available or self.version or "unknown"

    @property
    def demo_path(self) -> str:
        """Relative path of the bundled demo content directory."""
        return f"{self.install_path}/{DEMO_DIR_NAME}"


def default_install_path(slug: str, package_type: PackageType) -> str:
    """Build the conventional install path for a package.

    Args:
        slug: Package slug.
        package_type: Plugin or theme.

    Returns:
        Path relative to the destination root, e.g. 'user/plugins/admin'.
    """
    return f"user/{package_type.install_dir}/{slug}"
