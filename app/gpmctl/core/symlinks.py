"""Acquisition strategy selection and symlink source lookup.

When symlinks are enabled, a package whose repository has a checkout in
one of the configured development roots is linked into place instead of
being downloaded.
"""

import logging
import re
from enum import Enum
from pathlib import Path

from gpmctl.core.config import InstallConfig
from gpmctl.models.package import Package

logger = logging.getLogger(__name__)

# GitHub/Bitbucket HTTPS URL; group 2 is the trailing path segment (repo name)
GIT_REPOSITORY_RE = re.compile(r"^https?://(?:.*@)?(github|bitbucket)(?:\.org|\.com)/.*/(.*)$")


class AcquisitionStrategy(Enum):
    """How a package's content gets to its destination."""

    SYMLINK = "symlink"
    DOWNLOAD = "download"


def repository_dir_name(repository: str | None) -> str | None:
    """Extract the checkout directory name from a repository URL.

    Args:
        repository: Repository URL, e.g. 'https://github.com/org/grav-plugin-foo.git'.

    Returns:
        Directory name with any '.git' suffix removed, or None if the URL
        is not a recognized GitHub/Bitbucket URL.
    """
    if not repository:
        return None

    match = GIT_REPOSITORY_RE.match(repository.strip())
    if match is None:
        return None

    name = match.group(2)
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name or None


def locate_symlink_source(package: Package, dev_roots: tuple[Path, ...]) -> Path | None:
    """Find a local checkout of a package's repository.

    Development roots are searched in order and the first root containing
    the repository directory wins.

    Args:
        package: Package whose repository should be located.
        dev_roots: Ordered development roots.

    Returns:
        Path of the checkout, or None if not found.
    """
    repo_dir = repository_dir_name(package.repository)
    if repo_dir is None:
        return None

    for root in dev_roots:
        candidate = root / repo_dir
        if candidate.exists():
            logger.debug("Found symlink source for %s at %s", package.slug, candidate)
            return candidate

    return None


def choose_strategy(package: Package, config: InstallConfig) -> AcquisitionStrategy:
    """Decide how a package will be acquired.

    Symlinking is chosen only when symlinks are enabled and either a
    local checkout exists or the catalog has no installable version for
    the package (so it can only come from source).

    Args:
        package: Package to install.
        config: Run configuration.

    Returns:
        The acquisition strategy for this package.
    """
    if config.use_symlinks and (
        locate_symlink_source(package, config.dev_roots) is not None
        or not package.has_installable_version
    ):
        return AcquisitionStrategy.SYMLINK
    return AcquisitionStrategy.DOWNLOAD
