"""Destination inspection.

Classifies install targets and validates the site root packages are
installed into. Pure inspection: nothing here mutates the filesystem.
"""

import re
from enum import Enum
from pathlib import Path

# Platform version as declared in the site's system/defines.php
_DEFINES_VERSION_RE = re.compile(r"define\(\s*'GRAV_VERSION'\s*,\s*'([^']+)'\s*\)")


class DestinationState(Enum):
    """State of an install target path.

    Attributes:
        ABSENT: Nothing exists at the path.
        OCCUPIED: A file or directory (not a symlink) exists at the path.
        SYMLINKED: The path is a symbolic link (possibly dangling).
    """

    ABSENT = "absent"
    OCCUPIED = "occupied"
    SYMLINKED = "symlinked"


def check_destination(path: Path) -> DestinationState:
    """Classify an install target path.

    The state is derived fresh on every call since prompts earlier in
    the run may have changed the filesystem.

    Args:
        path: Absolute install target.

    Returns:
        DestinationState for the path.
    """
    if path.is_symlink():
        return DestinationState.SYMLINKED
    if path.exists():
        return DestinationState.OCCUPIED
    return DestinationState.ABSENT


def is_site_root(destination: Path) -> bool:
    """Check if a directory looks like a site packages can be installed into.

    Args:
        destination: Candidate site root.

    Returns:
        True if the directory exists and contains a ``user`` directory.
    """
    return destination.is_dir() and (destination / "user").is_dir()


def detect_platform_version(destination: Path) -> str | None:
    """Read the platform version from the site's system/defines.php.

    Args:
        destination: Site root.

    Returns:
        Version string, or None if it cannot be determined.
    """
    defines = destination / "system" / "defines.php"
    try:
        content = defines.read_text(encoding="utf-8")
    except OSError:
        return None

    match = _DEFINES_VERSION_RE.search(content)
    return match.group(1) if match else None
