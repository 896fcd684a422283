"""Filesystem helpers for placing and removing package content.

Thin wrappers over shutil and pathlib that treat symbolic links as
links (never following them when deleting).
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def make_dir(path: Path) -> Path:
    """Create a directory and any missing parents.

    Args:
        path: Directory to create.

    Returns:
        The created/existing directory path.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def remove_path(path: Path) -> bool:
    """Remove a directory tree, file or symbolic link.

    Dispatches on the path type:
    - Directories (but not symlinks to directories): shutil.rmtree
    - Files, symlinks, and dead symlinks: Path.unlink

    Args:
        path: Path to remove.

    Returns:
        True if something was removed, False if the path did not exist.

    Raises:
        OSError: If the removal fails.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        logger.debug("Removed directory %s", path)
        return True

    if path.exists() or path.is_symlink():
        path.unlink()
        logger.debug("Removed %s", path)
        return True

    return False


def copy_tree(src: Path, dst: Path) -> None:
    """Recursively copy the contents of src into dst, overwriting in place.

    Existing files in dst that src does not contain are left alone.

    Args:
        src: Source directory.
        dst: Destination directory (created if missing).

    Raises:
        OSError: If copying fails.
    """
    shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
    logger.debug("Copied %s into %s", src, dst)
