"""Archive installer.

Extracts a downloaded package archive and places its content at the
package's install path. Plugins replace the installed directory; themes
are copied over it so files the archive does not ship are kept.
"""

import logging
import shutil
import tempfile
import zipfile
from pathlib import Path

from gpmctl.utils.fileops import copy_tree, make_dir, remove_path

logger = logging.getLogger(__name__)

# Archive entries that never belong to the package
_IGNORED_ENTRIES = frozenset({"__MACOSX"})


class InstallerError(Exception):
    """Base exception for archive installation failures."""


class ZipOpenError(InstallerError):
    """Raised when the archive cannot be opened."""


class ZipExtractError(InstallerError):
    """Raised when the archive cannot be extracted."""


def _content_root(staging: Path) -> Path:
    """Return the directory holding the package files inside a staging dir.

    Archives usually wrap everything in a single top-level folder
    (e.g. 'grav-plugin-foo-1.2.0/'), which is unwrapped.
    """
    entries = [p for p in staging.iterdir() if p.name not in _IGNORED_ENTRIES]
    if not entries:
        raise ZipExtractError("Archive is empty")
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return staging


class ZipInstaller:
    """Installs packages from zip archives."""

    def install(self, archive: Path, destination: Path, install_path: str, is_theme: bool) -> None:
        """Extract an archive to destination/install_path.

        Extraction happens in a staging directory next to the target; the
        existing content is only touched once extraction succeeded.

        Args:
            archive: Zip archive to install.
            destination: Site root.
            install_path: Install path relative to the site root.
            is_theme: Copy over the existing directory instead of replacing it.

        Raises:
            ZipOpenError: If the archive is missing or not a zip file.
            ZipExtractError: If extraction fails or the archive is empty.
            InstallerError: If the content cannot be moved into place.
        """
        target = destination / install_path

        try:
            zf = zipfile.ZipFile(archive)
        except (OSError, zipfile.BadZipFile) as e:
            raise ZipOpenError(f"Unable to open package archive {archive.name}: {e}") from e

        make_dir(target.parent)
        staging = Path(tempfile.mkdtemp(prefix=".gpmctl-staging-", dir=target.parent))
        try:
            with zf:
                try:
                    zf.extractall(staging)
                except (OSError, zipfile.BadZipFile, RuntimeError) as e:
                    raise ZipExtractError(f"Unable to extract package archive {archive.name}: {e}") from e

            root = _content_root(staging)
            try:
                if is_theme:
                    copy_tree(root, target)
                else:
                    remove_path(target)
                    shutil.move(str(root), str(target))
            except OSError as e:
                raise InstallerError(f"Unable to move package into {target}: {e}") from e
        finally:
            remove_path(staging)

        logger.info("Installed %s into %s", archive.name, target)
