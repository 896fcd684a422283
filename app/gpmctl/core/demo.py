"""Demo content provisioning.

Packages may ship sample content in a reserved ``_demo`` directory. Such
packages are queued as they are installed; once every package has been
placed, the queue is drained and the user decides, per package, whether
to copy the demo content into the live ``user`` directory.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from rich.markup import escape

from gpmctl.core.config import InstallConfig
from gpmctl.core.protocols import ConfirmFn, Reporter
from gpmctl.models.package import Package
from gpmctl.utils.fileops import copy_tree

logger = logging.getLogger(__name__)

PAGES_DIR_NAME = "pages"


class DemoProvisioner:
    """Queues and installs bundled demo content."""

    def __init__(
        self,
        config: InstallConfig,
        confirm: ConfirmFn,
        reporter: Reporter,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._config = config
        self._confirm = confirm
        self._reporter = reporter
        self._clock = clock
        self._queue: list[Package] = []

    @property
    def pending(self) -> list[Package]:
        """Packages waiting for demo provisioning, in queue order."""
        return list(self._queue)

    @property
    def user_dir(self) -> Path:
        """Live user directory of the site."""
        return self._config.destination / "user"

    def demo_dir(self, package: Package) -> Path:
        """Demo content directory of an installed package."""
        return self._config.destination_path(package.demo_path)

    def enqueue(self, package: Package) -> bool:
        """Queue a package if it has demo content.

        Returns:
            True if the package was queued.
        """
        if not self.demo_dir(package).is_dir():
            return False
        if any(queued.slug == package.slug for queued in self._queue):
            return False
        self._queue.append(package)
        logger.debug("Queued demo content of %s", package.slug)
        return True

    def drain(self) -> list[str]:
        """Offer demo content for every queued package, in order.

        Returns:
            Slugs whose demo content was installed.
        """
        installed: list[str] = []
        queue, self._queue = self._queue, []
        for package in queue:
            if self.install_demo(package):
                installed.append(package.slug)
        return installed

    def backup_name(self) -> str:
        """Timestamped name for the pages backup, unique within user_dir."""
        base = f"{PAGES_DIR_NAME}.{self._clock():%m-%d-%Y-%H-%M-%S}"
        name = base
        counter = 1
        while (self.user_dir / name).exists() or (self.user_dir / name).is_symlink():
            name = f"{base}-{counter}"
            counter += 1
        return name

    def install_demo(self, package: Package) -> bool:
        """Ask for and install one package's demo content.

        If the demo ships pages, the live pages directory is moved to a
        backup first; declining the backup skips the demo entirely.

        Returns:
            True if the demo content was copied.
        """
        report = self._reporter.report
        demo_dir = self.demo_dir(package)
        if not demo_dir.is_dir():
            return False

        report(f"Attention: [package]{package.name}[/] contains demo content")
        if not self._confirm("Do you wish to install this demo content?"):
            report("  '- [error]Skipped![/]")
            report("")
            return False

        if (demo_dir / PAGES_DIR_NAME).is_dir():
            backup = self.backup_name()
            if not self._confirm(
                f"This will backup your current `user/{PAGES_DIR_NAME}` folder to `user/{backup}`, continue?"
            ):
                report("  '- [error]Skipped![/]")
                report("")
                return False

            if not self._backup_pages(backup):
                report("  '- [error]Demo content not installed.[/]")
                report("")
                return False

        try:
            copy_tree(demo_dir, self.user_dir)
        except OSError as e:
            logger.warning("Failed to copy demo content of %s: %s", package.slug, e)
            report("  |- Installing demo content...    [error]failed[/]")
            report(f"  |  '- {escape(str(e))}")
            report("")
            return False

        report("  |- Installing demo content...    [success]ok[/]")
        report("  '- [success]Success![/]")
        report("")
        return True

    def _backup_pages(self, backup: str) -> bool:
        report = self._reporter.report
        pages_dir = self.user_dir / PAGES_DIR_NAME
        if not pages_dir.exists():
            report("  |- Backing up pages...    [muted]nothing to back up[/]")
            return True

        try:
            pages_dir.rename(self.user_dir / backup)
        except OSError as e:
            logger.warning("Failed to back up %s: %s", pages_dir, e)
            report("  |- Backing up pages...    [error]failed[/]")
            return False

        report("  |- Backing up pages...    [success]ok[/]")
        return True
