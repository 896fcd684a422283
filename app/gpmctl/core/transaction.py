"""Single-package install transaction.

Drives one package from source check through destination check to
placement. Every path out of the transaction yields an InstallOutcome;
the destination is only modified once the new content is ready to be
placed, and temporary downloads are always removed.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from gpmctl.core.config import InstallConfig
from gpmctl.core.destination import DestinationState, check_destination
from gpmctl.core.download import TransportError, fetch_package
from gpmctl.core.installer import InstallerError
from gpmctl.core.protocols import ConfirmFn, Installer, Reporter, Transfer
from gpmctl.core.symlinks import AcquisitionStrategy, choose_strategy, locate_symlink_source
from gpmctl.models.outcome import InstallOutcome, failed, skipped_by_user, succeeded
from gpmctl.models.package import Package
from gpmctl.utils.fileops import remove_path

logger = logging.getLogger(__name__)

ABORTED_LINE = "  '- [error]Installation failed or aborted.[/]"
SUCCESS_LINE = "  '- [success]Success![/]"


@dataclass(frozen=True, slots=True)
class DestinationDecision:
    """Result of the destination check.

    Attributes:
        outcome: Set when the transaction must stop here.
        remove_symlink: The existing symlink must be removed right before placement.
    """

    outcome: InstallOutcome | None = None
    remove_symlink: bool = False

    @property
    def proceed(self) -> bool:
        """Check if placement may go ahead."""
        return self.outcome is None


class InstallTransaction:
    """Installs one package at a time, by download or by symlink.

    Attributes:
        config: Run configuration.
    """

    def __init__(
        self,
        config: InstallConfig,
        installer: Installer,
        transfer: Transfer,
        confirm: ConfirmFn,
        reporter: Reporter,
    ) -> None:
        self.config = config
        self._installer = installer
        self._transfer = transfer
        self._confirm = confirm
        self._reporter = reporter

    def run(self, package: Package, skip_prompt: bool = False) -> InstallOutcome:
        """Install a package.

        Args:
            package: Package to install.
            skip_prompt: Overwrite confirmation was already given by the caller.

        Returns:
            The outcome for this package.
        """
        strategy = choose_strategy(package, self.config)
        logger.debug("Installing %s via %s", package.slug, strategy.value)

        if strategy == AcquisitionStrategy.SYMLINK:
            return self._run_symlink(package, skip_prompt)
        return self._run_download(package, skip_prompt)

    def check_destination(
        self,
        package: Package,
        strategy: AcquisitionStrategy,
        skip_prompt: bool = False,
    ) -> DestinationDecision:
        """Turn the destination state into a go/abort decision.

        - absent: proceed
        - occupied: proceed if prompts are skipped, otherwise ask to overwrite
        - symlinked: never replaced by a symlink; for downloads, auto-skipped
          when prompts are skipped, otherwise ask to delete the link first

        Nothing is deleted here; a confirmed symlink removal is deferred to
        placement.
        """
        report = self._reporter.report
        skip = skip_prompt or self.config.assume_yes
        target = self.config.destination_path(package.install_path)
        state = check_destination(target)

        if state == DestinationState.OCCUPIED:
            report("  |- Checking destination...  [warning]exists[/]")
            if not skip and not self._confirm(
                "  |  '- The package is already installed, do you want to overwrite it?"
            ):
                report("  |     '- [error]You decided to not overwrite the already installed package.[/]")
                return DestinationDecision(
                    outcome=skipped_by_user(package.slug, "Declined to overwrite installed package")
                )

        elif state == DestinationState.SYMLINKED:
            report("  |- Checking destination...  [warning]symbolic link[/]")
            if strategy == AcquisitionStrategy.SYMLINK:
                report(
                    "  |     '- [error]Symlink cannot overwrite an existing package, please remove first.[/]"
                )
                return DestinationDecision(
                    outcome=failed(package.slug, "Cannot overwrite an existing symlink with a symlink")
                )
            if skip:
                report("  |     '- [warning]Skipped automatically.[/]")
                return DestinationDecision(
                    outcome=skipped_by_user(package.slug, "Destination is a symlink, skipped")
                )
            if not self._confirm(
                "  |  '- Destination has been detected as symlink, delete symbolic link first?"
            ):
                report("  |     '- [error]You decided to not delete the symlink automatically.[/]")
                return DestinationDecision(
                    outcome=skipped_by_user(package.slug, "Declined to delete existing symlink")
                )
            report("  |- Checking destination...  [success]ok[/]")
            return DestinationDecision(remove_symlink=True)

        report("  |- Checking destination...  [success]ok[/]")
        return DestinationDecision()

    def _run_symlink(self, package: Package, skip_prompt: bool) -> InstallOutcome:
        report = self._reporter.report
        report(f"Preparing to Symlink [package]{package.name}[/]")

        source = locate_symlink_source(package, self.config.dev_roots)
        if source is None or not source.exists():
            report("  |- Checking source...  [error]not found![/]")
            report(ABORTED_LINE)
            report("")
            return failed(package.slug, "Symlink source not found")
        report("  |- Checking source...  [success]ok[/]")

        decision = self.check_destination(package, AcquisitionStrategy.SYMLINK, skip_prompt)
        if not decision.proceed:
            report(ABORTED_LINE)
            report("")
            return decision.outcome  # type: ignore[return-value]

        target = self.config.destination_path(package.install_path)
        if target.exists() or target.is_symlink():
            report("  '- [error]Symlink cannot overwrite an existing package, please remove first[/]")
            report("")
            return failed(package.slug, "Symlink cannot overwrite an existing package")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.symlink_to(source, target_is_directory=True)
        except OSError as e:
            report("  |- Symlinking package...    [error]error[/]")
            report(ABORTED_LINE)
            report("")
            return failed(package.slug, f"Failed to create symlink: {e}")

        logger.info("Symlinked %s -> %s", target, source)
        report("  |- Symlinking package...    [success]ok[/]")
        report(SUCCESS_LINE)
        report("")
        return succeeded(package.slug)

    def _run_download(self, package: Package, skip_prompt: bool) -> InstallOutcome:
        report = self._reporter.report
        report(f"Preparing to install [package]{package.name}[/] {escape(f'[v{package.display_version}]')}")

        decision = self.check_destination(package, AcquisitionStrategy.DOWNLOAD, skip_prompt)
        if not decision.proceed:
            report(ABORTED_LINE)
            report("")
            return decision.outcome  # type: ignore[return-value]

        self._reporter.progress(0)
        try:
            archive = fetch_package(
                package,
                self._transfer,
                self.config.download_dir,
                on_progress=self._reporter.progress,
            )
        except (TransportError, OSError) as e:
            report("  |- Downloading package...    [error]error[/]")
            report(f"  |  '- {escape(str(e))}")
            report(ABORTED_LINE)
            report("")
            return failed(package.slug, str(e))
        self._reporter.progress(100)

        target = self.config.destination_path(package.install_path)
        try:
            return self._place_archive(package, archive.path, target, decision.remove_symlink)
        finally:
            try:
                remove_path(archive.tmp_dir)
                logger.debug("Removed temporary directory %s", archive.tmp_dir)
            except OSError as e:
                logger.warning("Failed to remove temporary directory %s: %s", archive.tmp_dir, e)

    def _place_archive(
        self,
        package: Package,
        archive: Path,
        target: Path,
        remove_symlink: bool,
    ) -> InstallOutcome:
        report = self._reporter.report
        try:
            if remove_symlink:
                target.unlink()
            self._installer.install(
                archive,
                self.config.destination,
                package.install_path,
                is_theme=package.is_theme,
            )
        except (InstallerError, OSError) as e:
            report("  |- Installing package...    [error]error[/]")
            report(f"  |  '- {escape(str(e))}")
            report(ABORTED_LINE)
            report("")
            return failed(package.slug, str(e))

        report("  |- Installing package...    [success]ok[/]")
        report(SUCCESS_LINE)
        report("")
        return succeeded(package.slug)
