"""Install run orchestration.

Sequences a whole run: site validation, package lookup, dependency
resolution and platform check, dependency buckets, the requested
packages, demo content, and finally the site cache.
"""

import logging
from pathlib import Path

from gpmctl.core.catalog import PLATFORM_SLUG, ResolutionError
from gpmctl.core.config import InstallConfig
from gpmctl.core.demo import DemoProvisioner
from gpmctl.core.destination import is_site_root
from gpmctl.core.protocols import Catalog, ConfirmFn, Installer, Reporter, Transfer
from gpmctl.core.sequencer import (
    DependencySequencer,
    PlatformVersionError,
    RequiredDependencyDeclined,
    check_platform,
)
from gpmctl.core.transaction import InstallTransaction
from gpmctl.models.action import ResolvedDependencies
from gpmctl.models.outcome import InstallOutcome, RunResult, failed, skipped_already_installed
from gpmctl.models.package import Package
from gpmctl.utils.fileops import remove_path

logger = logging.getLogger(__name__)

# Kept so the (otherwise empty) cache directory survives in checkouts
CACHE_KEEP = frozenset({".gitkeep"})


class Orchestrator:
    """Installs a list of requested packages and their dependencies.

    Example:
        >>> orchestrator = Orchestrator(config, catalog, ZipInstaller(), HttpTransfer(),
        ...                             confirm=console_confirm, reporter=ConsoleReporter())
        >>> result = orchestrator.install_all(["admin"])
        >>> result.installed
        ['form', 'login', 'admin']
    """

    def __init__(
        self,
        config: InstallConfig,
        catalog: Catalog,
        installer: Installer,
        transfer: Transfer,
        confirm: ConfirmFn,
        reporter: Reporter,
    ) -> None:
        self.config = config
        self._catalog = catalog
        self._confirm = confirm
        self._reporter = reporter
        self._transaction = InstallTransaction(config, installer, transfer, confirm, reporter)
        self._demo = DemoProvisioner(config, confirm, reporter)
        self._result = RunResult()

    def install_all(self, names: list[str]) -> RunResult:
        """Install the requested packages.

        Args:
            names: Requested package names (case-insensitive).

        Returns:
            RunResult with every per-package outcome; ``aborted`` is set
            when a fatal error stopped the run.
        """
        self._result = result = RunResult()
        report = self._reporter.report

        if not is_site_root(self.config.destination):
            return self._fatal(f"{self.config.destination} is not a valid site root")

        requested = list(dict.fromkeys(name.lower() for name in names))
        packages, not_found = self._catalog.find_packages(requested)

        if not_found:
            report(f"These packages were not found: [error]{', '.join(not_found)}[/]")
            for name in not_found:
                result.record(failed(name, "Package not found"))

        if not packages:
            report("Nothing to install.")
            report("")
            return result

        try:
            resolved = self._catalog.get_dependencies(list(packages))
        except ResolutionError as e:
            return self._fatal(str(e))

        if resolved.platform is not None:
            try:
                check_platform(resolved.platform, self.config.platform_version, PLATFORM_SLUG)
            except PlatformVersionError as e:
                return self._fatal(str(e))

        if resolved.actions:
            if not self._install_dependencies(resolved):
                return result
            report("[success]Dependencies are OK[/]")
            report("")

        for slug, package in packages.items():
            if slug in resolved.actions:
                report(f"[success]Package {slug} already installed as dependency[/]")
                result.record(skipped_already_installed(slug, "Installed as a dependency"))
                continue
            self._install_package(package, False)

        self._demo.drain()
        if result.installed:
            self.clear_cache()
        return result

    def clear_cache(self) -> list[Path]:
        """Empty the site cache so newly placed packages are picked up.

        Returns:
            Cache entries that could not be removed.
        """
        cache_dir = self.config.destination_path("cache")
        if not cache_dir.is_dir():
            return []

        leftovers: list[Path] = []
        for entry in sorted(cache_dir.iterdir()):
            if entry.name in CACHE_KEEP:
                continue
            try:
                remove_path(entry)
            except OSError as e:
                logger.warning("Failed to clear cache entry %s: %s", entry, e)
                leftovers.append(entry)

        status = "[warning]incomplete[/]" if leftovers else "[success]ok[/]"
        self._reporter.report(f"Clearing cache...    {status}")
        self._reporter.report("")
        return leftovers

    def _install_dependencies(self, dependencies: ResolvedDependencies) -> bool:
        sequencer = DependencySequencer(
            self._catalog,
            self._install_package,
            self._confirm,
            self._reporter,
        )
        try:
            sequencer.run(dependencies)
        except RequiredDependencyDeclined as e:
            logger.info("Run aborted: %s", e)
            self._fatal("Installation aborted")
            return False
        return True

    def _install_package(self, package: Package, skip_prompt: bool) -> InstallOutcome:
        outcome = self._result.record(self._transaction.run(package, skip_prompt))
        if outcome.succeeded:
            self._demo.enqueue(package)
        return outcome

    def _fatal(self, message: str) -> RunResult:
        self._reporter.report(f"[error]{message}[/]")
        return self._result.abort(message)


def install_all(
    names: list[str],
    config: InstallConfig,
    *,
    catalog: Catalog,
    installer: Installer,
    transfer: Transfer,
    confirm: ConfirmFn,
    reporter: Reporter,
) -> RunResult:
    """Install the requested packages with a fresh Orchestrator.

    See Orchestrator.install_all.
    """
    orchestrator = Orchestrator(config, catalog, installer, transfer, confirm, reporter)
    return orchestrator.install_all(names)
