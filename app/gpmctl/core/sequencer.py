"""Dependency sequencing.

Validates the platform requirement, then processes resolved dependencies
in three ordered buckets (install, update, optional update), asking one
confirmation per bucket before installing its members.
"""

import logging
from collections.abc import Callable

from gpmctl.core.protocols import Catalog, ConfirmFn, Reporter
from gpmctl.core.versions import VersionRequirementError, parse_requirement, parse_version
from gpmctl.models.action import (
    DEPENDENCY_BUCKETS,
    DependencyAction,
    DependencyBucket,
    ResolvedDependencies,
)
from gpmctl.models.outcome import InstallOutcome, failed
from gpmctl.models.package import Package

logger = logging.getLogger(__name__)

# Installs a package with prompts skipped, returning its outcome
InstallFn = Callable[[Package, bool], InstallOutcome]


class PlatformVersionError(Exception):
    """Raised when a dependency requires a newer platform than the one running."""


class RequiredDependencyDeclined(Exception):
    """Raised when the user declines a mandatory dependency bucket.

    Attributes:
        action: The bucket that was declined.
        packages: Dependency slugs in the declined bucket.
    """

    def __init__(self, action: DependencyAction, packages: list[str]) -> None:
        super().__init__(f"Required dependencies declined ({action.value}): {', '.join(packages)}")
        self.action = action
        self.packages = packages


def check_platform(requirement: str, running_version: str, platform_name: str = "grav") -> None:
    """Verify the running platform satisfies a dependency's requirement.

    Only the requirement's minimum version is compared.

    Args:
        requirement: Requirement string, e.g. '>=1.6.0'.
        running_version: Version of the running platform.
        platform_name: Platform name used in the error message.

    Raises:
        PlatformVersionError: If the platform is too old or a version is malformed.
    """
    try:
        minimum = parse_requirement(requirement).minimum
        running = parse_version(running_version)
    except VersionRequirementError as e:
        raise PlatformVersionError(str(e)) from e

    if minimum > running:
        msg = (
            f"One of the package dependencies requires {platform_name} {requirement} "
            f"(running {running_version}). Please update {platform_name} first."
        )
        raise PlatformVersionError(msg)


def confirmation_question(bucket: DependencyBucket, count: int) -> str:
    """Build the confirmation question for a bucket of the given size."""
    if count == 1:
        return f"{bucket.verb} this package?"
    return f"{bucket.verb} these {count} packages?"


class DependencySequencer:
    """Installs resolved dependencies bucket by bucket."""

    def __init__(
        self,
        catalog: Catalog,
        install: InstallFn,
        confirm: ConfirmFn,
        reporter: Reporter,
    ) -> None:
        """Initialize the sequencer.

        Args:
            catalog: Catalog used to look up dependency packages.
            install: Callback installing one package (package, skip_prompt).
            confirm: Yes/no prompt.
            reporter: Status line sink.
        """
        self._catalog = catalog
        self._install = install
        self._confirm = confirm
        self._reporter = reporter

    def run(self, dependencies: ResolvedDependencies) -> list[InstallOutcome]:
        """Process every bucket in order: install, update, then optional updates.

        Raises:
            RequiredDependencyDeclined: If a mandatory bucket is declined.
        """
        outcomes: list[InstallOutcome] = []
        for bucket in DEPENDENCY_BUCKETS:
            outcomes.extend(
                self.install_dependencies(dependencies, bucket.action, bucket.message, bucket.required)
            )
        return outcomes

    def install_dependencies(
        self,
        dependencies: ResolvedDependencies,
        action: DependencyAction,
        message: str,
        required: bool = True,
    ) -> list[InstallOutcome]:
        """Confirm and install the dependencies carrying one action.

        Args:
            dependencies: Resolved dependencies of the run.
            action: The bucket to process.
            message: Header reported before listing the members.
            required: If True, declining raises RequiredDependencyDeclined.

        Returns:
            Outcomes of the installed members (empty if skipped or empty).

        Raises:
            RequiredDependencyDeclined: If a required bucket is declined.
        """
        members = dependencies.members(action)
        if not members:
            return []

        report = self._reporter.report
        report(message)
        for name in members:
            report(f"  |- Package [package]{name}[/]")
        report("")

        bucket = DependencyBucket(action=action, message=message, required=required)
        if not self._confirm(confirmation_question(bucket, len(members))):
            if required:
                logger.debug("Required %s bucket declined: %s", action.value, members)
                raise RequiredDependencyDeclined(action, members)
            report("  '- [warning]Skipped optional dependency updates.[/]")
            report("")
            return []

        outcomes: list[InstallOutcome] = []
        for name in members:
            package = self._catalog.find_package(name)
            if package is None:
                report(f"[error]Package {name} not found in the catalog![/]")
                report("")
                outcomes.append(failed(name, "Package not found in the catalog"))
                continue
            outcomes.append(self._install(package, True))
        report("")
        return outcomes
