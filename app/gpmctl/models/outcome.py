"""Outcome models for package installation.

This module defines the per-package result of an install transaction and
the aggregate result of a whole run.
"""

from dataclasses import dataclass, field
from enum import Enum


class OutcomeStatus(Enum):
    """Final status of a single package installation."""

    SUCCEEDED = "succeeded"
    SKIPPED_BY_USER = "skipped_by_user"
    SKIPPED_ALREADY_INSTALLED = "skipped_already_installed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Result of installing a single package.

    Attributes:
        package: Slug of the package.
        status: Final status.
        reason: Explanation for skipped or failed outcomes.
    """

    package: str
    status: OutcomeStatus
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        """Check if the package was placed."""
        return self.status == OutcomeStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the package failed."""
        return self.status == OutcomeStatus.FAILED

    @property
    def skipped(self) -> bool:
        """Check if the package was skipped for any reason."""
        return self.status in (
            OutcomeStatus.SKIPPED_BY_USER,
            OutcomeStatus.SKIPPED_ALREADY_INSTALLED,
        )


def succeeded(package: str) -> InstallOutcome:
    """Create a successful outcome."""
    return InstallOutcome(package=package, status=OutcomeStatus.SUCCEEDED)


def skipped_by_user(package: str, reason: str) -> InstallOutcome:
    """Create an outcome for a package the user declined."""
    return InstallOutcome(package=package, status=OutcomeStatus.SKIPPED_BY_USER, reason=reason)


def skipped_already_installed(package: str, reason: str) -> InstallOutcome:
    """Create an outcome for a package that needed no work."""
    return InstallOutcome(
        package=package,
        status=OutcomeStatus.SKIPPED_ALREADY_INSTALLED,
        reason=reason,
    )


def failed(package: str, reason: str) -> InstallOutcome:
    """Create a failed outcome."""
    return InstallOutcome(package=package, status=OutcomeStatus.FAILED, reason=reason)


@dataclass(slots=True)
class RunResult:
    """Aggregate result of an install run.

    Outcomes are recorded in the order packages were processed,
    dependencies first.

    Attributes:
        outcomes: All per-package outcomes.
        aborted: True if a fatal error stopped the run.
        error: Fatal error message when aborted.
    """

    outcomes: list[InstallOutcome] = field(default_factory=list)
    aborted: bool = False
    error: str | None = None

    @property
    def installed(self) -> list[str]:
        """Slugs of packages that were placed."""
        return [o.package for o in self.outcomes if o.succeeded]

    @property
    def skipped(self) -> list[str]:
        """Slugs of packages that were skipped."""
        return [o.package for o in self.outcomes if o.skipped]

    @property
    def failed(self) -> list[str]:
        """Slugs of packages that failed."""
        return [o.package for o in self.outcomes if o.failed]

    @property
    def success(self) -> bool:
        """Check if the run finished without fatal or per-package failures."""
        return not self.aborted and not self.failed

    def record(self, outcome: InstallOutcome) -> InstallOutcome:
        """Append an outcome and return it."""
        self.outcomes.append(outcome)
        return outcome

    def abort(self, error: str) -> "RunResult":
        """Mark the run as fatally aborted."""
        self.aborted = True
        self.error = error
        return self
