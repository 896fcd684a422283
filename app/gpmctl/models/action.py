"""Dependency action models.

This module defines the per-dependency action computed by the resolver
and the ordered buckets the sequencer processes them in.
"""

from dataclasses import dataclass
from enum import Enum


class DependencyAction(Enum):
    """Action required for a resolved dependency.

    Attributes:
        INSTALL: Dependency is missing and must be installed.
        UPDATE: Installed version is too old and must be updated.
        IGNORE: A newer version exists but the installed one is sufficient.
    """

    INSTALL = "install"
    UPDATE = "update"
    IGNORE = "ignore"


@dataclass(frozen=True, slots=True)
class DependencyBucket:
    """A group of dependencies processed under a single confirmation.

    Attributes:
        action: The dependency action this bucket collects.
        message: Header reported before listing the bucket members.
        required: If True, declining the bucket aborts the whole run.
    """

    action: DependencyAction
    message: str
    required: bool = True

    @property
    def verb(self) -> str:
        """Verb used in the confirmation question."""
        return "Install" if self.action == DependencyAction.INSTALL else "Update"


# Processing order: mandatory installs, mandatory updates, optional updates.
DEPENDENCY_BUCKETS: tuple[DependencyBucket, ...] = (
    DependencyBucket(
        action=DependencyAction.INSTALL,
        message="The following dependencies need to be installed...",
    ),
    DependencyBucket(
        action=DependencyAction.UPDATE,
        message="The following dependencies need to be updated...",
    ),
    DependencyBucket(
        action=DependencyAction.IGNORE,
        message=(
            "The following dependencies can be updated as there is a newer version, "
            "but it's not mandatory..."
        ),
        required=False,
    ),
)


@dataclass(frozen=True, slots=True)
class ResolvedDependencies:
    """Dependency resolution result for a whole run.

    Attributes:
        actions: Dependency slug to action, in resolution order.
        platform: Platform version requirement, if any dependency declared one.
    """

    actions: dict[str, DependencyAction]
    platform: str | None = None

    def members(self, action: DependencyAction) -> list[str]:
        """Return dependency slugs carrying the given action, in order."""
        return [name for name, value in self.actions.items() if value == action]
