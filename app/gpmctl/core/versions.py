"""Version requirement parsing.

Dependency requirements use the operators found in package blueprints:

- ``>=1.2`` or ``1.2``: at least 1.2
- ``=1.2.0``: exactly 1.2.0
- ``~1.2``: at least 1.2, below the next significant release (2.0);
  ``~1.2.3`` stays below 1.3
- ``^1.2``: at least 1.2, below the next major release (2.0)
"""

import re
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

_REQUIREMENT_RE = re.compile(r"^\s*(>=|=|~|\^)?\s*v?(\S+)\s*$")


class VersionRequirementError(ValueError):
    """Raised when a version or requirement string cannot be parsed."""


def parse_version(value: str) -> Version:
    """Parse a version string.

    Raises:
        VersionRequirementError: If the string is not a valid version.
    """
    try:
        return Version(value.strip().lstrip("v"))
    except InvalidVersion as e:
        raise VersionRequirementError(f"Malformed version string '{value}'") from e


@dataclass(frozen=True, slots=True)
class VersionRequirement:
    """A parsed version requirement.

    Attributes:
        raw: Original requirement string.
        operator: Requirement operator ('>=', '=', '~' or '^').
        minimum: Lowest version that satisfies the requirement.
        upper: Exclusive upper bound, if the operator implies one.
    """

    raw: str
    operator: str
    minimum: Version
    upper: Version | None = None

    def allows(self, version: Version) -> bool:
        """Check if a version satisfies this requirement."""
        if self.operator == "=":
            return version == self.minimum
        if version < self.minimum:
            return False
        return self.upper is None or version < self.upper


def _next_significant(version: Version) -> Version:
    release = list(version.release)
    if len(release) == 1:
        return Version(str(release[0] + 1))
    release = release[:-1]
    release[-1] += 1
    return Version(".".join(str(part) for part in release))


def parse_requirement(requirement: str) -> VersionRequirement:
    """Parse a requirement string such as '>=1.6.0' or '~2.1'.

    Args:
        requirement: Requirement string from a dependency declaration.

    Returns:
        Parsed VersionRequirement.

    Raises:
        VersionRequirementError: If the requirement is malformed.
    """
    match = _REQUIREMENT_RE.match(requirement or "")
    if match is None:
        raise VersionRequirementError(f"Malformed version requirement '{requirement}'")

    operator = match.group(1) or ">="
    minimum = parse_version(match.group(2))

    upper: Version | None = None
    if operator == "~":
        upper = _next_significant(minimum)
    elif operator == "^":
        upper = Version(str(minimum.major + 1))

    return VersionRequirement(raw=requirement, operator=operator, minimum=minimum, upper=upper)


def merge_requirements(name: str, requirements: list[VersionRequirement]) -> VersionRequirement:
    """Combine several requirements on the same package into the strictest one.

    The candidate is the highest minimum; every requirement must accept it.

    Args:
        name: Package the requirements apply to (used in error messages).
        requirements: Requirements to merge (at least one).

    Returns:
        The requirement with the highest minimum.

    Raises:
        VersionRequirementError: If the requirements cannot all be satisfied.
    """
    strictest = max(requirements, key=lambda r: r.minimum)
    for requirement in requirements:
        if not requirement.allows(strictest.minimum):
            msg = (
                f"Incompatible version requirements for '{name}': "
                f"'{requirement.raw}' and '{strictest.raw}'"
            )
            raise VersionRequirementError(msg)
    return strictest
