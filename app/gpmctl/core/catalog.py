"""Package catalog backed by a JSON index.

The index lists every known plugin and theme::

    {
      "plugins": {"admin": {"name": "Admin Panel", "version": "1.10.0", ...}},
      "themes": {"quark": {...}}
    }

Each entry may carry ``repository``, ``zipball_url`` and ``dependencies``
(a list of slugs or ``{"name": ..., "version": ...}`` objects). Installed
versions are read from the package's ``blueprints.yaml`` at the destination.
"""

import json
import logging
from collections import deque
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from gpmctl.core.config import InstallConfig
from gpmctl.core.download import TransportError
from gpmctl.core.paths import get_index_cache_path
from gpmctl.core.protocols import Transfer
from gpmctl.core.versions import (
    VersionRequirement,
    VersionRequirementError,
    merge_requirements,
    parse_requirement,
    parse_version,
)
from gpmctl.models.action import DependencyAction, ResolvedDependencies
from gpmctl.models.package import DependencySpec, Package, PackageType, default_install_path

logger = logging.getLogger(__name__)

# Dependency slug that refers to the site platform itself
PLATFORM_SLUG = "grav"

_SECTIONS: dict[str, PackageType] = {
    "plugins": PackageType.PLUGIN,
    "themes": PackageType.THEME,
}


class CatalogError(Exception):
    """Raised when the package index cannot be loaded."""


class ResolutionError(CatalogError):
    """Raised when dependencies cannot be resolved."""


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def load_index(
    source: str,
    transfer: Transfer,
    force: bool = False,
    cache_path: Path | None = None,
) -> dict[str, Any]:
    """Load the package index from a URL or local file.

    Remote indexes are cached; the cache is bypassed when ``force`` is set.

    Args:
        source: Index URL or local path.
        transfer: Transfer used for remote indexes.
        force: Re-fetch remote indexes even if cached.
        cache_path: Cache file. If None, uses ~/.cache/gpmctl/index.json.

    Returns:
        Parsed index data.

    Raises:
        CatalogError: If the index cannot be read or parsed.
    """
    if _is_url(source):
        cache = cache_path or get_index_cache_path()
        if force or not cache.exists():
            logger.debug("Fetching package index from %s", source)
            try:
                content = transfer.get(source)
            except TransportError as e:
                raise CatalogError(f"Failed to fetch package index: {e}") from e
            try:
                cache.parent.mkdir(parents=True, exist_ok=True)
                cache.write_bytes(content)
            except OSError as e:
                logger.warning("Could not cache package index at %s: %s", cache, e)
            raw = content.decode("utf-8", errors="replace")
        else:
            logger.debug("Using cached package index %s", cache)
            raw = cache.read_text(encoding="utf-8")
    else:
        try:
            raw = Path(source).expanduser().read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Failed to read package index {source}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid package index {source}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Invalid package index {source}: expected an object")
    return data


def _parse_dependencies(raw: object) -> tuple[DependencySpec, ...]:
    specs: list[DependencySpec] = []
    if not isinstance(raw, list):
        return ()
    for item in raw:
        if isinstance(item, str):
            specs.append(DependencySpec(name=item.lower()))
        elif isinstance(item, dict) and item.get("name"):
            version = item.get("version")
            name = str(item["name"]).lower()
            specs.append(DependencySpec(name=name, version=str(version) if version else None))
    return tuple(specs)


def _parse_entry(slug: str, data: dict[str, Any], package_type: PackageType) -> Package:
    version = data.get("version")
    return Package(
        slug=slug,
        name=str(data.get("name") or slug),
        package_type=package_type,
        install_path=str(data.get("install_path") or default_install_path(slug, package_type)),
        version=str(version) if version else None,
        repository=data.get("repository"),
        zipball_url=data.get("zipball_url"),
        dependencies=_parse_dependencies(data.get("dependencies")),
    )


def read_installed_version(package_dir: Path) -> str | None:
    """Read the installed version of a package from its blueprints.yaml.

    Args:
        package_dir: Installed package directory.

    Returns:
        Version string, or None if it cannot be read.
    """
    blueprint = package_dir / "blueprints.yaml"
    try:
        with blueprint.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.debug("Cannot read %s: %s", blueprint, e)
        return None

    if isinstance(data, dict) and data.get("version") is not None:
        return str(data["version"])
    return None


class IndexCatalog:
    """Catalog over an in-memory package index.

    Attributes:
        destination: Site root used to inspect installed packages.
    """

    def __init__(self, index: dict[str, Any], destination: Path) -> None:
        self.destination = destination
        self._packages: dict[str, Package] = {}

        for section, package_type in _SECTIONS.items():
            entries = index.get(section) or {}
            if not isinstance(entries, dict):
                raise CatalogError(f"Invalid '{section}' section in package index")
            for slug, data in entries.items():
                if not isinstance(data, dict):
                    logger.warning("Skipping malformed index entry '%s'", slug)
                    continue
                key = slug.lower()
                self._packages[key] = _parse_entry(key, data, package_type)

    @classmethod
    def from_source(
        cls,
        source: str,
        config: InstallConfig,
        transfer: Transfer,
        cache_path: Path | None = None,
    ) -> "IndexCatalog":
        """Build a catalog for a run from an index URL or path.

        The run's ``force`` flag bypasses the index cache (see load_index).
        """
        index = load_index(source, transfer, force=config.force, cache_path=cache_path)
        return cls(index, config.destination)

    def find_package(self, name: str) -> Package | None:
        """Look up a package by name, annotated with any available update."""
        package = self._packages.get(name.lower())
        if package is None:
            return None
        return self._with_available(package)

    def find_packages(self, names: list[str]) -> tuple[dict[str, Package], list[str]]:
        """Look up packages by name, preserving request order."""
        found: dict[str, Package] = {}
        not_found: list[str] = []
        for name in names:
            package = self.find_package(name)
            if package is None:
                if name.lower() not in not_found:
                    not_found.append(name.lower())
            else:
                found[package.slug] = package
        return found, not_found

    def installed_version(self, package: Package) -> str | None:
        """Installed version of a package at the destination, if any."""
        return read_installed_version(self.destination / package.install_path)

    def _with_available(self, package: Package) -> Package:
        installed = self.installed_version(package)
        if installed is None or package.version is None:
            return package
        try:
            newer = parse_version(package.version) > parse_version(installed)
        except VersionRequirementError:
            return package
        if not newer:
            return package
        return replace(package, available=package.version)

    def get_dependencies(self, names: list[str]) -> ResolvedDependencies:
        """Resolve the transitive dependencies of the requested packages.

        The requested packages themselves are excluded from the result.

        Raises:
            ResolutionError: On unknown dependencies, malformed versions or
                incompatible requirements.
        """
        requested = [name.lower() for name in names]
        requirements: dict[str, list[VersionRequirement]] = {}
        platform: list[VersionRequirement] = []

        queue = deque(self._packages[name] for name in requested if name in self._packages)
        seen = set(requested)

        try:
            while queue:
                package = queue.popleft()
                for dep in package.dependencies:
                    parsed = parse_requirement(dep.version) if dep.version else None
                    if dep.name == PLATFORM_SLUG:
                        if parsed is not None:
                            platform.append(parsed)
                        continue

                    if dep.name in requested:
                        continue

                    reqs = requirements.setdefault(dep.name, [])
                    if parsed is not None:
                        reqs.append(parsed)

                    if dep.name not in seen:
                        seen.add(dep.name)
                        dependency = self._packages.get(dep.name)
                        if dependency is None:
                            msg = f"Dependency '{dep.name}' required by '{package.slug}' was not found"
                            raise ResolutionError(msg)
                        queue.append(dependency)

            actions: dict[str, DependencyAction] = {}
            for name, reqs in requirements.items():
                merged = merge_requirements(name, reqs) if reqs else None
                action = self._dependency_action(self._packages[name], merged)
                if action is not None:
                    actions[name] = action

            platform_requirement = merge_requirements(PLATFORM_SLUG, platform).raw if platform else None
        except VersionRequirementError as e:
            raise ResolutionError(str(e)) from e

        logger.debug("Resolved dependencies: %s (platform: %s)", actions, platform_requirement)
        return ResolvedDependencies(actions=actions, platform=platform_requirement)

    def _dependency_action(
        self,
        package: Package,
        requirement: VersionRequirement | None,
    ) -> DependencyAction | None:
        target = self.destination / package.install_path
        if not target.exists() and not target.is_symlink():
            return DependencyAction.INSTALL

        installed_raw = self.installed_version(package)
        if installed_raw is None:
            # Installed without readable version information; leave it alone
            return None

        installed = parse_version(installed_raw)
        if requirement is not None and installed < requirement.minimum:
            return DependencyAction.UPDATE
        if package.version is not None and parse_version(package.version) > installed:
            return DependencyAction.IGNORE
        return None
