"""Data models for gpmctl.

This module exports the core data structures used throughout the application.
"""

from gpmctl.models.action import (
    DEPENDENCY_BUCKETS,
    DependencyAction,
    DependencyBucket,
    ResolvedDependencies,
)
from gpmctl.models.outcome import InstallOutcome, OutcomeStatus, RunResult
from gpmctl.models.package import DependencySpec, Package, PackageType

__all__ = [
    "DEPENDENCY_BUCKETS",
    "DependencyAction",
    "DependencyBucket",
    "DependencySpec",
    "InstallOutcome",
    "OutcomeStatus",
    "Package",
    "PackageType",
    "ResolvedDependencies",
    "RunResult",
]
