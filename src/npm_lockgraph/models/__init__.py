"""Data models for lockfiles and resolved dependency graphs."""

from __future__ import annotations

from .dependency import Dependency, ResolutionError, ResolvedDependency
from .lockfile import Lockfile, LockfileFormatError, LockfilePackage, bare_name
from .resolution import NodeResolutionResult

__all__ = [
    "Dependency",
    "Lockfile",
    "LockfileFormatError",
    "LockfilePackage",
    "NodeResolutionResult",
    "ResolutionError",
    "ResolvedDependency",
    "bare_name",
]
