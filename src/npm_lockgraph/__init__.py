"""npm-lockgraph core package.

Version ordering and lockfile dependency-graph resolution for npm projects,
callable from the CLI and from other tools.
"""

from .advisories import AdvisoryError
from .config import ConfigError
from .models import (
    Dependency,
    Lockfile,
    LockfileFormatError,
    NodeResolutionResult,
    ResolutionError,
    ResolvedDependency,
)
from .parsers.semver import InvalidSelectorError, parse_selector, validate
from .resolver import resolve, resolve_document
from .versioning import Version, compare

__all__ = [
    "AdvisoryError",
    "ConfigError",
    "Dependency",
    "InvalidSelectorError",
    "Lockfile",
    "LockfileFormatError",
    "NodeResolutionResult",
    "ResolutionError",
    "ResolvedDependency",
    "Version",
    "compare",
    "parse_selector",
    "resolve",
    "resolve_document",
    "validate",
]
