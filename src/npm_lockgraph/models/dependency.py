"""Dependency edges and the resolved package nodes they point at."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..parsers.semver import VersionSelector, validate


class ResolutionError(RuntimeError):
    """Raised when a dependency edge is linked to a package twice."""


@dataclass(eq=False)
class Dependency:
    """A reference to a named package at a requested version selector.

    ``resolved`` starts unset and is linked at most once, by the resolver, when
    the lockfile entry for ``name`` is reached. Several edges may share the same
    ``ResolvedDependency``.
    """

    name: str
    raw_version: str | None = None
    selector: VersionSelector | None = None
    _resolved: ResolvedDependency | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Dependency name must be non-empty")

    @classmethod
    def request(cls, name: str, raw_version: str | None) -> Dependency:
        """Build an edge, keeping it usable when the selector is invalid."""
        selector = validate(raw_version) if raw_version is not None else None
        return cls(name=name, raw_version=raw_version, selector=selector)

    @property
    def requested_version(self) -> str | None:
        return self.selector.value if self.selector is not None else None

    @property
    def resolved(self) -> ResolvedDependency | None:
        return self._resolved

    @property
    def is_pending(self) -> bool:
        return self._resolved is None

    def resolve(self, package: ResolvedDependency) -> None:
        if self._resolved is not None:
            raise ResolutionError(
                f"Dependency '{self.name}' is already resolved to "
                f"{self._resolved.name}@{self._resolved.version}"
            )
        self._resolved = package

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "requestedVersion": self.requested_version,
            "resolvedVersion": self._resolved.version if self._resolved else None,
        }


@dataclass(frozen=True, eq=False)
class ResolvedDependency:
    """A concrete package instance pinned by the lockfile."""

    name: str
    version: str | None
    license: str | None = None
    transitive_dependencies: tuple[Dependency, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "version": self.version,
            "license": self.license,
            "dependencies": [dep.to_dict() for dep in self.transitive_dependencies],
        }
