"""Resolution result: the root project's view of the resolved graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Iterator, Mapping

from .dependency import Dependency, ResolvedDependency


@dataclass(frozen=True)
class NodeResolutionResult:
    """Direct and dev dependency edges of the root project.

    ``packages`` indexes every resolved node by bare name; when a name is
    installed more than once the entry listed last in the lockfile wins.
    """

    dependencies: tuple[Dependency, ...] = ()
    dev_dependencies: tuple[Dependency, ...] = ()
    packages: Mapping[str, ResolvedDependency] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> NodeResolutionResult:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.dependencies and not self.dev_dependencies

    def get_dependency(self, name: str) -> Dependency | None:
        """Return the first edge named ``name``; direct dependencies win over dev."""
        for dep in self.dependencies:
            if dep.name == name:
                return dep
        for dep in self.dev_dependencies:
            if dep.name == name:
                return dep
        return None

    lookup = get_dependency

    def get_package(self, name: str) -> ResolvedDependency | None:
        return self.packages.get(name)

    def iter_edges(self) -> Iterator[Dependency]:
        """Yield every edge reachable from the root, expanding each node once."""
        seen: set[int] = set()
        stack = list(reversed(self.dependencies + self.dev_dependencies))
        while stack:
            dep = stack.pop()
            yield dep
            node = dep.resolved
            if node is None or id(node) in seen:
                continue
            seen.add(id(node))
            stack.extend(reversed(node.transitive_dependencies))

    def unresolved(self) -> list[Dependency]:
        return [dep for dep in self.iter_edges() if dep.is_pending]

    def to_dict(self) -> dict[str, object]:
        return {
            "dependencies": [dep.to_dict() for dep in self.dependencies],
            "devDependencies": [dep.to_dict() for dep in self.dev_dependencies],
        }
