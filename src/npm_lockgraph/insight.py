"""Dependency insight: which packages a project requests and what it got.

Rows are produced for every manifest dependency whose name matches a glob
pattern, paired with the version the lockfile resolved it to. Transitive
packages can be included by walking the resolved graph.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase

from .models.resolution import NodeResolutionResult
from .parsers.package_json import Manifest
from .parsers.semver import VersionSelector, parse_selector

TRANSITIVE = "transitive"


@dataclass(frozen=True)
class InsightRow:
    """One dependency in use: requested range versus resolved version."""

    name: str
    requested_version: str
    resolved_version: str
    scope: str
    license: str | None = None
    advisories: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "requestedVersion": self.requested_version,
            "resolvedVersion": self.resolved_version,
            "scope": self.scope,
            "license": self.license,
        }
        if self.advisories:
            data["advisories"] = list(self.advisories)
        return data


def _version_matches(selector: VersionSelector | None, resolved_version: str) -> bool:
    if selector is None:
        return True
    return bool(resolved_version) and selector.is_valid(resolved_version)


def dependency_insight(
    manifest: Manifest,
    resolution: NodeResolutionResult,
    name_pattern: str = "*",
    version: str | None = None,
    only_direct: bool = True,
) -> list[InsightRow]:
    """Return insight rows for dependencies matching ``name_pattern``.

    Params:
        manifest: the project's package.json
        resolution: graph resolved from the project's lockfile (may be empty)
        name_pattern: glob matched against package names, e.g. ``@apollo*``
        version: optional selector; only rows whose resolved version satisfies
            it are kept
        only_direct: when False, packages reached transitively are included

    Raises:
        InvalidSelectorError: If ``version`` is not a valid selector.
    """
    selector = parse_selector(version) if version is not None else None
    rows: list[InsightRow] = []

    for scope, ranges in manifest.sections():
        for name, requested in ranges.items():
            if not fnmatchcase(name, name_pattern):
                continue
            dependency = resolution.get_dependency(name)
            resolved = dependency.resolved if dependency is not None else None
            resolved_version = (resolved.version or "") if resolved is not None else ""
            if not _version_matches(selector, resolved_version):
                continue
            rows.append(
                InsightRow(
                    name=name,
                    requested_version=requested,
                    resolved_version=resolved_version,
                    scope=scope,
                    license=resolved.license if resolved is not None else None,
                )
            )

    if only_direct:
        return rows

    seen = {(row.name, row.resolved_version) for row in rows}
    direct_edges = {id(dep) for dep in resolution.dependencies + resolution.dev_dependencies}
    for dep in resolution.iter_edges():
        if id(dep) in direct_edges or not fnmatchcase(dep.name, name_pattern):
            continue
        resolved = dep.resolved
        resolved_version = (resolved.version or "") if resolved is not None else ""
        if (dep.name, resolved_version) in seen:
            continue
        if not _version_matches(selector, resolved_version):
            continue
        seen.add((dep.name, resolved_version))
        rows.append(
            InsightRow(
                name=dep.name,
                requested_version=dep.raw_version or "",
                resolved_version=resolved_version,
                scope=TRANSITIVE,
                license=resolved.license if resolved is not None else None,
            )
        )
    return rows
