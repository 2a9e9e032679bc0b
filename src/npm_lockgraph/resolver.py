"""Rebuild the resolved dependency graph recorded in a package lockfile.

The lockfile ``packages`` map is walked once, in document order. Every edge is
registered under the name it requests; when the entry for that name is reached
all edges waiting on it are linked to the new node. Edges registered after
their target entry was visited, or naming a package that is never installed
(optional and peer dependencies), stay pending.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from .models.dependency import Dependency, ResolvedDependency
from .models.lockfile import ROOT_KEY, Lockfile, LockfileFormatError, bare_name
from .models.resolution import NodeResolutionResult

logger = logging.getLogger(__name__)


def _register(
    pending: dict[str, list[Dependency]], name: str, raw_version: str | None
) -> Dependency:
    dep = Dependency.request(name, raw_version)
    if dep.selector is None:
        logger.debug("Dependency %s has an unusable version %r", name, raw_version)
    pending[name].append(dep)
    return dep


def resolve(lockfile: Lockfile) -> NodeResolutionResult:
    """Link every dependency edge in ``lockfile`` to the package it resolved to."""
    pending: dict[str, list[Dependency]] = defaultdict(list)
    packages: dict[str, ResolvedDependency] = {}
    dependencies: list[Dependency] = []
    dev_dependencies: list[Dependency] = []

    for key, package in lockfile.packages.items():
        is_root = key == ROOT_KEY
        if is_root:
            for name, raw in package.dependencies.items():
                dependencies.append(_register(pending, name, raw))
        else:
            transitive = tuple(
                _register(pending, name, raw) for name, raw in package.dependencies.items()
            )
            name = bare_name(key)
            node = ResolvedDependency(
                name=name,
                version=package.version,
                license=package.license,
                transitive_dependencies=transitive,
            )
            for dep in pending.pop(name, []):
                dep.resolve(node)
            packages[name] = node

        for name, raw in package.dev_dependencies.items():
            dep = _register(pending, name, raw)
            if is_root:
                dev_dependencies.append(dep)

    if pending:
        logger.debug(
            "%d dependency name(s) left unresolved: %s",
            len(pending),
            ", ".join(sorted(pending)),
        )

    return NodeResolutionResult(
        dependencies=tuple(dependencies),
        dev_dependencies=tuple(dev_dependencies),
        packages=packages,
    )


def resolve_document(document: Any) -> NodeResolutionResult:
    """Resolve an already parsed lockfile document.

    A document that is not shaped like a lockfile yields an empty result, which
    callers must read as "no resolution data", not "no dependencies".
    """
    try:
        lockfile = Lockfile.from_dict(document)
    except LockfileFormatError as exc:
        logger.warning("Ignoring malformed lockfile: %s", exc)
        return NodeResolutionResult.empty()
    return resolve(lockfile)
