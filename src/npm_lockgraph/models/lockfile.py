"""Typed view of a package-lock.json document.

The ``packages`` map (lockfile v2 and v3) is kept in document order: the empty
key is the root project and every other key is an install path such as
``node_modules/a`` or ``node_modules/a/node_modules/b``. Lockfile v1 documents,
which only carry a nested ``dependencies`` tree, are flattened into the same
shape.

Known property names are matched case-insensitively at every level; the
document is canonicalized before it is checked against the schema.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any
from collections.abc import Iterable, Mapping

from ..validators.documents import SchemaValidationError, validate_lockfile

ROOT_KEY = ""
NODE_MODULES = "node_modules/"

DOCUMENT_KEYS = ("name", "version", "lockfileVersion", "packages", "dependencies")
PACKAGE_KEYS = ("version", "license", "dependencies", "devDependencies")
LEGACY_KEYS = ("version", "license", "dev", "requires", "dependencies")


class LockfileFormatError(ValueError):
    """Raised when a document does not have the shape of a package lockfile."""


def bare_name(key: str) -> str:
    """Return the package name for an install path.

    ``node_modules/rxfire`` → ``rxfire``; ``node_modules/a/node_modules/@s/b`` →
    ``@s/b``. Keys without a ``node_modules/`` segment (workspace links) are
    returned unchanged.
    """
    index = key.rfind(NODE_MODULES)
    if index < 0:
        return key
    return key[index + len(NODE_MODULES) :]


def _canonical(record: Any, keys: Iterable[str]) -> Any:
    """Copy ``record`` with case variants of ``keys`` renamed; an exact match wins."""
    if not isinstance(record, Mapping):
        return record
    result = dict(record)
    for key in keys:
        if key in result:
            continue
        lowered = key.lower()
        for name in list(result):
            if isinstance(name, str) and name.lower() == lowered:
                result[key] = result.pop(name)
                break
    return result


def _canonical_legacy(tree: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for name, meta in tree.items():
        meta = _canonical(meta, LEGACY_KEYS)
        if isinstance(meta, dict) and isinstance(meta.get("dependencies"), Mapping):
            meta["dependencies"] = _canonical_legacy(meta["dependencies"])
        result[name] = meta
    return result


def canonical_document(document: Any) -> Any:
    """Return ``document`` with every known property under its canonical name."""
    document = _canonical(document, DOCUMENT_KEYS)
    if not isinstance(document, dict):
        return document
    packages = document.get("packages")
    if isinstance(packages, Mapping):
        document["packages"] = {
            key: _canonical(meta, PACKAGE_KEYS) for key, meta in packages.items()
        }
    legacy = document.get("dependencies")
    if isinstance(legacy, Mapping):
        document["dependencies"] = _canonical_legacy(legacy)
    return document


def _range(value: Any) -> str | None:
    # an unusable range degrades only its own edge
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def _ranges(value: Any, where: str) -> dict[str, str | None]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise LockfileFormatError(f"{where} must map package names to version ranges")
    return {name: _range(raw) for name, raw in value.items()}


def _license(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("type"), str):
        return value["type"]
    return None


@dataclass(frozen=True)
class LockfilePackage:
    """One entry of the lockfile ``packages`` map.

    Range values are kept as written; ``None`` marks a range the lockfile
    recorded as null.
    """

    version: str | None = None
    license: str | None = None
    dependencies: dict[str, str | None] = field(default_factory=dict)
    dev_dependencies: dict[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], key: str = "") -> LockfilePackage:
        if not isinstance(data, Mapping):
            raise LockfileFormatError(f"Package '{key}' must be an object")
        data = _canonical(data, PACKAGE_KEYS)
        version = data.get("version")
        if version is not None and not isinstance(version, str):
            raise LockfileFormatError(f"Package '{key}' has a non-string version")
        return cls(
            version=version,
            license=_license(data.get("license")),
            dependencies=_ranges(data.get("dependencies"), f"'{key}' dependencies"),
            dev_dependencies=_ranges(data.get("devDependencies"), f"'{key}' devDependencies"),
        )


@dataclass(frozen=True)
class Lockfile:
    """The lockfile's flat package map plus its identifying header."""

    packages: dict[str, LockfilePackage]
    name: str | None = None
    version: str | None = None
    lockfile_version: int | None = None

    @property
    def root(self) -> LockfilePackage | None:
        return self.packages.get(ROOT_KEY)

    @classmethod
    def from_dict(cls, document: Any) -> Lockfile:
        """Build the model from a parsed JSON document.

        Raises:
            LockfileFormatError: If the document is not shaped like a lockfile.
        """
        document = canonical_document(document)
        try:
            validate_lockfile(document)
        except SchemaValidationError as exc:
            raise LockfileFormatError(f"Invalid lockfile:{exc}") from exc

        lockfile_version = document.get("lockfileVersion")
        packages_data = document.get("packages")
        if isinstance(packages_data, dict):
            packages = {
                key: LockfilePackage.from_dict(meta, key) for key, meta in packages_data.items()
            }
        else:
            packages = _flatten_legacy(document.get("dependencies") or {})

        return cls(
            packages=packages,
            name=document.get("name"),
            version=document.get("version"),
            lockfile_version=lockfile_version if isinstance(lockfile_version, int) else None,
        )


def _flatten_legacy(tree: Mapping[str, Any]) -> dict[str, LockfilePackage]:
    """Convert a lockfile v1 ``dependencies`` tree into a v2 ``packages`` map.

    v1 does not record the root's requested ranges, so the root entry pins each
    top-level package to its locked version.
    """
    direct: dict[str, str | None] = {}
    dev: dict[str, str | None] = {}
    for name, meta in tree.items():
        version = meta.get("version") or ""
        if meta.get("dev") is True:
            dev[name] = version
        else:
            direct[name] = version

    packages: dict[str, LockfilePackage] = {
        ROOT_KEY: LockfilePackage(dependencies=direct, dev_dependencies=dev)
    }

    def visit(prefix: str, children: Mapping[str, Any]) -> None:
        for name, meta in children.items():
            key = f"{prefix}{NODE_MODULES}{name}"
            packages[key] = LockfilePackage(
                version=meta.get("version"),
                license=_license(meta.get("license")),
                dependencies=_ranges(meta.get("requires"), f"'{key}' requires"),
            )
            nested = meta.get("dependencies")
            if isinstance(nested, dict):
                visit(f"{key}/", nested)

    visit("", tree)
    return packages
