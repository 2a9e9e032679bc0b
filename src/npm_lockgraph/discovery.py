"""Node.js project discovery utilities."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Iterable

logger = logging.getLogger(__name__)

EXCLUDES = {"node_modules", ".git", ".venv"}
MANIFEST = "package.json"
LOCKFILE = "package-lock.json"


@dataclass(frozen=True)
class NodeProject:
    """A directory holding a package.json, and whether it is locked."""

    path: Path
    name: str
    version: str
    has_lockfile: bool

    @property
    def manifest_path(self) -> Path:
        return self.path / MANIFEST

    @property
    def lockfile_path(self) -> Path:
        return self.path / LOCKFILE

    def to_dict(self, root: Path | None = None) -> dict[str, object]:
        path = self.path.relative_to(root) if root is not None else self.path
        return {
            "path": str(path),
            "name": self.name,
            "version": self.version,
            "hasLockfile": self.has_lockfile,
        }


def _read_identity(manifest: Path) -> tuple[str, str]:
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s: %s", manifest, exc)
        return "", ""
    if not isinstance(data, dict):
        return "", ""
    name = data.get("name")
    version = data.get("version")
    return (
        name if isinstance(name, str) else "",
        version if isinstance(version, str) else "",
    )


def discover_projects(root: Path, excludes: Iterable[str] = ()) -> list[NodeProject]:
    """Find Node.js projects recursively under root (excluding vendor dirs)."""
    root = root.resolve()
    skipped = EXCLUDES | set(excludes)
    found: list[NodeProject] = []

    def should_skip(p: Path) -> bool:
        return any(part in skipped for part in p.parts)

    for path in root.rglob(MANIFEST):
        if not path.is_file():
            continue
        if should_skip(path.relative_to(root)):
            continue
        project_dir = path.parent
        name, version = _read_identity(path)
        found.append(
            NodeProject(
                path=project_dir,
                name=name,
                version=version,
                has_lockfile=(project_dir / LOCKFILE).is_file(),
            )
        )

    found.sort(key=lambda project: str(project.path))
    logger.info("Discovered %d Node.js project(s) under %s", len(found), root)
    return found
