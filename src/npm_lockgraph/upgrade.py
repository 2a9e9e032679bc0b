"""Upgrade requested dependency versions in a package.json.

Only the manifest is rewritten; ``npm install`` is expected to refresh the
lockfile afterwards.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from .parsers.package_json import SECTIONS
from .parsers.semver import parse_range

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionChange:
    """A requested range rewritten in one manifest section."""

    name: str
    section: str
    before: str
    after: str

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "section": self.section,
            "before": self.before,
            "after": self.after,
        }


def upgrade_dependency_version(
    path: Path,
    name_pattern: str,
    version: str,
    dry_run: bool = False,
) -> list[VersionChange]:
    """Set the requested range of every dependency matching ``name_pattern``.

    Raises:
        InvalidSelectorError: If ``version`` is not an npm version range.
        ValueError: If the manifest is not a JSON object.
    """
    parse_range(version)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")

    changes: list[VersionChange] = []
    for section in SECTIONS:
        deps = data.get(section)
        if not isinstance(deps, dict):
            continue
        for name, requested in deps.items():
            if not isinstance(requested, str) or not fnmatchcase(name, name_pattern):
                continue
            if requested == version:
                continue
            deps[name] = version
            changes.append(VersionChange(name=name, section=section, before=requested, after=version))

    if changes and not dry_run:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.info("Upgraded %d dependency range(s) in %s", len(changes), path)
    return changes
