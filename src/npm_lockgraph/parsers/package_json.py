"""Parse package.json and extract the requested dependency ranges."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SECTIONS = ("dependencies", "devDependencies")


@dataclass(frozen=True)
class Manifest:
    """The parts of a package.json this tool reads; section maps keep file order."""

    name: str = ""
    version: str = ""
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    def sections(self) -> list[tuple[str, dict[str, str]]]:
        return [("dependencies", self.dependencies), ("devDependencies", self.dev_dependencies)]

    @classmethod
    def from_dict(cls, data: Any, source: str = "package.json") -> Manifest:
        if not isinstance(data, dict):
            raise ValueError(f"{source} must contain a JSON object")

        ranges: dict[str, dict[str, str]] = {}
        for section in SECTIONS:
            deps = data.get(section) or {}
            if not isinstance(deps, dict):
                logger.warning("%s: ignoring non-object %s section", source, section)
                deps = {}
            pairs: dict[str, str] = {}
            for name, version in deps.items():
                if not isinstance(version, str):
                    logger.warning("%s: skipping %s entry %r with non-string range", source, section, name)
                    continue
                pairs[name] = version
            ranges[section] = pairs

        name = data.get("name")
        version = data.get("version")
        return cls(
            name=name if isinstance(name, str) else "",
            version=version if isinstance(version, str) else "",
            dependencies=ranges["dependencies"],
            dev_dependencies=ranges["devDependencies"],
        )


def parse(path: Path) -> Manifest:
    """Return the manifest at ``path``.

    Raises:
        ValueError: If the file is not a JSON object (``json.JSONDecodeError``
            is a ``ValueError`` too).
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return Manifest.from_dict(data, source=str(path))
