"""Roll per-project insight rows up into one repository report."""

from __future__ import annotations

from collections import Counter
from typing import Any

REPORT_VERSION = "1"


def _row_key(row: dict[str, Any]) -> str:
    return f"{row.get('name', '')}@{row.get('resolvedVersion') or 'unresolved'}"


def aggregate(projects: list[dict[str, Any]]) -> dict[str, Any]:
    """Build the repository report from per-project entries.

    Each entry carries ``path``, ``dependencies`` (insight rows as dicts) and
    ``findings`` (how many rows an advisory flagged). ``inUse`` counts the
    projects using each ``name@version``, so a package pinned differently
    across projects appears once per version.
    """
    in_use: Counter[str] = Counter()
    unresolved = 0
    for project in projects:
        rows = project.get("dependencies", [])
        in_use.update({_row_key(row) for row in rows})
        unresolved += sum(1 for row in rows if not row.get("resolvedVersion"))

    findings = sum(int(p.get("findings", 0)) for p in projects)
    return {
        "version": REPORT_VERSION,
        "hasFindings": findings > 0,
        "projects": projects,
        "inUse": dict(sorted(in_use.items())),
        "totals": {
            "projects": len(projects),
            "dependencies": sum(len(p.get("dependencies", [])) for p in projects),
            "unresolved": unresolved,
            "findings": findings,
        },
    }
