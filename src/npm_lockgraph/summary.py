"""Markdown rendering of a scan report, one section per project."""

from __future__ import annotations

from typing import Any

HEADER = "| Package | Requested | Resolved | Scope | Advisories |"


def _cell(value: Any) -> str:
    return str(value).replace("|", "\\|")


def _table(rows: list[dict[str, Any]]) -> list[str]:
    lines = [HEADER, "| --- | --- | --- | --- | --- |"]
    for row in rows:
        cells = (
            row.get("name", ""),
            row.get("requestedVersion", ""),
            row.get("resolvedVersion") or "unresolved",
            row.get("scope", ""),
            ", ".join(row.get("advisories") or []) or "none",
        )
        lines.append("| " + " | ".join(_cell(c) for c in cells) + " |")
    return lines


def render_summary(report: dict[str, Any]) -> str:
    """Return Markdown with the report totals and each project's dependencies."""
    totals = report.get("totals", {})
    lines = [
        "# npm-lockgraph Summary",
        "",
        f"Projects: {totals.get('projects', 0)} | "
        f"Dependencies: {totals.get('dependencies', 0)} | "
        f"Unresolved: {totals.get('unresolved', 0)} | "
        f"Findings: {totals.get('findings', 0)}",
    ]

    projects = report.get("projects") or []
    if not projects:
        lines += ["", "_No Node.js projects found._"]

    for project in projects:
        lines += ["", f"## {project.get('path') or '(unknown project)'}", ""]
        rows = project.get("dependencies") or []
        lines += _table(rows) if rows else ["_No matching dependencies._"]

    return "\n".join(lines) + "\n"
