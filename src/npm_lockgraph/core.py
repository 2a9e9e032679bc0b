"""Core scanning entrypoints.

This module MUST NOT print or exit so it can be used by both the CLI and
library callers.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from .advisories import Advisory, advisories_for, load_advisories
from .config import Settings
from .discovery import NodeProject, discover_projects
from .insight import InsightRow, dependency_insight
from .models.resolution import NodeResolutionResult
from .parsers.package_json import Manifest
from .parsers.package_json import parse as parse_package_json
from .parsers.package_lock import parse as parse_package_lock
from .report import aggregate

logger = logging.getLogger(__name__)


def _load_resolution(project: NodeProject) -> NodeResolutionResult:
    if not project.has_lockfile:
        return NodeResolutionResult.empty()
    try:
        return parse_package_lock(project.lockfile_path)
    except OSError as exc:
        logger.warning("Could not read %s: %s", project.lockfile_path, exc)
        return NodeResolutionResult.empty()


def _load_manifest(project: NodeProject) -> Manifest:
    try:
        return parse_package_json(project.manifest_path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s: %s", project.manifest_path, exc)
        return Manifest()


def _with_advisories(rows: list[InsightRow], advisories: list[Advisory]) -> list[InsightRow]:
    flagged: list[InsightRow] = []
    for row in rows:
        matches = advisories_for(advisories, row.name, row.resolved_version)
        if matches:
            ids = tuple(sorted({advisory.id for advisory in matches}))
            row = replace(row, advisories=ids)
        flagged.append(row)
    return flagged


def scan_project(
    project: NodeProject,
    settings: Settings,
    advisories: list[Advisory] | None = None,
) -> list[InsightRow]:
    """Return the insight rows for one project."""
    manifest = _load_manifest(project)
    resolution = _load_resolution(project)
    if project.has_lockfile and resolution.is_empty and (
        manifest.dependencies or manifest.dev_dependencies
    ):
        logger.warning("No resolution data available for %s", project.path)

    rows = dependency_insight(
        manifest,
        resolution,
        name_pattern=settings.name_pattern,
        version=settings.version,
        only_direct=settings.only_direct,
    )
    if advisories:
        rows = _with_advisories(rows, advisories)
    return rows


def scan_repository(root: Path, settings: Settings | None = None) -> dict[str, Any]:
    """Report the dependencies in use by every Node.js project under root.

    Params:
        root: repository root to scan
        settings: name pattern, version selector, advisory source and
            discovery excludes; defaults when None

    Returns: dict report with per-project insight rows and totals

    Raises:
        InvalidSelectorError: If ``settings.version`` is not a valid selector.
        AdvisoryError: If the advisory source cannot be read.
    """
    root = root.resolve()
    settings = settings or Settings()

    advisories = load_advisories(settings.advisories) if settings.advisories else []

    projects: list[dict[str, Any]] = []
    for project in discover_projects(root, excludes=settings.excludes):
        rows = scan_project(project, settings, advisories)
        entry = project.to_dict(root)
        entry["dependencies"] = [row.to_dict() for row in rows]
        entry["findings"] = sum(1 for row in rows if row.advisories)
        projects.append(entry)

    return aggregate(projects)
