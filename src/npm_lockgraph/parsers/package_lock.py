"""Parse npm package-lock.json into its resolved dependency graph."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..models.lockfile import Lockfile, LockfileFormatError
from ..models.resolution import NodeResolutionResult
from ..resolver import resolve

logger = logging.getLogger(__name__)


def load(path: Path) -> Lockfile:
    """Return the lockfile model for ``path``.

    Supports npm v1 ("dependencies" tree) and v2+ ("packages" map).

    Raises:
        LockfileFormatError: If the file is not JSON or not shaped like a lockfile.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        # UnicodeDecodeError and JSONDecodeError
        raise LockfileFormatError(f"{path} is not valid UTF-8 JSON: {exc}") from exc
    return Lockfile.from_dict(data)


def parse(path: Path) -> NodeResolutionResult:
    """Return the resolution recorded in ``path``; empty when it is malformed."""
    try:
        lockfile = load(path)
    except LockfileFormatError as exc:
        logger.warning("Ignoring malformed lockfile %s: %s", path, exc)
        return NodeResolutionResult.empty()
    return resolve(lockfile)
