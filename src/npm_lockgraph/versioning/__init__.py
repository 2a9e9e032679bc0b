"""Version parsing and ordering."""

from __future__ import annotations

from .comparator import SPECIAL_MEANINGS, compare, sort_versions, version_key
from .version import Version

__all__ = [
    "SPECIAL_MEANINGS",
    "Version",
    "compare",
    "sort_versions",
    "version_key",
]
