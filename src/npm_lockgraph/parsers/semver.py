"""Node-style version selectors backed by ``semantic_version.NpmSpec``.

Supported expressions are the npm range grammar: exact versions, x-ranges
("1", "1.x", "1.2.*"), caret and tilde ranges, hyphen ranges and space
separated comparator sets. ``latest`` is read as ``*``.

Dependency edges and version filters take a single range only: unions with
"||" are rejected by ``parse_selector`` just like dist-tags, URLs and
file:/git:/npm: specifiers. ``parse_range`` accepts unions for callers that
only need to know the text is an npm range.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

import semantic_version

from ..versioning import Version

logger = logging.getLogger(__name__)

UNION = "||"
HYPHEN = " - "
_LATEST = "latest"
_OPERATOR_SPACE_RE = re.compile(r"(>=|<=|>|<|=|~|\^)\s+")


class InvalidSelectorError(ValueError):
    """Raised when a string is not a supported version selector."""


def _semver(version: str | Version) -> semantic_version.Version | None:
    text = str(version).strip().lstrip("v=")
    try:
        return semantic_version.Version(text)
    except ValueError:
        return None


def _normalize(expr: str) -> str:
    # NpmSpec wants ">=1.0.0", not ">= 1.0.0", and single spaces between blocks
    expr = _OPERATOR_SPACE_RE.sub(r"\1", expr)
    if HYPHEN in expr:
        low, _, high = expr.partition(HYPHEN)
        expr = f">={low.strip()} <={high.strip()}"
    return " ".join(expr.split())


def _npm_spec(expr: str) -> semantic_version.NpmSpec:
    if expr == _LATEST:
        expr = "*"
    groups = [_normalize(group) for group in expr.split(UNION)]
    if not all(groups):
        raise InvalidSelectorError(f"Empty range in '{expr}'")
    try:
        return semantic_version.NpmSpec(f" {UNION} ".join(groups))
    except ValueError as exc:
        raise InvalidSelectorError(f"Invalid version selector '{expr}': {exc}") from exc


@dataclass(frozen=True)
class VersionSelector:
    """A parsed npm range; ``value`` is the stripped selector text."""

    value: str
    spec: semantic_version.NpmSpec = field(compare=False, repr=False)

    def is_valid(self, version: str | Version) -> bool:
        """True when ``version`` is a semver version inside the range.

        Prereleases only match when a bound is a prerelease of the same
        major.minor.patch, as npm does.
        """
        candidate = _semver(version)
        return candidate is not None and self.spec.match(candidate)

    def __str__(self) -> str:
        return self.value


def _strip(raw: str) -> str:
    if not isinstance(raw, str):
        raise InvalidSelectorError(f"Selector must be a string, got {type(raw).__name__}")
    expr = raw.strip()
    if not expr:
        raise InvalidSelectorError("Selector must be non-empty")
    return expr


def parse_range(raw: str) -> VersionSelector:
    """Parse any npm range, unions included, or raise ``InvalidSelectorError``."""
    expr = _strip(raw)
    return VersionSelector(expr, _npm_spec(expr))


def parse_selector(raw: str) -> VersionSelector:
    """Parse a single npm range or raise ``InvalidSelectorError``."""
    expr = _strip(raw)
    if UNION in expr:
        raise InvalidSelectorError(f"Union ranges are not supported: '{expr}'")
    return VersionSelector(expr, _npm_spec(expr))


def validate(raw: str) -> VersionSelector | None:
    """Return the selector for ``raw``, or None when it is not a valid selector."""
    try:
        return parse_selector(raw)
    except InvalidSelectorError as exc:
        logger.debug("Ignoring version selector %r: %s", raw, exc)
        return None


def satisfies(installed: str, expr: str) -> bool:
    selector = validate(expr)
    if selector is None:
        return False
    return selector.is_valid(installed)
