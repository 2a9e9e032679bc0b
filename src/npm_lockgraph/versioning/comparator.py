"""Total ordering over versions.

Only the parts of a version take part in the comparison, never the
separators between them, so ``1.1.1``, ``1-1-1`` and ``1.1-1`` compare equal.
Do not use this ordering as the identity of a set or mapping key when such
versions must stay distinct.
"""

from __future__ import annotations

from functools import cmp_to_key
from types import MappingProxyType
from collections.abc import Mapping

from .version import Version

SPECIAL_MEANINGS: Mapping[str, int] = MappingProxyType(
    {
        "dev": -1,
        "rc": 1,
        "snapshot": 2,
        "final": 3,
        "ga": 4,
        "release": 5,
        "sp": 6,
    }
)


def _sign(left: object, right: object) -> int:
    return (left > right) - (left < right)  # type: ignore[operator]


def compare(left: Version | str, right: Version | str) -> int:
    """Compare two versions; negative, zero or positive like ``cmp``.

    Numeric parts beat textual ones. Textual parts are ranked through
    ``SPECIAL_MEANINGS`` (case-insensitive) when either side is a known
    qualifier, and lexically otherwise.
    """
    v1 = Version.parse(left)
    v2 = Version.parse(right)
    if v1 == v2:
        return 0

    parts1, parts2 = v1.parts, v2.parts
    numbers1, numbers2 = v1.numeric_parts, v2.numeric_parts

    shared = min(len(parts1), len(parts2))
    for i in range(shared):
        part1, part2 = parts1[i], parts2[i]
        number1, number2 = numbers1[i], numbers2[i]

        if part1 == part2:
            continue
        if number1 is not None and number2 is None:
            return 1
        if number2 is not None and number1 is None:
            return -1
        if number1 is not None and number2 is not None:
            if number1 == number2:
                # "01" and "1"
                continue
            return _sign(number1, number2)

        special1 = SPECIAL_MEANINGS.get(part1.lower())
        special2 = SPECIAL_MEANINGS.get(part2.lower())
        if special1 is not None:
            return special1 - (special2 or 0)
        if special2 is not None:
            return -special2
        return _sign(part1, part2)

    if len(parts1) > shared:
        return 1 if numbers1[shared] is not None else -1
    if len(parts2) > shared:
        return -1 if numbers2[shared] is not None else 1
    return 0


version_key = cmp_to_key(compare)


def sort_versions(versions: list[str]) -> list[str]:
    """Return ``versions`` sorted ascending under ``compare``."""
    return sorted(versions, key=version_key)
