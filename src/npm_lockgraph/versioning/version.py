"""Version tokenization used for ordering arbitrary version strings."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_PART_RE = re.compile(r"[0-9A-Za-z]+")


@dataclass(frozen=True)
class Version:
    """A version string split into its alphanumeric parts.

    Separators are discarded, so ``1.1.1`` and ``1-1-1`` have the same parts.
    Equality still compares the raw text; ordering lives in ``comparator``.
    Any string is accepted, including the empty string.
    """

    raw: str
    parts: tuple[str, ...] = field(init=False, compare=False, repr=False)
    numeric_parts: tuple[int | None, ...] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        parts = tuple(_PART_RE.findall(self.raw))
        numeric = tuple(int(part) if part.isdigit() else None for part in parts)
        object.__setattr__(self, "parts", parts)
        object.__setattr__(self, "numeric_parts", numeric)

    def __str__(self) -> str:
        return self.raw

    @classmethod
    def parse(cls, raw: str | Version) -> Version:
        if isinstance(raw, Version):
            return raw
        return cls(raw)

    @property
    def is_prerelease(self) -> bool:
        """True when any part is textual, e.g. ``1.0.0-rc.1``."""
        return any(value is None for value in self.numeric_parts)

    def release(self, size: int = 3) -> tuple[int, ...]:
        """Return the leading numeric parts, padded with zeros to ``size``."""
        numbers: list[int] = []
        for value in self.numeric_parts:
            if value is None or len(numbers) == size:
                break
            numbers.append(value)
        return tuple(numbers + [0] * (size - len(numbers)))
