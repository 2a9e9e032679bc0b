"""GitHub advisory database (OSV format) ingestion and CSV export."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from collections.abc import Iterable

import requests
from requests import Response
from tenacity import retry, stop_after_attempt, wait_fixed

from .versioning import Version, compare

logger = logging.getLogger(__name__)

NPM_ECOSYSTEM = "npm"
USER_AGENT = "npm-lockgraph"


class AdvisoryError(RuntimeError):
    """Raised when advisories cannot be fetched or read."""


@dataclass(frozen=True)
class Advisory:
    """One vulnerable version range of one npm package."""

    id: str
    published: str
    summary: str
    package: str
    introduced: str
    fixed: str | None
    severity: str
    cwes: tuple[str, ...] = ()

    def affects(self, version: str | Version) -> bool:
        """True when ``introduced <= version < fixed``."""
        if compare(self.introduced, version) > 0:
            return False
        return self.fixed is None or compare(version, self.fixed) < 0

    def to_csv_row(self) -> str:
        summary = '"' + self.summary.replace('"', '""') + '"'
        fields = [
            self.id,
            self.published,
            summary,
            self.package,
            self.introduced,
            self.fixed or "",
            self.severity,
            ";".join(self.cwes),
        ]
        return ",".join(fields)


def _advisory_id(record: dict[str, Any]) -> str:
    for alias in record.get("aliases") or []:
        if isinstance(alias, str) and alias.startswith("CVE-"):
            return alias
    return str(record.get("id", ""))


def _ranges(events: Iterable[dict[str, Any]]) -> list[tuple[str, str | None]]:
    """Pair up introduced/fixed events; an unmatched introduced stays open."""
    ranges: list[tuple[str, str | None]] = []
    introduced: str | None = None
    for event in events:
        if "introduced" in event:
            if introduced is not None:
                ranges.append((introduced, None))
            introduced = str(event["introduced"])
        elif "fixed" in event and introduced is not None:
            ranges.append((introduced, str(event["fixed"])))
            introduced = None
    if introduced is not None:
        ranges.append((introduced, None))
    return ranges


def parse_record(record: dict[str, Any]) -> list[Advisory]:
    """Return one Advisory per npm package range in an OSV record."""
    database = record.get("database_specific") or {}
    severity = str(database.get("severity") or "")
    cwes = tuple(str(cwe) for cwe in database.get("cwe_ids") or [])
    advisory_id = _advisory_id(record)

    advisories: list[Advisory] = []
    for affected in record.get("affected") or []:
        package = affected.get("package") or {}
        if package.get("ecosystem") != NPM_ECOSYSTEM:
            continue
        for version_range in affected.get("ranges") or []:
            if version_range.get("type") != "SEMVER":
                continue
            for introduced, fixed in _ranges(version_range.get("events") or []):
                advisories.append(
                    Advisory(
                        id=advisory_id,
                        published=str(record.get("published", "")),
                        summary=str(record.get("summary", "")),
                        package=str(package.get("name", "")),
                        introduced=introduced,
                        fixed=fixed,
                        severity=severity,
                        cwes=cwes,
                    )
                )
    return advisories


@retry(reraise=True, stop=stop_after_attempt(3), wait=wait_fixed(2))
def _http_get(url: str) -> Response:
    return requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=30)


def fetch_advisories(url: str) -> list[dict[str, Any]]:
    """Download OSV records from ``url`` (a single record or a JSON array)."""
    try:
        response = _http_get(url)
    except requests.RequestException as exc:  # pragma: no cover - network failure path
        raise AdvisoryError(f"Failed to fetch advisories: {exc}") from exc

    if response.status_code != 200:
        raise AdvisoryError(f"Unexpected status code {response.status_code} fetching advisories")

    try:
        payload = response.json()
    except ValueError as exc:
        raise AdvisoryError(f"Advisory payload from {url} is not JSON") from exc
    return payload if isinstance(payload, list) else [payload]


def _read_records(path: Path) -> list[dict[str, Any]]:
    files = sorted(path.rglob("*.json")) if path.is_dir() else [path]
    records: list[dict[str, Any]] = []
    for file in files:
        try:
            payload = json.loads(file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Skipping unreadable advisory file %s: %s", file, exc)
            continue
        records.extend(payload if isinstance(payload, list) else [payload])
    return records


def load_advisories(source: str | Path) -> list[Advisory]:
    """Load npm advisories from a directory, a JSON file or an http(s) URL."""
    text = str(source)
    if text.startswith("http://") or text.startswith("https://"):
        records = fetch_advisories(text)
    else:
        path = Path(source)
        if not path.exists():
            raise AdvisoryError(f"Advisory source not found: {path}")
        records = _read_records(path)

    advisories: list[Advisory] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning("Skipping advisory record that is not an object")
            continue
        advisories.extend(parse_record(record))
    logger.info("Loaded %d npm advisory range(s) from %s", len(advisories), text)
    return advisories


def advisories_for(advisories: Iterable[Advisory], package: str, version: str) -> list[Advisory]:
    """Return the advisories affecting ``package`` at ``version``."""
    if not version:
        return []
    return [a for a in advisories if a.package == package and a.affects(version)]


def write_csv(advisories: Iterable[Advisory], path: Path) -> int:
    """Write one CSV line per advisory; return the number of lines written."""
    lines = [advisory.to_csv_row() for advisory in advisories]
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
    return len(lines)
