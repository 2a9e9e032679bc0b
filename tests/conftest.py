"""Shared fixtures: package.json / package-lock.json documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def nebular_lock() -> dict[str, Any]:
    """Lockfile whose root requests one unparseable range (rxjs)."""
    return {
        "name": "nebular",
        "version": "13.0.0",
        "lockfileVersion": 2,
        "requires": True,
        "packages": {
            "": {
                "name": "nebular",
                "version": "13.0.0",
                "hasInstallScript": True,
                "license": "MIT",
                "dependencies": {
                    "rxfire": "^6.0.0",
                    "rxjs": "^6.5.3 || ^7.4.0",
                },
            },
            "node_modules/rxfire": {
                "version": "6.0.5",
                "resolved": "https://registry.npmjs.org/rxfire/-/rxfire-6.0.5.tgz",
                "peerDependencies": {"rxjs": "^6.0.0 || ^7.0.0"},
            },
            "node_modules/rxjs": {
                "version": "6.6.7",
                "resolved": "https://registry.npmjs.org/rxjs/-/rxjs-6.6.7.tgz",
                "dependencies": {"tslib": "^1.9.0"},
                "engines": {"npm": ">=2.0.0"},
            },
        },
    }


@pytest.fixture
def example_manifest() -> dict[str, Any]:
    return {
        "name": "example",
        "version": "1.0.0",
        "dependencies": {
            "jwt-decode": "^4.0.0",
            "lodash.camelcase": "^4.3.0",
            "lodash.kebabcase": "^4.1.0",
        },
        "devDependencies": {
            "jest": "^29.0.0",
        },
    }


@pytest.fixture
def example_lock() -> dict[str, Any]:
    return {
        "name": "example",
        "version": "1.0.0",
        "lockfileVersion": 3,
        "requires": True,
        "packages": {
            "": {
                "name": "example",
                "version": "1.0.0",
                "dependencies": {
                    "jwt-decode": "^4.0.0",
                    "lodash.camelcase": "^4.3.0",
                    "lodash.kebabcase": "^4.1.0",
                },
                "devDependencies": {
                    "jest": "^29.0.0",
                },
            },
            "node_modules/jest": {
                "version": "29.7.0",
                "dev": True,
                "license": "MIT",
                "dependencies": {"jest-cli": "^29.7.0"},
            },
            "node_modules/jest-cli": {
                "version": "29.7.0",
                "dev": True,
                "license": "MIT",
            },
            "node_modules/jwt-decode": {
                "version": "4.0.0",
                "license": "MIT",
                "engines": {"node": ">=18"},
            },
            "node_modules/lodash.camelcase": {
                "version": "4.3.0",
            },
            "node_modules/lodash.kebabcase": {
                "version": "4.1.1",
                "license": "MIT",
            },
        },
    }


@pytest.fixture
def write_project():
    """Write a package.json (and optionally a package-lock.json) into a directory."""

    def _write(directory: Path, manifest: dict[str, Any], lock: dict[str, Any] | None = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "package.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
        if lock is not None:
            (directory / "package-lock.json").write_text(json.dumps(lock, indent=2), encoding="utf-8")
        return directory

    return _write


@pytest.fixture
def camelcase_advisory() -> dict[str, Any]:
    """OSV record flagging lodash.camelcase below 4.3.1."""
    return {
        "id": "GHSA-test-camel",
        "published": "2024-01-01T00:00:00Z",
        "summary": "Prototype pollution in lodash.camelcase",
        "affected": [
            {
                "package": {"ecosystem": "npm", "name": "lodash.camelcase"},
                "ranges": [
                    {"type": "SEMVER", "events": [{"introduced": "0"}, {"fixed": "4.3.1"}]}
                ],
            }
        ],
        "database_specific": {"severity": "HIGH", "cwe_ids": ["CWE-1321"]},
    }


@pytest.fixture
def advisory_file(tmp_path, camelcase_advisory) -> Path:
    path = tmp_path / "advisories.json"
    path.write_text(json.dumps([camelcase_advisory]), encoding="utf-8")
    return path
