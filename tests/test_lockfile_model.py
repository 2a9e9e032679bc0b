"""Tests for the typed lockfile model."""

import pytest

from npm_lockgraph.models.lockfile import (
    ROOT_KEY,
    Lockfile,
    LockfileFormatError,
    LockfilePackage,
    bare_name,
)


@pytest.mark.parametrize(
    "key,expected",
    [
        ("node_modules/rxfire", "rxfire"),
        ("node_modules/@angular/core", "@angular/core"),
        ("node_modules/a/node_modules/b", "b"),
        ("node_modules/a/node_modules/@s/b", "@s/b"),
        ("packages/workspace-a", "packages/workspace-a"),
    ],
)
def test_bare_name(key, expected):
    assert bare_name(key) == expected


class TestFromDict:
    def test_packages_keep_document_order(self, example_lock):
        lockfile = Lockfile.from_dict(example_lock)
        assert list(lockfile.packages)[0] == ROOT_KEY
        assert list(lockfile.packages)[1:] == [
            "node_modules/jest",
            "node_modules/jest-cli",
            "node_modules/jwt-decode",
            "node_modules/lodash.camelcase",
            "node_modules/lodash.kebabcase",
        ]
        assert lockfile.name == "example"
        assert lockfile.lockfile_version == 3

    def test_package_fields(self, example_lock):
        lockfile = Lockfile.from_dict(example_lock)
        assert lockfile.root is not None
        assert lockfile.root.dependencies["lodash.camelcase"] == "^4.3.0"
        assert lockfile.root.dev_dependencies == {"jest": "^29.0.0"}
        camelcase = lockfile.packages["node_modules/lodash.camelcase"]
        assert camelcase == LockfilePackage(version="4.3.0")
        assert camelcase.license is None

    def test_properties_are_case_insensitive(self):
        lockfile = Lockfile.from_dict(
            {"packages": {"node_modules/a": {"Version": "1.0.0", "License": "ISC"}}}
        )
        package = lockfile.packages["node_modules/a"]
        assert package.version == "1.0.0"
        assert package.license == "ISC"

    def test_top_level_properties_are_case_insensitive(self):
        lockfile = Lockfile.from_dict(
            {
                "Name": "shouty",
                "LockfileVersion": 3,
                "Packages": {"": {"Dependencies": {"a": "^1.0.0"}}},
            }
        )
        assert lockfile.name == "shouty"
        assert lockfile.lockfile_version == 3
        assert lockfile.root.dependencies == {"a": "^1.0.0"}

    def test_exact_property_name_wins(self):
        lockfile = Lockfile.from_dict(
            {"packages": {"node_modules/a": {"version": "1.0.0", "VERSION": "9.9.9"}}}
        )
        assert lockfile.packages["node_modules/a"].version == "1.0.0"

    def test_null_and_numeric_ranges_are_kept_per_edge(self):
        lockfile = Lockfile.from_dict(
            {"packages": {"": {"dependencies": {"a": None, "b": 1, "c": "^2.0.0"}}}}
        )
        assert lockfile.root.dependencies == {"a": None, "b": "1", "c": "^2.0.0"}

    def test_legacy_license_object(self):
        lockfile = Lockfile.from_dict(
            {"packages": {"node_modules/a": {"version": "1.0.0", "license": {"type": "MIT"}}}}
        )
        assert lockfile.packages["node_modules/a"].license == "MIT"

    @pytest.mark.parametrize(
        "document",
        [
            [],
            "not a lockfile",
            {"name": "no-packages"},
            {"packages": []},
            {"packages": {"node_modules/a": "1.0.0"}},
            {"packages": {"node_modules/a": {"version": 1}}},
            {"packages": {"": {"dependencies": ["a"]}}},
        ],
    )
    def test_malformed_documents(self, document):
        with pytest.raises(LockfileFormatError):
            Lockfile.from_dict(document)


class TestLegacyLockfile:
    def test_v1_tree_is_flattened(self):
        document = {
            "name": "legacy",
            "lockfileVersion": 1,
            "dependencies": {
                "a": {
                    "version": "1.0.0",
                    "requires": {"b": "^2.0.0"},
                    "dependencies": {
                        "b": {"version": "2.1.0"},
                    },
                },
                "mocha": {"version": "10.0.0", "dev": True},
            },
        }
        lockfile = Lockfile.from_dict(document)
        assert list(lockfile.packages) == [
            "",
            "node_modules/a",
            "node_modules/a/node_modules/b",
            "node_modules/mocha",
        ]
        assert lockfile.root.dependencies == {"a": "1.0.0"}
        assert lockfile.root.dev_dependencies == {"mocha": "10.0.0"}
        assert lockfile.packages["node_modules/a"].dependencies == {"b": "^2.0.0"}
        assert lockfile.packages["node_modules/a/node_modules/b"].version == "2.1.0"
