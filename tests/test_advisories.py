"""Tests for advisory ingestion and CSV export."""

import json

import pytest

from npm_lockgraph import advisories as advisories_mod
from npm_lockgraph.advisories import (
    Advisory,
    AdvisoryError,
    advisories_for,
    load_advisories,
    parse_record,
    write_csv,
)

BOSTR = {
    "schema_version": "1.4.0",
    "id": "GHSA-7wp3-vm8x-6qwp",
    "modified": "2024-08-02T01:20:14Z",
    "published": "2024-08-02T01:20:13Z",
    "aliases": ["CVE-2024-41962"],
    "summary": "Bostr Improper Authorization vulnerability",
    "affected": [
        {
            "package": {"ecosystem": "npm", "name": "bostr"},
            "ranges": [
                {
                    "type": "ECOSYSTEM",
                    "events": [{"introduced": "0"}, {"fixed": "3.0.10"}],
                },
                {
                    "type": "SEMVER",
                    "events": [{"introduced": "0"}, {"fixed": "3.0.10"}],
                },
            ],
        }
    ],
    "database_specific": {"cwe_ids": ["CWE-285"], "severity": "MODERATE"},
}


class _Response:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


def test_parse_record():
    [advisory] = parse_record(BOSTR)
    assert advisory == Advisory(
        id="CVE-2024-41962",
        published="2024-08-02T01:20:13Z",
        summary="Bostr Improper Authorization vulnerability",
        package="bostr",
        introduced="0",
        fixed="3.0.10",
        severity="MODERATE",
        cwes=("CWE-285",),
    )


def test_parse_record_skips_other_ecosystems_and_keeps_open_ranges():
    record = {
        "id": "GHSA-xxxx",
        "affected": [
            {"package": {"ecosystem": "PyPI", "name": "requests"}, "ranges": []},
            {
                "package": {"ecosystem": "npm", "name": "left-pad"},
                "ranges": [{"type": "SEMVER", "events": [{"introduced": "1.0.0"}]}],
            },
        ],
    }
    [advisory] = parse_record(record)
    assert advisory.id == "GHSA-xxxx"
    assert advisory.package == "left-pad"
    assert advisory.fixed is None
    assert advisory.affects("9.9.9")
    assert not advisory.affects("0.9.0")


def test_affects_is_half_open():
    [advisory] = parse_record(BOSTR)
    assert advisory.affects("3.0.9")
    assert not advisory.affects("3.0.10")
    assert advisories_for([advisory], "bostr", "1.0.0") == [advisory]
    assert advisories_for([advisory], "bostr", "") == []
    assert advisories_for([advisory], "other", "1.0.0") == []


def test_write_csv(tmp_path):
    output = tmp_path / "advisories.csv"
    count = write_csv(parse_record(BOSTR), output)
    assert count == 1
    assert output.read_text() == (
        'CVE-2024-41962,2024-08-02T01:20:13Z,"Bostr Improper Authorization vulnerability",'
        "bostr,0,3.0.10,MODERATE,CWE-285\n"
    )


def test_csv_quotes_embedded_quotes():
    advisory = Advisory("X", "", 'say "hi"', "p", "0", None, "LOW")
    assert advisory.to_csv_row() == 'X,,"say ""hi""",p,0,,LOW,'


def test_load_advisories_from_directory(tmp_path, caplog):
    nested = tmp_path / "github-reviewed" / "2024" / "08"
    nested.mkdir(parents=True)
    (nested / "GHSA-7wp3-vm8x-6qwp.json").write_text(json.dumps(BOSTR))
    (nested / "broken.json").write_text("{")
    (nested / "latin1.json").write_bytes(b'{"summary": "caf\xe9"}')

    advisories = load_advisories(tmp_path)

    assert [a.package for a in advisories] == ["bostr"]
    assert caplog.text.count("Skipping unreadable advisory file") == 2


def test_load_advisories_missing_source(tmp_path):
    with pytest.raises(AdvisoryError):
        load_advisories(tmp_path / "missing")


def test_load_advisories_from_url(monkeypatch):
    monkeypatch.setattr(advisories_mod, "_http_get", lambda url: _Response(200, [BOSTR]))
    advisories = load_advisories("https://example.test/advisories.json")
    assert [a.id for a in advisories] == ["CVE-2024-41962"]


def test_fetch_unexpected_status(monkeypatch):
    monkeypatch.setattr(advisories_mod, "_http_get", lambda url: _Response(404, None))
    with pytest.raises(AdvisoryError):
        advisories_mod.fetch_advisories("https://example.test/advisories.json")
