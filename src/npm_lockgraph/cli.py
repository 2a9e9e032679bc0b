"""Command line interface for npm-lockgraph.

Subcommands:
  insight     report requested vs resolved dependency versions per project
  projects    list Node.js projects and whether they carry a lockfile
  upgrade     rewrite requested ranges in a package.json
  advisories  export npm advisories (OSV/GitHub format) to CSV
  validate    check a package-lock.json against the lockfile schema
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .advisories import AdvisoryError, load_advisories, write_csv
from .config import ConfigError, Settings, load_settings
from .core import scan_repository
from .discovery import discover_projects
from .parsers.package_lock import load as load_package_lock
from .parsers.semver import InvalidSelectorError
from .summary import render_summary
from .upgrade import upgrade_dependency_version

FINDINGS_EXIT_CODE = 10
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="Path to a settings JSON file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override the configured logging level",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="npm-lockgraph", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    sub = parser.add_subparsers(dest="command", required=True)

    insight = sub.add_parser("insight", help="Report dependencies in use")
    _add_common(insight)
    insight.add_argument("--root", type=Path, default=Path("."))
    insight.add_argument("--pattern", dest="name_pattern", default=None, help="Package name glob")
    insight.add_argument("--version", default=None, help="Only versions matching this selector")
    insight.add_argument(
        "--transitive",
        action="store_true",
        help="Include packages reached transitively",
    )
    insight.add_argument("--advisories", default=None, help="Advisory directory, file or URL")
    insight.add_argument("--summary", action="store_true", help="Print Markdown instead of JSON")
    insight.add_argument("--warn-only", action="store_true")

    projects = sub.add_parser("projects", help="List Node.js projects")
    _add_common(projects)
    projects.add_argument("--root", type=Path, default=Path("."))

    upgrade = sub.add_parser("upgrade", help="Upgrade requested dependency ranges")
    _add_common(upgrade)
    upgrade.add_argument("manifest", type=Path, help="Path to package.json")
    upgrade.add_argument("pattern", help="Package name glob, e.g. 'lodash*'")
    upgrade.add_argument("version", help="New requested version or range")
    upgrade.add_argument("--dry-run", action="store_true")

    advisories = sub.add_parser("advisories", help="Export npm advisories to CSV")
    _add_common(advisories)
    advisories.add_argument("source", help="Advisory directory, JSON file or URL")
    advisories.add_argument("--output", type=Path, required=True)

    validate = sub.add_parser("validate", help="Validate a package-lock.json")
    _add_common(validate)
    validate.add_argument("lockfile", type=Path)

    return parser.parse_args(argv)


def _settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    settings = settings.with_overrides(log_level=args.log_level)
    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)
    return settings


def _insight(args: argparse.Namespace, settings: Settings) -> int:
    settings = settings.with_overrides(
        name_pattern=args.name_pattern,
        version=args.version,
        advisories=args.advisories,
        only_direct=False if args.transitive else None,
    )
    report = scan_repository(args.root, settings)
    if args.summary:
        print(render_summary(report), end="")
    else:
        print(json.dumps(report, indent=2))

    if report.get("hasFindings") and not args.warn_only:
        return FINDINGS_EXIT_CODE
    return 0


def _projects(args: argparse.Namespace, settings: Settings) -> int:
    root = args.root.resolve()
    found = discover_projects(root, excludes=settings.excludes)
    print(json.dumps([project.to_dict(root) for project in found], indent=2))
    return 0


def _upgrade(args: argparse.Namespace, settings: Settings) -> int:
    changes = upgrade_dependency_version(args.manifest, args.pattern, args.version, dry_run=args.dry_run)
    print(json.dumps([change.to_dict() for change in changes], indent=2))
    return 0


def _advisories(args: argparse.Namespace, settings: Settings) -> int:
    count = write_csv(load_advisories(args.source), args.output)
    print(f"Wrote {count} advisory row(s) to {args.output}")
    return 0


def _validate(args: argparse.Namespace, settings: Settings) -> int:
    lockfile = load_package_lock(args.lockfile)
    print(f"{args.lockfile} is a valid lockfile with {len(lockfile.packages)} package entries")
    return 0


COMMANDS = {
    "insight": _insight,
    "projects": _projects,
    "upgrade": _upgrade,
    "advisories": _advisories,
    "validate": _validate,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = _settings(args)
        return COMMANDS[args.command](args, settings)
    except (ConfigError, InvalidSelectorError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2
    except (AdvisoryError, OSError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
