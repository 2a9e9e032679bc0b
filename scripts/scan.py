#!/usr/bin/env python3
"""Local CLI entrypoint to run a dependency insight scan.

Usage:
  python scripts/scan.py --root . [--pattern 'lodash*'] [--advisories path_or_url] [--warn-only]

This calls the same ``insight`` command the installed ``npm-lockgraph`` script runs.
"""

from __future__ import annotations

import sys

from npm_lockgraph.cli import main

if __name__ == "__main__":
    raise SystemExit(main(["insight", *sys.argv[1:]]))
