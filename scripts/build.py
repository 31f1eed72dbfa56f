#!/usr/bin/env python3
"""
Stamp the API endpoint environment into the package before building.

Usage:
  python scripts/build.py --env=development   # http://localhost:8080
  python scripts/build.py --env=production    # https://api.sqlew.io
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
STAMP_FILE = REPO_ROOT / "src" / "sqlew_connector" / "core" / "_build_env.py"

ENDPOINTS = {
    "development": "http://localhost:8080",
    "production": "https://api.sqlew.io",
}

TEMPLATE = '# Rewritten by scripts/build.py. Do not edit by hand.\nBUILD_ENV = "{env}"\n'


def render(env: str) -> str:
    if env not in ENDPOINTS:
        raise ValueError(f"Unknown build env: {env}")
    return TEMPLATE.format(env=env)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--env", choices=sorted(ENDPOINTS), default="production")
    args = parser.parse_args(argv)

    STAMP_FILE.write_text(render(args.env))
    print(f"Building for: {args.env}")
    print(f"API endpoint hardcoded to: {ENDPOINTS[args.env]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
