#!/usr/bin/env python3
"""Run the test suite with Qt in offscreen mode.

Usage:
  python scripts/run_tests_offscreen.py [--timeout SECONDS] [--debug-log] [--] [pytest args...]

Examples:
  python scripts/run_tests_offscreen.py -- tests/test_fetcher.py -k status
  python scripts/run_tests_offscreen.py --debug-log -- -k controller
"""

from __future__ import annotations

import argparse
import os
import shlex
import subprocess
import sys


def main() -> int:
    p = argparse.ArgumentParser(description="Run pytest with Qt offscreen mode")
    p.add_argument("--timeout", type=int, default=120, help="Maximum seconds to allow the whole pytest run")
    p.add_argument("--verbose", action="store_true", help="Don't use -q (quiet)")
    p.add_argument("--debug-log", action="store_true", help="Set THUMBNAIL_DEMO_LOG_LEVEL=debug for the run")
    p.add_argument("pytest_args", nargs=argparse.REMAINDER, help="Additional pytest args")
    args = p.parse_args()

    env = os.environ.copy()
    env.setdefault("QT_QPA_PLATFORM", "offscreen")
    if args.debug_log:
        env["THUMBNAIL_DEMO_LOG_LEVEL"] = "debug"

    cmd = [sys.executable, "-m", "pytest"]
    if not args.verbose:
        cmd += ["-q"]
    # Per-test limit via pytest-timeout; a hung thumbnail callback fails fast
    cmd += [f"--timeout={min(60, args.timeout)}"]
    cmd += [a for a in args.pytest_args if a != "--"]

    print("Running:", " ".join(shlex.quote(c) for c in cmd))
    try:
        completed = subprocess.run(cmd, env=env, check=False, timeout=args.timeout)
        return completed.returncode
    except subprocess.TimeoutExpired:
        print(f"pytest run timed out after {args.timeout} seconds", file=sys.stderr)
        return 124


if __name__ == "__main__":
    raise SystemExit(main())
