#!/usr/bin/env python3
# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally: format, lint, type check, tests, a CLI smoke run and the build.

Usage::

    python tools/ci.py               # every step
    python tools/ci.py tests lint    # only the named steps
    python tools/ci.py --fail-fast   # stop at the first failing step
"""

import argparse
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Step:
    key: str
    title: str
    command: list[str]


STEPS: list[Step] = [
    Step("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    Step("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    Step("types", "Type check", ["uv", "run", "ty", "check", "src/"]),
    Step("tests", "Tests", ["uv", "run", "pytest", "--cov=perspectives", "--cov-report=term-missing"]),
    Step("smoke", "CLI smoke run", ["uv", "run", "psp", "parse", "--indent", "0", "examples/aangifte.psp"]),
    Step("build", "Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a coloured summary."""
    parser = argparse.ArgumentParser(description="Run CI checks locally.")
    parser.add_argument("steps", nargs="*", help=f"Steps to run: {', '.join(s.key for s in STEPS)} (default: all)")
    parser.add_argument("--fail-fast", action="store_true", help="Stop after the first failing step")
    args = parser.parse_args()
    unknown = sorted(set(args.steps) - {s.key for s in STEPS})
    if unknown:
        parser.error(f"unknown step(s): {', '.join(unknown)}")

    selected = [s for s in STEPS if not args.steps or s.key in args.steps]
    results: list[tuple[Step, bool, float]] = []

    for step in selected:
        _banner(step.title)
        start = time.monotonic()
        proc = subprocess.run(step.command, cwd=_REPO_ROOT)
        passed = proc.returncode == 0
        results.append((step, passed, time.monotonic() - start))
        if not passed and args.fail_fast:
            break

    _banner("  Summary")
    for step, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {step.title} ({elapsed:.1f}s)"))
    skipped = len(selected) - len(results)
    if skipped:
        print(chalk.yellow(f"  {skipped} step(s) skipped"))

    print()
    return 0 if all(passed for _, passed, _ in results) and not skipped else 1


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


if __name__ == "__main__":
    sys.exit(main())
