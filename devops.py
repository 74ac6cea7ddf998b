"""Developer tasks for recsweep.

Usage: uv run devops.py <task> [args...]
Tasks: fmt, lint, test, smoke, clean
"""

import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

ROOT = Path(__file__).resolve().parent

# Directories removed by `clean`, relative to the project root.
ARTIFACT_DIRS = [".pytest_cache", ".ruff_cache", "build", "dist"]


def _run(commands: list[list[str]]) -> None:
    """Run commands in order from the project root, stopping at the first failure."""
    for cmd in commands:
        print(f"$ {' '.join(cmd)}", file=sys.stderr)
        try:
            subprocess.run(cmd, check=True, cwd=ROOT)  # nosec: B603, B607
        except FileNotFoundError:
            print(f"Command not found: {cmd[0]}", file=sys.stderr)
            sys.exit(127)
        except subprocess.CalledProcessError as e:
            print(f"Command failed ({e.returncode}): {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


def fmt(_args: list[str]) -> None:
    """Format the sources and apply safe lint fixes."""
    _run([["ruff", "format", "app", "tests"], ["ruff", "check", "--fix", "app", "tests"]])


def lint(_args: list[str]) -> None:
    """Check formatting and lint rules without touching files."""
    _run([["ruff", "format", "--check", "app", "tests"], ["ruff", "check", "app", "tests"]])


def test(args: list[str]) -> None:
    """Run the unit tests; extra arguments are passed to pytest."""
    _run([["uv", "run", "pytest", "-q", *args]])


def smoke(args: list[str]) -> None:
    """Run one side-effect free check against a config file (default: the user config)."""
    config = ["--config", args[0]] if args else []
    _run([["uv", "run", "recsweep", *config, "check", "--format", "json"]])


def clean(_args: list[str]) -> None:
    """Remove caches and build artifacts."""
    for cache in ROOT.rglob("__pycache__"):
        shutil.rmtree(cache, ignore_errors=True)
    for name in ARTIFACT_DIRS:
        shutil.rmtree(ROOT / name, ignore_errors=True)
    for egg_info in ROOT.glob("**/*.egg-info"):
        shutil.rmtree(egg_info, ignore_errors=True)
    print("Caches and build artifacts removed.", file=sys.stderr)


TASKS: dict[str, Callable[[list[str]], None]] = {
    "fmt": fmt,
    "lint": lint,
    "test": test,
    "smoke": smoke,
    "clean": clean,
}


def main(argv: list[str]) -> None:
    if not argv or argv[0] not in TASKS:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    TASKS[argv[0]](argv[1:])


if __name__ == "__main__":
    main(sys.argv[1:])
