#!/usr/bin/env python3
"""
Formatting script for the project.
Runs black and isort, and optionally ruff, over the package and its tests.
"""
import argparse
import subprocess
import sys
from pathlib import Path

TARGETS = ["src/matchypairing", "tests", "setup.py", "format.py"]


def run_command(cmd, description):
    """Run a command and handle errors."""
    print(f"Running {description}...")
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
        print(f"NICE! {description} completed successfully")
        if result.stdout:
            print(result.stdout)
        return True
    except subprocess.CalledProcessError as e:
        print(f"SAD! {description} failed:")
        print(e.stderr)
        return False
    except FileNotFoundError:
        print(f"Command not found: {cmd[2]}", file=sys.stderr)
        return False


def main():
    parser = argparse.ArgumentParser(description="Format and lint Python code")
    parser.add_argument(
        "--check", action="store_true", help="Check formatting without making changes"
    )
    parser.add_argument(
        "--lint", action="store_true", help="Run ruff in addition to formatting"
    )
    args = parser.parse_args()

    root = Path(__file__).parent.resolve()
    targets = [str(root / t) for t in TARGETS]

    black_cmd = [sys.executable, "-m", "black"] + (["--check", "--diff"] if args.check else [])
    isort_cmd = [sys.executable, "-m", "isort", "--profile", "black"] + (
        ["--check-only", "--diff"] if args.check else []
    )
    success = run_command(black_cmd + targets, "Black formatting")
    success = run_command(isort_cmd + targets, "Import sorting") and success
    if args.lint:
        success = (
            run_command([sys.executable, "-m", "ruff", "check"] + targets, "Ruff linting")
            and success
        )

    if success:
        print(f"Code successfully {'checked' if args.check else 'formatted'}!")
        sys.exit(0)
    print("Some operations failed. Please review the output above.")
    sys.exit(1)


if __name__ == "__main__":
    main()
