#!/usr/bin/env python3
"""Run the formatters, linters, and tests in sequence and report the results.

Steps:
1. Black format check
2. isort import order check
3. Ruff static check
4. Pylint static analysis
5. pytest
"""

from pathlib import Path
import subprocess
import sys

SOURCES = ["app", "core", "infrastructure", "main.py"]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` from the project root and return (success, combined output)."""
    print(f"\n{'='*60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=False, cwd=Path(__file__).parent
        )
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    success = result.returncode == 0
    output = result.stdout + result.stderr
    print("OK" if success else "FAILED")
    if output.strip():
        print(output)
    return success, output


def main() -> None:
    commands = [
        (["python", "-m", "black", ".", "--check"], "Black format check"),
        (["python", "-m", "isort", ".", "--check-only"], "isort import order check"),
        (["python", "-m", "ruff", "check", "."], "Ruff static check"),
        (["python", "-m", "pylint", *SOURCES], "Pylint static analysis"),
        (["python", "-m", "pytest", "-q"], "pytest"),
    ]

    results = [(description, *run_command(cmd, description)) for cmd, description in commands]

    print(f"\n{'='*60}")
    print("Summary")
    print("=" * 60)
    all_passed = True
    for description, success, _ in results:
        print(f"{description}: {'passed' if success else 'FAILED'}")
        all_passed = all_passed and success

    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    main()
