#!/usr/bin/env python3
"""
Development scripts for the mortar-inject project.

Every check is run through ``uv run`` so that the project's dev extra is used.
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

PACKAGE_DIR = "src/mortar/inject/"


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if it succeeded."""
    print(f"\n🔄 {description}: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"❌ Command not found: {cmd[0]}")
        return False

    print(f"✅ {description} passed")
    return True


def run_all(commands: list[tuple[list[str], str]]) -> int:
    """Run every command, even after a failure; 0 only if all passed."""
    results = [run_command(cmd, description) for cmd, description in commands]
    return 0 if all(results) else 1


def run_tests() -> int:
    return run_all([(["uv", "run", "pytest", "-v"], "Tests")])


def run_lint() -> int:
    status = run_all(
        [
            (["uv", "run", "ruff", "check", "."], "Ruff linting"),
            (["uv", "run", "ruff", "format", "--check", "."], "Ruff formatting"),
        ]
    )
    if status:
        print("\n💡 Fix formatting with: uv run ruff format .")
    return status


def run_typecheck() -> int:
    return run_all(
        [
            (["uv", "run", "mypy", PACKAGE_DIR], "MyPy type checking"),
            (["uv", "run", "pyright", PACKAGE_DIR], "Pyright type checking"),
        ]
    )


def run_demos() -> int:
    demos = sorted(p for p in Path("demo").glob("*.py") if not p.name.startswith("_"))
    if not demos:
        print("⚠️  No demo scripts found")
        return 0
    return run_all([(["uv", "run", "python", str(p)], f"Demo: {p.name}") for p in demos])


def run_readme_validation() -> int:
    """Extract the README's Python examples with phmdoctest and run them."""
    readme = Path("README.md")
    generated = Path("test_readme.py")
    if not readme.exists():
        print("❌ README.md not found")
        return 1

    try:
        return run_all(
            [
                (["uv", "run", "phmdoctest", str(readme), "--outfile", str(generated)], "Generating README tests"),
                (["uv", "run", "pytest", str(generated), "-v"], "README code examples"),
            ]
        )
    finally:
        generated.unlink(missing_ok=True)


COMMANDS: dict[str, Callable[[], int]] = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
    "readme": run_readme_validation,
}


def check_all() -> int:
    """Run every check and print a summary."""
    results = {name: func() == 0 for name, func in COMMANDS.items()}

    print(f"\n{'=' * 20} SUMMARY {'=' * 20}")
    for name, passed in results.items():
        print(f"{name:<15} {'✅ PASS' if passed else '❌ FAIL'}")

    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    commands = {**COMMANDS, "check": check_all}
    if len(sys.argv) != 2 or sys.argv[1] not in commands:
        print(f"Usage: python scripts.py <{'|'.join(commands)}>")
        sys.exit(1)
    sys.exit(commands[sys.argv[1]]())
