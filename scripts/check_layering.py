#!/usr/bin/env python3
"""Layering validation script.

Enforces the import direction of the used_space package: the engine never
depends on the presentation layer, and lower layers never reach upwards.

Rules:
- types/ imports nothing from used_space outside types/
- utils/ never imports used_space.core or used_space.__main__
- core/ never imports used_space.__main__ or display formatting

Exit codes:
    0: No violations found (clean)
    1: Violations detected (layering rule broken)
"""

from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Final

# ANSI color codes for terminal output
RED: Final[str] = "\033[91m"
GREEN: Final[str] = "\033[92m"
YELLOW: Final[str] = "\033[93m"
RESET: Final[str] = "\033[0m"

IMPORT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*(?:from|import)\s+(used_space(?:\.[\w.]+)?)")

# Layer directory -> module prefixes it must not import
FORBIDDEN_IMPORTS: Final[dict[str, tuple[str, ...]]] = {
    "types": ("used_space.core", "used_space.utils", "used_space.__main__"),
    "utils": ("used_space.core", "used_space.__main__"),
    "core": ("used_space.__main__", "used_space.utils.formatting"),
}


def check_file(file_path: Path, forbidden: tuple[str, ...]) -> list[tuple[int, str]]:
    """Check a single Python file for forbidden imports.

    Args:
        file_path: Path to the Python file to check.
        forbidden: Module prefixes this file may not import.

    Returns:
        List of (line_number, violation_description) tuples.
    """
    violations: list[tuple[int, str]] = []

    try:
        lines = file_path.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        print(f"{YELLOW}Warning: Could not read {file_path}: {e}{RESET}", file=sys.stderr)
        return violations

    for line_num, line in enumerate(lines, start=1):
        match = IMPORT_PATTERN.match(line)
        if match is None:
            continue
        module = match.group(1)
        if any(module == prefix or module.startswith(prefix + ".") for prefix in forbidden):
            violations.append((line_num, f"Forbidden import of {module}: {line.strip()}"))

    return violations


def scan_layer(package_path: Path, layer: str) -> dict[Path, list[tuple[int, str]]]:
    """Scan one layer directory for violations."""
    layer_path = package_path / layer
    if not layer_path.exists():
        print(f"{YELLOW}Warning: Layer directory {layer_path} does not exist{RESET}", file=sys.stderr)
        return {}

    violations_by_file: dict[Path, list[tuple[int, str]]] = {}
    for py_file in layer_path.rglob("*.py"):
        if "__pycache__" in py_file.parts:
            continue
        file_violations = check_file(py_file, FORBIDDEN_IMPORTS[layer])
        if file_violations:
            violations_by_file[py_file] = file_violations

    return violations_by_file


def main() -> int:
    """Main entry point for the layering check.

    Returns:
        Exit code: 0 if no violations, 1 if violations found.
    """
    project_root = Path(__file__).parent.parent
    package_path = project_root / "src" / "used_space"

    if not package_path.exists():
        print(f"{RED}Error: Could not find src/used_space directory{RESET}", file=sys.stderr)
        return 1

    print(f"Checking import layering in: {package_path}\n")

    all_violations: dict[Path, list[tuple[int, str]]] = {}
    for layer in FORBIDDEN_IMPORTS:
        all_violations.update(scan_layer(package_path, layer))

    if not all_violations:
        print(f"{GREEN}✓ No layering violations found{RESET}")
        return 0

    total = sum(len(v) for v in all_violations.values())
    print(f"{RED}✗ Found {total} layering violations:{RESET}\n")

    for file_path, violations in sorted(all_violations.items()):
        print(f"{RED}{file_path.relative_to(project_root)}{RESET}")
        for line_num, description in violations:
            print(f"  {line_num}: {description}")
        print()

    print(f"{RED}Layering check failed!{RESET}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
