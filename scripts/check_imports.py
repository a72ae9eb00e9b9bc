#!/usr/bin/env python3
"""Check ballotgate layer import boundaries.

Each top-level subpackage of ballotgate is a layer. A module may import
from its own layer and from the layers listed for it in ALLOWED_IMPORTS:

    domain          -> (nothing)
    config          -> domain
    application     -> domain, config
    infrastructure  -> domain, application
    bootstrap       -> domain, config, application, infrastructure
    api             -> every layer above

The ballot rules in domain/ and the ballot service in application/ stay
free of adapters, so they can be driven from tests with no wiring.

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: Clean
    1: At least one violation
"""
import ast
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import NamedTuple

PACKAGE = "ballotgate"

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "config": {"domain"},
    "application": {"domain", "config"},
    "infrastructure": {"domain", "application"},
    "bootstrap": {"domain", "config", "application", "infrastructure"},
    "api": {"domain", "config", "application", "infrastructure", "bootstrap"},
}


class Violation(NamedTuple):
    path: str
    line: int
    message: str


def imported_modules(tree: ast.AST) -> Iterator[tuple[int, str]]:
    """Yield (line, dotted module) for every absolute import in tree.

    `import a, b` yields both names; relative imports are skipped.
    """
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            yield node.lineno, node.module


def layer_of(py_file: Path, package_dir: Path) -> str | None:
    """Return the layer py_file belongs to, or None outside any layer."""
    try:
        parts = py_file.relative_to(package_dir).parts
    except ValueError:
        return None
    if len(parts) < 2 or parts[0] not in ALLOWED_IMPORTS:
        return None
    return parts[0]


def target_layer(module: str) -> str | None:
    """Return the ballotgate layer a dotted module name points into."""
    parts = module.split(".")
    if len(parts) >= 2 and parts[0] == PACKAGE and parts[1] in ALLOWED_IMPORTS:
        return parts[1]
    return None


def check_file_imports(py_file: Path, package_dir: Path) -> list[Violation]:
    """Return the boundary violations in one file."""
    layer = layer_of(py_file, package_dir)
    if layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: skipping {py_file}: {e}", file=sys.stderr)
        return []

    allowed = ALLOWED_IMPORTS[layer]
    found: list[Violation] = []
    for line, module in imported_modules(tree):
        target = target_layer(module)
        if target is None or target == layer or target in allowed:
            continue
        found.append(
            Violation(str(py_file), line, f"{layer} layer cannot import from {target}")
        )
    return found


def check_import_boundaries(package_dir: Path) -> list[Violation]:
    """Return the boundary violations in every module under package_dir."""
    if not package_dir.is_dir():
        print(f"Error: {package_dir} is not a directory", file=sys.stderr)
        return []
    return [
        violation
        for py_file in sorted(package_dir.rglob("*.py"))
        for violation in check_file_imports(py_file, package_dir)
    ]


def format_violations(violations: list[Violation]) -> str:
    if not violations:
        return ""
    body = [f"  {v.path}:{v.line}: {v.message}" for v in sorted(violations)]
    return "\n".join(
        [f"{len(violations)} import boundary violation(s):", *body]
    )


def main() -> int:
    package_dir = (
        Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).parent.parent / PACKAGE
    )
    violations = check_import_boundaries(package_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print(f"{package_dir}: layer boundaries clean")
    return 0


if __name__ == "__main__":
    sys.exit(main())
