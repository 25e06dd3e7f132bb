"""Validate layer import boundaries for story_canvas.

Inner layers stay free of outer ones: ``domain`` imports no other layer,
``core`` only ``domain``, ``application`` only ``domain`` and ``core``.
"""

from __future__ import annotations

import argparse
import ast
from pathlib import Path

PACKAGE = "story_canvas"
PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SOURCE_ROOT = PROJECT_ROOT / "src" / PACKAGE
KNOWN_LAYERS = {"api", "core", "adapters", "cli", "application", "domain"}
RULES: dict[str, set[str]] = {
    "domain": {"api", "core", "adapters", "cli", "application"},
    "core": {"api", "adapters", "cli", "application"},
    "application": {"api", "adapters", "cli"},
}


def _layer_for_path(path: Path, source_root: Path) -> str | None:
    try:
        relative = path.relative_to(source_root)
    except ValueError:
        return None
    return relative.parts[0] if len(relative.parts) > 1 else None


def _layer_of_module(parts: list[str]) -> str | None:
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1] if parts[1] in KNOWN_LAYERS else None


def _absolute_parts(node: ast.ImportFrom, path: Path, source_root: Path) -> list[str]:
    if node.level == 0:
        return node.module.split(".") if node.module else []
    package_parts = [PACKAGE, *path.relative_to(source_root).with_suffix("").parts[:-1]]
    if node.level - 1 > len(package_parts):
        return []
    base = package_parts[: len(package_parts) - (node.level - 1)]
    return [*base, *node.module.split(".")] if node.module else base


def imported_layers(node: ast.Import | ast.ImportFrom, path: Path, source_root: Path) -> set[str]:
    """Return the story_canvas layers one import statement reaches."""
    if isinstance(node, ast.Import):
        layers = {_layer_of_module(alias.name.split(".")) for alias in node.names}
        return {layer for layer in layers if layer is not None}

    parts = _absolute_parts(node, path, source_root)
    direct = _layer_of_module(parts)
    if direct is not None:
        return {direct}
    if parts == [PACKAGE]:
        # from story_canvas import core, api
        return {alias.name for alias in node.names if alias.name in KNOWN_LAYERS}
    return set()


def check_file(path: Path, source_root: Path = DEFAULT_SOURCE_ROOT) -> list[str]:
    layer = _layer_for_path(path, source_root)
    banned = RULES.get(layer or "", set())
    if not banned:
        return []

    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    violations: list[str] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        for imported in sorted(imported_layers(node, path, source_root) & banned):
            violations.append(f"{path}:{node.lineno}: {layer} must not import {PACKAGE}.{imported}")
    return violations


def check_import_boundaries(source_root: Path = DEFAULT_SOURCE_ROOT) -> list[str]:
    violations: list[str] = []
    for path in sorted(source_root.rglob("*.py")):
        violations.extend(check_file(path, source_root))
    return violations


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Check story_canvas layer imports.")
    parser.add_argument("--source-root", type=Path, default=DEFAULT_SOURCE_ROOT)
    parsed = parser.parse_args(argv)
    violations = check_import_boundaries(parsed.source_root)
    if violations:
        raise SystemExit("\n".join(violations))
    print("import boundary checks passed")


if __name__ == "__main__":
    main()
