"""
Layer boundary tests.

The stockroom packages form a strict stack:

    stockroom_kernel  <  stockroom_engines  <  stockroom_config  <  stockroom_services

A package may only import from packages below it.  In addition, the kernel
and the engines must stay free of I/O libraries (YAML parsing lives in
stockroom_config).

These tests read source code via AST -- they cannot break anything.
"""

import ast
from pathlib import Path

import pytest

from stockroom_kernel.invariants import (
    ALL_LEDGER_INVARIANTS,
    FORBIDDEN_KERNEL_IMPORTS,
    LedgerInvariant,
)

REPO_ROOT = Path(__file__).resolve().parents[2]

LAYERS = (
    "stockroom_kernel",
    "stockroom_engines",
    "stockroom_config",
    "stockroom_services",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _python_files(package: str) -> list[Path]:
    return sorted((REPO_ROOT / package).rglob("*.py"))


def _extract_imports(path: Path) -> list[tuple[int, str]]:
    """Extract (line_number, module_string) for all imports in a file."""
    tree = ast.parse(path.read_text(), filename=str(path))
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for path in _python_files(package):
        for lineno, module in _extract_imports(path):
            top = module.split(".")[0]
            if top in forbidden:
                found.append(f"  {path.relative_to(REPO_ROOT)}:{lineno} imports '{module}'")
    return found


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestLayering:
    """No package imports from a layer above it."""

    @pytest.mark.parametrize("position", range(len(LAYERS)))
    def test_no_upward_imports(self, position):
        package = LAYERS[position]
        above = LAYERS[position + 1:]
        violations = _violations(package, above)
        assert not violations, (
            f"Layer violation: {package} may not import {list(above)}:\n"
            + "\n".join(violations)
        )

    def test_kernel_forbidden_list_matches_layers(self):
        assert set(FORBIDDEN_KERNEL_IMPORTS) == set(LAYERS[1:])

    @pytest.mark.parametrize("package", ["stockroom_kernel", "stockroom_engines"])
    def test_core_has_no_yaml(self, package):
        violations = _violations(package, ("yaml",))
        assert not violations, "\n".join(violations)

    @pytest.mark.parametrize("package", LAYERS)
    def test_every_layer_has_sources(self, package):
        assert _python_files(package)


class TestInvariantsDeclaration:
    def test_declared(self):
        assert ALL_LEDGER_INVARIANTS == frozenset(LedgerInvariant)
        assert LedgerInvariant.ATOMIC_FAILURE in ALL_LEDGER_INVARIANTS

    def test_values_are_unique_identifiers(self):
        values = [invariant.value for invariant in LedgerInvariant]
        assert len(values) == len(set(values)) == 5
        assert all(value == value.lower() for value in values)
