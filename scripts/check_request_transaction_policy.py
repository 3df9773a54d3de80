"""Pre-commit helper enforcing request-bounded transaction conventions.

Routes and services scope every unit of work with ``async with db.begin():``
so a failure rolls back on its own. Explicit ``commit()``/``rollback()`` calls
there are reported. CLI scripts are not checked.

Usage:
    python scripts/check_request_transaction_policy.py [PATH ...]

With no arguments, ``hsc_api/routes`` and ``hsc_api/services`` are scanned.
Directories are searched recursively for ``*.py`` files.
"""

from __future__ import annotations

import ast
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ROOTS = (REPO_ROOT / "hsc_api" / "routes", REPO_ROOT / "hsc_api" / "services")

_FORBIDDEN_ATTRS = {"commit", "rollback"}


def _iter_python_files(paths: Iterable[Path]) -> Iterator[Path]:
    for path in paths:
        if path.is_dir():
            yield from sorted(path.rglob("*.py"))
        elif path.suffix == ".py":
            yield path


def find_violations(paths: Iterable[Path]) -> list[str]:
    """Return ``path:line`` for each ``<obj>.commit()``/``<obj>.rollback()`` call."""
    violations: list[str] = []
    for path in _iter_python_files(paths):
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if (
                isinstance(node, ast.Call)
                and isinstance(node.func, ast.Attribute)
                and node.func.attr in _FORBIDDEN_ATTRS
            ):
                violations.append(f"{path}:{node.lineno}")
    return violations


def main(argv: list[str]) -> int:
    paths = [Path(arg) for arg in argv[1:]] or list(DEFAULT_ROOTS)

    violations = find_violations(paths)
    if not violations:
        return 0

    sys.stderr.write(
        "\n".join(
            [
                "Explicit commit()/rollback() calls are forbidden in routes and"
                " services. Use `async with db.begin(): ...` instead.",
                "",
                "Violations:",
                *sorted(violations),
                "",
            ]
        )
    )
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
