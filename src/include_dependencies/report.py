"""Report aggregation for the CLI's JSON output."""

from __future__ import annotations

from typing import Any


def aggregate(functions: list[dict[str, Any]]) -> dict[str, Any]:
    """Aggregate per-function file lists into a single report.

    Each entry of ``functions`` holds ``name``, ``entry`` and ``files``;
    functions skipped for their runtime carry ``files: None``.
    """

    total_functions = len(functions)
    total_files = sum(len(f.get("files") or []) for f in functions)

    report: dict[str, Any] = {
        "version": "1",
        "functions": functions,
        "totals": {
            "functions": total_functions,
            "files": total_files,
        },
    }

    return report
