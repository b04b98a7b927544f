"""CLI entrypoint: list the files each function of a service needs."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from .config import ResolutionContext, load_service_config
from .core import resolve_dependencies
from .errors import IncludeDependenciesError
from .plugin import IncludeDependencies
from .report import aggregate


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="include-dependencies", description=__doc__)
    parser.add_argument(
        "--service-file",
        type=Path,
        default=None,
        help="Path to serverless.yml (default: $INCLUDE_DEPENDENCIES_SERVICE_FILE or ./serverless.yml)",
    )
    parser.add_argument(
        "--function",
        dest="functions",
        action="append",
        default=None,
        help="Function to process; repeatable (default: every function)",
    )
    parser.add_argument(
        "--entry",
        type=Path,
        default=None,
        help="Resolve a single entry file instead of the service's functions",
    )
    parser.add_argument(
        "--output",
        choices=["json", "lines"],
        default="json",
        help="Output format (default: json)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser.parse_args(argv)


def _relative(paths: list[Path], service_path: Path) -> list[str]:
    return [Path(os.path.relpath(p, service_path)).as_posix() for p in paths]


def _collect(args: argparse.Namespace) -> list[dict[str, Any]]:
    host = load_service_config(args.service_file)

    if args.entry is not None:
        context = ResolutionContext.from_host(host)
        files = resolve_dependencies(args.entry, context)
        return [
            {
                "name": None,
                "entry": str(args.entry),
                "files": _relative(files, context.service_path),
            }
        ]

    plugin = IncludeDependencies(host)
    names = args.functions or list(plugin.service.get("functions") or {})
    results: list[dict[str, Any]] = []
    for name in names:
        function_object = (plugin.service.get("functions") or {}).get(name) or {}
        results.append(
            {
                "name": name,
                "entry": function_object.get("handler") if isinstance(function_object, dict) else None,
                "files": plugin.process_function(name),
            }
        )
    return results


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        functions = _collect(args)
    except IncludeDependenciesError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.output == "lines":
        for function in functions:
            for path in function["files"] or []:
                print(path)
    else:
        print(json.dumps(aggregate(functions), indent=2))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
