"""Extract import/require specifiers from JavaScript and TypeScript sources."""

from __future__ import annotations

import re
from bisect import bisect_right
from pathlib import Path

SCRIPT_EXTENSIONS = {".js", ".cjs", ".mjs", ".jsx", ".ts", ".cts", ".mts", ".tsx"}

NODE_BUILTIN_MODULES = {
    "assert",
    "async_hooks",
    "buffer",
    "child_process",
    "cluster",
    "console",
    "constants",
    "crypto",
    "dgram",
    "diagnostics_channel",
    "dns",
    "domain",
    "events",
    "fs",
    "http",
    "http2",
    "https",
    "inspector",
    "module",
    "net",
    "os",
    "path",
    "perf_hooks",
    "process",
    "punycode",
    "querystring",
    "readline",
    "repl",
    "stream",
    "string_decoder",
    "sys",
    "timers",
    "tls",
    "trace_events",
    "tty",
    "url",
    "util",
    "v8",
    "vm",
    "wasi",
    "worker_threads",
    "zlib",
}

# Block and line comments; string literals are matched first so that
# "//" inside a URL string is not taken for a comment.
_COMMENT_RE = re.compile(
    r"""("(?:\\.|[^"\\\n])*"|'(?:\\.|[^'\\\n])*'|`(?:\\.|[^`\\])*`)"""
    r"""|(/\*.*?\*/|//[^\n]*)""",
    re.DOTALL,
)

_SPECIFIER_PATTERNS = (
    # require('x'), require.resolve('x')
    re.compile(r"""\brequire(?:\.resolve)?\s*\(\s*(['"`])([^'"`\n]+)\1\s*\)"""),
    # import x from 'x', import { a } from 'x', export * from 'x'
    re.compile(r"""\b(?:import|export)\s[^'"`;]*?\bfrom\s*(['"])([^'"\n]+)\1"""),
    # import 'x'
    re.compile(r"""\bimport\s*(['"])([^'"\n]+)\1"""),
    # import('x')
    re.compile(r"""\bimport\s*\(\s*(['"`])([^'"`\n]+)\1\s*\)"""),
)


def is_builtin(specifier: str) -> bool:
    if specifier.startswith("node:"):
        return True
    return specifier.split("/", 1)[0] in NODE_BUILTIN_MODULES


def strip_comments(source: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        if match.group(2):
            # keep line numbers stable
            return "\n" * match.group(2).count("\n")
        return match.group(1)

    return _COMMENT_RE.sub(_replace, source)


def _string_spans(code: str) -> list[tuple[int, int]]:
    return [match.span(1) for match in _COMMENT_RE.finditer(code) if match.group(1)]


def _inside_string(position: int, spans: list[tuple[int, int]], starts: list[int]) -> bool:
    index = bisect_right(starts, position) - 1
    return index >= 0 and position < spans[index][1]


def extract_from_source(source: str) -> list[str]:
    """Return specifiers in order of first appearance, built-ins excluded.

    A keyword that sits inside a string or template literal is text, not an
    import, and is skipped.
    """
    code = strip_comments(source)
    spans = _string_spans(code)
    starts = [start for start, _ in spans]

    found: list[tuple[int, str]] = []
    for pattern in _SPECIFIER_PATTERNS:
        for match in pattern.finditer(code):
            if _inside_string(match.start(), spans, starts):
                continue
            found.append((match.start(), match.group(2).strip()))

    specifiers: list[str] = []
    seen: set[str] = set()
    for _, specifier in sorted(found):
        if not specifier or "${" in specifier or specifier in seen:
            continue
        if is_builtin(specifier):
            # provided by the runtime
            continue
        seen.add(specifier)
        specifiers.append(specifier)
    return specifiers


def extract_specifiers(path: Path) -> list[str]:
    """Return the dependency specifiers of the source file at ``path``.

    Files that are not scripts (``.json``, ``.node``, ...) have no specifiers.
    """
    if path.suffix.lower() not in SCRIPT_EXTENSIONS:
        return []
    return extract_from_source(path.read_text(encoding="utf-8", errors="replace"))
