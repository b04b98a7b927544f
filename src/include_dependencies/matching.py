"""Glob filtering for packaging patterns."""

from __future__ import annotations

from collections.abc import Iterable

import pathspec


class _Glob:
    """One packaging glob, matched on top of gitignore pattern syntax.

    A gitignore pattern naming a directory also covers everything below it;
    a packaging glob only matches the paths it spells out, so only patterns
    ending in ``/**`` reach into a tree.
    """

    def __init__(self, pattern: str) -> None:
        self.spec = pathspec.PathSpec.from_lines("gitignore", [pattern])
        self.tree = pattern.endswith("/**")

    def matches(self, path: str) -> bool:
        if not self.spec.match_file(path):
            return False
        if self.tree:
            return True
        parts = path.split("/")
        return not any(self.spec.match_file("/".join(parts[:i])) for i in range(1, len(parts)))


def match_patterns(paths: Iterable[str], patterns: Iterable[str]) -> list[str]:
    """Filter ``paths`` through include and ``!``-prefixed exclude globs.

    A path is kept when it matches at least one include pattern and no
    exclude pattern. With only exclude patterns every path starts included.
    Input order is preserved.
    """
    includes: list[_Glob] = []
    excludes: list[_Glob] = []
    for pattern in patterns:
        if pattern.startswith("!"):
            excludes.append(_Glob(pattern[1:]))
        elif pattern:
            includes.append(_Glob(pattern))

    matched: list[str] = []
    for path in paths:
        normalised = path.replace("\\", "/")
        if includes and not any(glob.matches(normalised) for glob in includes):
            continue
        if any(glob.matches(normalised) for glob in excludes):
            continue
        matched.append(path)
    return matched
