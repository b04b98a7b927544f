"""Minimal semver range handling built atop packaging.version.

Supported expressions:
- exact versions (e.g., "2.32.0")
- caret ranges ^x.y.z → >=x.y.z,<x+1.0.0
- tilde ranges ~x.y.z → >=x.y.z,<x.y+1.0
- comparator sets split by spaces, e.g., ">= 2.32" or ">=1.0.0 <2.0.0"
"""

from __future__ import annotations

import re

from packaging.version import InvalidVersion, Version

_OPERATOR_GAP_RE = re.compile(r"(>=|<=|==|>|<|=)\s+")


def _parse_version(v: str) -> Version:
    return Version(v)


def _next_major(v: Version) -> Version:
    return Version(f"{v.major + 1}.0.0")


def _next_minor(v: Version) -> Version:
    return Version(f"{v.major}.{v.minor + 1}.0")


def _compare(v: Version, token: str) -> bool:
    if token.startswith(">="):
        return v >= _parse_version(token[2:])
    if token.startswith(">"):
        return v > _parse_version(token[1:])
    if token.startswith("<="):
        return v <= _parse_version(token[2:])
    if token.startswith("<"):
        return v < _parse_version(token[1:])
    if token.startswith("=="):
        return v == _parse_version(token[2:])
    if token.startswith("="):
        return v == _parse_version(token[1:])
    return v == _parse_version(token)


def satisfies(installed: str, expr: str) -> bool:
    """Return True when ``installed`` falls inside the range ``expr``.

    Unparseable versions never satisfy a range.
    """
    try:
        v = _parse_version(installed)
        expr = _OPERATOR_GAP_RE.sub(r"\1", expr.strip())

        # caret ^x.y.z
        if expr.startswith("^"):
            base = _parse_version(expr[1:])
            return base <= v < _next_major(base)

        # tilde ~x.y.z
        if expr.startswith("~"):
            base = _parse_version(expr[1:])
            return base <= v < _next_minor(base)

        return all(_compare(v, token) for token in expr.split())
    except InvalidVersion:
        return False
