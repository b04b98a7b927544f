"""Derive the package name from a require/import specifier."""

from __future__ import annotations


def package_name(specifier: str) -> str:
    """Return the package portion of ``specifier``.

    ``lodash/fp/map`` -> ``lodash``; ``@scope/pkg/deep/file.js`` -> ``@scope/pkg``.
    The first backslash is treated as a path separator.
    """
    normalised = specifier.replace("\\", "/", 1)
    parts = normalised.split("/")
    if normalised.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


def is_relative(specifier: str) -> bool:
    return specifier.startswith(".")
