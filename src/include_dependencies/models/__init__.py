"""Data models for dependency resolution."""

from __future__ import annotations

from .manifest import DEPENDENCY_SECTIONS, PackageManifest, is_tolerable_missing
from .resolution import ModuleResolution
from .resolved_package import ResolvedPackage

__all__ = [
    "DEPENDENCY_SECTIONS",
    "ModuleResolution",
    "PackageManifest",
    "ResolvedPackage",
    "is_tolerable_missing",
]
