"""Resolved package model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .manifest import PackageManifest


@dataclass(frozen=True)
class ResolvedPackage:
    """A manifest together with the location it was read from.

    Two values describe the same installed package iff their
    ``root_directory`` is equal; the name is not an identity.
    """

    manifest: PackageManifest
    manifest_path: Path

    @property
    def root_directory(self) -> Path:
        return self.manifest_path.parent

    @property
    def name(self) -> str | None:
        return self.manifest.name
