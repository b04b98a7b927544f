"""Read package.json manifests."""

from __future__ import annotations

import json
import os
from pathlib import Path

from ..models import PackageManifest, ResolvedPackage

MANIFEST_NAME = "package.json"


def load_manifest(path: Path) -> PackageManifest:
    """Parse the manifest at ``path``.

    A missing file raises ``FileNotFoundError``; malformed JSON raises
    ``ValueError`` naming the file.
    """
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    return PackageManifest.from_dict(data)


def read_manifest(path: Path) -> ResolvedPackage:
    return ResolvedPackage(manifest=load_manifest(path), manifest_path=path)


def read_nearest_manifest(path: Path) -> ResolvedPackage | None:
    """Find and parse the nearest ``package.json`` at or above ``path``."""
    current = Path(os.path.abspath(path))
    if not current.is_dir():
        current = current.parent

    for directory in (current, *current.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return read_manifest(candidate)
    return None
