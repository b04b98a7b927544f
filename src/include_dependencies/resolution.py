"""Node.js style module resolution.

Covers what the resolver needs from ``require.resolve``: relative and absolute
paths, extension probing, directory ``index`` files, the ``main`` and
``exports`` fields of ``package.json`` and the upward ``node_modules`` search,
followed by the directories listed in ``NODE_PATH``.
"""

from __future__ import annotations

import os
from pathlib import Path
from collections.abc import Iterator
from typing import Any

from .models import ModuleResolution, PackageManifest
from .parsers.package_json import MANIFEST_NAME, load_manifest
from .parsers.package_name import package_name

EXTENSIONS = (".js", ".json", ".node", ".mjs", ".cjs")
EXPORT_CONDITIONS = ("require", "node", "default")
NODE_PATH_ENV_VAR = "NODE_PATH"


def absolute(path: Path | str) -> Path:
    """Absolute, normalised path; symlinks are preserved."""
    return Path(os.path.abspath(path))


def _is_path_specifier(specifier: str) -> bool:
    return specifier in {".", ".."} or specifier.startswith(("./", "../", "/"))


def _load_as_file(candidate: Path) -> Path | None:
    if candidate.is_file():
        return candidate
    if not candidate.name:
        return None
    for ext in EXTENSIONS:
        with_ext = candidate.with_name(candidate.name + ext)
        if with_ext.is_file():
            return with_ext
    return None


def _load_index(directory: Path) -> Path | None:
    for ext in EXTENSIONS:
        index = directory / f"index{ext}"
        if index.is_file():
            return index
    return None


def _read_manifest_quietly(directory: Path) -> PackageManifest | None:
    manifest_path = directory / MANIFEST_NAME
    if not manifest_path.is_file():
        return None
    try:
        return load_manifest(manifest_path)
    except ValueError:
        # node ignores an unparseable manifest when looking for "main"
        return None


def _load_as_directory(directory: Path) -> Path | None:
    manifest = _read_manifest_quietly(directory)
    if manifest is not None and manifest.main:
        target = absolute(directory / manifest.main)
        found = _load_as_file(target) or _load_index(target)
        if found is not None:
            return found
    return _load_index(directory)


def _load_path(candidate: Path) -> Path | None:
    found = _load_as_file(candidate)
    if found is None and candidate.is_dir():
        found = _load_as_directory(candidate)
    return found


def _pick_condition(target: Any) -> str | None:
    if isinstance(target, str):
        return target
    if isinstance(target, list):
        for item in target:
            picked = _pick_condition(item)
            if picked is not None:
                return picked
        return None
    if isinstance(target, dict):
        for key, value in target.items():
            if key in EXPORT_CONDITIONS:
                picked = _pick_condition(value)
                if picked is not None:
                    return picked
    return None


def _export_target(exports: Any, subpath: str) -> str | None:
    if isinstance(exports, (str, list)):
        return _pick_condition(exports) if subpath == "." else None
    if not isinstance(exports, dict):
        return None

    if not any(key.startswith(".") for key in exports):
        # a bare conditions object describes "."
        return _pick_condition(exports) if subpath == "." else None

    if subpath in exports:
        return _pick_condition(exports[subpath])

    for key, value in exports.items():
        if key.count("*") != 1:
            continue
        prefix, suffix = key.split("*")
        if subpath.startswith(prefix) and subpath.endswith(suffix) and len(subpath) >= len(key) - 1:
            stem = subpath[len(prefix) : len(subpath) - len(suffix)]
            picked = _pick_condition(value)
            if picked is not None:
                return picked.replace("*", stem)
    return None


def _load_from_package(modules_dir: Path, specifier: str) -> Path | None:
    name = package_name(specifier)
    package_dir = modules_dir / name
    manifest = _read_manifest_quietly(package_dir)
    if manifest is not None and manifest.exports is not None:
        target = _export_target(manifest.exports, "." + specifier[len(name) :])
        if target is not None:
            exported = absolute(package_dir / target)
            if exported.is_file():
                return exported
    return _load_path(absolute(modules_dir / specifier))


def module_directories(base_directory: Path) -> Iterator[Path]:
    """Yield candidate ``node_modules`` directories for ``base_directory``, nearest first."""
    base = absolute(base_directory)
    for directory in (base, *base.parents):
        if directory.name == "node_modules":
            continue
        yield directory / "node_modules"

    for entry in os.environ.get(NODE_PATH_ENV_VAR, "").split(os.pathsep):
        if entry:
            yield absolute(entry)


def resolve_module_path(specifier: str, base_directory: Path) -> ModuleResolution:
    """Resolve ``specifier`` the way ``require.resolve`` would from ``base_directory``."""
    base = absolute(base_directory)

    if _is_path_specifier(specifier):
        found = _load_path(absolute(base / specifier))
        return ModuleResolution(specifier=specifier, base_directory=base, path=found)

    for modules_dir in module_directories(base):
        found = _load_from_package(modules_dir, specifier)
        if found is not None:
            return ModuleResolution(specifier=specifier, base_directory=base, path=found)

    return ModuleResolution.not_found(specifier, base)


def locate_package_manifest(name: str, base_directory: Path) -> ModuleResolution:
    """Find ``<name>/package.json`` through the ``node_modules`` search path."""
    base = absolute(base_directory)
    specifier = f"{name}/{MANIFEST_NAME}"
    for modules_dir in module_directories(base):
        candidate = modules_dir / name / MANIFEST_NAME
        if candidate.is_file():
            return ModuleResolution(specifier=specifier, base_directory=base, path=candidate)
    return ModuleResolution.not_found(specifier, base)
