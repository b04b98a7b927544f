"""Dependency list resolution.

Starting from a function's entry file, the walker follows relative imports
between local files and the dependency edges declared by installed packages,
then expands every distinct package root into the files it contains.

This module MUST NOT depend on the packaging layer (``plugin``) so it can be
used both from the plugin and from the standalone CLI.
"""

from __future__ import annotations

import logging
from pathlib import Path
from collections.abc import Mapping
from typing import Any

from .config import LogSink, ResolutionContext
from .discovery import list_package_files
from .errors import (
    LOG_PREFIX,
    MisconfiguredIgnoreError,
    UnresolvableLocalImportError,
    UnresolvablePackageError,
)
from .models import DEPENDENCY_SECTIONS, PackageManifest, ResolvedPackage, is_tolerable_missing
from .parsers.package_json import MANIFEST_NAME, load_manifest, read_manifest, read_nearest_manifest
from .parsers.package_name import is_relative, package_name
from .parsers.specifiers import extract_specifiers
from .resolution import absolute, locate_package_manifest, resolve_module_path

logger = logging.getLogger(__name__)

DependencyCache = dict[Path, list[Path]]


class DependencyWalker:
    """Owns the state of one resolution: visited sets and work queues."""

    def __init__(self, context: ResolutionContext) -> None:
        self.context = context
        self.local_files: set[Path] = set()
        self.package_roots: set[Path] = set()
        self.pending_local: list[Path] = []
        self.pending_packages: list[ResolvedPackage] = []
        self._service_manifest: PackageManifest | None = None

    def _log(self, message: str) -> None:
        self.context.log(f"{LOG_PREFIX}: {message}")

    # ---- Local files ---------------------------------------------------------------------

    def walk(self) -> None:
        """Drain the local queue, following relative imports."""
        while self.pending_local:
            current = self.pending_local.pop()

            if current in self.local_files:
                continue
            self.local_files.add(current)

            for specifier in extract_specifiers(current):
                if is_relative(specifier):
                    resolution = resolve_module_path(specifier, current.parent)
                    if not resolution.found:
                        raise UnresolvableLocalImportError(specifier, str(current))
                    self.pending_local.append(resolution.path)
                else:
                    self.handle(specifier, self.context.service_path)

    # ---- Packages ------------------------------------------------------------------------

    def _service_package_manifest(self) -> PackageManifest:
        if self._service_manifest is None:
            self._service_manifest = load_manifest(self.context.service_path / MANIFEST_NAME)
        return self._service_manifest

    def _declared_by_service(self, name: str) -> bool:
        self._log(f"going to check if module {name} is in package.json so it can be ignored")
        if self._service_package_manifest().declares(name):
            return True
        raise MisconfiguredIgnoreError(name)

    def _find_package(self, name: str, base_directory: Path) -> ResolvedPackage | None:
        if self.context.use_local_node_modules:
            # hoisted layout: a missing manifest is a filesystem error
            manifest_path = self.context.service_path / "node_modules" / name / MANIFEST_NAME
            return read_manifest(manifest_path)

        located = locate_package_manifest(name, base_directory)
        if not located.found:
            return None
        return read_nearest_manifest(located.path)

    def handle(
        self,
        specifier: str,
        base_directory: Path,
        optional_dependencies: Mapping[str, Any] | None = None,
        peer_dependencies_meta: Mapping[str, Any] | None = None,
    ) -> None:
        """Queue the package (or fallback local file) a package specifier refers to.

        ``optional_dependencies`` and ``peer_dependencies_meta`` come from the
        requesting package and decide whether a missing package is tolerated.
        """
        name = package_name(specifier)

        if name in self.context.ignored_package_names:
            self._log(f"module {name} should be globally ignored")
            return

        if self.context.ignore_package_json_dependencies and self._declared_by_service(name):
            return

        package = self._find_package(name, base_directory)
        if package is not None:
            self.pending_packages.append(package)
            return

        if is_tolerable_missing(name, optional_dependencies, peer_dependencies_meta):
            self._log(f"WARNING missing optional dependency: {name}")
            logger.warning("Missing optional dependency %s", name)
            return

        # the specifier may still name a file, e.g. a NODE_PATH alias
        fallback = resolve_module_path(specifier, base_directory)
        if fallback.found:
            self.pending_local.append(fallback.path)
            return

        raise UnresolvablePackageError(name)

    def expand(self) -> None:
        """Drain the package queue, following manifest dependency edges."""
        while self.pending_packages:
            package = self.pending_packages.pop()
            root = package.root_directory

            if root in self.package_roots:
                continue
            self.package_roots.add(root)

            manifest = package.manifest
            logger.debug("Expanding %s@%s at %s", package.name, manifest.version, root)
            # a name listed in several sections is one edge
            edges = dict.fromkeys(
                dependency for key in DEPENDENCY_SECTIONS for dependency in manifest.section(key)
            )
            for dependency in edges:
                self.handle(
                    dependency,
                    root,
                    manifest.optional_dependencies,
                    manifest.peer_dependencies_meta,
                )

    # ---- Result --------------------------------------------------------------------------

    def materialize(self) -> set[Path]:
        """Return the files of every visited package root."""
        files: set[Path] = set()
        for root in self.package_roots:
            files.update(list_package_files(root))
        return files

    def run(self, entry_file: Path) -> list[Path]:
        self.pending_local.append(absolute(entry_file))

        while self.pending_local or self.pending_packages:
            self.walk()
            self.expand()

        logger.debug(
            "Resolved %d local files and %d packages for %s",
            len(self.local_files),
            len(self.package_roots),
            entry_file,
        )
        return sorted(self.local_files | self.materialize())


def resolve_dependencies(
    entry_file: Path | str,
    context: ResolutionContext,
    cache: DependencyCache | None = None,
) -> list[Path]:
    """Return every file ``entry_file`` needs at runtime, itself included.

    ``cache`` is shared across calls of one packaging run and keyed by entry
    file; it is not safe for concurrent use.
    """
    entry = absolute(entry_file)
    if cache is not None and entry in cache:
        return list(cache[entry])

    files = DependencyWalker(context).run(entry)

    if cache is not None:
        cache[entry] = list(files)
    return files


def get_dependency_list(
    entry_file: Path | str,
    host_config: Any,
    *,
    log: LogSink | None = None,
    cache: DependencyCache | None = None,
) -> list[Path]:
    """Resolve ``entry_file`` with settings taken from the host configuration record."""
    context = ResolutionContext.from_host(host_config, log=log)
    return resolve_dependencies(entry_file, context, cache=cache)
