"""Packaging hooks: decide which functions to process and merge their file lists.

The plugin mutates the host record the way the framework expects: every
processed function's dependency paths are appended to ``package.patterns`` of
the function (``package.individually``) or of the service.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from collections.abc import Iterable, MutableMapping
from typing import Any

from .config import (
    PLUGIN_NAME,
    LogSink,
    PluginOptions,
    ResolutionContext,
    host_log_sink,
)
from .core import DependencyCache, resolve_dependencies
from .errors import LOG_PREFIX, ConfigError
from .matching import match_patterns
from .parsers.semver import satisfies
from .resolution import resolve_module_path

logger = logging.getLogger(__name__)

MIN_HOST_VERSION = ">= 2.32"
NODE_RUNTIME_RE = re.compile(r"(provided|nodejs)+")
NODE_MODULES_EXCLUSION = "!node_modules/**"


def union(a: Iterable[str] | None = None, b: Iterable[str] | None = None) -> list[str]:
    """Concatenate ``a`` and ``b`` dropping repeats, first occurrence wins."""
    existing = list(a or [])
    seen = set(existing)
    for item in b or []:
        if item in seen:
            continue
        seen.add(item)
        existing.append(item)
    return existing


def _package_section(owner: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    package = owner.get("package")
    if not isinstance(package, MutableMapping):
        package = {}
        owner["package"] = package
    return package


class IncludeDependencies:
    """Adds each Node.js function's runtime files to its packaging patterns."""

    def __init__(
        self,
        host_config: MutableMapping[str, Any],
        options: dict[str, Any] | None = None,
        host_version: str | None = None,
        log: LogSink | None = None,
    ) -> None:
        if host_version is not None and not satisfies(host_version, MIN_HOST_VERSION):
            raise ConfigError(f"{PLUGIN_NAME} requires serverless 2.32 or higher!")

        self.log = log or host_log_sink(host_config) or logger.info
        self.context = ResolutionContext.from_host(host_config, log=self.log)
        self.plugin_options = PluginOptions.from_host(host_config)
        self.host_config = host_config
        self.options = options or {}
        self.cache: DependencyCache = {}

        service = host_config.get("service")
        if not isinstance(service, MutableMapping):
            service = {}
            host_config["service"] = service
        self.service = service

        package = service.get("package")
        self.individually = bool(isinstance(package, MutableMapping) and package.get("individually"))

        self.hooks = {
            "before:deploy:function:packageFunction": self.function_deploy,
            "before:package:createDeploymentArtifacts": self.create_deployment_artifacts,
        }
        self._log("starting work")

    def _log(self, message: str) -> None:
        self.log(f"{LOG_PREFIX}: {message}")

    @property
    def service_path(self) -> Path:
        return self.context.service_path

    def function_deploy(self) -> list[str] | None:
        function_name = self.options.get("function")
        if not function_name:
            raise ConfigError(f"{LOG_PREFIX}: no function given to deploy")
        return self.process_function(function_name)

    def create_deployment_artifacts(self) -> None:
        functions = self.service.get("functions") or {}
        for function_name in functions:
            self.process_function(function_name)

    def process_function(self, function_name: str) -> list[str] | None:
        """Process one function; returns its dependency paths, or None if skipped."""
        package = _package_section(self.service)
        package["patterns"] = union([NODE_MODULES_EXCLUSION], package.get("patterns"))

        functions = self.service.get("functions") or {}
        function_object = functions.get(function_name)
        if not isinstance(function_object, MutableMapping):
            raise ConfigError(f"{LOG_PREFIX}: unknown function {function_name}")

        runtime = self.get_function_runtime(function_object)
        if runtime and NODE_RUNTIME_RE.search(runtime):
            return self.process_node_function(function_object)
        return None

    def process_node_function(self, function_object: MutableMapping[str, Any]) -> list[str]:
        _package_section(function_object)

        handler = function_object.get("handler")
        if not isinstance(handler, str) or not handler:
            raise ConfigError(f"{LOG_PREFIX}: function is missing a handler")

        file_name = self.get_handler_filename(handler)
        dependencies = self.get_dependencies(file_name, _package_section(self.service)["patterns"])

        target = function_object if self.individually else self.service
        target_package = _package_section(target)
        target_package["patterns"] = union(target_package.get("patterns"), dependencies)

        self._log(f"after all, dependencies length is: {len(dependencies)}")
        return dependencies

    def get_function_runtime(self, function_object: MutableMapping[str, Any]) -> str | None:
        provider = self.service.get("provider")
        provider_runtime = provider.get("runtime") if isinstance(provider, MutableMapping) else None
        return function_object.get("runtime") or provider_runtime

    def get_handler_filename(self, handler: str) -> Path:
        """Map ``dir/file.export`` to the file that defines the handler."""
        last_dot = handler.rfind(".")
        handler_path = handler[:last_dot] if last_dot != -1 else "index"

        resolution = resolve_module_path(str(self.service_path / handler_path), self.service_path)
        if not resolution.found:
            raise ConfigError(f"{LOG_PREFIX}: could not find the file for handler {handler}")
        return resolution.path

    def get_dependencies(self, file_name: Path, patterns: Iterable[str]) -> list[str]:
        """Return the dependency paths relative to the service, minus excluded modules."""
        dependencies = self.get_dependency_list(file_name)
        relative = [
            Path(os.path.relpath(path, self.service_path)).as_posix() for path in dependencies
        ]

        exclusions = [
            p
            for p in patterns
            if p.startswith("!node_modules") and p not in ("!node_modules", NODE_MODULES_EXCLUSION)
        ]
        logger.debug("Exclusions for %s: %s", file_name, exclusions)

        if exclusions:
            return match_patterns(relative, exclusions)
        return relative

    def get_dependency_list(self, file_name: Path) -> list[Path]:
        if not self.individually and self.plugin_options.enable_caching:
            return resolve_dependencies(file_name, self.context, cache=self.cache)
        return resolve_dependencies(file_name, self.context)
