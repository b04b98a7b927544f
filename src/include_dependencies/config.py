"""Configuration extracted from the host (serverless framework) record.

The host record is a mapping shaped like the framework's own objects::

    {
        "config": {"servicePath": "/path/to/service"},
        "service": {
            "custom": {
                "serverless-plugin-include-dependencies": {
                    "shouldUseLocalNodeModules": false,
                    "shouldIgnorePackageJsonDependencies": false,
                    "packagesToBeIgnored": []
                },
                "includeDependencies": {"enableCaching": false}
            },
            ...
        },
    }

Missing or ``null`` ``service``, ``custom`` and option blocks fall back to
defaults; a missing record or ``servicePath`` is a ``ConfigError``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Callable, Mapping
from typing import Any

import yaml

from .errors import LOG_PREFIX, ConfigError
from .validators.options import (
    PLUGIN_OPTIONS_SCHEMA,
    RESOLUTION_OPTIONS_SCHEMA,
    validate_options,
)

logger = logging.getLogger(__name__)

PLUGIN_NAME = "serverless-plugin-include-dependencies"
PLUGIN_OPTIONS_KEY = "includeDependencies"
SERVICE_FILE_ENV_VAR = "INCLUDE_DEPENDENCIES_SERVICE_FILE"
DEFAULT_SERVICE_FILE = Path("serverless.yml")

LogSink = Callable[[str], None]


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _require_host(host_config: Any) -> Mapping[str, Any]:
    if host_config is None:
        raise ConfigError(f"{LOG_PREFIX}: host configuration is required")
    if not isinstance(host_config, Mapping):
        raise ConfigError(f"{LOG_PREFIX}: host configuration must be a mapping")
    return host_config


def service_path_of(host_config: Any) -> Path:
    host = _require_host(host_config)
    config = host.get("config")
    if not isinstance(config, Mapping):
        raise ConfigError(f"{LOG_PREFIX}: host configuration is missing 'config'")

    service_path = config.get("servicePath")
    if not isinstance(service_path, (str, os.PathLike)) or not str(service_path):
        raise ConfigError(f"{LOG_PREFIX}: host configuration is missing 'config.servicePath'")
    return Path(os.path.abspath(service_path))


def custom_options(host_config: Any, key: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Return ``service.custom[key]`` validated against ``schema`` ({} when absent)."""
    host = _require_host(host_config)
    custom = _mapping(_mapping(host.get("service")).get("custom"))
    options = custom.get(key)
    if options is None:
        return {}

    try:
        validate_options(options, schema)
    except ValueError as exc:
        raise ConfigError(f"{LOG_PREFIX}: invalid custom.{key} options:{exc}") from exc
    return dict(options)


def host_log_sink(host_config: Any) -> LogSink | None:
    log = _mapping(_mapping(host_config).get("cli")).get("log")
    return log if callable(log) else None


@dataclass(slots=True, frozen=True)
class ResolutionContext:
    """Per-invocation settings for the dependency walker."""

    service_path: Path
    use_local_node_modules: bool = False
    ignore_package_json_dependencies: bool = False
    ignored_package_names: frozenset[str] = frozenset()
    log: LogSink = logger.info

    @classmethod
    def from_host(cls, host_config: Any, log: LogSink | None = None) -> ResolutionContext:
        """Build the context from the host record, validating the plugin options."""
        service_path = service_path_of(host_config)
        options = custom_options(host_config, PLUGIN_NAME, RESOLUTION_OPTIONS_SCHEMA)

        return cls(
            service_path=service_path,
            use_local_node_modules=bool(options.get("shouldUseLocalNodeModules", False)),
            ignore_package_json_dependencies=bool(
                options.get("shouldIgnorePackageJsonDependencies", False)
            ),
            ignored_package_names=frozenset(options.get("packagesToBeIgnored") or ()),
            log=log or host_log_sink(host_config) or logger.info,
        )


@dataclass(slots=True, frozen=True)
class PluginOptions:
    """Options read from ``custom.includeDependencies``."""

    enable_caching: bool = False

    @classmethod
    def from_host(cls, host_config: Any) -> PluginOptions:
        options = custom_options(host_config, PLUGIN_OPTIONS_KEY, PLUGIN_OPTIONS_SCHEMA)
        return cls(enable_caching=bool(options.get("enableCaching", False)))


def _resolve_service_file(path: Path | str | None = None) -> Path:
    """Resolve the service file path.

    Priority:
    1. Explicit path argument
    2. INCLUDE_DEPENDENCIES_SERVICE_FILE environment variable
    3. serverless.yml in the working directory
    """
    if path is not None:
        return Path(path)

    env_path = os.environ.get(SERVICE_FILE_ENV_VAR)
    if env_path:
        return Path(env_path)

    return DEFAULT_SERVICE_FILE


def load_service_config(path: Path | str | None = None) -> dict[str, Any]:
    """Load a ``serverless.yml`` file into a host configuration record.

    The service path is the directory containing the file.

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping.
    """
    service_file = _resolve_service_file(path)

    if not service_file.is_file():
        raise ConfigError(f"Service file not found: {service_file}")

    try:
        content = service_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read service file: {exc}") from exc

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in service file: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Service file must contain a YAML mapping")

    return {
        "config": {"servicePath": os.path.dirname(os.path.abspath(service_file))},
        "service": data,
    }
