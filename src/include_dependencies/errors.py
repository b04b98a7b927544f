"""Error taxonomy for dependency resolution."""

from __future__ import annotations

from enum import Enum

LOG_PREFIX = "[serverless-plugin-include-dependencies]"


class ErrorKind(str, Enum):
    """Fatal conditions raised by the resolver."""

    UNRESOLVABLE_LOCAL_IMPORT = "unresolvable-local-import"
    UNRESOLVABLE_PACKAGE = "unresolvable-package"
    MISCONFIGURED_IGNORE = "misconfigured-ignore"
    HOST_MISCONFIGURATION = "host-misconfiguration"


class IncludeDependenciesError(RuntimeError):
    """Base error; aborts resolution of the current entry file."""

    kind: ErrorKind = ErrorKind.HOST_MISCONFIGURATION

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class ConfigError(IncludeDependenciesError):
    """Raised when the host configuration is absent or invalid."""

    kind = ErrorKind.HOST_MISCONFIGURATION


class UnresolvableLocalImportError(IncludeDependenciesError):
    """Raised when a relative import inside a local file cannot be resolved."""

    kind = ErrorKind.UNRESOLVABLE_LOCAL_IMPORT

    def __init__(self, specifier: str, importer: str) -> None:
        super().__init__(
            f"{LOG_PREFIX}: Could not resolve '{specifier}' imported from {importer}",
            name=specifier,
        )
        self.importer = importer


class UnresolvablePackageError(IncludeDependenciesError):
    """Raised when a package cannot be resolved by any strategy."""

    kind = ErrorKind.UNRESOLVABLE_PACKAGE

    def __init__(self, name: str) -> None:
        super().__init__(f"{LOG_PREFIX}: Could not find {name}", name=name)


class MisconfiguredIgnoreError(IncludeDependenciesError):
    """Raised when a package should be ignored but the service does not declare it."""

    kind = ErrorKind.MISCONFIGURED_IGNORE

    def __init__(self, name: str) -> None:
        super().__init__(
            f"{LOG_PREFIX}: module {name} should be ignored, "
            "but could not be found in package json...",
            name=name,
        )
