"""include-dependencies core package.

Computes the local source files and installed npm package files a serverless
function's entry file needs at runtime, for use by the packaging hooks and the
standalone CLI.
"""

from .core import DependencyWalker, get_dependency_list, resolve_dependencies
from .config import ResolutionContext
from .errors import (
    ConfigError,
    ErrorKind,
    IncludeDependenciesError,
    MisconfiguredIgnoreError,
    UnresolvableLocalImportError,
    UnresolvablePackageError,
)

__all__ = [
    "ConfigError",
    "DependencyWalker",
    "ErrorKind",
    "IncludeDependenciesError",
    "MisconfiguredIgnoreError",
    "ResolutionContext",
    "UnresolvableLocalImportError",
    "UnresolvablePackageError",
    "get_dependency_list",
    "resolve_dependencies",
]
