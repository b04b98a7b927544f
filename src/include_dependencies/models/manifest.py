"""Package manifest model."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Any

DEPENDENCY_SECTIONS = (
    "dependencies",
    "peerDependencies",
    "optionalDependencies",
)


def _section(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        return {}
    return dict(value)


@dataclass(frozen=True)
class PackageManifest:
    """The parts of a ``package.json`` the resolver relies on."""

    name: str | None = None
    version: str | None = None
    main: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies_meta: dict[str, dict[str, Any]] = field(default_factory=dict)
    exports: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PackageManifest:
        if not isinstance(data, Mapping):
            raise ValueError("package.json must contain a JSON object")

        name = data.get("name")
        version = data.get("version")
        main = data.get("main")
        return cls(
            name=name if isinstance(name, str) else None,
            version=str(version) if version is not None else None,
            main=main if isinstance(main, str) and main else None,
            dependencies=_section(data, "dependencies"),
            peer_dependencies=_section(data, "peerDependencies"),
            optional_dependencies=_section(data, "optionalDependencies"),
            peer_dependencies_meta=_section(data, "peerDependenciesMeta"),
            exports=data.get("exports"),
        )

    def section(self, key: str) -> dict[str, str]:
        """Return a dependency section by its ``package.json`` key."""
        return {
            "dependencies": self.dependencies,
            "peerDependencies": self.peer_dependencies,
            "optionalDependencies": self.optional_dependencies,
        }[key]

    def declares(self, name: str) -> bool:
        return any(name in self.section(key) for key in DEPENDENCY_SECTIONS)


def is_tolerable_missing(
    name: str,
    optional_dependencies: Mapping[str, Any] | None,
    peer_dependencies_meta: Mapping[str, Any] | None,
) -> bool:
    """Return True when a missing ``name`` is declared optional by its requester."""
    if optional_dependencies and name in optional_dependencies:
        return True
    if peer_dependencies_meta and name in peer_dependencies_meta:
        meta = peer_dependencies_meta[name]
        return isinstance(meta, Mapping) and bool(meta.get("optional"))
    return False
