"""Module resolution result model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ModuleResolution:
    """Outcome of resolving a specifier; ``path`` is None when nothing matched."""

    specifier: str
    base_directory: Path
    path: Path | None = None

    @property
    def found(self) -> bool:
        return self.path is not None

    @classmethod
    def not_found(cls, specifier: str, base_directory: Path) -> ModuleResolution:
        return cls(specifier=specifier, base_directory=base_directory)
