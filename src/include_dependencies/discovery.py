"""Package file discovery utilities."""

from __future__ import annotations

from pathlib import Path
from collections.abc import Iterator

EXCLUDES = {"node_modules"}


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def iter_package_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root``.

    The package's own ``node_modules`` directory is skipped; its contents are
    separate packages, resolved and expanded on their own. Dot-entries are
    skipped the way a ``**`` glob skips them.
    """

    def _walk(current: Path, depth: int) -> Iterator[Path]:
        try:
            entries = sorted(current.iterdir())
        except (FileNotFoundError, NotADirectoryError, PermissionError):
            return

        for entry in entries:
            if _is_hidden(entry):
                continue
            if entry.is_dir():
                if entry.is_symlink():
                    continue
                if depth == 0 and entry.name in EXCLUDES:
                    continue
                yield from _walk(entry, depth + 1)
            elif entry.is_file():
                yield entry

    yield from _walk(root, 0)


def list_package_files(root: Path) -> list[Path]:
    """Return every file belonging to the package installed at ``root``."""
    return list(iter_package_files(root))
