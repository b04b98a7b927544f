"""Shared fixtures for building service and node_modules trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


def write(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def write_package(
    modules_dir: Path,
    name: str,
    manifest: dict[str, Any] | None = None,
    files: dict[str, str] | None = None,
) -> Path:
    """Create ``modules_dir/name`` with a package.json and the given files."""
    root = modules_dir / name
    data = {"name": name, "version": "1.0.0"}
    data.update(manifest or {})
    write(root, "package.json", json.dumps(data))
    for relative, content in (files if files is not None else {"index.js": ""}).items():
        write(root, relative, content)
    return root


def host_config(service_path: Path, options: dict[str, Any] | None = None, **service: Any) -> dict[str, Any]:
    custom = {}
    if options is not None:
        custom["serverless-plugin-include-dependencies"] = options
    service_data: dict[str, Any] = {"custom": custom}
    service_data.update(service)
    return {"config": {"servicePath": str(service_path)}, "service": service_data}


@pytest.fixture
def service(tmp_path: Path) -> Path:
    root = tmp_path / "service"
    write(root, "package.json", json.dumps({"name": "service", "dependencies": {}}))
    return root


@pytest.fixture
def node_modules(service: Path) -> Path:
    path = service / "node_modules"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _clear_node_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NODE_PATH", raising=False)
