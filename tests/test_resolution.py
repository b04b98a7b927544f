"""Tests for Node-style module resolution."""

from __future__ import annotations

import json

import pytest

from conftest import write, write_package
from include_dependencies.resolution import (
    locate_package_manifest,
    module_directories,
    resolve_module_path,
)


class TestPathSpecifiers:
    """Tests for relative and absolute specifiers."""

    def test_exact_file(self, tmp_path):
        target = write(tmp_path, "lib/a.js")
        assert resolve_module_path("./lib/a.js", tmp_path).path == target

    def test_extension_probing(self, tmp_path):
        write(tmp_path, "lib/a.json", "{}")
        target = write(tmp_path, "lib/a.js")
        assert resolve_module_path("./lib/a", tmp_path).path == target

    def test_directory_index(self, tmp_path):
        target = write(tmp_path, "lib/index.js")
        assert resolve_module_path("./lib", tmp_path).path == target

    def test_directory_main(self, tmp_path):
        write(tmp_path, "lib/package.json", json.dumps({"main": "dist/entry"}))
        target = write(tmp_path, "lib/dist/entry.js")
        assert resolve_module_path("./lib", tmp_path).path == target

    def test_parent_directory(self, tmp_path):
        target = write(tmp_path, "shared.js")
        assert resolve_module_path("../shared", tmp_path / "nested").path == target

    def test_absolute_path(self, tmp_path):
        target = write(tmp_path, "handler.js")
        assert resolve_module_path(str(tmp_path / "handler"), tmp_path / "elsewhere").path == target

    def test_not_found_is_a_value(self, tmp_path):
        resolution = resolve_module_path("./nope", tmp_path)
        assert not resolution.found
        assert resolution.path is None
        assert resolution.specifier == "./nope"


class TestPackageSpecifiers:
    """Tests for node_modules lookups."""

    def test_upward_search(self, tmp_path):
        pkg = write_package(tmp_path / "node_modules", "dep")
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        assert resolve_module_path("dep", nested).path == pkg / "index.js"

    def test_nearest_node_modules_wins(self, tmp_path):
        write_package(tmp_path / "node_modules", "dep")
        inner = write_package(tmp_path / "app" / "node_modules", "dep")
        assert resolve_module_path("dep", tmp_path / "app").path == inner / "index.js"

    def test_main_field(self, tmp_path):
        pkg = write_package(tmp_path / "node_modules", "dep", {"main": "lib/main.js"}, files={"lib/main.js": ""})
        assert resolve_module_path("dep", tmp_path).path == pkg / "lib" / "main.js"

    def test_deep_import(self, tmp_path):
        pkg = write_package(tmp_path / "node_modules", "@scope/dep", files={"lib/x.js": ""})
        assert resolve_module_path("@scope/dep/lib/x", tmp_path).path == pkg / "lib" / "x.js"

    def test_exports_string(self, tmp_path):
        pkg = write_package(
            tmp_path / "node_modules", "dep", {"exports": "./dist/index.cjs"}, files={"dist/index.cjs": ""}
        )
        assert resolve_module_path("dep", tmp_path).path == pkg / "dist" / "index.cjs"

    def test_exports_conditions(self, tmp_path):
        pkg = write_package(
            tmp_path / "node_modules",
            "dep",
            {"exports": {".": {"import": "./esm/index.mjs", "require": "./cjs/index.js"}}},
            files={"esm/index.mjs": "", "cjs/index.js": ""},
        )
        assert resolve_module_path("dep", tmp_path).path == pkg / "cjs" / "index.js"

    def test_exports_subpath_pattern(self, tmp_path):
        pkg = write_package(
            tmp_path / "node_modules",
            "dep",
            {"exports": {"./features/*": {"default": "./src/features/*.js"}}},
            files={"src/features/x.js": ""},
        )
        assert resolve_module_path("dep/features/x", tmp_path).path == pkg / "src" / "features" / "x.js"

    def test_node_path(self, tmp_path, monkeypatch):
        target = write(tmp_path / "shared", "alias/file.js")
        monkeypatch.setenv("NODE_PATH", str(tmp_path / "shared"))
        assert resolve_module_path("alias/file", tmp_path / "service").path == target

    def test_module_directories_skip_node_modules_parents(self, tmp_path):
        base = tmp_path / "node_modules" / "dep"
        dirs = list(module_directories(base))
        assert dirs[0] == base / "node_modules"
        assert tmp_path / "node_modules" / "node_modules" not in dirs
        assert tmp_path / "node_modules" in dirs


class TestLocatePackageManifest:
    """Tests for finding <name>/package.json."""

    def test_finds_manifest_without_main(self, tmp_path):
        pkg = write_package(tmp_path / "node_modules", "nomain", {"main": "missing.js"}, files={})
        resolution = locate_package_manifest("nomain", tmp_path / "src")
        assert resolution.path == pkg / "package.json"

    def test_ignores_exports_restrictions(self, tmp_path):
        pkg = write_package(tmp_path / "node_modules", "strict", {"exports": {".": "./index.js"}})
        assert locate_package_manifest("strict", tmp_path).path == pkg / "package.json"

    @pytest.mark.parametrize("name", ["absent", "@scope/absent"])
    def test_missing(self, tmp_path, name):
        assert not locate_package_manifest(name, tmp_path).found
