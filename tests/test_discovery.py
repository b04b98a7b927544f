"""Tests for package file discovery."""

from __future__ import annotations

from conftest import write
from include_dependencies.discovery import list_package_files


class TestListPackageFiles:
    """Tests for enumerating a package's files."""

    def test_lists_nested_files(self, tmp_path):
        root = tmp_path / "pkg"
        write(root, "package.json", "{}")
        write(root, "lib/a.js")
        write(root, "lib/deep/b.js")

        files = {p.relative_to(root).as_posix() for p in list_package_files(root)}

        assert files == {"package.json", "lib/a.js", "lib/deep/b.js"}

    def test_skips_own_node_modules_only(self, tmp_path):
        root = tmp_path / "pkg"
        write(root, "node_modules/dep/index.js")
        write(root, "vendor/node_modules/kept.js")

        files = {p.relative_to(root).as_posix() for p in list_package_files(root)}

        assert files == {"vendor/node_modules/kept.js"}

    def test_skips_dot_entries(self, tmp_path):
        root = tmp_path / "pkg"
        write(root, ".npmignore")
        write(root, ".github/workflow.yml")
        write(root, "index.js")

        assert list_package_files(root) == [root / "index.js"]

    def test_missing_root(self, tmp_path):
        assert list_package_files(tmp_path / "absent") == []
