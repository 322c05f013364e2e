"""Tests for workspace doc discovery and path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from orgview.doc_map import (
    classify_layer,
    discover_doc_files,
    find_workspace_file,
    resolve_workspace_path,
)
from orgview.exceptions import WorkspaceError


def _touch(root: Path, relative: str, content: str = "* Heading\n") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestClassifyLayer:
    """Tests for doc-map layer assignment."""

    @pytest.mark.parametrize(
        ("relative_path", "layer"),
        [
            ("README.org", "strategic"),
            ("notes.org", "strategic"),
            ("docs/ARCHITECTURE.org", "strategic"),
            ("docs/DOC_PHILOSOPHY.org", "strategic"),
            ("docs/guide.org", "other"),
            ("docs/deep/ROADMAP.org", "other"),
            ("quick_reference.org", "quickref"),
            ("src/module/quick_reference.org", "quickref"),
        ],
    )
    def test_layers(self, relative_path: str, layer: str) -> None:
        assert classify_layer(relative_path) == layer


class TestDiscoverDocFiles:
    """Tests for discover_doc_files."""

    def test_sorted_by_layer_then_path(self, tmp_path: Path) -> None:
        for relative in ("src/b/quick_reference.org", "docs/zeta.org", "README.org", "docs/PLAN.org", "docs/alpha.org"):
            _touch(tmp_path, relative)

        entries = discover_doc_files(tmp_path, token_counter=lambda text: None)

        assert [(entry.layer, entry.path) for entry in entries] == [
            ("strategic", "README.org"),
            ("strategic", "docs/PLAN.org"),
            ("quickref", "src/b/quick_reference.org"),
            ("other", "docs/alpha.org"),
            ("other", "docs/zeta.org"),
        ]

    def test_entry_fields(self, tmp_path: Path) -> None:
        _touch(tmp_path, "docs/guide.org", "one two three")

        (entry,) = discover_doc_files(tmp_path, token_counter=lambda text: len(text.split()))

        assert entry.name == "guide.org"
        assert entry.dir == "docs"
        assert entry.tokens == 3

    def test_root_file_has_empty_dir(self, tmp_path: Path) -> None:
        _touch(tmp_path, "README.org")

        (entry,) = discover_doc_files(tmp_path)

        assert entry.dir == ""
        assert entry.tokens is None

    def test_excluded_directories_and_other_suffixes(self, tmp_path: Path) -> None:
        _touch(tmp_path, "node_modules/pkg/README.org")
        _touch(tmp_path, ".git/notes.org")
        _touch(tmp_path, "dist/out.org")
        _touch(tmp_path, "docs/readme.md")
        _touch(tmp_path, "docs/kept.org")

        entries = discover_doc_files(tmp_path)

        assert [entry.path for entry in entries] == ["docs/kept.org"]

    def test_limit(self, tmp_path: Path) -> None:
        for index in range(5):
            _touch(tmp_path, f"docs/file{index}.org")

        assert len(discover_doc_files(tmp_path, limit=3)) == 3

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(WorkspaceError):
            discover_doc_files(tmp_path / "missing")


class TestWorkspacePaths:
    """Tests for path resolution inside the workspace."""

    def test_resolve_inside_workspace(self, tmp_path: Path) -> None:
        assert resolve_workspace_path(tmp_path, "docs/a.org") == (tmp_path / "docs" / "a.org").resolve()

    @pytest.mark.parametrize("relative", ["../outside.org", "docs/../../outside.org", "/etc/passwd"])
    def test_escape_is_rejected(self, tmp_path: Path, relative: str) -> None:
        with pytest.raises(WorkspaceError, match="escapes workspace"):
            resolve_workspace_path(tmp_path, relative)

    def test_find_direct_path(self, tmp_path: Path) -> None:
        path = _touch(tmp_path, "docs/guide.org")

        assert find_workspace_file(tmp_path, "docs/guide.org") == path.resolve()

    def test_find_by_suffix(self, tmp_path: Path) -> None:
        path = _touch(tmp_path, "packages/core/docs/guide.org")

        assert find_workspace_file(tmp_path, "docs/guide.org") == path
        assert find_workspace_file(tmp_path, "./guide.org") == path

    def test_suffix_must_match_whole_components(self, tmp_path: Path) -> None:
        _touch(tmp_path, "docs/myguide.org")

        assert find_workspace_file(tmp_path, "guide.org") is None

    def test_missing_file(self, tmp_path: Path) -> None:
        assert find_workspace_file(tmp_path, "nowhere.org") is None
