"""Tests for the scanner module: directory tree collection."""

from __future__ import annotations

import errno
import logging
import os
from pathlib import Path
from typing import Any

import pytest

from folder_name_sanitizer import scanner
from folder_name_sanitizer.errors import CollectionError, InvalidRootError
from folder_name_sanitizer.scanner import (
    DirectoryEntry,
    calculate_depth,
    collect_directories,
    validate_path_under_root,
)


def _relative_paths(root: Path, entries: list[DirectoryEntry]) -> set[str]:
    return {entry.path.relative_to(root.resolve()).as_posix() for entry in entries}


class TestCollectDirectories:
    def test_collects_every_directory_below_root(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        (tmp_path / "d").mkdir()

        result = collect_directories(tmp_path)

        assert _relative_paths(tmp_path, result.entries) == {"a", "a/b", "a/b/c", "d"}
        assert result.total_found == 4
        assert result.warnings == []

    def test_files_are_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "dir").mkdir()
        (tmp_path / "file:name.txt").touch()
        (tmp_path / "dir" / "nested.txt").touch()

        result = collect_directories(tmp_path)

        assert _relative_paths(tmp_path, result.entries) == {"dir"}

    def test_root_is_excluded(self, tmp_path: Path) -> None:
        (tmp_path / "child").mkdir()

        result = collect_directories(tmp_path)

        assert all(entry.path != tmp_path.resolve() for entry in result.entries)

    def test_empty_root(self, tmp_path: Path) -> None:
        result = collect_directories(tmp_path)

        assert result.entries == []
        assert result.total_found == 0

    def test_entry_metadata(self, tmp_path: Path) -> None:
        (tmp_path / "outer" / "in:ner").mkdir(parents=True)

        result = collect_directories(tmp_path)
        entry = next(e for e in result.entries if e.name == "in:ner")

        root = tmp_path.resolve()
        assert entry.path == root / "outer" / "in:ner"
        assert entry.parent == root / "outer"
        assert entry.depth == 2
        assert entry.path.is_absolute()

    def test_depths(self, tmp_path: Path) -> None:
        (tmp_path / "one" / "two" / "three").mkdir(parents=True)

        result = collect_directories(tmp_path)

        depths = {entry.name: entry.depth for entry in result.entries}
        assert depths == {"one": 1, "two": 2, "three": 3}

    def test_ancestor_depth_is_smaller(self, tmp_path: Path) -> None:
        (tmp_path / "x" / "y" / "z").mkdir(parents=True)
        (tmp_path / "x" / "w").mkdir()

        entries = collect_directories(tmp_path).entries

        for ancestor in entries:
            for descendant in entries:
                if ancestor.path in descendant.path.parents:
                    assert ancestor.depth < descendant.depth

    def test_names_needing_sanitization_are_collected(self, tmp_path: Path) -> None:
        (tmp_path / "a." / "b<1>").mkdir(parents=True)

        result = collect_directories(tmp_path)

        assert _relative_paths(tmp_path, result.entries) == {"a.", "a./b<1>"}

    def test_max_depth_excludes_deeper_directories(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)

        result = collect_directories(tmp_path, max_depth=2)

        assert _relative_paths(tmp_path, result.entries) == {"a", "a/b"}

    def test_max_depth_zero_is_unlimited(self, tmp_path: Path) -> None:
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)

        result = collect_directories(tmp_path, max_depth=0)

        assert result.total_found == 3

    def test_accepts_string_root(self, tmp_path: Path) -> None:
        (tmp_path / "a").mkdir()

        result = collect_directories(str(tmp_path))

        assert result.root == tmp_path.resolve()
        assert result.total_found == 1

    def test_long_path_warning(self, tmp_path: Path) -> None:
        deep = tmp_path / ("a" * 100) / ("b" * 100) / ("c" * 100)
        deep.mkdir(parents=True)

        result = collect_directories(tmp_path)

        assert any("MAX_PATH" in warning for warning in result.warnings)


class TestCollectDirectoriesInvalidRoot:
    def test_missing_root(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidRootError, match="does not exist"):
            collect_directories(tmp_path / "missing")

    def test_file_root(self, tmp_path: Path) -> None:
        f = tmp_path / "file.txt"
        f.touch()
        with pytest.raises(InvalidRootError, match="not a directory"):
            collect_directories(f)

    def test_invalid_root_is_a_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            collect_directories(tmp_path / "missing")


class TestCollectDirectoriesSymlinks:
    def test_symlinked_directory_skipped_by_default(self, tmp_path: Path) -> None:
        (tmp_path / "real").mkdir()
        link = tmp_path / "link:dir"
        link.symlink_to(tmp_path / "real", target_is_directory=True)

        result = collect_directories(tmp_path)

        assert _relative_paths(tmp_path, result.entries) == {"real"}
        assert result.skipped_symlinks == [tmp_path.resolve() / "link:dir"]

    def test_symlink_to_file_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "target.txt").touch()
        (tmp_path / "link").symlink_to(tmp_path / "target.txt")

        result = collect_directories(tmp_path)

        assert result.entries == []
        assert result.skipped_symlinks == []

    def test_follow_symlinks_collects_link(self, tmp_path: Path) -> None:
        (tmp_path / "real" / "inside").mkdir(parents=True)
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)

        result = collect_directories(tmp_path, follow_symlinks=True)

        names = {entry.name for entry in result.entries}
        assert "link" in names
        assert "real" in names
        assert result.skipped_symlinks == []

    def test_follow_symlinks_does_not_loop(self, tmp_path: Path) -> None:
        (tmp_path / "a").mkdir()
        (tmp_path / "a" / "loop").symlink_to(tmp_path, target_is_directory=True)

        result = collect_directories(tmp_path, follow_symlinks=True)

        assert _relative_paths(tmp_path, result.entries) == {"a", "a/loop"}


class TestCollectDirectoriesInaccessible:
    @pytest.fixture
    def unreadable_tree(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        """Tree where listing any directory named ``bad?`` is denied."""
        (tmp_path / "bad?" / "hidden").mkdir(parents=True)
        (tmp_path / "ok" / "deep").mkdir(parents=True)
        real_scandir = os.scandir

        def scandir(path: Path) -> Any:
            if Path(path).name == "bad?":
                raise PermissionError(errno.EACCES, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(scanner.os, "scandir", scandir)
        return tmp_path

    def test_skip_inaccessible_keeps_directory_itself(self, unreadable_tree: Path) -> None:
        result = collect_directories(unreadable_tree)

        assert _relative_paths(unreadable_tree, result.entries) == {"bad?", "ok", "ok/deep"}
        assert len(result.warnings) == 1
        assert "bad?" in result.warnings[0]
        assert "Permission denied" in result.warnings[0]

    def test_skip_inaccessible_logs_warning(
        self, unreadable_tree: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="folder_name_sanitizer.scanner"):
            collect_directories(unreadable_tree)

        assert [r.levelno for r in caplog.records] == [logging.WARNING]

    def test_without_skip_walk_covers_rest_of_tree(
        self, unreadable_tree: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="folder_name_sanitizer.scanner"):
            result = collect_directories(unreadable_tree, skip_inaccessible=False)

        assert _relative_paths(unreadable_tree, result.entries) == {"bad?", "ok", "ok/deep"}
        assert len(result.warnings) == 1
        assert [r.levelno for r in caplog.records] == [logging.ERROR]

    def test_unreadable_root_is_fatal(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "child").mkdir()

        def scandir(path: Path) -> Any:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))

        monkeypatch.setattr(scanner.os, "scandir", scandir)

        with pytest.raises(CollectionError, match="Cannot read root directory"):
            collect_directories(tmp_path)


class TestCalculateDepth:
    def test_root_is_zero(self, tmp_path: Path) -> None:
        assert calculate_depth(tmp_path, tmp_path) == 0

    def test_direct_child_is_one(self, tmp_path: Path) -> None:
        assert calculate_depth(tmp_path / "a", tmp_path) == 1

    def test_nested(self, tmp_path: Path) -> None:
        assert calculate_depth(tmp_path / "a" / "b" / "c", tmp_path) == 3


class TestValidatePathUnderRoot:
    def test_valid_path(self, tmp_path: Path) -> None:
        child = tmp_path / "subdir" / "inner"
        validate_path_under_root(child, tmp_path)  # Should not raise.

    def test_path_outside_root(self, tmp_path: Path) -> None:
        outside = tmp_path.parent / "outside"
        with pytest.raises(ValueError, match="not under root"):
            validate_path_under_root(outside, tmp_path)

    def test_root_itself(self, tmp_path: Path) -> None:
        validate_path_under_root(tmp_path, tmp_path)  # Should not raise.

    def test_similar_prefix_not_confused(self, tmp_path: Path) -> None:
        """'/root-other' must not be accepted as under '/root'."""
        fake = Path(str(tmp_path) + "-other")
        with pytest.raises(ValueError, match="not under root"):
            validate_path_under_root(fake, tmp_path)

    def test_symlink_escaping_root(self, tmp_path: Path) -> None:
        (tmp_path / "inside").mkdir()
        (tmp_path / "outside").mkdir()
        (tmp_path / "inside" / "link").symlink_to(tmp_path / "outside", target_is_directory=True)

        with pytest.raises(ValueError, match="not under root"):
            validate_path_under_root(tmp_path / "inside" / "link", tmp_path / "inside")
