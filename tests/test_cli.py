"""Tests for the CLI module: end-to-end integration tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from folder_name_sanitizer.cli import main


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Directory tree root, kept apart from the log file location."""
    path = tmp_path / "root"
    path.mkdir()
    return path


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "rename_log.json"


class TestCLIDryRun:
    def test_dry_run_no_write(self, root: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Without --write, no folders should be renamed."""
        (root / "bad:dir").mkdir()

        exit_code = main([str(root)])

        assert exit_code == 0
        assert (root / "bad:dir").is_dir()
        assert not (root / "bad_dir").exists()
        out = capsys.readouterr().out
        assert "=== DRY RUN SUMMARY ===" in out
        assert "bad:dir -> bad_dir" in out
        assert "Use --write to apply changes." in out

    def test_dry_run_clean_directory(self, root: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (root / "clean").mkdir()

        exit_code = main([str(root)])

        assert exit_code == 0
        assert "All folder names are already compatible." in capsys.readouterr().out

    def test_files_are_not_renamed(self, root: Path) -> None:
        (root / "file:name.txt").touch()

        exit_code = main([str(root)])

        assert exit_code == 0
        assert (root / "file:name.txt").exists()


class TestCLIWrite:
    def test_write_with_yes(self, root: Path, log_file: Path) -> None:
        """--write --yes renames folders without prompting."""
        (root / "a." / "b<1>").mkdir(parents=True)

        exit_code = main([str(root), "--write", "--yes", "--log-file", str(log_file)])

        assert exit_code == 0
        assert (root / "a" / "b_1_").is_dir()
        assert not (root / "a.").exists()

    def test_write_creates_log(
        self, root: Path, log_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (root / "bad:dir").mkdir()

        exit_code = main([str(root), "--write", "--yes", "--log-file", str(log_file)])

        assert exit_code == 0
        data = json.loads(log_file.read_text(encoding="utf-8"))
        assert data["total_renames"] == 1
        assert data["renames"][0]["destination"].endswith("bad_dir")
        assert data["simulated"] is False
        assert f"Log written to: {log_file}" in capsys.readouterr().out

    def test_confirmation_accepted(
        self, root: Path, log_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (root / "bad:dir").mkdir()
        monkeypatch.setattr("builtins.input", lambda _prompt: "y")

        exit_code = main([str(root), "--write", "--log-file", str(log_file)])

        assert exit_code == 0
        assert (root / "bad_dir").is_dir()

    def test_confirmation_declined(
        self, root: Path, log_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (root / "bad:dir").mkdir()
        monkeypatch.setattr("builtins.input", lambda _prompt: "n")

        exit_code = main([str(root), "--write", "--log-file", str(log_file)])

        assert exit_code == 2
        assert (root / "bad:dir").is_dir()
        assert not log_file.exists()

    def test_confirmation_eof(
        self, root: Path, log_file: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (root / "bad:dir").mkdir()

        def raise_eof(_prompt: str) -> str:
            raise EOFError

        monkeypatch.setattr("builtins.input", raise_eof)

        exit_code = main([str(root), "--write", "--log-file", str(log_file)])

        assert exit_code == 2
        assert (root / "bad:dir").is_dir()

    def test_nothing_to_rename_skips_prompt(
        self,
        root: Path,
        log_file: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (root / "clean").mkdir()

        def fail_input(_prompt: str) -> str:
            raise AssertionError("input() must not be called")

        monkeypatch.setattr("builtins.input", fail_input)

        exit_code = main([str(root), "--write", "--log-file", str(log_file)])

        assert exit_code == 0
        assert "No renames needed." in capsys.readouterr().out
        assert not log_file.exists()


class TestCLIValidation:
    def test_invalid_path(self, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["/nonexistent/path/12345"])

        assert exit_code == 1
        assert "is not a directory" in capsys.readouterr().err

    def test_file_path(self, tmp_path: Path) -> None:
        f = tmp_path / "file.txt"
        f.touch()

        assert main([str(f)]) == 1

    def test_max_length_too_small(self, root: Path) -> None:
        assert main([str(root), "--max-length", "3"]) == 1

    def test_negative_max_depth(self, root: Path) -> None:
        assert main([str(root), "--max-depth", "-1"]) == 1


class TestCLIOptions:
    def test_verbose(self, root: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (root / "bad:dir").mkdir()

        exit_code = main([str(root), "--verbose"])

        assert exit_code == 0
        assert "[1/1] Processing: bad:dir" in capsys.readouterr().out

    def test_max_depth(self, root: Path, log_file: Path) -> None:
        (root / "a:" / "b:").mkdir(parents=True)

        exit_code = main(
            [str(root), "--write", "--yes", "--max-depth", "1", "--log-file", str(log_file)]
        )

        assert exit_code == 0
        assert (root / "a_" / "b:").is_dir()

    def test_max_length(self, root: Path, log_file: Path) -> None:
        (root / ("a" * 50)).mkdir()

        exit_code = main(
            [
                str(root),
                "--write",
                "--yes",
                "--max-length",
                "20",
                "--log-file",
                str(log_file),
            ]
        )

        assert exit_code == 0
        dirs = list(root.iterdir())
        assert len(dirs) == 1
        assert dirs[0].name == "a" * 17 + "..."

    def test_reserved_name(self, root: Path, log_file: Path) -> None:
        (root / "aux").mkdir()

        exit_code = main([str(root), "--write", "--yes", "--log-file", str(log_file)])

        assert exit_code == 0
        assert (root / "aux_").is_dir()
