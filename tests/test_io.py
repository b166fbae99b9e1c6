"""Tests for gitcache.io module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from gitcache.io import ensure_parent_dir, safe_rmtree, safe_unlink, write_bytes


class TestEnsureParentDir:
    """Tests for ensure_parent_dir function."""

    def test_creates_nested_directories(self, tmp_path: Path) -> None:
        """Should create all parent directories."""
        target = tmp_path / "a" / "b" / "c" / "file.bin"
        result = ensure_parent_dir(target)

        assert result == target
        assert target.parent.is_dir()

    def test_handles_existing_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "file.bin"
        ensure_parent_dir(target)
        assert ensure_parent_dir(target) == target

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        result = ensure_parent_dir(str(tmp_path / "nested" / "file.bin"))
        assert isinstance(result, Path)
        assert result.parent.exists()


class TestWriteBytes:
    """Tests for write_bytes function."""

    def test_writes_and_replaces(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "blob"

        write_bytes(target, b"\x00\x01")
        write_bytes(target, b"second")

        assert target.read_bytes() == b"second"

    def test_cleans_temp_on_failure(self, tmp_path: Path) -> None:
        """Should not leave a temp file behind when the rename fails."""
        target = tmp_path / "blob"

        with patch("gitcache.io.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError, match="boom"):
                write_bytes(target, b"data")

        assert list(tmp_path.iterdir()) == []

    def test_raises_when_parent_is_file(self, tmp_path: Path) -> None:
        (tmp_path / "file").write_text("x", encoding="utf-8")

        with pytest.raises(OSError):
            write_bytes(tmp_path / "file" / "blob", b"data")


class TestSafeRmtree:
    """Tests for safe_rmtree function."""

    def test_removes_tree(self, tmp_path: Path) -> None:
        tree = tmp_path / "tree"
        (tree / "sub").mkdir(parents=True)
        (tree / "sub" / "f.txt").write_text("x", encoding="utf-8")

        assert safe_rmtree(tree) is True
        assert not tree.exists()

    def test_missing_is_success(self, tmp_path: Path) -> None:
        assert safe_rmtree(tmp_path / "nope") is True

    def test_failure_returns_false(self, tmp_path: Path) -> None:
        with patch("gitcache.io.shutil.rmtree", side_effect=PermissionError("denied")):
            assert safe_rmtree(tmp_path) is False


class TestSafeUnlink:
    def test_removes_file(self, tmp_path: Path) -> None:
        file = tmp_path / "f"
        file.write_text("x", encoding="utf-8")

        assert safe_unlink(file) is True
        assert not file.exists()

    def test_missing_is_success(self, tmp_path: Path) -> None:
        assert safe_unlink(tmp_path / "nope") is True
