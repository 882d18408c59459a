"""
Tests for symlink recreation.
"""

import os

import pytest

from leafutil.symlinks import recreate_symlink


class TestRecreateSymlink:
    """Test replacing link targets."""

    def test_creates_link(self, tmp_path):
        src = tmp_path / "v1"
        src.write_text("one")
        target = tmp_path / "current"
        recreate_symlink(str(src), str(target))
        assert os.readlink(target) == str(src)
        assert target.read_text() == "one"

    def test_replaces_existing_link(self, tmp_path):
        (tmp_path / "v1").write_text("one")
        (tmp_path / "v2").write_text("two")
        target = tmp_path / "current"
        recreate_symlink(str(tmp_path / "v1"), str(target))
        recreate_symlink(str(tmp_path / "v2"), str(target))
        assert target.read_text() == "two"

    def test_replaces_regular_file(self, tmp_path):
        (tmp_path / "v1").write_text("one")
        target = tmp_path / "binary"
        target.write_text("old binary")
        recreate_symlink(str(tmp_path / "v1"), str(target))
        assert target.is_symlink()

    def test_replaces_dangling_link(self, tmp_path):
        target = tmp_path / "current"
        target.symlink_to(tmp_path / "gone")
        (tmp_path / "v1").write_text("one")
        recreate_symlink(str(tmp_path / "v1"), str(target))
        assert target.read_text() == "one"

    def test_unwritable_location(self, tmp_path):
        with pytest.raises(OSError, match="failed to create symlink"):
            recreate_symlink(str(tmp_path / "v1"), str(tmp_path / "missing-dir" / "link"))
