"""
Tests for package-level conventions shared by every leafutil module.
"""

import importlib

import pytest

import leafutil

MODULES = [
    "leafutil",
    "leafutil.values",
    "leafutil.files",
    "leafutil.dirs",
    "leafutil.symlinks",
    "leafutil.paths",
    "leafutil.validation",
    "leafutil.dates",
    "leafutil.loaders",
]


class TestModuleDocstrings:
    """Test the summary line at the top of each module."""

    @pytest.mark.parametrize("name", MODULES)
    def test_summary_line_is_plain_ascii(self, name):
        """Summary lines stick to ASCII punctuation."""
        module = importlib.import_module(name)
        summary = module.__doc__.strip().splitlines()[0]
        assert summary
        assert summary.isascii()

    def test_version(self):
        assert leafutil.__version__ == "0.1.0"
