"""
Path helpers for expansion, containment and project-root discovery.
"""

from __future__ import annotations

import os
from typing import Optional


class ProjectRootNotFoundError(FileNotFoundError):
    """Raised when no ancestor directory contains the requested marker."""
    pass


def expand_path(path: str) -> str:
    """
    Expand a user path into an absolute one.

    "~/workspace/foo" -> "/home/<user>/workspace/foo"
    "$DATA/raw"       -> "<value of DATA>/raw", made absolute

    A leading "~" is always the current user's home directory.

    Raises:
        OSError: If the home directory cannot be determined
    """
    if path.startswith("~"):
        home = os.path.expanduser("~")
        if home == "~":
            raise OSError("failed to get user home directory")
        path = os.path.join(home, path[1:].lstrip("/\\"))

    return os.path.abspath(os.path.expandvars(path))


def is_sub_path(path: str, base_path: str) -> bool:
    """
    Check whether ``path`` lies inside ``base_path`` (or is ``base_path`` itself).

    Both paths are compared after being made absolute; nothing is
    resolved against the filesystem.
    """
    try:
        rel = os.path.relpath(os.path.abspath(path), os.path.abspath(base_path))
    except ValueError:
        # different drives on Windows
        return False
    return rel != os.pardir and not rel.startswith(os.pardir + os.sep)


def find_project_root(marker: str, start: Optional[str] = None) -> str:
    """
    Walk up from ``start`` (default: cwd) to the directory containing ``marker``.

    Args:
        marker: File or directory name identifying the root,
            e.g. "pyproject.toml" or ".git"
        start: Directory to start from

    Returns:
        Absolute path of the first directory holding the marker

    Raises:
        ProjectRootNotFoundError: If the filesystem root is reached first

    Example:
        root = find_project_root("pyproject.toml")
    """
    directory = os.path.abspath(start or os.getcwd())
    while True:
        if os.path.exists(os.path.join(directory, marker)):
            return directory

        parent = os.path.dirname(directory)
        if parent == directory:
            break
        directory = parent

    raise ProjectRootNotFoundError(f"project root not found: no {marker} above {start or os.getcwd()}")


def walk_file(filename: str, levels: int, start: Optional[str] = None) -> str:
    """
    Look for ``filename`` in ``start`` (default: cwd) and up to ``levels`` - 1 parents.

    Returns:
        Full path of the first match, or "" if not found
    """
    directory = os.path.abspath(start or os.getcwd())
    for _ in range(levels):
        candidate = os.path.join(directory, filename)
        if os.path.exists(candidate):
            return candidate
        directory = os.path.dirname(directory)
    return ""


__all__ = [
    "ProjectRootNotFoundError",
    "expand_path",
    "is_sub_path",
    "find_project_root",
    "walk_file",
]
