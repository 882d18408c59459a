"""
Directory helpers for creation, recursive copy, cleanup and listing.

Copy semantics shared by every copy_* function here:
    - Directories are recreated with the source directory's mode bits
    - Regular files are copied with their permission bits
    - Symlinks are SKIPPED, never followed or recreated

Use `leafutil.symlinks` when links need to be (re)created explicitly.
"""

from __future__ import annotations

import datetime
import logging
import os
import shutil
import stat
from typing import Iterator, List

from leafutil.files import (
    DEFAULT_DIR_WRITE_PERMISSIONS,
    MAXIMUM_NEW_DIRECTORY_ATTEMPTS,
    copy_file,
    copy_unless_symlink,
    file_exists,
)

logger = logging.getLogger(__name__)

# Timestamp layout used by list_directory ("02 Jan 06 15:04 UTC")
LISTING_TIME_FORMAT = "%d %b %y %H:%M %Z"


class UniqueDirectoryError(OSError):
    """Raised when create_unique_directory cannot produce a fresh directory."""
    pass


def dir_exists(path: str) -> bool:
    """
    Check whether ``path`` exists and is a directory.

    Returns:
        True for an existing directory, False if missing or not a directory

    Raises:
        OSError: For stat failures other than "not found"
    """
    try:
        info = os.stat(path)
    except FileNotFoundError:
        return False
    return stat.S_ISDIR(info.st_mode)


def dir_is_empty(path: str) -> bool:
    """Check whether the directory at ``path`` has no entries."""
    with os.scandir(path) as entries:
        return next(entries, None) is None


def create_unique_directory(
    directory: str, name: str, maximum_attempts: int = MAXIMUM_NEW_DIRECTORY_ATTEMPTS
) -> str:
    """
    Create a new directory under ``directory``, numbering the name if taken.

    Tries "name", then "name1", "name2", ... until a free name is found.

    Args:
        directory: Parent directory (created if missing)
        name: Base name of the new directory
        maximum_attempts: How many names to try before giving up

    Returns:
        Full path of the created directory

    Raises:
        UniqueDirectoryError: If creation fails or no free name is found
    """
    for attempt in range(maximum_attempts):
        candidate = name if attempt == 0 else f"{name}{attempt}"
        path = os.path.join(directory, candidate)
        if file_exists(path):
            continue
        try:
            os.makedirs(path, DEFAULT_DIR_WRITE_PERMISSIONS)
        except OSError as err:
            raise UniqueDirectoryError(f"failed to create directory {path}: {err}") from err
        return path

    raise UniqueDirectoryError(
        f"could not create a unique directory in {directory} starting with {name} "
        f"after {maximum_attempts} attempts"
    )


def copy_dir(src: str, dst: str, force: bool = False) -> None:
    """
    Recursively copy the directory ``src`` to ``dst``.

    Args:
        src: Source directory
        dst: Destination directory
        force: Remove an existing ``dst`` first instead of failing

    Raises:
        NotADirectoryError: If ``src`` is not a directory
        FileExistsError: If ``dst`` exists and ``force`` is False
    """
    src = os.path.normpath(src)
    dst = os.path.normpath(dst)
    mode = _source_dir_mode(src)

    if os.path.lexists(dst):
        if not force:
            raise FileExistsError(f"destination already exists: {dst}")
        _remove_all(dst)

    os.makedirs(dst, mode)
    for entry in _sorted_entries(src):
        target = os.path.join(dst, entry.name)
        if entry.is_dir(follow_symlinks=False):
            copy_dir(entry.path, target, force)
        else:
            copy_unless_symlink(entry.path, target)


def copy_dir_preserve(src: str, dst: str) -> None:
    """
    Recursively copy ``src`` into ``dst`` without touching existing files.

    Only files missing from ``dst`` are copied; anything already there
    is preserved as-is.
    """
    src = os.path.normpath(src)
    dst = os.path.normpath(dst)
    mode = _source_dir_mode(src)

    os.makedirs(dst, mode, exist_ok=True)
    for entry in _sorted_entries(src):
        target = os.path.join(dst, entry.name)
        if entry.is_dir(follow_symlinks=False):
            copy_dir_preserve(entry.path, target)
        elif entry.is_symlink():
            logger.debug("Skipping symlink %s", entry.path)
        elif not os.path.exists(target):
            try:
                copy_file(entry.path, target)
            except OSError as err:
                raise OSError(f"copying {entry.path} to {target}: {err}") from err


def copy_dir_overwrite(src: str, dst: str) -> None:
    """Recursively copy ``src`` into ``dst``, overwriting files that already exist."""
    src = os.path.normpath(src)
    dst = os.path.normpath(dst)
    mode = _source_dir_mode(src)

    os.makedirs(dst, mode, exist_ok=True)
    for entry in _sorted_entries(src):
        target = os.path.join(dst, entry.name)
        if entry.is_dir(follow_symlinks=False):
            copy_dir_overwrite(entry.path, target)
        else:
            copy_unless_symlink(entry.path, target)


def copy_file_or_dir(src: str, dst: str, force: bool = False) -> None:
    """
    Copy ``src`` to ``dst`` whether it is a file or a directory.

    ``force`` only matters for directories (see copy_dir).
    """
    try:
        info = os.stat(src)
    except OSError as err:
        raise OSError(f"getting details of file '{src}': {err}") from err

    if stat.S_ISDIR(info.st_mode):
        copy_dir(src, dst, force)
    else:
        copy_file(src, dst)


def rename_dir(src: str, dst: str, force: bool = False) -> None:
    """
    Move a directory by copying it and removing the source.

    Works across filesystems, unlike os.rename. Symlinks inside ``src``
    are not carried over.
    """
    try:
        copy_dir(src, dst, force)
    except OSError as err:
        raise OSError(f"failed to copy source dir {src} to {dst}: {err}") from err
    try:
        _remove_all(src)
    except OSError as err:
        raise OSError(f"failed to cleanup source dir {src}: {err}") from err
    logger.debug("Moved directory %s to %s", src, dst)


def delete_dir_contents(directory: str) -> None:
    """Remove everything inside ``directory`` but keep the directory itself."""
    for entry in _sorted_entries(directory):
        _remove_all(entry.path)


def delete_dir_contents_except(directory: str, except_name: str) -> None:
    """
    Remove everything inside ``directory`` except entries ending in ``except_name``.

    Example:
        delete_dir_contents_except("build", ".git") keeps build/.git
    """
    for entry in _sorted_entries(directory):
        if entry.path.endswith(except_name):
            continue
        _remove_all(entry.path)


def recreate_dirs(*dirs: str) -> None:
    """Delete each directory (if present) and create it again, empty."""
    for directory in dirs:
        _remove_all(directory)
        os.makedirs(directory, DEFAULT_DIR_WRITE_PERMISSIONS)
        logger.debug("Recreated %s", directory)


def list_directory(root: str, recurse: bool = False) -> List[str]:
    """
    Describe the entries under ``root``, one line each.

    Line format: "<mode> <size> <modified> <name>", e.g.
        "-rw-r--r-- 12 19 Oct 26 13:45 UTC notes.txt"

    Args:
        root: Directory to list
        recurse: Include entries of subdirectories (depth-first, sorted)

    Returns:
        One line per entry (the root itself is not listed)

    Raises:
        FileNotFoundError: If ``root`` does not exist
        NotADirectoryError: If ``root`` is not a directory
    """
    if not os.path.exists(root):
        raise FileNotFoundError(f"unable to list {root} as does not exist")
    if not os.path.isdir(root):
        raise NotADirectoryError(f"{root} is not a directory")

    result = []
    for path in _walk(root, recurse):
        info = os.stat(path)
        modified = datetime.datetime.fromtimestamp(info.st_mtime).astimezone()
        result.append(
            f"{stat.filemode(info.st_mode)} {info.st_size} "
            f"{modified.strftime(LISTING_TIME_FORMAT)} {os.path.basename(path)}"
        )
    return result


def _walk(root: str, recurse: bool) -> Iterator[str]:
    for entry in _sorted_entries(root):
        yield entry.path
        if recurse and entry.is_dir(follow_symlinks=False):
            yield from _walk(entry.path, recurse)


def _sorted_entries(directory: str) -> List[os.DirEntry]:
    with os.scandir(directory) as entries:
        return sorted(entries, key=lambda entry: entry.name)


def _source_dir_mode(src: str) -> int:
    info = os.stat(src)
    if not stat.S_ISDIR(info.st_mode):
        raise NotADirectoryError(f"source is not a directory: {src}")
    return stat.S_IMODE(info.st_mode)


def _remove_all(path: str) -> None:
    """Remove a file, link or directory tree; missing paths are ignored."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.remove(path)


__all__ = [
    "LISTING_TIME_FORMAT",
    "UniqueDirectoryError",
    "dir_exists",
    "dir_is_empty",
    "create_unique_directory",
    "copy_dir",
    "copy_dir_preserve",
    "copy_dir_overwrite",
    "copy_file_or_dir",
    "rename_dir",
    "delete_dir_contents",
    "delete_dir_contents_except",
    "recreate_dirs",
    "list_directory",
]
