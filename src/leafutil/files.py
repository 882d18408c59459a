"""
File helpers: existence checks, polling, copy/move/delete, globbing.

Thin wrappers over os/shutil that give callers one obvious function per
everyday chore. Directory-level helpers live in `leafutil.dirs`.

Conventions:
    - Paths are plain strings (anything os.fspath accepts works too)
    - OS failures propagate as OSError subclasses
    - Where extra context helps, errors are re-raised with the paths
      involved and chained to the original
"""

from __future__ import annotations

import fnmatch
import glob
import logging
import mimetypes
import os
import shlex
import shutil
import subprocess
import time
from typing import Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Permission bits for newly created directories and files
DEFAULT_DIR_WRITE_PERMISSIONS = 0o766
DEFAULT_FILE_WRITE_PERMISSIONS = 0o644
MAXIMUM_NEW_DIRECTORY_ATTEMPTS = 1000

# Seconds between checks in the wait_* helpers
POLL_INTERVAL = 0.1


class GlobProcessingError(Exception):
    """Raised when the callback given to glob_all_files fails on a file."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        super().__init__(f"failed processing file '{path}': {cause}")


def file_exists(path: str) -> bool:
    """
    Check whether anything exists at ``path`` (file or directory).

    Any stat failure, not just "not found", is reported as False.
    """
    try:
        os.stat(path)
    except (OSError, ValueError):
        return False
    return True


def file_size(path: str) -> int:
    """Return the size of the file in bytes, or -1 if it cannot be read."""
    try:
        return os.stat(path).st_size
    except OSError:
        return -1


def file_is_empty(path: str) -> bool:
    """
    Check whether the file at ``path`` has zero length.

    Raises:
        OSError: If the file cannot be stat'ed
    """
    try:
        return os.stat(path).st_size == 0
    except OSError as err:
        raise OSError(f"getting details of file '{path}': {err}") from err


def wait_for_file_exists(path: str, timeout: float) -> bool:
    """
    Poll until a file appears at ``path``.

    Args:
        path: File to wait for
        timeout: Maximum seconds to wait

    Returns:
        True once the file exists; False on timeout, or as soon as
        stat fails with anything other than "not found"
    """
    deadline = time.monotonic() + timeout
    while True:
        try:
            os.stat(path)
            return True
        except FileNotFoundError:
            pass
        except OSError as err:
            logger.debug("Stopped waiting for %s: %s", path, err)
            return False

        if time.monotonic() >= deadline:
            return False
        time.sleep(POLL_INTERVAL)


def wait_for_no_file_handlers(path: str, timeout: float, local: bool = True) -> bool:
    """
    Poll ``lsof`` until no process holds ``path`` open.

    Args:
        path: File to check
        timeout: Maximum seconds to wait
        local: Run ``lsof <path>`` directly; otherwise grep the full
            ``lsof`` listing (for paths lsof cannot resolve itself)

    Returns:
        True when no open handles are reported (lsof exits non-zero or
        prints nothing), False if handles remain after the timeout
    """
    if local:
        command = ["lsof", path]
    else:
        command = ["sh", "-c", f"lsof | grep {shlex.quote(path)}"]

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            result = subprocess.run(command, capture_output=True, check=False)
        except OSError as err:
            # lsof unavailable: nothing can be holding the file as far as we can tell
            logger.debug("Could not run %s: %s", command[0], err)
            return True

        if result.returncode != 0 or not result.stdout:
            return True

        time.sleep(POLL_INTERVAL)

    return False


def copy_file(src: str, dst: str) -> None:
    """
    Copy file contents from ``src`` to ``dst`` and carry over permission bits.

    The destination is flushed to disk before the mode is applied.
    """
    with open(src, "rb") as fin, open(dst, "wb") as fout:
        shutil.copyfileobj(fin, fout)
        fout.flush()
        os.fsync(fout.fileno())
    shutil.copymode(src, dst)


def copy_unless_symlink(src: str, dst: str) -> bool:
    """
    Copy ``src`` to ``dst`` unless ``src`` is a symlink.

    Returns:
        True if the file was copied, False if it was skipped
    """
    if os.path.islink(src):
        logger.debug("Skipping symlink %s", src)
        return False
    copy_file(src, dst)
    return True


def move_file(src: str, dst: str) -> None:
    """Copy the contents of ``src`` into ``dst``, then remove ``src``."""
    shutil.copyfile(src, dst)
    os.remove(src)
    logger.debug("Moved %s to %s", src, dst)


def rename_file(src: str, dst: str) -> None:
    """
    Rename a file by copying it and removing the source.

    Works across filesystems, unlike os.rename. A no-op when both paths
    are the same.
    """
    if src == dst:
        return
    try:
        copy_file(src, dst)
    except OSError as err:
        raise OSError(f"failed to copy source file {src} to {dst}: {err}") from err
    try:
        os.remove(src)
    except OSError as err:
        raise OSError(f"failed to cleanup source file {src}: {err}") from err


def load_bytes(directory: str, name: str) -> bytes:
    """
    Read the file ``name`` inside ``directory``.

    Raises:
        OSError: With both the name and directory in the message
    """
    path = os.path.join(directory, name)
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as err:
        raise OSError(f"error loading file {name} in directory {directory}: {err}") from err


def delete_file(path: str) -> None:
    """
    Delete a file if it exists.

    This does NOT scrub the contents; use destroy_file for anything
    sensitive.

    Raises:
        ValueError: If ``path`` is empty
        OSError: If the file exists but cannot be removed
    """
    if not path:
        raise ValueError("filename is not valid")
    if not file_exists(path):
        return
    try:
        os.remove(path)
    except OSError as err:
        raise OSError(f"could not remove file {path}: {err}") from err
    logger.debug("Deleted %s", path)


def destroy_file(path: str) -> None:
    """
    Overwrite a file with random bytes of the same length, then delete it.

    Raises:
        OSError: If the file cannot be stat'ed, overwritten or removed
    """
    try:
        size = os.stat(path).st_size
    except OSError as err:
        raise OSError(f"could not destroy {path}: {err}") from err

    try:
        with open(path, "r+b") as fh:
            fh.write(os.urandom(size))
            fh.flush()
            os.fsync(fh.fileno())
    except OSError as err:
        raise OSError(f"unable to overwrite {path} with random data: {err}") from err

    delete_file(path)


def first_file_exists(*paths: str) -> str:
    """Return the first of ``paths`` that exists, or "" if none do."""
    for path in paths:
        if file_exists(path):
            return path
    return ""


def filter_file_exists(paths: Iterable[str]) -> List[str]:
    """Keep only the paths that exist, preserving order."""
    return [path for path in paths if file_exists(path)]


def ignore_file(path: str, ignores: Iterable[str]) -> bool:
    """
    Check ``path`` against shell-style ignore patterns.

    Args:
        path: Path to test
        ignores: Patterns such as "*.tmp" or "build/*"

    Returns:
        True if any pattern matches
    """
    return any(fnmatch.fnmatchcase(path, pattern) for pattern in ignores)


def glob_all_files(basedir: Optional[str], pattern: str, fn: Callable[[str], None]) -> None:
    """
    Glob ``pattern`` and call ``fn`` for every matching file.

    A matched directory is expanded recursively, so every file underneath
    it is visited too, dotfiles included.

    Args:
        basedir: Directory the pattern is relative to ("" or None for cwd)
        pattern: Glob pattern
        fn: Callback receiving the full path of each file

    Raises:
        OSError: If a matched entry cannot be stat'ed
        GlobProcessingError: If ``fn`` raises
    """
    names = sorted(glob.glob(pattern, root_dir=basedir or None))
    for name in names:
        full_path = os.path.join(basedir, name) if basedir else name
        if os.path.isdir(full_path):
            _process_directory(full_path, fn)
        else:
            _process_file(full_path, fn)


def _process_directory(directory: str, fn: Callable[[str], None]) -> None:
    with os.scandir(directory) as entries:
        paths = sorted(entry.path for entry in entries)
    for path in paths:
        if os.path.isdir(path):
            _process_directory(path, fn)
        else:
            _process_file(path, fn)


def _process_file(path: str, fn: Callable[[str], None]) -> None:
    os.stat(path)
    try:
        fn(path)
    except Exception as err:
        raise GlobProcessingError(path, err) from err


def safe_name(name: str) -> str:
    """Make ``name`` usable as a single path component ("a.b/c" -> "a_b_c")."""
    return name.replace(".", "_").replace("/", "_")


def content_type(name: str) -> str:
    """
    Guess the MIME type from a file name's extension.

    Text types carry an explicit utf-8 charset. Log and text files
    unknown to the platform registry fall back to plain text.

    Returns:
        The MIME type, or "" if unknown
    """
    guessed, _ = mimetypes.guess_type(name, strict=False)
    if guessed:
        if guessed.startswith("text/"):
            return f"{guessed}; charset=utf-8"
        return guessed

    ext = os.path.splitext(name)[1]
    if ext in (".log", ".txt"):
        return "text/plain; charset=utf-8"
    return ""


def read(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


def write(path: str, content: bytes, mode: int = DEFAULT_FILE_WRITE_PERMISSIONS) -> None:
    """Write ``content`` to ``path``, truncating; ``mode`` applies when the file is created."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "wb") as fh:
        fh.write(content)


def append(path: str, content: bytes, mode: int = DEFAULT_FILE_WRITE_PERMISSIONS) -> None:
    """Append ``content`` to ``path``, creating it with ``mode`` if needed."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, mode)
    with os.fdopen(fd, "ab") as fh:
        fh.write(content)


def delete(path: str) -> None:
    os.remove(path)


__all__ = [
    "DEFAULT_DIR_WRITE_PERMISSIONS",
    "DEFAULT_FILE_WRITE_PERMISSIONS",
    "MAXIMUM_NEW_DIRECTORY_ATTEMPTS",
    "POLL_INTERVAL",
    "GlobProcessingError",
    "file_exists",
    "file_size",
    "file_is_empty",
    "wait_for_file_exists",
    "wait_for_no_file_handlers",
    "copy_file",
    "copy_unless_symlink",
    "move_file",
    "rename_file",
    "load_bytes",
    "delete_file",
    "destroy_file",
    "first_file_exists",
    "filter_file_exists",
    "ignore_file",
    "glob_all_files",
    "safe_name",
    "content_type",
    "read",
    "write",
    "append",
    "delete",
]
