"""
Symlink helpers.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def recreate_symlink(src: str, target: str) -> None:
    """
    Point ``target`` at ``src``, replacing whatever is at ``target`` now.

    An existing file or link (dangling links included) is removed first.

    Args:
        src: Path the link should point to
        target: Path of the link itself

    Raises:
        OSError: If the old entry cannot be removed or the link cannot be created
    """
    if os.path.lexists(target):
        try:
            os.remove(target)
        except OSError as err:
            raise OSError(f"failed to remove {target}: {err}") from err

    try:
        os.symlink(src, target)
    except OSError as err:
        raise OSError(f"failed to create symlink from {src} to {target}: {err}") from err
    logger.debug("Linked %s -> %s", target, src)


__all__ = ["recreate_symlink"]
