"""
Date parsing against a small set of named layouts.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Union


class DateParseError(ValueError):
    """Raised when a string does not match the requested layout."""
    pass


class DateLayout(Enum):
    """strptime formats for the date layouts in use."""

    YYYYMMDD = "%Y-%m-%d"
    YYYYMMDDTHHMMSS = "%Y-%m-%dT%H:%M:%S"


def parse(layout: Union[DateLayout, str], text: str) -> datetime.datetime:
    """
    Parse ``text`` using ``layout``.

    Args:
        layout: A DateLayout, or a raw strptime format
        text: Input such as "2024-03-01"

    Returns:
        Naive datetime

    Raises:
        DateParseError: If ``text`` does not match the layout
    """
    fmt = layout.value if isinstance(layout, DateLayout) else layout
    try:
        return datetime.datetime.strptime(text, fmt)
    except ValueError as err:
        raise DateParseError(f"failed to parse date {text!r} with layout {fmt!r}: {err}") from err


__all__ = ["DateLayout", "DateParseError", "parse"]
