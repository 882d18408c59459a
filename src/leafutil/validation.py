"""
Dataclass Field Validation

Checks that the fields of a dataclass instance are filled in, driven by
per-field metadata ("tags"):

    @dataclass
    class Database:
        host: str = field(default="", metadata={"yaml": "host"})
        port: int = field(default=0, metadata={"yaml": "port"})
        replica: str = field(default="", metadata={"required": False})

Recognized metadata keys:
    yaml:      Name reported for the field (defaults to the attribute name)
    required:  True by default; False (or "false") opts the field out

Nested dataclass fields are validated recursively and reported with
dotted paths, e.g. "database.host".

DESIGN NOTE:
    is_field_empty is deliberately its own check, parallel to
    leafutil.values.is_zero. It answers "was this setting provided",
    not "is this structurally a zero value", so for instance a nested
    dataclass is only empty when it declares no fields at all.
"""

from __future__ import annotations

import dataclasses
import numbers
from collections.abc import Sized
from typing import Any, List, Tuple


class ValidationError(ValueError):
    """Raised when required fields are empty. ``fields`` lists their paths."""

    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(f"required fields are empty: {self.fields}")


def is_field_empty(value: Any) -> bool:
    """Report whether a single field value counts as "not provided"."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, numbers.Number):
        return value == 0
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return len(dataclasses.fields(value)) == 0
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def validate_struct_fields(obj: Any, path: str = "") -> List[str]:
    """
    Validate that every required field of a dataclass instance is filled in.

    Args:
        obj: Dataclass instance to check
        path: Prefix for reported field paths (used for nesting)

    Returns:
        Paths of optional fields that are empty

    Raises:
        TypeError: If ``obj`` is not a dataclass instance
        ValidationError: If any required field is empty
    """
    if not dataclasses.is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"validate_struct_fields expects a dataclass instance, got {type(obj).__name__}")

    empty, missing = _collect_empty_fields(obj, path)
    if missing:
        raise ValidationError(missing)
    return empty


def _collect_empty_fields(obj: Any, path: str) -> Tuple[List[str], List[str]]:
    empty: List[str] = []
    missing: List[str] = []

    for f in dataclasses.fields(obj):
        field_path = path + f.metadata.get("yaml", f.name)
        required = _is_required(f.metadata.get("required", True))
        value = getattr(obj, f.name)

        if required and dataclasses.is_dataclass(value) and not isinstance(value, type):
            nested_empty, nested_missing = _collect_empty_fields(value, field_path + ".")
            empty.extend(nested_empty)
            missing.extend(nested_missing)
        elif is_field_empty(value):
            if required:
                missing.append(field_path)
            else:
                empty.append(field_path)

    return empty, missing


def _is_required(tag: Any) -> bool:
    if isinstance(tag, str):
        return tag.strip().lower() in ("", "true")
    return bool(tag)


__all__ = [
    "ValidationError",
    "is_field_empty",
    "validate_struct_fields",
]
