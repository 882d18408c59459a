"""
Load YAML/JSON files, optionally straight into dataclasses.

Parsing goes through an intermediate dict. When a dataclass type is
given, the dict is mapped onto it field by field:

    - the key for a field is its "yaml" metadata entry, else its name
    - nested dataclass fields (also Optional[...] and List[...] of them)
      are built recursively
    - keys with no matching field are ignored
    - fields missing from the file keep their defaults
"""

from __future__ import annotations

import dataclasses
import json
import types
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints

import yaml

T = TypeVar("T")


class LoaderError(OSError):
    """Raised when a config/data file cannot be read."""
    pass


def yaml_from_file(path: str, cls: Optional[Type[T]] = None) -> Any:
    """
    Read a YAML file.

    Args:
        path: File to read
        cls: Optional dataclass to build from the document

    Returns:
        The parsed document, or an instance of ``cls``

    Raises:
        LoaderError: If the file cannot be read
        yaml.YAMLError: If the document is malformed
    """
    return _load(path, yaml.safe_load, cls)


def json_from_file(path: str, cls: Optional[Type[T]] = None) -> Any:
    """
    Read a JSON file.

    Args:
        path: File to read
        cls: Optional dataclass to build from the document

    Returns:
        The parsed document, or an instance of ``cls``

    Raises:
        LoaderError: If the file cannot be read
        json.JSONDecodeError: If the document is malformed
    """
    return _load(path, json.loads, cls)


def _load(path: str, parse: Callable[[str], Any], cls: Optional[type]) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            content = fh.read()
    except OSError as err:
        raise LoaderError(f"failed reading file {path}: {err}") from err

    data = parse(content)
    if cls is None:
        return data
    if data is None:
        data = {}
    return dataclass_from_dict(cls, data)


def dataclass_from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
    """
    Build a dataclass instance from a mapping.

    Raises:
        TypeError: If ``cls`` is not a dataclass or ``data`` is not a mapping
    """
    if not dataclasses.is_dataclass(cls) or not isinstance(cls, type):
        raise TypeError(f"expected a dataclass type, got {cls!r}")
    if not isinstance(data, dict):
        raise TypeError(f"cannot build {cls.__name__} from {type(data).__name__}")

    hints = get_type_hints(cls)
    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        key = f.metadata.get("yaml", f.name)
        if key not in data:
            continue
        kwargs[f.name] = _convert(hints.get(f.name), data[key])
    return cls(**kwargs)


def _convert(tp: Any, value: Any) -> Any:
    if value is None or tp is None:
        return value

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        for arg in get_args(tp):
            if dataclasses.is_dataclass(arg) and isinstance(value, dict):
                return dataclass_from_dict(arg, value)
        return value
    if origin is list and isinstance(value, list):
        args = get_args(tp)
        item_type = args[0] if args else None
        return [_convert(item_type, item) for item in value]
    if dataclasses.is_dataclass(tp) and isinstance(tp, type) and isinstance(value, dict):
        return dataclass_from_dict(tp, value)
    return value


__all__ = [
    "LoaderError",
    "yaml_from_file",
    "json_from_file",
    "dataclass_from_dict",
]
