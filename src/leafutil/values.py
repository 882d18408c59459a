"""
Value selection: default picking and zero-value detection.

Provides:
    - pick: mapping lookup with a caller-supplied fallback
    - first_non_zero / first_non_zero_of: first candidate that carries a value
    - is_zero: what counts as "empty" for an arbitrary object
    - zero_value: the canonical empty instance of a type

Zero-value decision table (first matching row wins):

    None                                  always zero
    ZeroCheckable (has is_zero())         whatever is_zero() says
    callables, classes, modules           non-zero
    bool                                  False
    str / bytes / bytearray               length 0
    numbers.Number                        == 0
    Enum member                           its value is zero
    datetime / date                       equals .min
    dataclass                             every field zero or equal to its declared default
    namedtuple                            every element zero
    other sized collections               length 0
    default-constructible with __eq__     equals type(value)()
    plain objects                         every instance attribute zero
    anything else                         non-zero

Optional[T] plays the role of a pointer: None is the null reference,
a present value is judged by the row for T.

IMPORTANT: Everything here is pure. Nothing logs, nothing raises for
well-formed values, nothing mutates its arguments.
"""

from __future__ import annotations

import dataclasses
import datetime
import numbers
import types
from collections.abc import Sized
from enum import Enum
from typing import (
    Any,
    FrozenSet,
    Hashable,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")
T = TypeVar("T")


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


_UNSET: Any = _Unset()


@runtime_checkable
class ZeroCheckable(Protocol):
    """
    Explicit opt-in for types that know when they are empty.

    Any object whose class defines an ``is_zero()`` method is judged by
    that method alone, before any structural inspection happens.
    """

    def is_zero(self) -> bool:
        ...


def pick(mapping: Mapping[K, V], key: K, default: V) -> V:
    """
    Return ``mapping[key]`` if the key is present, otherwise ``default``.

    Presence is what matters: a stored value that is itself zero
    (``""``, ``0``, an empty dataclass) is returned as-is.

    Args:
        mapping: Mapping to look in (never modified)
        key: Key to look up
        default: Value returned when the key is absent

    Returns:
        The stored value or the default
    """
    if key in mapping:
        return mapping[key]
    return default


def first_non_zero(*candidates: T, default: Any = _UNSET) -> T:
    """
    Return the first candidate that is not zero-valued.

    If no candidate qualifies the result is ``default`` when given,
    ``None`` when there were no candidates at all, and otherwise the
    zero value of the first candidate's type.

    Example:
        first_non_zero(None, "", "filled")  -> "filled"
        first_non_zero(0, 0, 0)             -> 0
    """
    return first_non_zero_of(candidates, default=default)


def first_non_zero_of(candidates: Iterable[T], default: Any = _UNSET) -> T:
    """
    Lazy variant of first_non_zero over any iterable.

    Stops pulling from ``candidates`` as soon as a match is found.
    """
    first: Any = _UNSET
    for candidate in candidates:
        if first is _UNSET:
            first = candidate
        if not is_zero(candidate):
            return candidate

    if default is not _UNSET:
        return default
    if first is _UNSET:
        return None
    return zero_value(type(first))


def is_zero(value: Any) -> bool:
    """
    Report whether ``value`` is the zero ("empty") value for its type.

    Total over all inputs: unrecognized objects are inspected
    structurally instead of being assumed non-zero.

    Args:
        value: Any object

    Returns:
        True if the value counts as absent/empty
    """
    return _is_zero(value, frozenset())


def _is_zero(value: Any, active: FrozenSet[int]) -> bool:
    if value is None:
        return True

    # The class must define the method; a data attribute named is_zero does not opt in
    if not isinstance(value, type) and callable(getattr(type(value), "is_zero", None)):
        return bool(value.is_zero())

    # Classes, callables and modules are live references, never "empty"
    if callable(value) or isinstance(value, types.ModuleType):
        return False

    if isinstance(value, bool):
        return not value
    if isinstance(value, (str, bytes, bytearray)):
        return len(value) == 0
    if isinstance(value, numbers.Number):
        return value == 0
    if isinstance(value, Enum):
        return _is_zero(value.value, active)
    if isinstance(value, datetime.datetime):
        return value.replace(tzinfo=None) == datetime.datetime.min
    if isinstance(value, datetime.date):
        return value == datetime.date.min

    # Composites from here on; a cycle means something points somewhere
    marker = id(value)
    if marker in active:
        return False
    active = active | {marker}

    if dataclasses.is_dataclass(value):
        return _dataclass_is_zero(value, active)
    if isinstance(value, tuple) and hasattr(value, "_fields"):
        return all(_is_zero(item, active) for item in value)
    if isinstance(value, Sized):
        return len(value) == 0

    return _object_is_zero(value, active)


def _dataclass_is_zero(value: Any, active: FrozenSet[int]) -> bool:
    for f in dataclasses.fields(value):
        current = getattr(value, f.name, None)
        if _is_zero(current, active):
            continue
        if f.default is not dataclasses.MISSING and _equals(current, f.default):
            continue
        if f.default_factory is not dataclasses.MISSING and _equals(current, f.default_factory()):
            continue
        return False
    return True


def _object_is_zero(value: Any, active: FrozenSet[int]) -> bool:
    cls = type(value)
    if cls.__eq__ is not object.__eq__:
        try:
            blank = cls()
        except Exception:
            # no-arg construction unsupported; inspect attributes instead
            pass
        else:
            return _equals(value, blank)

    state = _instance_state(value)
    if state is None:
        return False
    return all(_is_zero(item, active) for item in state.values())


def _instance_state(value: Any) -> Optional[dict]:
    """Collect instance attributes from __dict__ and __slots__, or None if opaque."""
    state = {}
    inspectable = False

    if hasattr(value, "__dict__"):
        inspectable = True
        state.update(vars(value))

    for klass in type(value).__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if name in ("__dict__", "__weakref__"):
                continue
            inspectable = True
            if hasattr(value, name):
                state[name] = getattr(value, name)

    return state if inspectable else None


def _equals(left: Any, right: Any) -> bool:
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        # e.g. array-likes with ambiguous truth values
        return False


def zero_value(tp: Any) -> Any:
    """
    Build the canonical zero value for a type.

    Examples:
        zero_value(int)            -> 0
        zero_value(str)            -> ""
        zero_value(Optional[int])  -> None
        zero_value(List[str])      -> []
        zero_value(SomeDataclass)  -> SomeDataclass(<required fields zeroed>)

    Types that cannot be built without arguments yield None.
    """
    if tp is None or tp is type(None) or tp is Any:
        return None

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        if type(None) in args:
            return None
        return zero_value(args[0])
    if origin is not None:
        tp = origin

    if not isinstance(tp, type):
        return None
    if dataclasses.is_dataclass(tp):
        return _zero_dataclass(tp)
    if issubclass(tp, Enum):
        for member in tp:
            if is_zero(member):
                return member
        return None
    if issubclass(tp, datetime.date):
        return tp.min
    if issubclass(tp, tuple) and hasattr(tp, "_fields"):
        hints = _type_hints(tp)
        return tp._make(zero_value(hints.get(name)) for name in tp._fields)

    try:
        return tp()
    except Exception:
        return None


def _zero_dataclass(tp: type) -> Any:
    hints = _type_hints(tp)
    kwargs = {}
    for f in dataclasses.fields(tp):
        if not f.init:
            continue
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            kwargs[f.name] = zero_value(hints.get(f.name))
    try:
        return tp(**kwargs)
    except Exception:
        return None


def _type_hints(tp: type) -> dict:
    try:
        return get_type_hints(tp)
    except Exception:
        # unresolvable forward references; treat every field as untyped
        return {}


__all__ = [
    "ZeroCheckable",
    "pick",
    "first_non_zero",
    "first_non_zero_of",
    "is_zero",
    "zero_value",
]
