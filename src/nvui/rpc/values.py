"""Fallible conversions from untyped msgpack values to Python types.

Every accessor either returns a value of the requested type or raises
``ConversionError`` naming the field and what was found instead. ``bool`` is
a subclass of ``int`` in Python but a distinct type on the wire, so integer
accessors reject it.
"""

from __future__ import annotations

from typing import TypeAlias

from collections.abc import Sequence

from msgpack import ExtType

from nvui.errors import ConversionError

Value: TypeAlias = "None | bool | int | float | str | bytes | list[Value] | dict[Value, Value] | ExtType"


def kind_of(value: Value) -> str:
    """Return the wire type name of ``value``."""

    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "str"
    if isinstance(value, (bytes, bytearray)):
        return "bin"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "map"
    if isinstance(value, ExtType):
        return "ext"
    return type(value).__name__


def describe(value: Value) -> str:
    """Short human-readable description used in fault details."""

    kind = kind_of(value)
    if kind in {"nil", "array", "map", "ext"}:
        return kind
    text = repr(value)
    if len(text) > 40:
        text = text[:37] + "..."
    return f"{kind} {text}"


def as_array(value: Value, field: str) -> list[Value]:
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ConversionError(field, "array", describe(value))


def as_int(value: Value, field: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ConversionError(field, "int", describe(value))


def as_bool(value: Value, field: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConversionError(field, "bool", describe(value))


def as_str(value: Value, field: str) -> str:
    if isinstance(value, str):
        return value
    raise ConversionError(field, "str", describe(value))


def as_optional_str(value: Value, field: str) -> str | None:
    """Return ``None`` for nil, the string for str, and fail otherwise."""

    if value is None:
        return None
    if isinstance(value, str):
        return value
    raise ConversionError(field, "str or nil", describe(value))


def field_at(fields: Sequence[Value], index: int, name: str) -> Value:
    """Return the positional field ``index`` or fail if the occurrence is too short."""

    if index < len(fields):
        return fields[index]
    raise ConversionError(f"field {index} ({name})", "a value", "end of occurrence")


def optional_field_at(fields: Sequence[Value], index: int) -> Value:
    """Return the positional field ``index``, or nil if it is absent."""

    if index < len(fields):
        return fields[index]
    return None


def map_from_pairs(pairs: list[tuple[Value, Value]]) -> dict[Value, Value] | list[list[Value]]:
    """Build a map received from the wire.

    Maps become dicts. A map with an array or map key cannot be a dict, so it
    is kept as its ordered list of ``[key, value]`` pairs instead.
    """

    try:
        return dict(pairs)
    except TypeError:
        return [[key, value] for key, value in pairs]
