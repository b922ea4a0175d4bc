"""Primitive value model understood natively by the serialization engine."""

from enum import StrEnum, auto
from typing import Any, TypeAlias

boolean: TypeAlias = bool
integer: TypeAlias = int
number: TypeAlias = float
string: TypeAlias = str
object_: TypeAlias = dict[str, Any]
any_: TypeAlias = Any


class PrimitiveKind(StrEnum):
    """The atomic value kinds every storage backend must support."""

    BOOLEAN = auto()
    INTEGER = auto()
    NUMBER = auto()
    STRING = auto()
    OBJECT = auto()
    ANY = auto()


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_integer(value: Any) -> bool:
    # bool is an int subclass but never an integer here
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    """Check if a value can be read as a number (ints are widened)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_object(value: Any) -> bool:
    """Check if a value is a string-keyed dynamic object."""
    return isinstance(value, dict) and all(isinstance(k, str) for k in value)


def is_any(value: Any) -> bool:
    """Check if a value is representable as an untyped value."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return True
    if isinstance(value, (list, tuple)):
        return all(is_any(v) for v in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_any(v) for k, v in value.items())
    return False


KIND_CHECKS = {
    PrimitiveKind.BOOLEAN: is_boolean,
    PrimitiveKind.INTEGER: is_integer,
    PrimitiveKind.NUMBER: is_number,
    PrimitiveKind.STRING: is_string,
    PrimitiveKind.OBJECT: is_object,
    PrimitiveKind.ANY: is_any,
}
