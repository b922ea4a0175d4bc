"""Resolution of Python types to their serialization descriptors."""

import dataclasses
import threading
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .typeinfo import (
    ANY,
    BOOLEAN,
    INTEGER,
    NUMBER,
    OBJECT,
    STRING,
    ArrayTypeInfo,
    EnumTypeInfo,
    Field,
    OptionalTypeInfo,
    StructTypeInfo,
    TypeInfo,
    VariantTypeInfo,
)
from .types import is_object

_NoneType = type(None)

_BASIC_TYPES: dict[Any, TypeInfo] = {
    bool: BOOLEAN,
    int: INTEGER,
    float: NUMBER,
    str: STRING,
    dict: OBJECT,
    Any: ANY,
    object: ANY,
}

_g_lock = threading.RLock()
_g_cache: dict[Any, TypeInfo] = {}
_g_registry: dict[Any, TypeInfo] = {}


@dataclass(frozen=True)
class SerdeFieldInfo:
    """Metadata for a serialized struct field."""

    name: str | None = None  # storage key, defaults to the attribute name
    required: bool = False
    skip: bool = False


# Sentinel for missing default
_MISSING: Any = object()


def struct_field(
    *,
    name: str | None = None,
    required: bool = False,
    skip: bool = False,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
) -> Any:
    """Define a dataclass field with serialization metadata.

    Args:
        name: Storage key for the field, if different from the attribute name.
        required: Fail decoding when the field is absent from storage.
        skip: Exclude the field from serialization entirely.
        default: Default value for the field.
        default_factory: Factory function for default value.

    Returns:
        A dataclass field with serialization metadata attached.
    """
    metadata = {"dapserde": SerdeFieldInfo(name, required, skip)}

    if default is not _MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not _MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


def struct_fields(cls: type) -> tuple[Field, ...]:
    """Derive the Field list of a dataclass from its declared fields.

    Base class fields come first, in declaration order.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    hints = typing.get_type_hints(cls, include_extras=True)
    result: list[Field] = []
    for f in dataclasses.fields(cls):
        info: SerdeFieldInfo = f.metadata.get("dapserde", SerdeFieldInfo())
        if info.skip:
            continue
        result.append(
            Field(
                name=info.name or f.name,
                attr=f.name,
                type=type_of(hints[f.name]),
                required=info.required,
            )
        )
    return tuple(result)


def _cache_key(tp: Any) -> Any:
    # int | float and float | int compare equal; keep argument order in the key
    origin = typing.get_origin(tp)
    if origin is None:
        return tp
    return (origin, tuple(_cache_key(a) for a in typing.get_args(tp)))


def register_type(tp: Any, info: TypeInfo) -> None:
    """Use info as the descriptor of tp, replacing any previous resolution."""
    with _g_lock:
        _g_registry[tp] = info
        _g_cache.pop(_cache_key(tp), None)


def type_of(tp: Any) -> TypeInfo:
    """Return the (shared) descriptor for a type annotation.

    Raises:
        TypeError: If the annotation has no serializable shape.
    """
    if isinstance(tp, TypeInfo):
        return tp

    key = _cache_key(tp)
    with _g_lock:
        cached = _g_cache.get(key)
        if cached is None:
            cached = _resolve(tp)
            _g_cache[key] = cached
        return cached


def type_of_value(value: Any) -> TypeInfo:
    """Pick a descriptor for a value whose static type is not known."""
    tp = type(value)
    if tp in _g_registry or hasattr(tp, "__dapserde_type__"):
        return type_of(tp)
    if dataclasses.is_dataclass(value) or isinstance(value, Enum):
        return type_of(tp)
    if tp in (bool, int, float, str):
        return _BASIC_TYPES[tp]
    if is_object(value):
        return OBJECT
    return ANY


def _resolve(tp: Any) -> TypeInfo:
    if tp in _g_registry:
        return _g_registry[tp]
    if isinstance(tp, type) and hasattr(tp, "__dapserde_type__"):
        return tp.__dapserde_type__()
    if tp in _BASIC_TYPES:
        return _BASIC_TYPES[tp]
    if tp is list:
        return ArrayTypeInfo(ANY)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is typing.Annotated:
        return type_of(args[0])
    if origin is list:
        return ArrayTypeInfo(type_of(args[0]) if args else ANY)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return ArrayTypeInfo(type_of(args[0]), container=tuple)
        raise TypeError(f"Only homogeneous tuples (tuple[T, ...]) are supported, got {tp!r}")
    if origin is dict:
        if args and (args[0] is not str or args[1] is not Any):
            raise TypeError(f"Only dict[str, Any] objects are supported, got {tp!r}")
        return OBJECT
    if origin is Union or origin is types.UnionType:
        alternatives = [a for a in args if a is not _NoneType]
        if len(alternatives) == 1:
            inner = type_of(alternatives[0])
        else:
            inner = VariantTypeInfo(type_of(a) for a in alternatives)
        if len(alternatives) != len(args):
            return OptionalTypeInfo(inner)
        return inner

    if isinstance(tp, type):
        if dataclasses.is_dataclass(tp):
            return StructTypeInfo(tp, struct_fields)
        if issubclass(tp, Enum):
            return EnumTypeInfo(tp)

    raise TypeError(f"No serialization descriptor for {tp!r}")
