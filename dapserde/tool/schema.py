"""JSON-exportable description of a type's serialization shape."""

from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any

from dataclasses_json import DataClassJsonMixin

from dapserde.serde.typeinfo import (
    ArrayTypeInfo,
    BasicTypeInfo,
    EnumTypeInfo,
    OptionalTypeInfo,
    StructTypeInfo,
    TypeInfo,
    VariantTypeInfo,
)
from dapserde.serde.typeof import type_of


class Shape(StrEnum):
    """Structural category of a type, selecting the algorithm that handles it."""

    PRIMITIVE = auto()
    SEQUENCE = auto()
    OPTIONAL = auto()
    VARIANT = auto()
    STRUCT = auto()
    ENUM = auto()
    CUSTOM = auto()


@dataclass
class FieldSchema(DataClassJsonMixin):
    """Represents a serialized struct member."""

    name: str
    attr: str
    type: str
    required: bool


@dataclass
class TypeSchema(DataClassJsonMixin):
    """Represents one type descriptor.

    - fields: struct members, in serialization order
    - children: names of the element/inner/alternative types
    - values: stored values of enum members
    """

    name: str
    shape: Shape
    fields: list[FieldSchema] = field(default_factory=list)
    children: list[str] = field(default_factory=list)
    values: list[Any] = field(default_factory=list)


def shape_of(info: TypeInfo) -> Shape:
    """Classify a descriptor."""
    if isinstance(info, BasicTypeInfo):
        return Shape.PRIMITIVE
    if isinstance(info, ArrayTypeInfo):
        return Shape.SEQUENCE
    if isinstance(info, OptionalTypeInfo):
        return Shape.OPTIONAL
    if isinstance(info, VariantTypeInfo):
        return Shape.VARIANT
    if isinstance(info, StructTypeInfo):
        return Shape.STRUCT
    if isinstance(info, EnumTypeInfo):
        return Shape.ENUM
    return Shape.CUSTOM


def _children(info: TypeInfo) -> list[TypeInfo]:
    if isinstance(info, ArrayTypeInfo):
        return [info.element]
    if isinstance(info, OptionalTypeInfo):
        return [info.inner]
    if isinstance(info, VariantTypeInfo):
        return list(info.alternatives)
    if isinstance(info, StructTypeInfo):
        return [f.type for f in info.fields]
    return []


def describe(tp: Any) -> TypeSchema:
    """Describe a single type."""
    info = type_of(tp)
    schema = TypeSchema(name=info.name, shape=shape_of(info))

    if isinstance(info, StructTypeInfo):
        schema.fields = [
            FieldSchema(name=f.name, attr=f.attr, type=f.type.name, required=f.required)
            for f in info.fields
        ]
    elif isinstance(info, EnumTypeInfo):
        schema.values = [m.value for m in info.cls]
    else:
        schema.children = [c.name for c in _children(info)]
    return schema


def describe_all(tp: Any) -> list[TypeSchema]:
    """Describe tp and every struct, enum and custom type reachable from it.

    Each type is listed once, in depth-first order; recursive types are
    supported.
    """
    result: list[TypeSchema] = []
    seen: set[int] = set()
    pending = [type_of(tp)]

    while pending:
        info = pending.pop()
        if id(info) in seen:
            continue
        seen.add(id(info))
        if shape_of(info) in (Shape.STRUCT, Shape.ENUM, Shape.CUSTOM) or not result:
            result.append(describe(info))
        pending.extend(reversed(_children(info)))

    return result
