"""Structural (de)serialization engine."""

from .location import AttributeLocation, ItemLocation, Location, ValueLocation
from .serialization import Deserializer, SerializationError, Serializer
from .typeinfo import (
    ArrayTypeInfo,
    BasicTypeInfo,
    EnumTypeInfo,
    Field,
    OptionalTypeInfo,
    StructTypeInfo,
    TypeInfo,
    VariantTypeInfo,
)
from .typeof import (
    SerdeFieldInfo,
    register_type,
    struct_field,
    struct_fields,
    type_of,
    type_of_value,
)
from .types import PrimitiveKind, any_, boolean, integer, number, object_, string

__all__ = [
    "ArrayTypeInfo",
    "AttributeLocation",
    "BasicTypeInfo",
    "Deserializer",
    "EnumTypeInfo",
    "Field",
    "ItemLocation",
    "Location",
    "OptionalTypeInfo",
    "PrimitiveKind",
    "SerdeFieldInfo",
    "SerializationError",
    "Serializer",
    "StructTypeInfo",
    "TypeInfo",
    "ValueLocation",
    "VariantTypeInfo",
    "any_",
    "boolean",
    "integer",
    "number",
    "object_",
    "register_type",
    "string",
    "struct_field",
    "struct_fields",
    "type_of",
    "type_of_value",
]
