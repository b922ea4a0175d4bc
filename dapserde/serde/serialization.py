"""Storage-facing Serializer and Deserializer contracts.

Concrete storage backends implement the primitive, ``array()``, ``field()``
and ``remove()`` methods. The composite algorithms (sequences, optionals,
variants and structs) are implemented here once, purely in terms of those
methods, and are driven by type descriptors.

Methods returning a bool use it to indicate success.
"""

import logging
from collections.abc import Callable, Collection, Iterable
from typing import Any

from .location import AttributeLocation, ItemLocation, Location, ValueLocation
from .typeinfo import Field, TypeInfo
from .typeof import type_of, type_of_value
from .types import PrimitiveKind

logger = logging.getLogger(__name__)


class SerializationError(RuntimeError):
    """Raised when serialization or deserialization fails."""


class Deserializer:
    """Decodes data from the storage node this instance refers to.

    Instances passed to ``array()`` and ``field()`` callbacks are scoped to
    the nested node and must not be used after the callback returns.
    """

    # deserialization methods for the primitive kinds.
    # If the stored node is not of the requested kind these return False and
    # leave the location untouched.
    def deserialize_boolean(self, location: Location) -> bool:
        raise NotImplementedError

    def deserialize_integer(self, location: Location) -> bool:
        raise NotImplementedError

    def deserialize_number(self, location: Location) -> bool:
        raise NotImplementedError

    def deserialize_string(self, location: Location) -> bool:
        raise NotImplementedError

    def deserialize_object(self, location: Location) -> bool:
        raise NotImplementedError

    def deserialize_any(self, location: Location) -> bool:
        raise NotImplementedError

    def count(self) -> int:
        """Return the number of elements of the array node."""
        raise NotImplementedError

    def array(self, visit: Callable[["Deserializer"], bool]) -> bool:
        """Call visit for each element of the array node, in index order."""
        raise NotImplementedError

    def field(self, name: str, visit: Callable[["Deserializer"], bool]) -> bool:
        """Call visit for the member with the given name of the struct node.

        If the member is absent visit is not called and True is returned.
        """
        raise NotImplementedError

    def deserialize_primitive(self, kind: PrimitiveKind, location: Location) -> bool:
        """Decode the node as the given primitive kind."""
        return getattr(self, _DECODERS[kind])(location)

    def deserialize(self, tp: Any, location: Location) -> bool:
        """Decode the node as tp (an annotation or a TypeInfo)."""
        return type_of(tp).deserialize(self, location)

    def deserialize_array(self, element: TypeInfo, location: Location) -> bool:
        """Decode an array node into the list held by location.

        The list is resized to the stored element count and each element is
        decoded in place.
        """
        n = self.count()
        current = location.get()
        items: list[Any] = current if isinstance(current, list) else []
        del items[n:]
        items.extend(element.construct() for _ in range(len(items), n))
        location.set(items)

        index = 0

        def visit(d: Deserializer) -> bool:
            nonlocal index
            if index >= len(items):
                items.append(element.construct())
            ok = element.deserialize(d, ItemLocation(items, index))
            if not ok:
                logger.debug("%s: element %d failed to decode", element.name, index)
            index += 1
            return ok

        return self.array(visit)

    def deserialize_optional(self, inner: TypeInfo, location: Location) -> bool:
        """Decode an optional value.

        A node that does not decode as inner leaves location unchanged and
        still succeeds: an absent value is not an error.
        """
        value = ValueLocation(inner.construct())
        if inner.deserialize(self, value):
            location.set(value.value)
        else:
            logger.debug("optional<%s>: no value decoded", inner.name)
        return True

    def deserialize_variant(self, alternatives: Iterable[TypeInfo], location: Location) -> bool:
        """Decode a variant, taking the first alternative that decodes."""
        for alternative in alternatives:
            value = ValueLocation(alternative.construct())
            if alternative.deserialize(self, value):
                location.set(value.value)
                return True
        logger.debug("no variant alternative matched the stored value")
        return False

    def deserialize_fields(self, obj: Any, fields: Iterable[Field]) -> bool:
        """Decode each of fields into the matching attribute of obj.

        Fields absent from storage keep their current value unless they are
        marked required.
        """
        fields = tuple(fields)
        if not fields:
            # no member lookups to reject a non-object node
            return self.deserialize_object(ValueLocation())
        for f in fields:
            visited = False

            def visit(d: Deserializer, f: Field = f) -> bool:
                nonlocal visited
                visited = True
                return f.type.deserialize(d, AttributeLocation(obj, f.attr))

            if not self.field(f.name, visit):
                logger.debug("%s.%s failed to decode", type(obj).__name__, f.name)
                return False
            if f.required and not visited:
                logger.debug("%s.%s is required but absent", type(obj).__name__, f.name)
                return False
        return True

    def field_value(self, name: str, tp: Any, location: Location) -> bool:
        """Decode the struct member name as tp into location."""
        return self.field(name, lambda d: d.deserialize(tp, location))


class Serializer:
    """Encodes data to the storage node this instance refers to.

    If a serialize method is called more than once on the same instance, the
    last type and value is stored.
    """

    # serialization methods for the primitive kinds.
    def serialize_boolean(self, value: bool) -> bool:
        raise NotImplementedError

    def serialize_integer(self, value: int) -> bool:
        raise NotImplementedError

    def serialize_number(self, value: float) -> bool:
        raise NotImplementedError

    def serialize_string(self, value: str) -> bool:
        raise NotImplementedError

    def serialize_object(self, value: dict[str, Any]) -> bool:
        raise NotImplementedError

    def serialize_any(self, value: Any) -> bool:
        raise NotImplementedError

    def array(self, count: int, visit: Callable[["Serializer"], bool]) -> bool:
        """Encode an array node of count elements.

        visit is called count times, each time with a Serializer for the
        n'th element.
        """
        raise NotImplementedError

    def field(self, name: str, visit: Callable[["Serializer"], bool]) -> bool:
        """Encode the member with the given name of the struct node."""
        raise NotImplementedError

    def remove(self) -> None:
        """Mark the node as absent. Calling it again has no further effect."""
        raise NotImplementedError

    def serialize_primitive(self, kind: PrimitiveKind, value: Any) -> bool:
        """Encode value as the given primitive kind."""
        return getattr(self, _ENCODERS[kind])(value)

    def serialize(self, value: Any, tp: Any = None) -> bool:
        """Encode value as tp, or as the type inferred from value."""
        info = type_of(tp) if tp is not None else type_of_value(value)
        return info.serialize(self, value)

    def serialize_array(self, element: TypeInfo, values: Collection[Any]) -> bool:
        """Encode values as an array node, one element per callback."""
        it = iter(values)

        def visit(s: Serializer) -> bool:
            return element.serialize(s, next(it))

        return self.array(len(values), visit)

    def serialize_optional(self, inner: TypeInfo, value: Any) -> bool:
        """Encode an optional; None removes the node."""
        if value is None:
            self.remove()
            return True
        return inner.serialize(self, value)

    def serialize_variant(self, alternatives: Iterable[TypeInfo], value: Any) -> bool:
        """Encode the held value with the first alternative it matches."""
        for alternative in alternatives:
            if alternative.matches(value):
                return alternative.serialize(self, value)
        logger.debug("%r matches no variant alternative", value)
        return False

    def serialize_fields(self, obj: Any, fields: Iterable[Field]) -> bool:
        """Encode each of fields from the matching attribute of obj."""
        for f in fields:
            value = getattr(obj, f.attr)

            def visit(s: Serializer, f: Field = f, value: Any = value) -> bool:
                return f.type.serialize(s, value)

            if not self.field(f.name, visit):
                logger.debug("%s.%s failed to encode", type(obj).__name__, f.name)
                return False
        return True

    def field_value(self, name: str, value: Any, tp: Any = None) -> bool:
        """Encode value as the struct member name."""
        return self.field(name, lambda s: s.serialize(value, tp))


_DECODERS = {
    PrimitiveKind.BOOLEAN: "deserialize_boolean",
    PrimitiveKind.INTEGER: "deserialize_integer",
    PrimitiveKind.NUMBER: "deserialize_number",
    PrimitiveKind.STRING: "deserialize_string",
    PrimitiveKind.OBJECT: "deserialize_object",
    PrimitiveKind.ANY: "deserialize_any",
}

_ENCODERS = {
    PrimitiveKind.BOOLEAN: "serialize_boolean",
    PrimitiveKind.INTEGER: "serialize_integer",
    PrimitiveKind.NUMBER: "serialize_number",
    PrimitiveKind.STRING: "serialize_string",
    PrimitiveKind.OBJECT: "serialize_object",
    PrimitiveKind.ANY: "serialize_any",
}
