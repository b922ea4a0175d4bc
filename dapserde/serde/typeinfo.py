"""Runtime type descriptors for the serialization engine.

A type descriptor is a stateless record describing how values of one Python
type are read from a Deserializer and written to a Serializer. Descriptors
are created once per type by ``type_of()`` and shared by every call.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from .location import ValueLocation
from .types import KIND_CHECKS, PrimitiveKind

if TYPE_CHECKING:
    from .location import Location
    from .serialization import Deserializer, Serializer


class TypeInfo:
    """Base class for type descriptors.

    Subclasses implement ``deserialize()`` and ``serialize()``. Types with a
    custom shape can subclass this directly and publish the descriptor from a
    ``__dapserde_type__()`` classmethod or with ``register_type()``.
    """

    __slots__ = ()

    @property
    def name(self) -> str:
        raise NotImplementedError("name must be implemented by the descriptor")

    def construct(self) -> Any:
        """Return a default-initialized value of this type."""
        return None

    def matches(self, value: Any) -> bool:
        """Check if a value is an instance of this type."""
        raise NotImplementedError("matches() must be implemented by the descriptor")

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        """Read a value of this type from d into location."""
        raise NotImplementedError("deserialize() must be implemented by the descriptor")

    def serialize(self, s: Serializer, value: Any) -> bool:
        """Write value to s."""
        raise NotImplementedError("serialize() must be implemented by the descriptor")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


@dataclass(frozen=True, slots=True)
class Field:
    """Describes a single serialized member of a struct."""

    name: str  # storage key
    attr: str  # attribute on the instance
    type: TypeInfo
    required: bool = False


_DEFAULTS: dict[PrimitiveKind, Callable[[], Any]] = {
    PrimitiveKind.BOOLEAN: bool,
    PrimitiveKind.INTEGER: int,
    PrimitiveKind.NUMBER: float,
    PrimitiveKind.STRING: str,
    PrimitiveKind.OBJECT: dict,
    PrimitiveKind.ANY: lambda: None,
}


class BasicTypeInfo(TypeInfo):
    """Descriptor for one of the primitive kinds."""

    __slots__ = ("kind",)

    def __init__(self, kind: PrimitiveKind) -> None:
        self.kind = kind

    @property
    def name(self) -> str:
        return str(self.kind)

    def construct(self) -> Any:
        return _DEFAULTS[self.kind]()

    def matches(self, value: Any) -> bool:
        return KIND_CHECKS[self.kind](value)

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        return d.deserialize_primitive(self.kind, location)

    def serialize(self, s: Serializer, value: Any) -> bool:
        return s.serialize_primitive(self.kind, value)


BOOLEAN = BasicTypeInfo(PrimitiveKind.BOOLEAN)
INTEGER = BasicTypeInfo(PrimitiveKind.INTEGER)
NUMBER = BasicTypeInfo(PrimitiveKind.NUMBER)
STRING = BasicTypeInfo(PrimitiveKind.STRING)
OBJECT = BasicTypeInfo(PrimitiveKind.OBJECT)
ANY = BasicTypeInfo(PrimitiveKind.ANY)


class ArrayTypeInfo(TypeInfo):
    """Descriptor for a homogeneous sequence (list or tuple)."""

    __slots__ = ("element", "container")

    def __init__(self, element: TypeInfo, container: type = list) -> None:
        self.element = element
        self.container = container

    @property
    def name(self) -> str:
        return f"array<{self.element.name}>"

    def construct(self) -> Any:
        return self.container()

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.container) and all(self.element.matches(v) for v in value)

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        if self.container is list:
            return d.deserialize_array(self.element, location)

        scratch = ValueLocation(list(location.get() or ()))
        if not d.deserialize_array(self.element, scratch):
            return False
        location.set(self.container(scratch.value))
        return True

    def serialize(self, s: Serializer, value: Any) -> bool:
        if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
            return False
        return s.serialize_array(self.element, value)


class OptionalTypeInfo(TypeInfo):
    """Descriptor for a value that may be absent (``T | None``)."""

    __slots__ = ("inner",)

    def __init__(self, inner: TypeInfo) -> None:
        self.inner = inner

    @property
    def name(self) -> str:
        return f"optional<{self.inner.name}>"

    def matches(self, value: Any) -> bool:
        return value is None or self.inner.matches(value)

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        return d.deserialize_optional(self.inner, location)

    def serialize(self, s: Serializer, value: Any) -> bool:
        return s.serialize_optional(self.inner, value)


class VariantTypeInfo(TypeInfo):
    """Descriptor for a tagged union; alternatives keep declaration order."""

    __slots__ = ("alternatives",)

    def __init__(self, alternatives: Iterable[TypeInfo]) -> None:
        self.alternatives = tuple(alternatives)
        if not self.alternatives:
            raise TypeError("variant requires at least one alternative")

    @property
    def name(self) -> str:
        return f"variant<{', '.join(a.name for a in self.alternatives)}>"

    def construct(self) -> Any:
        return self.alternatives[0].construct()

    def matches(self, value: Any) -> bool:
        return any(a.matches(value) for a in self.alternatives)

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        return d.deserialize_variant(self.alternatives, location)

    def serialize(self, s: Serializer, value: Any) -> bool:
        return s.serialize_variant(self.alternatives, value)


class StructTypeInfo(TypeInfo):
    """Descriptor for a dataclass described by a list of Fields.

    The field list is produced on first use so that structs may refer to
    themselves (directly or through other structs).
    """

    __slots__ = ("cls", "_fields_factory", "_fields")

    def __init__(self, cls: type, fields_factory: Callable[[type], tuple[Field, ...]]) -> None:
        self.cls = cls
        self._fields_factory = fields_factory
        self._fields: tuple[Field, ...] | None = None

    @property
    def name(self) -> str:
        return self.cls.__name__

    @property
    def fields(self) -> tuple[Field, ...]:
        if self._fields is None:
            self._fields = self._fields_factory(self.cls)
        return self._fields

    @property
    def frozen(self) -> bool:
        return self.cls.__dataclass_params__.frozen  # type: ignore[attr-defined]

    def construct(self) -> Any:
        by_attr = {f.attr: f for f in self.fields}
        kwargs: dict[str, Any] = {}
        for f in dataclasses.fields(self.cls):
            if not f.init:
                continue
            if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
                continue
            member = by_attr.get(f.name)
            kwargs[f.name] = member.type.construct() if member else None
        return self.cls(**kwargs)

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.cls)

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        obj = location.get()
        if not isinstance(obj, self.cls):
            obj = self.construct()

        if not self.frozen:
            if not d.deserialize_fields(obj, self.fields):
                return False
            location.set(obj)
            return True

        # Frozen dataclasses are decoded into a scratch namespace and rebuilt
        scratch = SimpleNamespace(**{f.attr: getattr(obj, f.attr) for f in self.fields})
        if not d.deserialize_fields(scratch, self.fields):
            return False
        init = {f.name for f in dataclasses.fields(self.cls) if f.init}
        changes = {k: v for k, v in vars(scratch).items() if k in init}
        location.set(dataclasses.replace(obj, **changes))
        return True

    def serialize(self, s: Serializer, value: Any) -> bool:
        if not isinstance(value, self.cls):
            return False
        # a struct is an object node even when it has no fields
        if not s.serialize_object({}):
            return False
        return s.serialize_fields(value, self.fields)


class EnumTypeInfo(TypeInfo):
    """Descriptor for an Enum, stored as its member value.

    Decoding tries the members in declaration order and takes the first one
    whose value equals the stored value (with the same primitive kind).
    """

    __slots__ = ("cls",)

    def __init__(self, cls: type[Enum]) -> None:
        if not len(cls):
            raise TypeError(f"{cls.__name__} has no members")
        self.cls = cls

    @property
    def name(self) -> str:
        return self.cls.__name__

    def construct(self) -> Any:
        return next(iter(self.cls))

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.cls)

    def deserialize(self, d: Deserializer, location: Location) -> bool:
        raw = ValueLocation()
        if not d.deserialize_primitive(PrimitiveKind.ANY, raw):
            return False
        for member in self.cls:
            if type(member.value) is type(raw.value) and member.value == raw.value:
                location.set(member)
                return True
        return False

    def serialize(self, s: Serializer, value: Any) -> bool:
        if not isinstance(value, self.cls):
            return False
        return s.serialize(value.value)
