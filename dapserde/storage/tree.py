"""In-memory storage backend over JSON-compatible Python trees.

A tree is made of dicts (string keys), lists, str, int, float, bool and
None. A node that was removed holds the ``ABSENT`` sentinel; a struct
member whose node was removed is left out of its dict.
"""

import copy
import logging
from collections.abc import Callable
from typing import Any, Final

from dapserde.config import SerdeConfig
from dapserde.serde.location import Location, ValueLocation
from dapserde.serde.serialization import Deserializer, SerializationError, Serializer
from dapserde.serde.typeof import type_of, type_of_value
from dapserde.serde.types import is_any, is_boolean, is_integer, is_number, is_object, is_string

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a node removed from storage."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()


def _to_tree(value: Any) -> Any:
    """Copy an untyped value into plain dicts and lists."""
    if isinstance(value, dict):
        return {k: _to_tree(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_tree(v) for v in value]
    return value


class TreeSerializer(Serializer):
    """Serializer writing to the tree node held in ``value``."""

    def __init__(self, *, depth: int = 0, config: SerdeConfig | None = None) -> None:
        self.value: Any = ABSENT
        self.removed = False
        self.depth = depth
        self.config = config or SerdeConfig()

    def _set(self, value: Any) -> bool:
        self.value = value
        self.removed = False
        return True

    def serialize_boolean(self, value: bool) -> bool:
        return is_boolean(value) and self._set(value)

    def serialize_integer(self, value: int) -> bool:
        return is_integer(value) and self._set(value)

    def serialize_number(self, value: float) -> bool:
        return is_number(value) and self._set(float(value))

    def serialize_string(self, value: str) -> bool:
        return is_string(value) and self._set(value)

    def serialize_object(self, value: dict[str, Any]) -> bool:
        return is_object(value) and is_any(value) and self._set(_to_tree(value))

    def serialize_any(self, value: Any) -> bool:
        return is_any(value) and self._set(_to_tree(value))

    def _child(self) -> "TreeSerializer | None":
        if self.depth >= self.config.max_depth:
            logger.warning("nesting exceeds max_depth=%d", self.config.max_depth)
            return None
        return type(self)(depth=self.depth + 1, config=self.config)

    def array(self, count: int, visit: Callable[[Serializer], bool]) -> bool:
        items: list[Any] = []
        self._set(items)
        for _ in range(count):
            child = self._child()
            if child is None or not visit(child):
                return False
            items.append(None if child.value is ABSENT else child.value)
        return True

    def field(self, name: str, visit: Callable[[Serializer], bool]) -> bool:
        if not isinstance(self.value, dict):
            self._set({})
        child = self._child()
        if child is None:
            return False
        ok = visit(child)
        if child.removed or child.value is ABSENT:
            self.value.pop(name, None)
        else:
            self.value[name] = child.value
        return ok

    def remove(self) -> None:
        self.value = ABSENT
        self.removed = True


class TreeDeserializer(Deserializer):
    """Deserializer reading from a tree node."""

    def __init__(self, node: Any, *, depth: int = 0, config: SerdeConfig | None = None) -> None:
        self.node = node
        self.depth = depth
        self.config = config or SerdeConfig()

    def _get(self, check: Callable[[Any], bool], location: Location) -> bool:
        if self.node is ABSENT or not check(self.node):
            return False
        location.set(self.node)
        return True

    def deserialize_boolean(self, location: Location) -> bool:
        return self._get(is_boolean, location)

    def deserialize_integer(self, location: Location) -> bool:
        return self._get(is_integer, location)

    def deserialize_number(self, location: Location) -> bool:
        if self.node is ABSENT or not is_number(self.node):
            return False
        location.set(float(self.node))
        return True

    def deserialize_string(self, location: Location) -> bool:
        return self._get(is_string, location)

    def deserialize_object(self, location: Location) -> bool:
        if self.node is ABSENT or not is_object(self.node):
            return False
        location.set(copy.deepcopy(self.node))
        return True

    def deserialize_any(self, location: Location) -> bool:
        if self.node is ABSENT:
            return False
        location.set(copy.deepcopy(self.node))
        return True

    def count(self) -> int:
        return len(self.node) if isinstance(self.node, list) else 0

    def _child(self, node: Any) -> "TreeDeserializer | None":
        if self.depth >= self.config.max_depth:
            logger.warning("nesting exceeds max_depth=%d", self.config.max_depth)
            return None
        return type(self)(node, depth=self.depth + 1, config=self.config)

    def array(self, visit: Callable[[Deserializer], bool]) -> bool:
        if not isinstance(self.node, list):
            return False
        for element in self.node:
            child = self._child(element)
            if child is None or not visit(child):
                return False
        return True

    def field(self, name: str, visit: Callable[[Deserializer], bool]) -> bool:
        if not isinstance(self.node, dict):
            return False
        if name not in self.node:
            return True
        child = self._child(self.node[name])
        if child is None:
            return False
        return visit(child)


def encode(value: Any, tp: Any = None, *, config: SerdeConfig | None = None) -> Any:
    """Encode value into a tree.

    Returns ABSENT when value is an unset optional.

    Raises:
        SerializationError: If value does not encode as tp.
    """
    info = type_of(tp) if tp is not None else type_of_value(value)
    s = TreeSerializer(config=config or SerdeConfig.from_env())
    if not info.serialize(s, value):
        raise SerializationError(f"Failed to encode {info.name}")
    return s.value


def decode(tp: Any, tree: Any, *, into: Any = None, config: SerdeConfig | None = None) -> Any:
    """Decode a tree as tp.

    Args:
        tp: The type annotation (or TypeInfo) to decode.
        tree: The tree to decode from.
        into: Existing value to decode into; fields absent from the tree keep
            their current value. Defaults to a freshly constructed value.
        config: Backend settings, read from the environment if omitted.

    Raises:
        SerializationError: If the tree does not decode as tp.
    """
    info = type_of(tp)
    location = ValueLocation(into if into is not None else info.construct())
    d = TreeDeserializer(tree, config=config or SerdeConfig.from_env())
    if not info.deserialize(d, location):
        raise SerializationError(f"Failed to decode {info.name}")
    return location.value
