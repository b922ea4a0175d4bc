"""Writable locations used as decode destinations.

A location stands in for "a reference to a value of some type": the generic
algorithms read the current value from it (so nested structs and sequences
are decoded in place) and write the decoded value back into it.
"""

from typing import Any


class Location:
    """Base class for decode destinations."""

    __slots__ = ()

    def get(self) -> Any:
        raise NotImplementedError

    def set(self, value: Any) -> None:
        raise NotImplementedError


class ValueLocation(Location):
    """A standalone box holding one value."""

    __slots__ = ("value",)

    def __init__(self, value: Any = None) -> None:
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"ValueLocation({self.value!r})"


class AttributeLocation(Location):
    """An attribute of an object, used for struct fields."""

    __slots__ = ("obj", "attr")

    def __init__(self, obj: Any, attr: str) -> None:
        self.obj = obj
        self.attr = attr

    def get(self) -> Any:
        return getattr(self.obj, self.attr)

    def set(self, value: Any) -> None:
        setattr(self.obj, self.attr, value)


class ItemLocation(Location):
    """An index into a mutable sequence, used for array elements."""

    __slots__ = ("items", "index")

    def __init__(self, items: list[Any], index: int) -> None:
        self.items = items
        self.index = index

    def get(self) -> Any:
        return self.items[self.index]

    def set(self, value: Any) -> None:
        self.items[self.index] = value
