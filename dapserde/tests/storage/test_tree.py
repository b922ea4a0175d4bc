"""Tests for the in-memory tree backend"""

# pylint: disable=redefined-outer-name,unused-variable,expression-not-assigned,singleton-comparison

from pytest import raises

from dapserde.config import SerdeConfig
from dapserde.serde import SerializationError, ValueLocation
from dapserde.storage import ABSENT, TreeDeserializer, TreeSerializer, decode, encode
from dapserde.tests.messages import TreeNode


def _chain(depth):
    node = TreeNode(name=str(depth))
    for i in reversed(range(depth)):
        node = TreeNode(name=str(i), children=[node])
    return node


def describe_serializer():
    def starts_absent(expect):
        expect(TreeSerializer().value is ABSENT) == True

    def keeps_last_value(expect):
        s = TreeSerializer()
        s.serialize_integer(1)
        s.serialize_string("two")
        expect(s.value) == "two"

    def checks_primitive_kinds(expect):
        s = TreeSerializer()
        expect(s.serialize_integer(True)) == False
        expect(s.serialize_boolean(1)) == False
        expect(s.serialize_string(None)) == False
        expect(s.serialize_object({1: "a"})) == False
        expect(s.serialize_any({"a": object()})) == False
        expect(s.value is ABSENT) == True

    def stores_numbers_as_floats(expect):
        s = TreeSerializer()
        expect(s.serialize_number(2)) == True
        expect(isinstance(s.value, float)) == True

    def copies_untyped_values(expect):
        value = {"a": (1, 2)}
        s = TreeSerializer()
        s.serialize_any(value)
        expect(s.value) == {"a": [1, 2]}
        expect(s.value is value) == False

    def encodes_arrays_in_index_order(expect):
        s = TreeSerializer()
        indices = iter(range(3))
        expect(s.array(3, lambda c: c.serialize_integer(next(indices)))) == True
        expect(s.value) == [0, 1, 2]

    def stops_array_at_first_failure(expect):
        calls = []

        def visit(c):
            calls.append(c)
            return len(calls) < 2

        s = TreeSerializer()
        expect(s.array(5, visit)) == False
        expect(len(calls)) == 2

    def stores_unwritten_elements_as_null(expect):
        s = TreeSerializer()
        expect(s.array(2, lambda c: True)) == True
        expect(s.value) == [None, None]

    def encodes_fields(expect):
        s = TreeSerializer()
        s.field("a", lambda c: c.serialize_integer(1))
        s.field("b", lambda c: c.serialize_string("x"))
        expect(s.value) == {"a": 1, "b": "x"}

    def drops_removed_fields(expect):
        def remove(c):
            c.remove()
            return True

        s = TreeSerializer()
        s.field("a", lambda c: c.serialize_integer(1))
        s.field("b", remove)
        expect(s.value) == {"a": 1}

    def removes_idempotently(expect):
        s = TreeSerializer()
        s.serialize_integer(5)
        s.remove()
        s.remove()
        expect(s.value is ABSENT) == True

        d = TreeDeserializer(s.value)
        expect(d.deserialize_integer(ValueLocation())) == False
        expect(decode(int | None, s.value)) == None

    def caps_nesting_depth(expect):
        config = SerdeConfig(max_depth=4)
        s = TreeSerializer(config=config)
        expect(s.serialize(_chain(3))) == False
        expect(TreeSerializer(config=SerdeConfig(max_depth=10)).serialize(_chain(3))) == True


def describe_deserializer():
    def reads_matching_kinds(expect):
        location = ValueLocation()
        expect(TreeDeserializer("x").deserialize_string(location)) == True
        expect(location.value) == "x"

    def leaves_location_on_mismatch(expect):
        location = ValueLocation("keep")
        expect(TreeDeserializer(1).deserialize_string(location)) == False
        expect(location.value) == "keep"

    def reads_null_as_any(expect):
        location = ValueLocation("keep")
        expect(TreeDeserializer(None).deserialize_any(location)) == True
        expect(location.value) == None

    def fails_on_absent_node(expect):
        for method in ("boolean", "integer", "number", "string", "object", "any"):
            d = TreeDeserializer(ABSENT)
            expect(getattr(d, f"deserialize_{method}")(ValueLocation())) == False

    def counts_only_arrays(expect):
        expect(TreeDeserializer([1, 2, 3]).count()) == 3
        expect(TreeDeserializer({"a": 1}).count()) == 0
        expect(TreeDeserializer("abc").count()) == 0

    def rejects_array_on_non_array(expect):
        expect(TreeDeserializer({"a": 1}).array(lambda d: True)) == False

    def visits_elements_in_order(expect):
        seen = []
        ok = TreeDeserializer([3, 1, 2]).array(lambda d: seen.append(d.node) or True)
        expect(ok) == True
        expect(seen) == [3, 1, 2]

    def skips_absent_fields(expect):
        calls = []
        ok = TreeDeserializer({"a": 1}).field("b", lambda d: calls.append(d) or True)
        expect(ok) == True
        expect(calls) == []

    def visits_present_fields(expect):
        location = ValueLocation()
        ok = TreeDeserializer({"a": 1}).field("a", lambda d: d.deserialize_integer(location))
        expect(ok) == True
        expect(location.value) == 1

    def rejects_field_on_non_object(expect):
        expect(TreeDeserializer([1]).field("a", lambda d: True)) == False

    def does_not_alias_storage(expect):
        tree = {"a": [1, 2]}
        value = decode(dict, tree)
        value["a"].append(3)
        expect(tree) == {"a": [1, 2]}

    def caps_nesting_depth(expect):
        tree = encode(_chain(3))
        with raises(SerializationError):
            decode(TreeNode, tree, config=SerdeConfig(max_depth=4))
        expect(decode(TreeNode, tree, config=SerdeConfig(max_depth=10))) == _chain(3)

    def reads_depth_limit_from_environment(expect, monkeypatch):
        tree = encode(_chain(3))
        monkeypatch.setenv("DAPSERDE_MAX_DEPTH", "4")
        with raises(SerializationError):
            decode(TreeNode, tree)
