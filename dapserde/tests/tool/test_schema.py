"""Tests for type shape descriptions"""

# pylint: disable=redefined-outer-name,unused-variable,expression-not-assigned,singleton-comparison

import json

from dapserde.tests.messages import (
    Breakpoint,
    ChecksumAlgorithm,
    SetBreakpointsResponseBody,
    TreeNode,
)
from dapserde.tool import schema
from dapserde.tool.schema import FieldSchema, Shape, TypeSchema


def describe_describe():
    def describes_structs(expect):
        info = schema.describe(Breakpoint)
        expect(info.name) == "Breakpoint"
        expect(info.shape) == Shape.STRUCT
        expect(info.fields[0]) == FieldSchema(
            name="verified", attr="verified", type="boolean", required=True
        )
        expect(info.fields[3].type) == "optional<Source>"

    def describes_enums(expect):
        info = schema.describe(ChecksumAlgorithm)
        expect(info.shape) == Shape.ENUM
        expect(info.values) == ["MD5", "SHA1", "SHA256", "timestamp"]

    def describes_composites(expect):
        expect(schema.describe(int | None)) == TypeSchema(
            name="optional<integer>", shape=Shape.OPTIONAL, children=["integer"]
        )
        expect(schema.describe(int | str).children) == ["integer", "string"]
        expect(schema.describe(list[int]).shape) == Shape.SEQUENCE
        expect(schema.describe(int).shape) == Shape.PRIMITIVE

    def exports_json(expect):
        data = json.loads(schema.describe(Breakpoint).to_json())
        expect(data["shape"]) == "struct"
        expect(data["fields"][0]["name"]) == "verified"


def describe_describe_all():
    def lists_reachable_structs_once(expect):
        names = [s.name for s in schema.describe_all(SetBreakpointsResponseBody)]
        expect(names) == [
            "SetBreakpointsResponseBody",
            "Breakpoint",
            "Source",
            "Checksum",
            "ChecksumAlgorithm",
        ]

    def handles_recursive_types(expect):
        expect([s.name for s in schema.describe_all(TreeNode)]) == ["TreeNode"]

    def keeps_root_composite(expect):
        names = [s.name for s in schema.describe_all(list[TreeNode])]
        expect(names) == ["array<TreeNode>", "TreeNode"]
