"""Tests for CLI interface."""

# pylint: disable=redefined-outer-name,unused-variable,expression-not-assigned,singleton-comparison

import json

from click.testing import CliRunner

from dapserde.tool.cli import cli


def describe_info_command():
    def prints_struct_table(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "dapserde.tests.messages:Breakpoint"])
        expect(result.exit_code) == 0
        expect(result.output).includes("Breakpoint")
        expect(result.output).includes("verified")
        expect(result.output).includes("optional<Source>")

    def prints_json(expect):
        runner = CliRunner()
        result = runner.invoke(
            cli, ["info", "dapserde.tests.messages:SetBreakpointsResponseBody", "--json"]
        )
        expect(result.exit_code) == 0
        data = json.loads(result.output)
        expect([t["name"] for t in data][:3]) == [
            "SetBreakpointsResponseBody",
            "Breakpoint",
            "Source",
        ]
        expect(data[1]["fields"][0]["required"]) == True

    def rejects_malformed_target(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "dapserde.tests.messages"])
        expect(result.exit_code) == 2

    def rejects_unknown_module(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "dapserde.no_such_module:Thing"])
        expect(result.exit_code) == 2

    def rejects_unknown_attribute(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "dapserde.tests.messages:Missing"])
        expect(result.exit_code) == 2

    def rejects_unsupported_type(expect):
        runner = CliRunner()
        result = runner.invoke(cli, ["info", "dapserde.tests.messages:Location"])
        expect(result.exit_code) == 1


def describe_check_command():
    def accepts_valid_document(expect, tmp_path):
        doc = tmp_path / "bp.json"
        doc.write_text('{"verified": true, "line": 12}', encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "dapserde.tests.messages:Breakpoint", str(doc)])
        expect(result.exit_code) == 0
        expect(result.output).includes("OK")
        expect(result.output).includes("line=12")

    def rejects_invalid_document(expect, tmp_path):
        doc = tmp_path / "bp.json"
        doc.write_text('{"line": 12}', encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(cli, ["check", "dapserde.tests.messages:Breakpoint", str(doc)])
        expect(result.exit_code) == 1

    def honors_max_depth(expect, tmp_path):
        doc = tmp_path / "tree.json"
        doc.write_text(
            json.dumps({"name": "a", "children": [{"name": "b", "children": [{"name": "c"}]}]}),
            encoding="utf-8",
        )

        runner = CliRunner()
        target = "dapserde.tests.messages:TreeNode"
        expect(runner.invoke(cli, ["check", target, str(doc)]).exit_code) == 0
        result = runner.invoke(cli, ["check", target, str(doc), "--max-depth", "3"])
        expect(result.exit_code) == 1
