"""Command-line interface for inspecting and checking serializable types."""

from __future__ import annotations

import importlib
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from dapserde.config import SerdeConfig
from dapserde.log import setup_logging
from dapserde.serde.serialization import SerializationError
from dapserde.storage import jsonio
from dapserde.tool.schema import Shape, TypeSchema, describe_all


def load_target(target: str) -> Any:
    """Import a type given as "package.module:Name"."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"expected module:Type, got {target!r}", param_hint="TARGET")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(
            f"cannot import {module_name}: {exc}", param_hint="TARGET"
        ) from exc

    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(
                f"{module_name} has no attribute {attr}", param_hint="TARGET"
            ) from None
    return obj


@click.group()
@click.option("--verbose", "-v", count=True, help="Increase log output (-v info, -vv debug)")
def cli(verbose: int) -> None:
    """Structural serialization engine tools."""
    level = {0: None, 1: logging.INFO}.get(verbose, logging.DEBUG)
    setup_logging(level)


@cli.command()
@click.argument("target")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def info(target: str, output_json: bool) -> None:
    """Display the serialization shape of TARGET (module:Type)."""
    tp = load_target(target)
    try:
        schemas = describe_all(tp)
    except TypeError as exc:
        raise click.ClickException(str(exc)) from exc

    if output_json:
        print("[" + ", ".join(s.to_json() for s in schemas) + "]")
    else:
        _output_plain(schemas)


def _output_plain(schemas: list[TypeSchema]) -> None:
    """Output type descriptions using rich text formatting."""
    console = Console()

    for schema in schemas:
        console.print(f"[bold cyan]{schema.name}[/bold cyan] [dim]({schema.shape})[/dim]")

        if schema.shape == Shape.STRUCT:
            table = Table(show_header=True, box=None, padding=(0, 2, 0, 2))
            table.add_column("Key", style="white")
            table.add_column("Attribute", style="dim")
            table.add_column("Type", style="yellow")
            table.add_column("Required", style="green")
            for f in schema.fields:
                table.add_row(f.name, f.attr, f.type, "yes" if f.required else "")
            console.print(table)
        elif schema.shape == Shape.ENUM:
            console.print("  values: " + ", ".join(repr(v) for v in schema.values))
        elif schema.children:
            console.print("  " + ", ".join(schema.children))

        console.print()


@cli.command()
@click.argument("target")
@click.argument("input_file", type=click.File("r", encoding="utf-8"))
@click.option("--max-depth", type=click.IntRange(min=1), default=None, help="Maximum nesting depth")
def check(target: str, input_file: Any, max_depth: int | None) -> None:
    """Decode the JSON document INPUT_FILE as TARGET (module:Type)."""
    tp = load_target(target)
    config = SerdeConfig(max_depth=max_depth) if max_depth else SerdeConfig.from_env()

    try:
        value = jsonio.load(tp, input_file, config=config)
    except SerializationError as exc:
        click.echo(f"{input_file.name}: {exc}", err=True)
        sys.exit(1)
    except TypeError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"{input_file.name}: OK")
    click.echo(repr(value))


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
