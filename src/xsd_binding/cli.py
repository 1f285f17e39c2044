"""Command-line interface for xsd-binding."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from xsd_binding.binding import SchemaBinding
from xsd_binding.codegen import write_modules
from xsd_binding.errors import BindingError
from xsd_binding.schema import Schema, get_schema_registry, resolve_schema

console = Console()
error_console = Console(stderr=True)


def _load(schema_ref: str) -> Schema:
    try:
        return resolve_schema(schema_ref)
    except BindingError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(2)


def _bind(schema_ref: str) -> SchemaBinding:
    schema = _load(schema_ref)
    try:
        return SchemaBinding(schema)
    except BindingError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(2)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log driver diagnostics.")
def main(verbose: bool) -> None:
    """Read, write and generate typed bindings for XML schemas.

    SCHEMA arguments are bundled schema names (see `schemas`) or paths to
    JSON schema definitions.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=error_console, show_path=False)],
        )


@main.command()
def schemas() -> None:
    """List the bundled schemas."""
    registry = get_schema_registry()
    table = Table(title="Bundled schemas")
    table.add_column("Name", style="cyan")
    table.add_column("Root element")
    table.add_column("Records", justify="right")
    table.add_column("Enums", justify="right")
    for name in registry.list_schemas():
        schema = registry.get(name)
        table.add_row(
            name,
            schema.root_element,
            str(sum(1 for _ in schema.iter_types())),
            str(len(schema.enums)),
        )
    console.print(table)


@main.command()
@click.argument("schema_ref", metavar="SCHEMA")
@click.option(
    "--output",
    "-o",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    required=True,
    help="Directory to write the generated modules to.",
)
@click.option(
    "--package",
    "-p",
    default=None,
    help="Package the generated modules will be imported from.",
)
def generate(schema_ref: str, out_dir: Path, package: str | None) -> None:
    """Generate binding modules for SCHEMA."""
    schema = _load(schema_ref)
    try:
        written = write_modules(schema, out_dir, package)
    except BindingError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(2)
    for path in written:
        console.print(f"[green]Wrote[/green] {path}")


@main.command()
@click.argument("schema_ref", metavar="SCHEMA")
@click.argument("document", type=click.Path(dir_okay=False, path_type=Path))
def dump(schema_ref: str, document: Path) -> None:
    """Read DOCUMENT and print its canonical form."""
    binding = _bind(schema_ref)
    try:
        root = binding.read(document)
    except ValueError as exc:
        error_console.print(f"[red]Error:[/red] {document}: {exc}")
        sys.exit(1)
    if root is None:
        error_console.print(
            f"[red]Error:[/red] {document} is not a <{binding.root_element}> document"
        )
        sys.exit(1)
    click.echo(binding.dumps(root), nl=False)


@main.command()
@click.argument("schema_ref", metavar="SCHEMA")
@click.argument(
    "documents", nargs=-1, required=True, type=click.Path(dir_okay=False, path_type=Path)
)
def check(schema_ref: str, documents: tuple[Path, ...]) -> None:
    """Report whether each DOCUMENT binds to SCHEMA."""
    binding = _bind(schema_ref)
    failed = 0
    for path in documents:
        try:
            root = binding.read(path)
        except ValueError as exc:
            console.print(f"[red]✗[/red] {path}: {exc}")
            failed += 1
            continue
        if root is None:
            console.print(f"[red]✗[/red] {path}: not a <{binding.root_element}> document")
            failed += 1
        else:
            console.print(f"[green]✓[/green] {path}")

    if failed:
        console.print(f"\n[red]{failed} of {len(documents)} documents failed[/red]")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
