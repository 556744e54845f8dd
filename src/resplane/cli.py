"""
resplane command line.

Inspect the property catalog and validate property ids or predicates
against a resource type:
- catalog: Show accepted, key and primary-key property ids
- check:   Report property ids a resource type does not support
- predicate: Validate a JSON predicate and list the key lookups it implies
"""

from __future__ import annotations

import json
import platform
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from resplane._version import get_version
from resplane.core.config import ResplaneConfig, load_config
from resplane.core.errors import ResplaneError
from resplane.runtime.logging import get_logger, setup_logging_from_config
from resplane.runtime.predicate_evaluator import (
    extract_key_property_maps,
    get_predicate_property_ids,
)
from resplane.runtime.property_helper import PropertyIdIndex
from resplane.specs.catalog import PropertyCatalog, ResourceType
from resplane.specs.predicate import predicate_from_dict

app = typer.Typer(
    help="resplane - resource providers for a cluster management plane",
    no_args_is_help=True,
)

console = Console()
logger = get_logger("CLI")


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        console.print(f"[bold]resplane[/bold] {get_version()}")
        console.print(f"[dim]Python {platform.python_version()}[/dim]")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to resplane.toml"),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version information",
        ),
    ] = None,
) -> None:
    """Load configuration and set up logging for every command."""
    try:
        config = load_config(config_path)
    except ResplaneError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    setup_logging_from_config(config.logging)
    ctx.obj = config


def _load_catalog(ctx: typer.Context) -> PropertyCatalog:
    config: ResplaneConfig = ctx.obj or ResplaneConfig()
    try:
        catalog = PropertyCatalog.load(config.catalog_path)
    except ResplaneError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
    logger.debug("Loaded catalog with %d resource type(s)", len(catalog.resource_types()))
    return catalog


def _parse_type(name: str) -> ResourceType:
    for resource_type in ResourceType:
        if resource_type.value.lower() == name.lower():
            return resource_type
    choices = ", ".join(t.value for t in ResourceType)
    console.print(f"[red]Unknown resource type '{name}'. Choose one of: {choices}[/red]")
    raise typer.Exit(1)


# =============================================================================
# Commands
# =============================================================================


@app.command(name="catalog")
def catalog_command(
    ctx: typer.Context,
    resource_type: Annotated[
        str | None, typer.Argument(help="Resource type (all types when omitted)")
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the property ids of one or every resource type."""
    catalog = _load_catalog(ctx)
    types = [_parse_type(resource_type)] if resource_type else catalog.resource_types()

    if output_json:
        payload = {
            t.value: {
                "property_ids": sorted(catalog.get_property_ids(t)),
                "key_property_ids": {
                    k.value: v for k, v in catalog.get_key_property_ids(t).items()
                },
                "pk_property_ids": sorted(catalog.get_pk_property_ids(t)),
            }
            for t in types
        }
        console.print_json(json.dumps(payload))
        return

    for t in types:
        keys = {v: k.value for k, v in catalog.get_key_property_ids(t).items()}
        pks = catalog.get_pk_property_ids(t)

        table = Table(title=t.value)
        table.add_column("Property Id")
        table.add_column("Key For", style="cyan")
        table.add_column("PK")
        for property_id in sorted(catalog.get_property_ids(t)):
            table.add_row(
                property_id,
                keys.get(property_id, ""),
                "[green]yes[/green]" if property_id in pks else "",
            )
        console.print(table)


@app.command(name="check")
def check_command(
    ctx: typer.Context,
    resource_type: Annotated[str, typer.Argument(help="Resource type")],
    property_ids: Annotated[list[str], typer.Argument(help="Property ids to validate")],
) -> None:
    """Report which property ids a resource type does not support."""
    catalog = _load_catalog(ctx)
    t = _parse_type(resource_type)
    index = PropertyIdIndex(catalog.get_property_ids(t))

    unsupported = index.unsupported(property_ids)
    for property_id in property_ids:
        if property_id in unsupported:
            console.print(f"[red]✗[/red] {property_id}")
        else:
            console.print(f"[green]✓[/green] {property_id}")

    if unsupported:
        console.print(f"\n[red]{len(unsupported)} unsupported property id(s) for {t.value}[/red]")
        raise typer.Exit(1)


@app.command(name="predicate")
def predicate_command(
    ctx: typer.Context,
    resource_type: Annotated[str, typer.Argument(help="Resource type")],
    predicate_json: Annotated[
        str, typer.Argument(help="Predicate as JSON, or @file to read it from a file")
    ],
) -> None:
    """Validate a predicate and show the backend lookups it narrows to."""
    catalog = _load_catalog(ctx)
    t = _parse_type(resource_type)

    text = predicate_json
    if text.startswith("@"):
        text = Path(text[1:]).read_text(encoding="utf-8")
    try:
        predicate = predicate_from_dict(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as e:
        console.print(f"[red]Invalid predicate: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    index = PropertyIdIndex(catalog.get_property_ids(t))
    unsupported = index.unsupported(get_predicate_property_ids(predicate))
    if unsupported:
        console.print(
            f"[red]Unsupported property id(s) for {t.value}: {', '.join(sorted(unsupported))}[/red]"
        )
        raise typer.Exit(1)

    lookup_ids = set(catalog.get_key_property_ids(t).values()) | catalog.get_pk_property_ids(t)
    pins = extract_key_property_maps(predicate, lookup_ids)
    if pins == [{}]:
        console.print("[yellow]Predicate pins no key properties: full lookup[/yellow]")
        return

    console.print(f"[green]{len(pins)} narrowed lookup(s)[/green]")
    for pin in pins:
        console.print("  " + ", ".join(f"{k}={v!r}" for k, v in sorted(pin.items())))


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
