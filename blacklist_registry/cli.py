"""Registry command-line interface.

Provides the offline batch audit used as a release gate, an offline
renderer for dataset dumps, and a launcher for the HTTP API.

Audit exit status:
    0 - every entry is valid
    1 - at least one violation (one ``<path> <message>`` line each on stdout)
    2 - the schema or dataset could not be read
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import uvicorn
from rich.console import Console
from rich.markup import escape

from blacklist_registry.dataset import load_json
from blacklist_registry.exceptions import DatasetError
from blacklist_registry.models import Entry
from blacklist_registry.rendering import ProtocolVersion, render, render_markup
from blacklist_registry.validator import SchemaValidator

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_UNREADABLE = 2

console = Console(stderr=True)

logger = logging.getLogger(__name__)


def print_error(text: str) -> None:
    """Print error message."""
    console.print(f"[red]Error:[/red] {escape(text)}")


def _load_inputs(
    dataset: Path, schema_path: Optional[Path]
) -> tuple[SchemaValidator, object]:
    if schema_path:
        validator = SchemaValidator.from_path(schema_path)
    else:
        validator = SchemaValidator.default()
    return validator, load_json(dataset, "dataset")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Blacklist registry tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.argument("dataset", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Schema definition to audit against (defaults to the packaged schema)",
)
@click.pass_context
def audit(ctx: click.Context, dataset: Path, schema_path: Optional[Path]) -> None:
    """Validate every entry in DATASET and report each violation."""
    try:
        validator, data = _load_inputs(dataset, schema_path)
    except DatasetError as e:
        print_error(str(e))
        ctx.exit(EXIT_UNREADABLE)

    result = validator.validate_collection(data)
    for error in result.errors:
        click.echo(f"{error.path} {error.message}")

    if result.valid:
        count = len(data) if isinstance(data, list) else 0
        console.print(f"[green]Data integrity verified[/green] ({count} entries)")
        ctx.exit(EXIT_OK)

    logger.debug(f"Audit of {dataset} failed with {len(result.errors)} violation(s)")
    console.print(f"[red]Data validation failed:[/red] {len(result.errors)} violation(s)")
    ctx.exit(EXIT_VIOLATIONS)


@cli.command("render")
@click.argument("dataset", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--protocol",
    type=click.Choice([p.value for p in ProtocolVersion]),
    default=ProtocolVersion.current.value,
    show_default=True,
)
@click.option(
    "--format", "output_format", type=click.Choice(["json", "html"]), default="json"
)
@click.pass_context
def render_dataset(ctx: click.Context, dataset: Path, protocol: str, output_format: str) -> None:
    """Render DATASET the way list clients receive it."""
    try:
        validator, data = _load_inputs(dataset, None)
    except DatasetError as e:
        print_error(str(e))
        ctx.exit(EXIT_UNREADABLE)

    result = validator.validate_collection(data)
    if not result.valid:
        for error in result.errors:
            click.echo(f"{error.path} {error.message}", err=True)
        print_error(f"{dataset} is not a valid registry; refusing to render")
        ctx.exit(EXIT_VIOLATIONS)

    entries = sorted((Entry.model_validate(doc) for doc in data), key=lambda e: e.position)
    items = render(entries, protocol)
    if output_format == "html":
        click.echo(render_markup(items, protocol))
    else:
        click.echo(json.dumps(items, indent=2))


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=3006, type=int, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the registry API."""
    uvicorn.run("blacklist_registry.api.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
