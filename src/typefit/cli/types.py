"""typefit types command - list declared types in the catalog."""

import json
from pathlib import Path

import click
from rich.table import Table

from typefit.cli.utils import load_cli_config
from typefit.core.progress import get_console, pluralize, spinner, status
from typefit.index.scanner import CatalogBuilder


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def types_command(ctx: click.Context, path: Path, as_json: bool) -> None:
    """List the interfaces and object type aliases found under PATH.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    config = load_cli_config(ctx, root)
    builder = CatalogBuilder(config.index)

    with spinner(f"Scanning {root}"):
        catalog, stats = builder.build(root)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "name": d.name,
                        "kind": d.kind,
                        "file_path": d.file_path,
                        "line": d.location.line + 1 if d.location else None,
                        "properties": [p.name for p in d.properties],
                    }
                    for d in catalog.iter_declared()
                ],
                indent=2,
            )
        )
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Type")
    table.add_column("Kind", style="dim")
    table.add_column("Properties", justify="right")
    table.add_column("Location", style="cyan")
    for d in catalog.iter_declared():
        line = f":{d.location.line + 1}" if d.location else ""
        location = f"{_relative(d.file_path, root)}{line}"
        table.add_row(d.name, d.kind, str(len(d.properties)), location)
    get_console().print(table)

    status(
        f"{pluralize(len(catalog), 'type')} in {pluralize(len(catalog.files), 'file')}",
        style="success",
    )
    if stats.files_failed:
        status(f"{pluralize(stats.files_failed, 'file')} could not be parsed", style="warning")


def _relative(file_path: str, root: Path) -> str:
    try:
        return str(Path(file_path).relative_to(root))
    except ValueError:
        return file_path
