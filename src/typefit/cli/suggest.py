"""typefit suggest command - rank declared types for untyped literals."""

import json
from pathlib import Path

import click
from rich.table import Table

from typefit.cli.utils import find_project_root, load_cli_config
from typefit.core.errors import TypeFitError
from typefit.core.progress import get_console, spinner, status
from typefit.suggest import SuggestionService


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root to scan for types (default: nearest tsconfig.json/package.json)",
)
@click.option(
    "--max", "max_suggestions", type=click.IntRange(min=1), help="Suggestions per literal"
)
@click.option(
    "--min-score", type=click.FloatRange(0.0, 1.0), help="Hide suggestions scoring below this"
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def suggest_command(
    ctx: click.Context,
    file: Path,
    root: Path | None,
    max_suggestions: int | None,
    min_score: float | None,
    as_json: bool,
) -> None:
    """Suggest declared types for the untyped object literals in FILE."""
    root = (root or find_project_root(file)).resolve()
    config = load_cli_config(ctx, root)
    if max_suggestions is not None:
        config.matching.max_suggestions = max_suggestions
    if min_score is not None:
        config.matching.minimum_score = min_score

    service = SuggestionService(root, config)
    try:
        with spinner(f"Scanning {root}"):
            service.build()
        result = service.suggest_file(file)
    except TypeFitError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if not result.literals:
        status("No untyped object literals found", style="info")
        return

    console = get_console()
    for item in result.literals:
        loc = item.untyped.location
        console.print(
            f"[bold]{item.untyped.name}[/bold] [dim]line {loc.line + 1}[/dim]", highlight=False
        )
        if not item.matches:
            status("no compatible types", style="warning", indent=2)
            continue

        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Type")
        table.add_column("Score", justify="right")
        table.add_column("Missing", style="red")
        table.add_column("Extra", style="yellow")
        for match in item.matches:
            name = f"[green]{match.type_name}[/green]" if match.is_exact_match else match.type_name
            table.add_row(
                name,
                f"{match.percentage}%",
                ", ".join(match.missing_properties),
                ", ".join(match.extra_properties),
            )
        console.print(table)
