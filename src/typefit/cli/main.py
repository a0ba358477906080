"""TypeFit CLI - typefit command."""

import click

from typefit import __version__
from typefit.cli.suggest import suggest_command
from typefit.cli.types import types_command
from typefit.cli.watch import watch_command
from typefit.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="typefit")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """TypeFit - suggest declared TypeScript types for untyped object literals."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(types_command, name="types")
cli.add_command(suggest_command, name="suggest")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
