"""CLI utilities."""

from pathlib import Path

import click

from typefit.config.loader import load_config
from typefit.config.models import TypeFitConfig
from typefit.core.errors import TypeFitError
from typefit.core.logging import configure_logging


def find_project_root(start_path: Path | None = None) -> Path:
    """Find the nearest directory holding a tsconfig.json or package.json.

    Falls back to ``start_path`` (or the current directory) when none is found.
    """
    if start_path is None:
        start_path = Path.cwd()

    start = start_path.resolve()
    if start.is_file():
        start = start.parent

    for candidate in (start, *start.parents):
        if (candidate / "tsconfig.json").exists() or (candidate / "package.json").exists():
            return candidate
    return start


def load_cli_config(ctx: click.Context, root: Path) -> TypeFitConfig:
    """Load config for ``root`` and apply its logging section.

    ``-v`` keeps DEBUG console logging regardless of the configured level.
    """
    try:
        config = load_config(root)
    except TypeFitError as e:
        raise click.ClickException(str(e)) from e

    verbose = bool(ctx.find_root().obj and ctx.find_root().obj.get("verbose"))
    if not verbose:
        configure_logging(config=config.logging)
    return config
