"""typefit watch command - keep the catalog fresh as files change."""

import asyncio
import contextlib
from pathlib import Path

import click

from typefit.cli.utils import load_cli_config
from typefit.core.progress import pluralize, spinner, status
from typefit.index.scanner import ScanStats
from typefit.index.watcher import CatalogWatcher
from typefit.suggest import SuggestionService


async def _run(service: SuggestionService, stop: asyncio.Event) -> None:
    config = service.config
    indexer = service.create_indexer()

    async def _report(stats: ScanStats) -> None:
        catalog = indexer.status.catalog
        parts = [pluralize(stats.files_scanned, "file") + " re-extracted"]
        if stats.files_removed:
            parts.append(f"{stats.files_removed} removed")
        if stats.files_failed:
            parts.append(f"{stats.files_failed} failed")
        status(
            f"{', '.join(parts)}; catalog has {pluralize(catalog.types, 'type')}",
            style="warning" if stats.files_failed else "success",
        )

    indexer.set_on_complete(_report)
    indexer.start()

    watcher = CatalogWatcher(
        service.root,
        indexer.queue_paths,
        extensions=config.index.extensions,
        include_node_modules=config.index.include_node_modules,
        debounce_window=config.watcher.debounce_sec,
        max_debounce_wait=config.watcher.max_debounce_wait_sec,
    )
    await watcher.start()
    try:
        await stop.wait()
    finally:
        await watcher.stop()
        await indexer.stop()


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def watch_command(ctx: click.Context, path: Path) -> None:
    """Watch PATH and keep the type catalog up to date until interrupted.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    config = load_cli_config(ctx, root)
    service = SuggestionService(root, config)

    with spinner(f"Scanning {root}"):
        stats = service.build()
    status(
        f"{pluralize(stats.types_found, 'type')} in {pluralize(stats.files_scanned, 'file')}",
        style="success",
    )
    status("Watching for changes (Ctrl+C to stop)", style="info")

    stop = asyncio.Event()
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(service, stop))
    status("Stopped", style="info")
