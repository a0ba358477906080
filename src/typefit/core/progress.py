"""Terminal feedback for the CLI: status lines and a scan spinner.

Everything goes to stderr so ``--json`` output on stdout stays parseable.

Usage::

    with spinner("Scanning project"):
        catalog, stats = builder.build(root)
    status(f"{pluralize(len(catalog), 'type')} found", style="success")
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

# Per thread: the indexer's worker threads keep logging while the CLI spins
_suppression = threading.local()


def is_console_suppressed() -> bool:
    return getattr(_suppression, "active", False)


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Silence console log handlers for the duration of the block."""
    _suppression.active = True
    try:
        yield
    finally:
        _suppression.active = False


def _is_tty() -> bool:
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())


def get_console() -> Console:
    return _console


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print one styled line, e.g. ``✓ 12 types in 4 files``."""
    _console.print(" " * indent + _STYLES.get(style, "") + message, highlight=False)

    from typefit.core.logging import get_logger

    get_logger("progress").debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    return f"{count} {singular if count == 1 else (plural or singular + 's')}"


@contextmanager
def spinner(message: str, *, indent: int = 0) -> Iterator[None]:
    """Animated spinner on a terminal; a single ``message...`` line otherwise."""
    text = " " * indent + message
    if not _is_tty():
        _console.print(f"{text}...", highlight=False)
        yield
        return

    with suppress_console_logs(), _console.status(f"[cyan]{text}[/cyan]", spinner="dots"):
        yield
