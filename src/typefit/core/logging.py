"""structlog setup for the CLI and the watcher.

Every configured output gets its own stdlib handler and level; structlog
events are rendered through ``ProcessorFormatter`` so JSON files and the
console share one processor chain. Events logged while a catalog scan is
running carry that scan's ``scan_id``.

Console handlers go quiet while a Rich spinner owns the terminal (see
``typefit.core.progress``); file handlers keep receiving everything.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from typefit.config.models import LoggingConfig, LogOutputConfig

_CONSOLE_DESTINATIONS = ("stderr", "stdout")

_scan_id: ContextVar[str | None] = ContextVar("scan_id", default=None)
_log_file: Path | None = None


def get_scan_id() -> str | None:
    return _scan_id.get()


def set_scan_id(scan_id: str | None = None) -> str:
    """Bind a scan correlation ID, generating a short one if not given."""
    sid = scan_id or uuid4().hex[:12]
    _scan_id.set(sid)
    return sid


def clear_scan_id() -> None:
    _scan_id.set(None)


def get_log_file_path() -> Path | None:
    """First file output of the active configuration."""
    return _log_file


def _scan_id_processor(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    sid = _scan_id.get()
    if sid is not None:
        event_dict["scan_id"] = sid
    return event_dict


def _level(name: str | None, fallback: int = logging.INFO) -> int:
    if not name:
        return fallback
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


class ConsoleSuppressingFilter(logging.Filter):
    """Drop records while a spinner is live."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: ARG002
        from typefit.core.progress import is_console_suppressed

        return not is_console_suppressed()


def _handler_for(
    output: LogOutputConfig,
    level: int,
    pre_chain: list[structlog.types.Processor],
) -> logging.Handler:
    handler: logging.Handler
    console = output.destination in _CONSOLE_DESTINATIONS
    if output.destination == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    elif output.destination == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)
    )
    handler.setLevel(level)
    if console:
        handler.addFilter(ConsoleSuppressingFilter())
    return handler


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "INFO",
) -> None:
    """Install handlers for every output in ``config``.

    Without ``config`` a single stderr output is set up from ``json_format``
    and ``level``. Safe to call again; previous handlers are replaced.
    """
    global _log_file
    from typefit.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    root_level = _level(config.level)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _scan_id_processor,  # type: ignore[list-item]
    ]
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfiguration must reach loggers created at import time
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(root_level)
    # watchfiles reports every raw filesystem event at DEBUG
    logging.getLogger("watchfiles").setLevel(logging.WARNING)

    _log_file = None
    for output in config.outputs:
        if _log_file is None and output.destination not in _CONSOLE_DESTINATIONS:
            _log_file = Path(output.destination)
        root.addHandler(_handler_for(output, _level(output.level, root_level), pre_chain))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger  # type: ignore[no-any-return]
