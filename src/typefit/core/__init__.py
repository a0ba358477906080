"""Core module exports."""

from typefit.core.errors import (
    ConfigError,
    ErrorCode,
    ExtractionError,
    InternalError,
    TypeFitError,
)
from typefit.core.logging import (
    clear_scan_id,
    configure_logging,
    get_logger,
    get_scan_id,
    set_scan_id,
)
from typefit.core.progress import spinner, status

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "ExtractionError",
    "InternalError",
    "TypeFitError",
    # Logging
    "clear_scan_id",
    "configure_logging",
    "get_logger",
    "get_scan_id",
    "set_scan_id",
    # Progress
    "spinner",
    "status",
]
