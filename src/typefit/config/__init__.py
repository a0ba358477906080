"""Config module exports."""

from typefit.config.loader import load_config
from typefit.config.models import (
    IndexConfig,
    IndexerConfig,
    LoggingConfig,
    MatchingConfig,
    TypeFitConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "IndexConfig",
    "IndexerConfig",
    "LoggingConfig",
    "MatchingConfig",
    "TypeFitConfig",
    "WatcherConfig",
]
