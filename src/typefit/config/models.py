"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TYPEFIT__SECTION__KEY)
3. Repo YAML (.typefit/config.yaml)
4. Global YAML (~/.config/typefit/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TYPEFIT__<SECTION>__<KEY>=<VALUE>

Examples:
    TYPEFIT__LOGGING__LEVEL=DEBUG
    TYPEFIT__MATCHING__MAX_SUGGESTIONS=10
    TYPEFIT__INDEX__INCLUDE_NODE_MODULES=true
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TYPEFIT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every property comparison.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class MatchingConfig(BaseModel):
    """Suggestion filtering and scorer limits.

    Env vars:
        TYPEFIT__MATCHING__MINIMUM_SCORE: Hide suggestions scoring below this
        TYPEFIT__MATCHING__MAX_SUGGESTIONS: Suggestions shown per literal
        TYPEFIT__MATCHING__MAX_NESTING_DEPTH: Nested match recursion limit
    """

    minimum_score: float = Field(
        default=0.0,
        description="Hide suggestions scoring below this. Zero-score matches are never shown.",
    )
    max_suggestions: int = Field(
        default=5,
        description="Maximum suggestions per untyped literal.",
    )
    max_nesting_depth: int = Field(
        default=32,
        description="Nested matching stops recursing past this depth.",
    )
    depth_limit_score: float = Field(
        default=0.5,
        description="Credit given to a nested property once the depth limit is reached.",
    )

    @field_validator("minimum_score", "depth_limit_score")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not (0.0 <= v <= 1.0):
            raise ValueError(f"Score must be within 0.0-1.0, got {v}")
        return v

    @field_validator("max_suggestions", "max_nesting_depth")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Must be at least 1, got {v}")
        return v


class IndexConfig(BaseModel):
    """Declared-type catalog scanning.

    Env vars:
        TYPEFIT__INDEX__INCLUDE_NODE_MODULES: Also scan node_modules
        TYPEFIT__INDEX__MAX_FILE_SIZE_MB: Skip files larger than this
    """

    include_node_modules: bool = Field(
        default=False,
        description="Scan node_modules for declared types. Slow on large installs.",
    )
    extensions: list[str] = Field(
        default_factory=lambda: [".ts", ".tsx", ".mts", ".cts"],
        description="Source extensions scanned for declarations and literals.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip files larger than this (MB).",
    )


class IndexerConfig(BaseModel):
    """Background catalog indexer.

    Env vars:
        TYPEFIT__INDEXER__DEBOUNCE_SEC: Indexer debounce window
        TYPEFIT__INDEXER__MAX_WORKERS: Extraction worker threads
        TYPEFIT__INDEXER__FRESHNESS_TIMEOUT_SEC: Max wait for an in-flight rescan
    """

    debounce_sec: float = Field(
        default=0.5,
        description="Changes arriving within this window are extracted together.",
    )
    max_workers: int = Field(
        default=1,
        description="Extraction worker threads.",
    )
    freshness_timeout_sec: float = Field(
        default=5.0,
        description="Max wait for pending catalog updates before scoring anyway.",
    )


class WatcherConfig(BaseModel):
    """File watcher.

    Env vars:
        TYPEFIT__WATCHER__DEBOUNCE_SEC: Quiet window before changes are emitted
    """

    debounce_sec: float = Field(
        default=0.3,
        description="Quiet window before a batch of changes is emitted.",
    )
    max_debounce_wait_sec: float = Field(
        default=2.0,
        description="Upper bound on how long a burst of changes is held back.",
    )


class TypeFitConfig(BaseModel):
    """Root configuration for typefit."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
