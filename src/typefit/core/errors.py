"""typefit error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Extraction
- 9xxx: Internal

The matcher itself never raises. Errors surface from configuration loading
and from the source extraction collaborators, where the catalog builder
catches them per file.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Extraction (3xxx)
    EXTRACTION_UNSUPPORTED_LANGUAGE = 3001
    EXTRACTION_READ_FAILED = 3002
    EXTRACTION_PARSE_FAILED = 3003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_TIMEOUT = 9002


@dataclass(frozen=True, slots=True)
class TypeFitError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TypeFitError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ExtractionError(TypeFitError):
    """Source extraction errors (one file at a time)."""

    @classmethod
    def unsupported_language(cls, path: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACTION_UNSUPPORTED_LANGUAGE,
            message=f"Unsupported source file: {path}",
            details={"path": path},
        )

    @classmethod
    def read_failed(cls, path: str, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACTION_READ_FAILED,
            message=f"Failed to read {path}: {reason}",
            retryable=True,
            details={"path": path, "reason": reason},
        )

    @classmethod
    def parse_failed(cls, path: str, reason: str) -> "ExtractionError":
        return cls(
            code=ErrorCode.EXTRACTION_PARSE_FAILED,
            message=f"Failed to parse {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class InternalError(TypeFitError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def timeout(cls, operation: str, seconds: float) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_TIMEOUT,
            message=f"Timed out after {seconds:.1f}s: {operation}",
            retryable=True,
            details={"operation": operation, "timeout_sec": seconds},
        )
