"""Error Handling System

Key components:
- Result[T, E]: container for success/failure, used by the coercion layer
- AppError: base error type with full context
- ErrorCode: hierarchical error code taxonomy
- AppErrorException / ConfigurationError: raisable wrappers for setup bugs

Usage:
    from fieldcheck.core.errors import Ok, Err, Result, AppError, ErrorCode

    def parse_port(raw: str) -> Result[int, AppError]:
        if not raw.isdigit():
            return validation_error("port must be numeric", field="port")
        return Ok(int(raw))
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    validation_error,
    invalid_type,
    invalid_format,
    precondition_failed,
    unknown_language,
    table_load_failed,
)


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when an AppError must interrupt control flow instead of
    travelling inside a Result.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class ConfigurationError(AppErrorException):
    """Programmer/setup error. Never a validation outcome; never swallowed."""


__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "AppErrorException",
    "ConfigurationError",
    "validation_error",
    "invalid_type",
    "invalid_format",
    "precondition_failed",
    "unknown_language",
    "table_load_failed",
]
