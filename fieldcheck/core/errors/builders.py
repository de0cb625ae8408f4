"""Error Builders

Ergonomic constructors for typed errors. Each builder creates an AppError
with the appropriate code and context, wrapped in Err.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    value: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, "value": value, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    ))


def invalid_type(expected: str, actual: object, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Expected {expected}, got {type(actual).__name__}",
        code=ErrorCode.E2004_INVALID_TYPE,
        origin=origin,
        expected=expected,
        actual=type(actual).__name__,
    )


def invalid_format(value: str, expected: str, origin: str = "", cause: Exception | None = None) -> Err[AppError]:
    return validation_error(
        f"Cannot parse '{value[:50]}' as {expected}",
        code=ErrorCode.E2002_INVALID_FORMAT,
        origin=origin,
        cause=cause,
        expected=expected,
    )


# =============================================================================
# Configuration Errors (E5xxx)
# =============================================================================

def precondition_failed(message: str, *, origin: str = "", **metadata) -> AppError:
    """Build (not wrap) a precondition error; these are raised, never returned."""
    return AppError(
        code=ErrorCode.E5003_PRECONDITION_FAILED,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=metadata,
    )


def unknown_language(code: str, available: list[str], origin: str = "") -> AppError:
    return AppError(
        code=ErrorCode.E5010_UNKNOWN_LANGUAGE,
        message=f"Language '{code}' not registered. Available: {', '.join(available) or 'none'}",
        context=ErrorContext(origin=origin),
        metadata={"language": code, "available": available},
    )


def table_load_failed(path: str, cause: Exception, origin: str = "") -> AppError:
    return AppError(
        code=ErrorCode.E6002_FILE_READ_ERROR,
        message=f"Failed to load message table '{path}': {cause}",
        context=ErrorContext(origin=origin),
        metadata={"path": path},
        cause=cause,
    )
