"""Monadic Error Handling Types

Result/Either types for composable error propagation inside the toolkit.
Coercion layers return Results; the fluent session converts them to
recorded failures and never lets them escape as control flow.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation errors
    E5xxx: Configuration/precondition errors
    E6xxx: Resource errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2006_MISMATCH = 2006
    E2010_INVALID_EMAIL = 2010
    E2011_INVALID_UUID = 2011
    E2012_INVALID_DATE = 2012
    E2013_INVALID_URL = 2013
    E2014_INVALID_IP = 2014
    E2015_INVALID_TIMEZONE = 2015
    E2020_INVALID_MEDIA = 2020
    E2021_INVALID_JSON = 2021
    E2030_WEAK_PASSWORD = 2030

    # Configuration (E5xxx)
    E5003_PRECONDITION_FAILED = 5003
    E5010_UNKNOWN_LANGUAGE = 5010

    # Resource (E6xxx)
    E6002_FILE_READ_ERROR = 6002

    @property
    def http_status(self) -> int:
        """Map error code to the HTTP status a web layer would answer with."""
        code = self.value
        if 2000 <= code < 3000:
            return 422
        if code == 5010:
            return 400
        return 500

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 5000 <= code < 6000:
            return "configuration"
        return "resource"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was built."""
    correlation_id: str = field(default_factory=lambda: uuid4().hex[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""

    def with_origin(self, origin: str) -> ErrorContext: return replace(self, origin=origin)


@dataclass(frozen=True, slots=True)
class AppError:
    """Typed error record shared by the coercion layer and raised setup errors.

    - code: member of the ErrorCode taxonomy
    - message: human-readable, already formatted
    - metadata: structured details (field, expected type, language, path)
    - cause: underlying exception, if any
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    @property
    def error_id(self) -> str: return f"{self.code.name}:{self.context.correlation_id}"

    def with_metadata(self, **kwargs) -> AppError: return replace(self, metadata={**self.metadata, **kwargs})

    def with_origin(self, origin: str) -> AppError: return replace(self, context=self.context.with_origin(origin))

    def to_dict(self) -> dict:
        """Serialize for logs or a caller's HTTP response."""
        return {"error": {"code": self.code.name, "code_num": self.code.value, "category": self.code.category,
            "http_status": self.code.http_status, "message": self.message, "origin": self.context.origin,
            "correlation_id": self.context.correlation_id, "timestamp": self.context.timestamp.isoformat(),
            "metadata": self.metadata}}

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


# ============================================================================
# Result
# ============================================================================

@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful coercion or parse."""
    value: T

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    @property
    def code(self) -> None: return None

    def unwrap(self) -> T: return self.value

    def unwrap_or(self, default: T) -> T: return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]: return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, AppError]]) -> Result[U, AppError]: return f(self.value)


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failed coercion or parse; carries the AppError explaining why."""
    error: E

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    @property
    def code(self) -> ErrorCode:
        """Error code of the wrapped AppError, so callers can branch without unwrapping."""
        return self.error.code

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T: return default

    def unwrap_err(self) -> E: return self.error

    def map(self, f: Callable[[T], U]) -> Err[E]: return self

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Err[E]: return self


Result = Union[Ok[T], Err[E]]
