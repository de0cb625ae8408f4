"""Validation Error System

Failures are recorded, not raised, while rules are chained. Each failure
keeps its rule key and error code next to the composed message so callers
can act on them programmatically. A ValidationError is raised only on
request.

Error Format:
{
    "error": {
        "type": "validation_error",
        "message": "Validation failed",
        "mode": "collect_all",
        "errors": [
            {
                "field": "email",
                "rule": "email",
                "code": "E2010_INVALID_EMAIL",
                "message": "The email must be a valid email address."
            }
        ]
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from fieldcheck.core.errors import AppError, ErrorCode


class ValidationMode(str, Enum):
    """How many messages per attribute a report carries."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """One failed rule on one attribute.

    - field: raw attribute key the session was bound to
    - rule: rule key that failed (e.g. "email", "min_string")
    - message: composed, localized message
    - code: error code from the taxonomy
    """
    field: str
    rule: str
    message: str
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "rule": self.rule, "code": self.code.name, "message": self.message}


@dataclass
class ValidationError(Exception):
    """Validation failures for one or more attributes, raised on request."""
    message: str
    details: list[RuleFailure] = field(default_factory=list)
    mode: ValidationMode = ValidationMode.COLLECT_ALL

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.details: return self.message
        if len(self.details) == 1: return self.details[0].message
        return f"{self.message} ({len(self.details)} errors)"

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Messages grouped by attribute key, in recording order."""
        result: dict[str, list[str]] = {}
        for detail in self.details: result.setdefault(detail.field, []).append(detail.message)
        return result

    @property
    def first_error(self) -> RuleFailure | None: return self.details[0] if self.details else None

    def get_errors_for_field(self, field_name: str) -> list[RuleFailure]:
        return [d for d in self.details if d.field == field_name]

    def to_app_error(self) -> AppError:
        """Convert to AppError for the error handling system."""
        if len(self.details) == 1:
            d = self.details[0]
            return AppError(code=d.code, message=d.message, metadata={"field": d.field, "rule": d.rule})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"Validation failed: {len(self.details)} errors",
            metadata={"validation_mode": self.mode.value, "error_count": len(self.details),
                "errors": [d.to_dict() for d in self.details]})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses."""
        return {"error": {"type": "validation_error", "message": self.message, "mode": self.mode.value,
            "error_count": len(self.details), "errors": [d.to_dict() for d in self.details]}}
