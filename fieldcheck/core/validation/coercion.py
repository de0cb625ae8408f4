"""Explicit Coercion Rules

Rules that turn a dynamically typed bound value into the type a predicate
needs. Coercion is always attempted on the exact runtime type first; string
fallbacks use strict, locale-independent base-10 grammars. A failed coercion
is an Err, which predicates treat as a rule failure.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Generic, TypeVar
import math
import re

from fieldcheck.core.errors import AppError, Ok, Result, invalid_format, invalid_type

T = TypeVar("T")
S = TypeVar("S")

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def is_integer(value: Any) -> bool:
    """Native int that is not a bool."""
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    """Native int, float or Decimal that is not a bool and not NaN.

    Ordering a Decimal NaN raises InvalidOperation, and a signaling NaN
    raises even on ==, so NaNs never reach a comparison.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, Decimal):
        return not value.is_nan()
    if isinstance(value, float):
        return not math.isnan(value)
    return isinstance(value, int)


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[S, T]):
    """Base class for coercion rules.

    Subclasses implement coerce(), returning Ok(converted) or an Err
    describing why the value does not convert.
    """

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to target type. Returns Result."""

    def can_coerce(self, value: Any) -> bool:
        return self.coerce(value).is_ok()

    def __call__(self, value: Any) -> Result[T, AppError]:
        return self.coerce(value)


@dataclass(frozen=True, slots=True)
class ToInt(CoercionRule[Any, int]):
    """Native int as-is, or a string of base-10 digits with an optional sign.

    Surrounding whitespace, underscores and non-ASCII digits are rejected.
    """

    def coerce(self, value: Any) -> Result[int, AppError]:
        if is_integer(value):
            return Ok(value)
        if not isinstance(value, str):
            return invalid_type("int or integer string", value, origin="coercion")
        if not _INT_PATTERN.fullmatch(value):
            return invalid_format(value, "int", origin="coercion")
        return Ok(int(value))


@dataclass(frozen=True, slots=True)
class ToFloat(CoercionRule[Any, float]):
    """Native number as float, or a plain decimal/scientific string."""

    def coerce(self, value: Any) -> Result[float, AppError]:
        if is_number(value):
            return Ok(float(value))
        if not isinstance(value, str):
            return invalid_type("number or numeric string", value, origin="coercion")
        if not _FLOAT_PATTERN.fullmatch(value):
            return invalid_format(value, "float", origin="coercion")
        return Ok(float(value))


@dataclass(frozen=True, slots=True)
class StringToBool(CoercionRule[Any, bool]):
    """Coerce form-style answers to boolean.

    Truthy: "yes", "on", "1", "true", True, 1
    Falsy: "no", "off", "0", "false", False, 0
    """
    true_values: frozenset[str] = frozenset({"yes", "on", "1", "true"})
    false_values: frozenset[str] = frozenset({"no", "off", "0", "false"})

    def coerce(self, value: Any) -> Result[bool, AppError]:
        if isinstance(value, bool):
            return Ok(value)
        if is_integer(value):
            if value in (0, 1):
                return Ok(value == 1)
            return invalid_format(str(value), "bool", origin="coercion")
        if not isinstance(value, str):
            return invalid_type("bool, 0/1 or answer string", value, origin="coercion")
        lower = value.strip().lower()
        if lower in self.true_values:
            return Ok(True)
        if lower in self.false_values:
            return Ok(False)
        return invalid_format(value, "bool", origin="coercion")


@dataclass(frozen=True, slots=True)
class StringToDateTime(CoercionRule[str, datetime]):
    """Parse a string with a strptime layout into a naive datetime.

    The string must be exactly what the layout renders for the parsed
    instant (month names compare case-insensitively), so "2024-1-5" does
    not match "%Y-%m-%d".
    """
    layout: str = "%Y-%m-%d"

    def coerce(self, value: Any) -> Result[datetime, AppError]:
        if not isinstance(value, str):
            return invalid_type("date string", value, origin="coercion")
        try:
            parsed = datetime.strptime(value, self.layout)
        except ValueError as e:
            return invalid_format(value, f"date '{self.layout}'", origin="coercion", cause=e)
        if parsed.strftime(self.layout).lower() != value.lower():
            return invalid_format(value, f"date '{self.layout}'", origin="coercion")
        return Ok(normalize_datetime(parsed))


def normalize_datetime(value: date | datetime) -> datetime:
    """Bring dates, naive and aware datetimes onto one naive-UTC timeline."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime.combine(value, time())


def coerce_or_none(rule: CoercionRule[Any, T], value: Any) -> T | None:
    """Run a rule and discard the error detail."""
    return rule(value).unwrap_or(None)


TO_INT = ToInt()
TO_FLOAT = ToFloat()
TO_BOOL = StringToBool()
