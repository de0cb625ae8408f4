"""Rule Predicate Catalog

Every rule is a pure function `(value, *params) -> bool` keyed by a member of
the closed RuleKey set. Predicates pattern-match on the runtime type they
accept and fail closed (return False) for every other type. They never raise
for bad input; a coercion or parse failure is simply a failed rule.

Families:
- Presence / conditional presence
- Type and format
- Character class
- Comparison and membership
- Range and size
- Date
- Media
- Password strength
"""
from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping, Sequence
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Any
from urllib.parse import urlparse
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import json
import re
import unicodedata

from fieldcheck.core.errors import ErrorCode
from .coercion import TO_BOOL, TO_FLOAT, TO_INT, StringToDateTime, is_integer, is_number, normalize_datetime
from .media import ImageDecoder, MimeTyped


class RuleKey(str, Enum):
    """Closed set of rule identifiers. Values double as message-table keys."""
    ACCEPTED = "accepted"
    ACCEPTED_IF = "accepted_if"
    ACTIVE_URL = "active_url"
    AFTER = "after"
    AFTER_OR_EQUAL = "after_or_equal"
    ALPHA = "alpha"
    ALPHA_DASH = "alpha_dash"
    ALPHA_NUM = "alpha_num"
    ARRAY = "array"
    BEFORE = "before"
    BEFORE_OR_EQUAL = "before_or_equal"
    BETWEEN = "between"
    BOOLEAN = "boolean"
    CONFIRMED = "confirmed"
    DATE = "date"
    DATE_EQUALS = "date_equals"
    DATE_FORMAT = "date_format"
    DECLINED = "declined"
    DECLINED_IF = "declined_if"
    DIFFERENT = "different"
    DIGITS = "digits"
    DIGITS_BETWEEN = "digits_between"
    DIMENSIONS = "dimensions"
    DISTINCT = "distinct"
    EMAIL = "email"
    ENDS_WITH = "ends_with"
    EXISTS = "exists"
    FILLED = "filled"
    IMAGE = "image"
    IN = "in"
    IN_ARRAY = "in_array"
    INTEGER = "integer"
    IP = "ip"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    JSON = "json"
    MAX_NUMERIC = "max_numeric"
    MAX_STRING = "max_string"
    MIMES = "mimes"
    MIN_NUMERIC = "min_numeric"
    MIN_STRING = "min_string"
    NOT_IN = "not_in"
    NOT_REGEX = "not_regex"
    NUMERIC = "numeric"
    PASSWORD_LETTERS = "password_letters"
    PASSWORD_MIXED = "password_mixed"
    PASSWORD_NUMBERS = "password_numbers"
    PASSWORD_SYMBOLS = "password_symbols"
    PASSWORD_UNCOMPROMISED = "password_uncompromised"
    PRESENT = "present"
    PROHIBITED = "prohibited"
    PROHIBITED_IF = "prohibited_if"
    REGEX = "regex"
    REQUIRED = "required"
    REQUIRED_IF = "required_if"
    REQUIRED_UNLESS = "required_unless"
    SAME = "same"
    STARTS_WITH = "starts_with"
    STRING = "string"
    TIMEZONE = "timezone"
    UNIQUE = "unique"
    URL = "url"
    UUID = "uuid"

    @property
    def error_code(self) -> ErrorCode:
        """Machine-readable code reported alongside the composed message."""
        return _RULE_CODES.get(self, ErrorCode.E2005_CONSTRAINT_VIOLATION)


_RULE_CODES: dict[RuleKey, ErrorCode] = {
    **dict.fromkeys((RuleKey.REQUIRED, RuleKey.REQUIRED_IF, RuleKey.REQUIRED_UNLESS,
                     RuleKey.FILLED, RuleKey.PRESENT), ErrorCode.E2001_REQUIRED_FIELD_MISSING),
    **dict.fromkeys((RuleKey.STRING, RuleKey.BOOLEAN, RuleKey.INTEGER, RuleKey.NUMERIC,
                     RuleKey.ARRAY), ErrorCode.E2004_INVALID_TYPE),
    **dict.fromkeys((RuleKey.ALPHA, RuleKey.ALPHA_DASH, RuleKey.ALPHA_NUM, RuleKey.REGEX,
                     RuleKey.NOT_REGEX, RuleKey.STARTS_WITH, RuleKey.ENDS_WITH,
                     RuleKey.DIGITS, RuleKey.DIGITS_BETWEEN), ErrorCode.E2002_INVALID_FORMAT),
    **dict.fromkeys((RuleKey.MIN_STRING, RuleKey.MAX_STRING, RuleKey.MIN_NUMERIC,
                     RuleKey.MAX_NUMERIC, RuleKey.BETWEEN), ErrorCode.E2003_OUT_OF_RANGE),
    **dict.fromkeys((RuleKey.SAME, RuleKey.DIFFERENT, RuleKey.CONFIRMED), ErrorCode.E2006_MISMATCH),
    **dict.fromkeys((RuleKey.DATE, RuleKey.DATE_FORMAT, RuleKey.DATE_EQUALS, RuleKey.BEFORE,
                     RuleKey.BEFORE_OR_EQUAL, RuleKey.AFTER, RuleKey.AFTER_OR_EQUAL),
                    ErrorCode.E2012_INVALID_DATE),
    **dict.fromkeys((RuleKey.URL, RuleKey.ACTIVE_URL), ErrorCode.E2013_INVALID_URL),
    **dict.fromkeys((RuleKey.IP, RuleKey.IPV4, RuleKey.IPV6), ErrorCode.E2014_INVALID_IP),
    **dict.fromkeys((RuleKey.IMAGE, RuleKey.DIMENSIONS, RuleKey.MIMES), ErrorCode.E2020_INVALID_MEDIA),
    **dict.fromkeys((RuleKey.PASSWORD_LETTERS, RuleKey.PASSWORD_MIXED, RuleKey.PASSWORD_NUMBERS,
                     RuleKey.PASSWORD_SYMBOLS, RuleKey.PASSWORD_UNCOMPROMISED), ErrorCode.E2030_WEAK_PASSWORD),
    RuleKey.EMAIL: ErrorCode.E2010_INVALID_EMAIL,
    RuleKey.UUID: ErrorCode.E2011_INVALID_UUID,
    RuleKey.JSON: ErrorCode.E2021_INVALID_JSON,
    RuleKey.TIMEZONE: ErrorCode.E2015_INVALID_TIMEZONE,
}


# ============================================================================
# Shared helpers
# ============================================================================

def deep_equal(a: Any, b: Any) -> bool:
    """Structural equality that also requires matching runtime types.

    1, 1.0 and True are three different values here; lists, tuples and
    mappings are compared element-wise. A Decimal NaN equals nothing.
    """
    if type(a) is not type(b):
        return False
    if isinstance(a, Decimal) and (a.is_nan() or b.is_nan()):
        return False
    if isinstance(a, Mapping):
        return a.keys() == b.keys() and all(deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(deep_equal(x, y) for x, y in zip(a, b))
    return a == b


def contains(values: Iterable[Any], value: Any) -> bool:
    return any(deep_equal(value, candidate) for candidate in values)


def is_empty(value: Any) -> bool:
    """None, blank strings, empty containers, False and numeric zero."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, bool):
        return not value
    if is_number(value):
        return value == 0
    if isinstance(value, (bytes, bytearray, Collection)):
        return len(value) == 0
    return False


def condition_holds(other: Any, expected: Any) -> bool:
    """Side condition for *_if rules.

    Strings compare case- and whitespace-insensitively. A string compared
    against a bool or int is matched on its form rendering ("true", "1").
    """
    if isinstance(other, str) and isinstance(expected, str):
        return other.strip().lower() == expected.strip().lower()
    if isinstance(other, str) and isinstance(expected, (bool, int)):
        rendered = str(expected).lower() if isinstance(expected, bool) else str(expected)
        return other.strip().lower() == rendered
    return deep_equal(other, expected)


def _size(value: Any) -> float | None:
    """Numeric value, string length or container size; None if unsized."""
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        return float(len(value))
    if isinstance(value, (list, tuple, Mapping, set, frozenset)):
        return float(len(value))
    return None


# ============================================================================
# Presence
# ============================================================================

DECLINED_ANSWERS = frozenset({"no", "declined", "0", "false"})


def required(value: Any) -> bool:
    return not is_empty(value)


def present(value: Any) -> bool:
    return not is_empty(value)


def prohibited(value: Any) -> bool:
    return not present(value)


def filled(value: Any) -> bool:
    """Fails for None, blank strings and empty containers; scalar zero is filled."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, Mapping, set, frozenset, bytes, bytearray)):
        return len(value) > 0
    return True


def accepted(value: Any) -> bool:
    return TO_BOOL(value).unwrap_or(False) is True


def declined(value: Any) -> bool:
    """False, or one of "no", "declined", "0", "false" in any case."""
    if isinstance(value, bool):
        return not value
    return isinstance(value, str) and value.strip().lower() in DECLINED_ANSWERS


# ============================================================================
# Conditional presence (vacuous pass when the condition does not hold)
# ============================================================================

def required_if(value: Any, other: Any, expected: Any = True) -> bool:
    return required(value) if condition_holds(other, expected) else True


def required_unless(value: Any, other: Any, allowed: Iterable[Any]) -> bool:
    return True if contains(allowed, other) else required(value)


def prohibited_if(value: Any, other: Any, expected: Any = True) -> bool:
    return prohibited(value) if condition_holds(other, expected) else True


def accepted_if(value: Any, other: Any, expected: Any) -> bool:
    return accepted(value) if condition_holds(other, expected) else True


def declined_if(value: Any, other: Any, expected: Any) -> bool:
    return declined(value) if condition_holds(other, expected) else True


# ============================================================================
# Type and format
# ============================================================================

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")


def string(value: Any) -> bool:
    return isinstance(value, str)


def boolean(value: Any) -> bool:
    return isinstance(value, bool)


def integer(value: Any) -> bool:
    return TO_INT.can_coerce(value)


def numeric(value: Any, optional: bool = False) -> bool:
    """Native numbers pass unless they are zero and the field is not optional.

    Numeric strings, including "0", pass on parse alone.
    """
    if is_number(value):
        return optional or value != 0
    return isinstance(value, str) and TO_FLOAT.can_coerce(value)


def array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def json_(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        json.loads(value)
        return True
    except ValueError:
        return False


def email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def url(value: Any) -> bool:
    """Absolute URI with scheme and host, or an absolute path."""
    if not isinstance(value, str) or not value or any(c.isspace() for c in value):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    if parsed.scheme:
        return bool(parsed.netloc) or bool(parsed.path) or bool(parsed.query)
    return value.startswith("/")


def active_url(value: Any) -> bool:
    """http(s) URL with a host. No DNS lookup is made."""
    if not url(value):
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.hostname)


def ip(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        ip_address(value)
        return True
    except ValueError:
        return False


def ipv4(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        IPv4Address(value)
        return True
    except ValueError:
        return False


def ipv6(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        address = IPv6Address(value)
    except ValueError:
        return False
    return address.ipv4_mapped is None


def uuid(value: Any) -> bool:
    if isinstance(value, UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
        return True
    except ValueError:
        return False


def timezone(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        ZoneInfo(value)
        return True
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False


@lru_cache(maxsize=256)
def _compiled(pattern: str) -> re.Pattern | None:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def regex(value: Any, pattern: str) -> bool:
    """Unanchored search; an invalid pattern fails."""
    compiled = _compiled(pattern)
    return isinstance(value, str) and compiled is not None and compiled.search(value) is not None


def not_regex(value: Any, pattern: str) -> bool:
    compiled = _compiled(pattern)
    return isinstance(value, str) and compiled is not None and compiled.search(value) is None


def starts_with(value: Any, prefixes: Iterable[str]) -> bool:
    return isinstance(value, str) and any(value.startswith(p) for p in prefixes)


def ends_with(value: Any, suffixes: Iterable[str]) -> bool:
    return isinstance(value, str) and any(value.endswith(s) for s in suffixes)


# ============================================================================
# Character class (every character is checked; "" passes)
# ============================================================================

_ASCII_LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_ASCII_DIGITS = frozenset("0123456789")
_ALPHA_NUM = _ASCII_LETTERS | _ASCII_DIGITS
_ALPHA_DASH = _ALPHA_NUM | {"-"}


def alpha(value: Any) -> bool:
    return isinstance(value, str) and all(ch in _ASCII_LETTERS for ch in value)


def alpha_dash(value: Any) -> bool:
    return isinstance(value, str) and all(ch in _ALPHA_DASH for ch in value)


def alpha_num(value: Any) -> bool:
    return isinstance(value, str) and all(ch in _ALPHA_NUM for ch in value)


# ============================================================================
# Comparison and membership
# ============================================================================

def same(value: Any, other: Any) -> bool:
    return deep_equal(value, other)


def different(value: Any, other: Any) -> bool:
    return not deep_equal(value, other)


def confirmed(value: Any, confirmation: Any) -> bool:
    return isinstance(value, str) and isinstance(confirmation, str) and value == confirmation


def distinct(value: Any) -> bool:
    if not isinstance(value, (list, tuple)):
        return False
    return all(not contains(value[:i], item) for i, item in enumerate(value))


def in_(value: Any, allowed: Iterable[Any]) -> bool:
    return contains(allowed, value)


def not_in(value: Any, forbidden: Iterable[Any]) -> bool:
    return not contains(forbidden, value)


def unique(value: Any, existing: Iterable[Any]) -> bool:
    return not contains(existing, value)


# in_array and exists share membership semantics with in_
in_array = in_
exists = in_


# ============================================================================
# Range and size
# ============================================================================

def min_string(value: Any, minimum: int) -> bool:
    return isinstance(value, str) and len(value) >= minimum


def max_string(value: Any, maximum: int) -> bool:
    return isinstance(value, str) and len(value) <= maximum


def min_numeric(value: Any, minimum: float | int | Decimal) -> bool:
    return is_number(value) and value >= minimum


def max_numeric(value: Any, maximum: float | int | Decimal) -> bool:
    return is_number(value) and value <= maximum


def between(value: Any, minimum: float | int, maximum: float | int) -> bool:
    size = _size(value)
    return size is not None and minimum <= size <= maximum


def _digit_count(value: Any) -> int | None:
    if isinstance(value, str):
        return sum(1 for ch in value if ch in _ASCII_DIGITS)
    if is_integer(value):
        return len(str(abs(value)))
    return None


def digits(value: Any, count: int) -> bool:
    return _digit_count(value) == count


def digits_between(value: Any, minimum: int, maximum: int) -> bool:
    count = _digit_count(value)
    return count is not None and minimum <= count <= maximum


# ============================================================================
# Date
# ============================================================================

DateLike = date | datetime | str


def _parse_date(value: Any, layout: str) -> datetime | None:
    return StringToDateTime(layout)(value).unwrap_or(None)


def _target(target: DateLike, layout: str) -> datetime | None:
    if isinstance(target, (date, datetime)):
        return normalize_datetime(target)
    return _parse_date(target, layout)


def _compare(value: Any, target: DateLike, layout: str) -> int | None:
    """-1/0/1 ordering of value against target, None if either is unparseable."""
    parsed, other = _parse_date(value, layout), _target(target, layout)
    if parsed is None or other is None:
        return None
    return (parsed > other) - (parsed < other)


def date_(value: Any, layout: str = "%Y-%m-%d") -> bool:
    return _parse_date(value, layout) is not None


def date_format(value: Any, layout: str) -> bool:
    return _parse_date(value, layout) is not None


def date_equals(value: Any, target: DateLike, layout: str = "%Y-%m-%d") -> bool:
    return _compare(value, target, layout) == 0


def before(value: Any, target: DateLike, layout: str = "%Y-%m-%d") -> bool:
    return _compare(value, target, layout) == -1


def before_or_equal(value: Any, target: DateLike, layout: str = "%Y-%m-%d") -> bool:
    return _compare(value, target, layout) in (-1, 0)


def after(value: Any, target: DateLike, layout: str = "%Y-%m-%d") -> bool:
    return _compare(value, target, layout) == 1


def after_or_equal(value: Any, target: DateLike, layout: str = "%Y-%m-%d") -> bool:
    return _compare(value, target, layout) in (0, 1)


# ============================================================================
# Media
# ============================================================================

def image(value: Any, decoder: ImageDecoder) -> bool:
    return isinstance(value, (bytes, bytearray)) and decoder.size(bytes(value)) is not None


def dimensions(value: Any, decoder: ImageDecoder, min_width: int, min_height: int,
               max_width: int, max_height: int) -> bool:
    if not isinstance(value, (bytes, bytearray)):
        return False
    if (size := decoder.size(bytes(value))) is None:
        return False
    width, height = size
    return min_width <= width <= max_width and min_height <= height <= max_height


def mimes(value: Any, allowed: Sequence[str]) -> bool:
    if not isinstance(value, MimeTyped):
        return False
    actual = value.mime_type().lower()
    return any(actual == mime.lower() for mime in allowed)


# ============================================================================
# Password strength (single pass, string values only)
# ============================================================================

def password_letters(value: Any) -> bool:
    return isinstance(value, str) and any(ch.isalpha() for ch in value)


def password_mixed(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    has_upper = has_lower = False
    for ch in value:
        has_upper, has_lower = has_upper or ch.isupper(), has_lower or ch.islower()
        if has_upper and has_lower:
            return True
    return False


def password_numbers(value: Any) -> bool:
    return isinstance(value, str) and any(ch.isdecimal() for ch in value)


def password_symbols(value: Any) -> bool:
    return isinstance(value, str) and any(unicodedata.category(ch)[0] in "PS" for ch in value)


def password_uncompromised(value: Any, leaked: Iterable[str]) -> bool:
    return isinstance(value, str) and all(value != entry for entry in leaked)
