"""Fluent Field Validation

Each attribute gets its own session. Values are bound explicitly, rules are
chained, and failures accumulate as localized messages in call order. Rule
predicates are pure functions over the bound value; parse failures are rule
failures, never exceptions.

Key Features:
- Fluent per-attribute sessions with English and Persian message tables
- Closed rule catalog (RuleKey) with an error code per rule
- Explicit coercion layer for numeric, boolean and date strings
- Injectable image decoder and MIME capability for media rules
- ValidationContext for validating several attributes together

Usage:
    from fieldcheck.core.validation import attribute, ValidationContext

    message = attribute("email").with_value(raw).fa_msg().required().email().first_error()

    with ValidationContext(lang="en") as ctx:
        ctx.attribute("username").with_value(username).required().alpha_dash().max_string(32)
        ctx.attribute("age").with_value(age).integer().between(18, 120)
"""

from .coercion import (
    CoercionRule,
    ToInt,
    ToFloat,
    StringToBool,
    StringToDateTime,
    TO_INT,
    TO_FLOAT,
    TO_BOOL,
    coerce_or_none,
    normalize_datetime,
)

from .media import (
    MimeTyped,
    ImageDecoder,
    PillowDecoder,
    DEFAULT_DECODER,
)

from .rules import RuleKey

from .errors import (
    ValidationMode,
    RuleFailure,
    ValidationError,
)

from .session import Validator, attribute

from .context import ValidationContext

__all__ = [
    # Coercion
    "CoercionRule",
    "ToInt",
    "ToFloat",
    "StringToBool",
    "StringToDateTime",
    "TO_INT",
    "TO_FLOAT",
    "TO_BOOL",
    "coerce_or_none",
    "normalize_datetime",
    # Media
    "MimeTyped",
    "ImageDecoder",
    "PillowDecoder",
    "DEFAULT_DECODER",
    # Rules
    "RuleKey",
    # Errors
    "ValidationMode",
    "RuleFailure",
    "ValidationError",
    # Sessions
    "Validator",
    "attribute",
    "ValidationContext",
]
